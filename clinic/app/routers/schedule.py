"""
Scheduling API endpoints.

GET  /schedule/matrix          - Room x Slot availability for a date
POST /schedule/check           - Feasibility of one room/therapists/slot
POST /schedule/alternatives    - Per-day result of a recurring request
GET  /schedule/recommendations - Ranked open (room, slot, therapist)
"""

from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query

from ..config import settings
from ..dependencies import get_now, get_registry, get_repository, get_timings
from ..schemas.bookings import (
    BookingCheckRequest,
    BookingCheckResponse,
    RecurringAlternativesRequest,
)
from ..schemas.scheduling import (
    AlternativeResult,
    RoomMatrix,
    SlotRecommendation,
    normalize_slot,
)
from ..services.scheduling import (
    AppointmentRepository,
    ClinicRegistry,
    ClinicTimings,
    build_schedule_matrix,
    can_book_appointment,
    get_recommended_slots,
    get_recurring_slot_alternatives,
    get_therapist_conflicts,
    resolve_days,
)
from ..services.scheduling.dates import add_days


router = APIRouter(prefix="/schedule", tags=["schedule"])


@router.get("/matrix", response_model=list[RoomMatrix])
def get_schedule_matrix(
    target_date: date = Query(..., alias="date"),
    patient_id: str | None = None,
    show_all: bool = False,
    registry: ClinicRegistry = Depends(get_registry),
    repository: AppointmentRepository = Depends(get_repository),
    timings: ClinicTimings = Depends(get_timings),
    now: datetime = Depends(get_now),
):
    """Room x Slot matrix for a date, therapists filtered for the patient."""
    return build_schedule_matrix(
        target_date,
        repository.list_appointments(target_date, target_date),
        registry.rooms,
        registry.therapists,
        timings,
        now,
        patient_gender=registry.patient_gender(patient_id),
        enforce_gender_match=settings.enforce_gender_match,
        show_all=show_all,
    )


@router.post("/check", response_model=BookingCheckResponse)
def check_booking(
    data: BookingCheckRequest,
    repository: AppointmentRepository = Depends(get_repository),
):
    """Can this room and these therapists be booked at date/slot?"""
    appointments = repository.list_appointments(data.date, data.date)
    available = can_book_appointment(
        appointments,
        room_id=data.room_id,
        therapist_ids=data.therapist_ids,
        target_date=data.date,
        slot=data.slot,
    )
    return BookingCheckResponse(
        available=available,
        therapist_conflicts=get_therapist_conflicts(
            appointments, data.date, data.slot, data.therapist_ids
        ),
    )


@router.post("/alternatives", response_model=dict[date, AlternativeResult])
def get_alternatives(
    data: RecurringAlternativesRequest,
    registry: ClinicRegistry = Depends(get_registry),
    repository: AppointmentRepository = Depends(get_repository),
    timings: ClinicTimings = Depends(get_timings),
    now: datetime = Depends(get_now),
):
    """Per-day availability and substitutes for a recurring request."""
    days = resolve_days(data.duration, data.custom_mode, data.custom_duration)
    if days < 1:
        return {}

    appointments = repository.list_appointments(
        data.start_date, add_days(data.start_date, days - 1)
    )
    return get_recurring_slot_alternatives(
        start_date=data.start_date,
        days=days,
        requested_slot=data.requested_slot,
        selected_therapists=data.selected_therapists,
        selected_room=data.selected_room,
        appointments=appointments,
        patient_id=data.patient_id,
        rooms=registry.rooms,
        therapists=registry.therapists,
        patients=registry.patients,
        timings=timings,
        now=now,
        enforce_gender_match=settings.enforce_gender_match,
    )


@router.get("/recommendations", response_model=list[SlotRecommendation])
def get_recommendations(
    target_date: date = Query(..., alias="date"),
    slot: str = Query(...),
    patient_id: str | None = None,
    therapist_ids: list[str] = Query(default=[]),
    registry: ClinicRegistry = Depends(get_registry),
    repository: AppointmentRepository = Depends(get_repository),
    timings: ClinicTimings = Depends(get_timings),
    now: datetime = Depends(get_now),
):
    """Open (room, slot, therapist) proposals nearest to the requested slot."""
    try:
        slot = normalize_slot(slot)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    matrix = build_schedule_matrix(
        target_date,
        repository.list_appointments(target_date, target_date),
        registry.rooms,
        registry.therapists,
        timings,
        now,
    )
    return get_recommended_slots(
        matrix, slot, therapist_ids, registry.patient_gender(patient_id)
    )
