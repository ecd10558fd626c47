# clinic/app/routers/appointments.py
# Booking-commit path: re-validates feasibility right before appending.

import logging
import uuid
from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, status

from ..dependencies import get_now, get_registry, get_repository, get_timings
from ..schemas.bookings import AppointmentCreate
from ..schemas.scheduling import Appointment
from ..services.scheduling import (
    AppointmentRepository,
    ClinicRegistry,
    ClinicTimings,
)
from ..services.scheduling.alternatives import REASON_CLINIC_CLOSED, REASON_PAST
from ..services.scheduling.conflicts import REASON_SLOT_NOT_FOUND
from ..services.scheduling.dates import is_slot_in_past

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.get("/", response_model=list[Appointment])
def list_appointments(
    date_start: date | None = None,
    date_end: date | None = None,
    repository: AppointmentRepository = Depends(get_repository),
):
    return repository.list_appointments(date_start, date_end)


@router.post("/", response_model=Appointment, status_code=status.HTTP_201_CREATED)
def create_appointment(
    data: AppointmentCreate,
    registry: ClinicRegistry = Depends(get_registry),
    repository: AppointmentRepository = Depends(get_repository),
    timings: ClinicTimings = Depends(get_timings),
    now: datetime = Depends(get_now),
):
    if registry.room(data.room_id) is None:
        raise HTTPException(status_code=404, detail="Room not found")
    unknown = [tid for tid in data.therapist_ids if registry.therapist(tid) is None]
    if unknown:
        raise HTTPException(status_code=404, detail=f"Therapist not found: {', '.join(unknown)}")

    if not timings.is_working_day(data.date):
        raise HTTPException(status_code=400, detail=REASON_CLINIC_CLOSED)
    if data.slot not in timings.slots_for(data.date):
        raise HTTPException(status_code=400, detail=REASON_SLOT_NOT_FOUND)
    if is_slot_in_past(data.date, data.slot, now):
        raise HTTPException(status_code=400, detail=REASON_PAST)

    appointment = Appointment(
        **data.model_dump(exclude={"id"}),
        id=data.id or uuid.uuid4().hex,
    )
    result = repository.append(appointment)
    if not result.ok:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=result.reason)

    logger.info(
        f"Appointment {appointment.id} created: {appointment.date.isoformat()} "
        f"{appointment.slot} room={appointment.room_id} therapists={appointment.therapist_ids}"
    )
    return result.appointment
