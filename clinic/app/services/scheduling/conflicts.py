"""
Conflict detection for recurring requests.

- get_therapist_conflicts: which of the chosen therapists are already taken
- get_recurring_conflicts: the same, for every day of a recurring range
- check_recurring_slot_availability: per-day state of one room/slot read
  from the schedule matrix
"""

from datetime import date, datetime
from typing import Optional, Sequence

from ...schemas.scheduling import (
    Appointment,
    RecurringDayAvailability,
    Room,
    Therapist,
    TherapistConflict,
    normalize_slot,
)
from .config import ClinicTimings, get_clinic_timings
from .dates import add_days, as_date, date_range
from .matrix import build_schedule_matrix, find_cell
from .rules import is_therapist_booked, require_appointments


REASON_ROOM_NOT_FOUND = "Room not found"
REASON_SLOT_NOT_FOUND = "Slot not found"
REASON_PATIENT_SCHEDULED = "Patient already scheduled"
REASON_PAST = "Time Slot is in the past"
REASON_BOOKED = "Booked"


def get_therapist_conflicts(
    appointments: Sequence[Appointment],
    target_date: date | str,
    slot: str,
    therapist_ids: Sequence[str],
) -> list[str]:
    """Ids from therapist_ids already booked at (target_date, slot), input order kept."""
    require_appointments(appointments)
    target_date = as_date(target_date)
    slot = normalize_slot(slot)
    return [
        tid for tid in therapist_ids
        if is_therapist_booked(appointments, tid, target_date, slot)
    ]


def get_recurring_conflicts(
    appointments: Sequence[Appointment],
    start_date: date | str,
    days: int,
    slot: str,
    therapist_ids: Sequence[str],
) -> list[TherapistConflict]:
    """One entry per day of the range where at least one therapist is taken."""
    start_date = as_date(start_date)
    slot = normalize_slot(slot)
    conflicts = []
    for day in date_range(start_date, days):
        taken = get_therapist_conflicts(appointments, day, slot, therapist_ids)
        if taken:
            conflicts.append(TherapistConflict(date=day, slot=slot, therapist_ids=taken))
    return conflicts


def _has_client_booking(
    appointments: Sequence[Appointment],
    client_id: str,
    target_date: date,
    slot: str,
) -> bool:
    return any(
        a.is_active and a.client_id == client_id and a.date == target_date and a.slot == slot
        for a in appointments
    )


def check_recurring_slot_availability(
    start_date: date | str,
    days: int,
    room_id: str,
    slot: str,
    appointments: Sequence[Appointment],
    rooms: Sequence[Room],
    therapists: Sequence[Therapist],
    timings: ClinicTimings | None = None,
    now: datetime | None = None,
    client_id: Optional[str] = None,
    skip_non_working_days: bool = False,
) -> list[RecurringDayAvailability]:
    """
    Per-day availability of one room at one slot.

    With skip_non_working_days, weekly-off days are stepped over and the
    range is extended so that exactly `days` working days are reported.

    Returns:
        List of RecurringDayAvailability, reason None when available.
    """
    require_appointments(appointments)
    start_date = as_date(start_date)
    timings = timings or get_clinic_timings()
    now = now or datetime.now()
    slot = normalize_slot(slot)

    results: list[RecurringDayAvailability] = []
    if skip_non_working_days and len(timings.weekly_off) == 7:
        return results

    offset = 0
    while len(results) < days:
        day = add_days(start_date, offset)
        offset += 1
        if skip_non_working_days and not timings.is_working_day(day):
            continue

        matrix = build_schedule_matrix(day, appointments, rooms, therapists, timings, now)
        if not any(room.id == room_id for room in matrix):
            reason = REASON_ROOM_NOT_FOUND
        else:
            cell = find_cell(matrix, room_id, slot)
            if cell is None:
                reason = REASON_SLOT_NOT_FOUND
            elif client_id and _has_client_booking(appointments, client_id, day, slot):
                reason = REASON_PATIENT_SCHEDULED
            elif cell.is_booked:
                reason = REASON_BOOKED
            elif cell.is_past:
                reason = REASON_PAST
            else:
                reason = None

        results.append(RecurringDayAvailability(date=day, available=reason is None, reason=reason))

    return results
