"""
Booking rules: the atomic feasibility check and the gender-match filter.

Everything here is a pure function over an appointment snapshot.
"""

from datetime import date
from typing import Iterable, Optional, Sequence

from ...schemas.scheduling import Appointment, Therapist, normalize_slot
from .dates import as_date


def require_appointments(appointments) -> Sequence[Appointment]:
    """
    Guard for the appointment snapshot.

    Raises TypeError for anything but a list or tuple.
    """
    if not isinstance(appointments, (list, tuple)):
        raise TypeError(
            f"appointments must be a list, got {type(appointments).__name__}"
        )
    return appointments


def _occupying(appointments: Iterable[Appointment], target_date: date, slot: str):
    for appt in appointments:
        if appt.is_active and appt.date == target_date and appt.slot == slot:
            yield appt


def find_room_booking(
    appointments: Iterable[Appointment],
    room_id: str,
    target_date: date,
    slot: str,
) -> Optional[Appointment]:
    """Active appointment holding room_id at (target_date, slot), if any."""
    for appt in _occupying(appointments, target_date, slot):
        if appt.room_id == room_id:
            return appt
    return None


def is_therapist_booked(
    appointments: Iterable[Appointment],
    therapist_id: str,
    target_date: date,
    slot: str,
) -> bool:
    """True if therapist_id is on any active appointment at (target_date, slot)."""
    return any(
        therapist_id in appt.therapist_ids
        for appt in _occupying(appointments, target_date, slot)
    )


def can_book_appointment(
    appointments: Sequence[Appointment],
    *,
    room_id: Optional[str],
    therapist_ids: Sequence[str],
    target_date: date | str,
    slot: str,
) -> bool:
    """
    Can this room and these therapists be booked at (target_date, slot)?

    False if the room already has a booking at that slot, or if any of the
    therapists is booked at that slot in any room. room_id=None skips the
    room check.

    The therapist calendar (Therapist.availability) and gender are not
    consulted; callers filter therapists before asking.
    """
    require_appointments(appointments)
    target_date = as_date(target_date)
    slot = normalize_slot(slot)

    if room_id is not None and find_room_booking(appointments, room_id, target_date, slot):
        return False

    return not any(
        is_therapist_booked(appointments, tid, target_date, slot)
        for tid in therapist_ids
    )


def filter_therapists_by_gender(
    therapists: Sequence[Therapist],
    patient_gender: Optional[str],
    enforce_gender_match: bool,
    show_all: bool = False,
) -> list[Therapist]:
    """
    Therapists allowed to treat a patient of patient_gender.

    - show_all (explicit user override) → full roster
    - matching disabled or gender unknown → full roster
    - otherwise → therapists of the same gender (case-insensitive)
    """
    if show_all or not enforce_gender_match or not patient_gender:
        return list(therapists)

    wanted = patient_gender.strip().lower()
    return [t for t in therapists if t.gender.lower() == wanted]
