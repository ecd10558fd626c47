"""
Availability evaluator: Room x Slot matrix for one date.

Per cell:
✓ is_past: slot start at or before now
✓ is_booked: an active appointment holds this room at this slot
✓ available_therapists: calendar allows the slot, gender filter passes,
  and the therapist is not on any appointment at this slot (any room)

The matrix is a snapshot. A therapist free at a slot is listed in every
free room of that slot; the feasibility check at commit time decides.
"""

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ...schemas.scheduling import Appointment, MatrixCell, Room, RoomMatrix, Therapist
from .config import ClinicTimings, get_clinic_timings
from .dates import as_date, is_slot_in_past
from .rules import (
    filter_therapists_by_gender,
    find_room_booking,
    is_therapist_booked,
    require_appointments,
)

logger = logging.getLogger(__name__)


def build_schedule_matrix(
    target_date: date | str,
    appointments: Sequence[Appointment],
    rooms: Sequence[Room],
    therapists: Sequence[Therapist],
    timings: ClinicTimings | None = None,
    now: datetime | None = None,
    patient_gender: Optional[str] = None,
    enforce_gender_match: bool = False,
    show_all: bool = False,
) -> list[RoomMatrix]:
    """
    Build the Room x Slot matrix for target_date.

    Returns:
        One RoomMatrix per room (roster order), one MatrixCell per slot of
        the day. A weekly-off day yields rooms with no slots.
    """
    require_appointments(appointments)
    target_date = as_date(target_date)
    timings = timings or get_clinic_timings()
    now = now or datetime.now()

    slots = timings.slots_for(target_date)
    day_appointments = [a for a in appointments if a.is_active and a.date == target_date]
    candidates = filter_therapists_by_gender(
        therapists, patient_gender, enforce_gender_match, show_all
    )

    # Therapists that remain free per slot are the same for every room
    free_by_slot = {
        slot: [
            t.as_ref()
            for t in candidates
            if t.is_available(target_date, slot)
            and not is_therapist_booked(day_appointments, t.id, target_date, slot)
        ]
        for slot in slots
    }

    matrix = []
    for room in rooms:
        cells = []
        for slot in slots:
            is_past = is_slot_in_past(target_date, slot, now)
            booking = find_room_booking(day_appointments, room.id, target_date, slot)
            is_booked = booking is not None
            is_room_available = not is_past and not is_booked

            cells.append(MatrixCell(
                slot=slot,
                is_past=is_past,
                is_room_available=is_room_available,
                is_booked=is_booked,
                available_therapists=list(free_by_slot[slot]) if is_room_available else [],
                booking=booking,
            ))

        matrix.append(RoomMatrix(id=room.id, room_name=room.display_name, slots=cells))

    logger.debug(
        f"Matrix built for {target_date.isoformat()}: "
        f"{len(rooms)} rooms x {len(slots)} slots, {len(day_appointments)} bookings"
    )
    return matrix


def find_cell(matrix: Sequence[RoomMatrix], room_id: str, slot: str) -> Optional[MatrixCell]:
    """Cell of room_id at slot, or None if the room or slot is not in the matrix."""
    for room in matrix:
        if room.id != room_id:
            continue
        for cell in room.slots:
            if cell.slot == slot:
                return cell
    return None
