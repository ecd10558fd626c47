"""
Recurring alternative finder.

For a booking repeated over consecutive days at the same slot/room/
therapists, evaluates each day on its own and, when the day is not
bookable, proposes substitute (slot, room) pairs.

Past slot (slot start <= now), reason "Time Slot is in the past":
  1. same slot, another therapist of the patient's gender, every room
     where the pair is bookable (collect all)
  2. only if 1 found nothing: later slots ascending, first slot where the
     selected therapists fit the selected room, or any gender-matched
     therapist fits any room (find first)

Future slot:
  - original combination bookable → available
  - a. same slot, same therapists, other rooms (collect all)
  - b. later slots, same room, same therapists (find first)
  - c. earlier slots nearest first, same room, same therapists (find first)
  Each tier runs only when the previous one found nothing.

Business outcomes are returned as AlternativeResult, never raised.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ...schemas.scheduling import (
    Alternative,
    AlternativeResult,
    Appointment,
    Patient,
    Room,
    Therapist,
    normalize_slot,
)
from .config import ClinicTimings, get_clinic_timings
from .dates import as_date, date_range, is_slot_in_past
from .rules import (
    can_book_appointment,
    filter_therapists_by_gender,
    is_therapist_booked,
    require_appointments,
)
from .search import collect_all, find_first

logger = logging.getLogger(__name__)


REASON_PAST = "Time Slot is in the past"
REASON_THERAPISTS_BUSY = "Therapists are busy"
REASON_ROOM_UNAVAILABLE = "Selected Room is not available"
REASON_CLINIC_CLOSED = "Clinic is closed"

# Preset course lengths offered by the booking form, in days
RECURRING_DURATIONS = (1, 3, 7, 14, 21)


def resolve_days(
    duration: Optional[int] = None,
    custom_mode: bool = False,
    custom_duration: int | str | None = None,
) -> int:
    """
    Number of consecutive days a request covers.

    custom_mode → custom_duration (non-numeric counts as 0),
    otherwise duration, defaulting to a single day.
    """
    if custom_mode:
        try:
            return int(custom_duration)
        except (TypeError, ValueError):
            return 0
    return duration if duration is not None else 1


def is_recurring(days: int) -> bool:
    return days > 1


def get_recurring_slot_alternatives(
    start_date: date | str,
    days: int,
    requested_slot: str,
    selected_therapists: Sequence[str],
    selected_room: str,
    appointments: Sequence[Appointment],
    patient_id: str,
    rooms: Sequence[Room],
    therapists: Sequence[Therapist],
    patients: Sequence[Patient],
    timings: ClinicTimings | None = None,
    now: datetime | None = None,
    enforce_gender_match: bool = True,
) -> dict[date, AlternativeResult]:
    """
    Evaluate a recurring request day by day.

    Returns:
        {date: AlternativeResult} for every day of the range, in date order.
        days < 1 → empty dict.

    Raises:
        TypeError: appointments is not a list, or start_date is not a date.
        ValueError: start_date or requested_slot is malformed.
    """
    require_appointments(appointments)
    start_date = as_date(start_date)
    timings = timings or get_clinic_timings()
    now = now or datetime.now()
    requested_slot = normalize_slot(requested_slot)

    patient = next((p for p in patients if p.id == patient_id), None)
    patient_gender = patient.gender if patient else None
    if patient is None:
        logger.warning(f"Patient {patient_id} not found, gender match not applied")

    results: dict[date, AlternativeResult] = {}
    for day in date_range(start_date, days):
        search = _DaySearch(
            day=day,
            requested_slot=requested_slot,
            selected_therapists=list(selected_therapists or []),
            selected_room=selected_room,
            appointments=appointments,
            rooms=list(rooms),
            therapists=list(therapists),
            candidates=filter_therapists_by_gender(
                therapists, patient_gender, enforce_gender_match
            ),
            timings=timings,
            now=now,
        )
        result = search.evaluate()
        logger.debug(
            f"{day.isoformat()} {requested_slot} room={selected_room}: "
            f"available={result.available} reason={result.reason} "
            f"alternatives={len(result.alternatives)}"
        )
        results[day] = result

    return results


@dataclass
class _DaySearch:
    """Search state for one day of a recurring request."""
    day: date
    requested_slot: str
    selected_therapists: list[str]
    selected_room: str
    appointments: Sequence[Appointment]
    rooms: list[Room]
    therapists: list[Therapist]
    candidates: list[Therapist]  # gender-filtered roster
    timings: ClinicTimings
    now: datetime

    def evaluate(self) -> AlternativeResult:
        if not self.timings.is_working_day(self.day):
            return AlternativeResult(available=False, reason=REASON_CLINIC_CLOSED)
        if self._is_past(self.requested_slot):
            return self._past_slot()
        return self._future_slot()

    # ── Helpers ──────────────────────────────────────────────────────────

    def _is_past(self, slot: str) -> bool:
        return is_slot_in_past(self.day, slot, self.now)

    def _can_book(self, therapist_ids: Sequence[str], room_id: Optional[str], slot: str) -> bool:
        return can_book_appointment(
            self.appointments,
            room_id=room_id,
            therapist_ids=therapist_ids,
            target_date=self.day,
            slot=slot,
        )

    def _first_room_for_any_candidate(self, slot: str) -> Optional[str]:
        for therapist in self.candidates:
            if not therapist.is_available(self.day, slot):
                continue
            room = find_first(lambda r: self._can_book([therapist.id], r.id, slot), self.rooms)
            if room is not None:
                return room.id
        return None

    def _first_room_at(self, slot: str) -> Optional[str]:
        if self.selected_room and self._can_book(self.selected_therapists, self.selected_room, slot):
            return self.selected_room
        return self._first_room_for_any_candidate(slot)

    # ── Past slot ────────────────────────────────────────────────────────

    def _past_slot(self) -> AlternativeResult:
        slot = self.requested_slot

        # Priority 1: same slot, a different therapist of the patient's gender
        substitutes = [
            t for t in self.candidates
            if t.id not in self.selected_therapists and t.is_available(self.day, slot)
        ]
        free_rooms = collect_all(
            lambda r: any(self._can_book([t.id], r.id, slot) for t in substitutes),
            self.rooms,
        )
        alternatives = [Alternative(slot=slot, room_number=r.id) for r in free_rooms]

        # Priority 2: nearest later slot that is not in the past
        if not alternatives:
            later = (
                (s, self._first_room_at(s))
                for s in self.timings.slots_after(slot)
                if not self._is_past(s)
            )
            hit = find_first(lambda match: match[1] is not None, later)
            if hit is not None:
                alternatives = [Alternative(slot=hit[0], room_number=hit[1])]

        return AlternativeResult(available=False, reason=REASON_PAST, alternatives=alternatives)

    # ── Future slot ──────────────────────────────────────────────────────

    def _future_slot(self) -> AlternativeResult:
        slot = self.requested_slot
        therapist_ids = self.selected_therapists
        room_id = self.selected_room

        if self._can_book(therapist_ids, room_id, slot):
            return AlternativeResult(available=True)

        # a. same slot, other rooms
        other_rooms = collect_all(
            lambda r: r.id != room_id and self._can_book(therapist_ids, r.id, slot),
            self.rooms,
        )
        alternatives = [Alternative(slot=slot, room_number=r.id) for r in other_rooms]

        # b. later slots, same room
        if not alternatives:
            later = find_first(
                lambda s: self._can_book(therapist_ids, room_id, s),
                self.timings.slots_after(slot),
            )
            if later is not None:
                alternatives = [Alternative(slot=later, room_number=room_id)]

        # c. earlier slots, same room, nearest first
        if not alternatives:
            earlier = find_first(
                lambda s: not self._is_past(s) and self._can_book(therapist_ids, room_id, s),
                self.timings.slots_before(slot),
            )
            if earlier is not None:
                alternatives = [Alternative(slot=earlier, room_number=room_id)]

        reason = None
        if not alternatives and self._selected_therapists_unavailable():
            reason = REASON_THERAPISTS_BUSY

        return AlternativeResult(
            available=False,
            reason=reason or REASON_ROOM_UNAVAILABLE,
            alternatives=alternatives,
        )

    def _selected_therapists_unavailable(self) -> bool:
        """Any selected therapist unknown, off-calendar or booked at the slot."""
        by_id = {t.id: t for t in self.therapists}
        for tid in self.selected_therapists:
            therapist = by_id.get(tid)
            if therapist is None or not therapist.is_available(self.day, self.requested_slot):
                return True
            if is_therapist_booked(self.appointments, tid, self.day, self.requested_slot):
                return True
        return False
