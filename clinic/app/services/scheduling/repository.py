"""
Booking store.

The scheduling core reads appointments through AppointmentRepository and
never holds on to them: every query starts from list_appointments().

append() re-checks room and therapist exclusivity against the store's own
contents before writing. Check and write are not atomic.
"""

import logging
from collections import defaultdict
from datetime import date
from typing import Optional, Protocol

from sqlalchemy import insert, select
from sqlalchemy.orm import Session

from ...schemas.scheduling import Appointment, BookingResult
from .rules import find_room_booking, is_therapist_booked

logger = logging.getLogger(__name__)


REASON_DUPLICATE_ID = "Appointment already exists"
REASON_ROOM_TAKEN = "Selected Room is not available"
REASON_THERAPISTS_BUSY = "Therapists are busy"


class AppointmentRepository(Protocol):
    def list_appointments(
        self,
        date_start: Optional[date] = None,
        date_end: Optional[date] = None,
    ) -> list[Appointment]:
        ...

    def append(self, appointment: Appointment) -> BookingResult:
        ...


def _in_range(day: date, date_start: Optional[date], date_end: Optional[date]) -> bool:
    if date_start is not None and day < date_start:
        return False
    if date_end is not None and day > date_end:
        return False
    return True


def _clash_reason(existing: list[Appointment], appointment: Appointment) -> Optional[str]:
    """Why appointment cannot join existing, or None."""
    if not appointment.is_active:
        return None
    if appointment.room_id is not None and find_room_booking(
        existing, appointment.room_id, appointment.date, appointment.slot
    ):
        return REASON_ROOM_TAKEN
    if any(
        is_therapist_booked(existing, tid, appointment.date, appointment.slot)
        for tid in appointment.therapist_ids
    ):
        return REASON_THERAPISTS_BUSY
    return None


class InMemoryAppointmentRepository:
    """List-backed store. Callers get copies, never the live list."""

    def __init__(self, appointments: Optional[list[Appointment]] = None):
        self._appointments: list[Appointment] = list(appointments or [])

    def list_appointments(
        self,
        date_start: Optional[date] = None,
        date_end: Optional[date] = None,
    ) -> list[Appointment]:
        return [
            a.model_copy(deep=True)
            for a in self._appointments
            if _in_range(a.date, date_start, date_end)
        ]

    def append(self, appointment: Appointment) -> BookingResult:
        if any(a.id == appointment.id for a in self._appointments):
            return BookingResult(ok=False, reason=REASON_DUPLICATE_ID)

        same_day = [a for a in self._appointments if a.date == appointment.date]
        reason = _clash_reason(same_day, appointment)
        if reason:
            logger.warning(f"Appointment {appointment.id} refused: {reason}")
            return BookingResult(ok=False, reason=reason)

        self._appointments.append(appointment.model_copy(deep=True))
        return BookingResult(ok=True, appointment=appointment)


class SqlAppointmentRepository:
    """Store over the appointments / appointment_therapists tables."""

    def __init__(self, db: Session):
        self.db = db

    def list_appointments(
        self,
        date_start: Optional[date] = None,
        date_end: Optional[date] = None,
    ) -> list[Appointment]:
        from ...models.generated import Appointments

        query = self.db.query(Appointments)
        if date_start is not None:
            query = query.filter(Appointments.date >= date_start.isoformat())
        if date_end is not None:
            query = query.filter(Appointments.date <= date_end.isoformat())
        rows = query.order_by(Appointments.date, Appointments.slot, Appointments.id).all()

        therapists = self._therapist_ids([row.id for row in rows])
        return [
            Appointment(
                id=row.id,
                date=row.date,
                slot=row.slot,
                room_id=row.room_id,
                therapist_ids=therapists.get(row.id, []),
                client_id=row.client_id,
                duration=row.duration,
                tab=row.tab,
                status=row.status,
            )
            for row in rows
        ]

    def append(self, appointment: Appointment) -> BookingResult:
        from ...models.generated import Appointments, t_appointment_therapists

        if self.db.get(Appointments, appointment.id) is not None:
            return BookingResult(ok=False, reason=REASON_DUPLICATE_ID)

        same_day = self.list_appointments(appointment.date, appointment.date)
        reason = _clash_reason(same_day, appointment)
        if reason:
            logger.warning(f"Appointment {appointment.id} refused: {reason}")
            return BookingResult(ok=False, reason=reason)

        self.db.add(Appointments(
            id=appointment.id,
            date=appointment.date.isoformat(),
            slot=appointment.slot,
            room_id=appointment.room_id,
            client_id=appointment.client_id,
            duration=appointment.duration,
            tab=appointment.tab,
            status=appointment.status,
        ))
        self.db.flush()
        if appointment.therapist_ids:
            self.db.execute(
                insert(t_appointment_therapists),
                [
                    {"appointment_id": appointment.id, "therapist_id": tid, "position": i}
                    for i, tid in enumerate(appointment.therapist_ids)
                ],
            )
        self.db.commit()
        return BookingResult(ok=True, appointment=appointment)

    def _therapist_ids(self, appointment_ids: list[str]) -> dict[str, list[str]]:
        from ...models.generated import t_appointment_therapists as link

        if not appointment_ids:
            return {}
        rows = self.db.execute(
            select(link.c.appointment_id, link.c.therapist_id)
            .where(link.c.appointment_id.in_(appointment_ids))
            .order_by(link.c.appointment_id, link.c.position)
        ).all()

        result: dict[str, list[str]] = defaultdict(list)
        for appointment_id, therapist_id in rows:
            result[appointment_id].append(therapist_id)
        return result
