"""
Room / therapist / patient rosters.

Rosters are static configuration: loaded once (from the database or the
built-in seed) and read by every scheduling query.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...schemas.scheduling import Patient, Room, Therapist

logger = logging.getLogger(__name__)


@dataclass
class ClinicRegistry:
    rooms: list[Room] = field(default_factory=list)
    therapists: list[Therapist] = field(default_factory=list)
    patients: list[Patient] = field(default_factory=list)

    def room(self, room_id: str) -> Optional[Room]:
        return next((r for r in self.rooms if r.id == room_id), None)

    def therapist(self, therapist_id: str) -> Optional[Therapist]:
        return next((t for t in self.therapists if t.id == therapist_id), None)

    def patient(self, patient_id: str) -> Optional[Patient]:
        return next((p for p in self.patients if p.id == patient_id), None)

    def patient_gender(self, patient_id: Optional[str]) -> Optional[str]:
        patient = self.patient(patient_id) if patient_id else None
        return patient.gender if patient else None


def default_registry() -> ClinicRegistry:
    """Seed roster used when the database has no rooms yet."""
    return ClinicRegistry(
        rooms=[
            Room(id="r1", name="Room 1 (Therapy)"),
            Room(id="r2", name="Room 2 (Therapy)"),
            Room(id="r3", name="Room 3 (Therapy)"),
        ],
        therapists=[
            Therapist(
                id="t1",
                name="Test Male Therapist",
                gender="male",
                availability={
                    "2025-05-20": ["07:00", "08:00", "09:00", "15:00"],
                    "2025-05-21": ["07:00", "08:00", "09:00", "10:00"],
                    "2025-05-22": ["07:00", "09:00", "10:00", "15:00"],
                },
            ),
            Therapist(
                id="t2",
                name="Test Female Therapist",
                gender="female",
                availability={
                    "2025-05-20": ["07:00", "09:00", "10:00", "15:00"],
                    "2025-05-21": ["08:00", "09:00", "11:00", "16:00"],
                    "2025-05-22": ["07:00", "08:00", "09:00", "10:00", "12:00"],
                },
            ),
            Therapist(
                id="t3",
                name="Mr. Nithin",
                gender="male",
                availability={
                    "2025-05-20": ["10:00", "11:00"],
                    "2025-05-21": ["09:00", "10:00", "11:00"],
                    "2025-05-22": ["15:00", "16:00"],
                },
            ),
            Therapist(
                id="t4",
                name="Ms. Anjali",
                gender="female",
                availability={
                    "2025-05-20": ["08:00", "09:00"],
                    "2025-05-21": ["07:00", "08:00", "10:00"],
                    "2025-05-22": ["09:00", "10:00", "11:00"],
                },
            ),
        ],
        patients=[
            Patient(id="p1", name="Test Male", gender="male"),
            Patient(id="p2", name="Rahul", gender="male"),
            Patient(id="p3", name="Sunita Singh", gender="female"),
            Patient(id="p4", name="Amit Kumar", gender="male"),
        ],
    )


# ── Database ─────────────────────────────────────────────────────────────


def load_registry(db: Session) -> ClinicRegistry:
    """Read active rooms and therapists, their calendars and all patients."""
    from ...models.generated import Patients, Rooms, TherapistAvailability, Therapists

    rooms = (
        db.query(Rooms)
        .filter(Rooms.is_active == 1)
        .order_by(Rooms.display_order, Rooms.id)
        .all()
    )
    therapists = (
        db.query(Therapists)
        .filter(Therapists.is_active == 1)
        .order_by(Therapists.display_order, Therapists.id)
        .all()
    )

    calendar: dict[str, dict[str, list[str]]] = defaultdict(lambda: defaultdict(list))
    for row in db.query(TherapistAvailability).all():
        calendar[row.therapist_id][row.date].append(row.slot)

    return ClinicRegistry(
        rooms=[Room(id=r.id, name=r.name) for r in rooms],
        therapists=[
            Therapist(
                id=t.id,
                name=t.name,
                gender=t.gender,
                availability=dict(calendar.get(t.id, {})),
            )
            for t in therapists
        ],
        patients=[
            Patient(id=p.id, name=p.name, gender=p.gender)
            for p in db.query(Patients).order_by(Patients.id).all()
        ],
    )


def seed_registry(db: Session, registry: ClinicRegistry) -> None:
    """Write a roster into empty roster tables."""
    from ...models.generated import Patients, Rooms, TherapistAvailability, Therapists

    for order, room in enumerate(registry.rooms):
        db.add(Rooms(id=room.id, name=room.name or room.id, display_order=order))

    for order, therapist in enumerate(registry.therapists):
        db.add(Therapists(
            id=therapist.id,
            name=therapist.name or therapist.id,
            gender=therapist.gender,
            display_order=order,
        ))
        for day, slots in therapist.availability.items():
            for slot in sorted(slots):
                db.add(TherapistAvailability(
                    therapist_id=therapist.id,
                    date=_iso(day),
                    slot=slot,
                ))

    for patient in registry.patients:
        db.add(Patients(id=patient.id, name=patient.name or patient.id, gender=patient.gender))

    db.commit()
    logger.info(
        f"Registry seeded: {len(registry.rooms)} rooms, "
        f"{len(registry.therapists)} therapists, {len(registry.patients)} patients"
    )


def ensure_registry(db: Session) -> None:
    """Seed the default roster when no rooms exist."""
    from ...models.generated import Rooms

    if db.query(Rooms).count() == 0:
        seed_registry(db, default_registry())


def _iso(day: date | str) -> str:
    return day.isoformat() if isinstance(day, date) else str(day)
