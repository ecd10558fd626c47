"""Shared test fixtures."""
from datetime import date, datetime

import pytest

from clinic.app.schemas.scheduling import Appointment, Patient, Room, Therapist
from clinic.app.services.scheduling import ClinicTimings


DAY = date(2025, 5, 20)  # Tuesday
FULL_DAY = ClinicTimings().slot_starts


@pytest.fixture
def day() -> date:
    return DAY


@pytest.fixture
def now() -> datetime:
    """The evening before DAY: every slot of DAY is in the future."""
    return datetime(2025, 5, 19, 18, 0)


@pytest.fixture
def timings() -> ClinicTimings:
    return ClinicTimings()


@pytest.fixture
def rooms() -> list[Room]:
    return [
        Room(id="r1", name="Room 1 (Therapy)"),
        Room(id="r2", name="Room 2 (Therapy)"),
        Room(id="r3", name="Room 3 (Therapy)"),
    ]


@pytest.fixture
def therapists() -> list[Therapist]:
    """Two male and two female therapists working every slot of three days."""
    calendar = {
        "2025-05-20": FULL_DAY,
        "2025-05-21": FULL_DAY,
        "2025-05-22": FULL_DAY,
    }
    return [
        Therapist(id="t1", name="Arjun", gender="male", availability=calendar),
        Therapist(id="t2", name="Meera", gender="female", availability=calendar),
        Therapist(id="t3", name="Nithin", gender="male", availability=calendar),
        Therapist(id="t4", name="Anjali", gender="female", availability=calendar),
    ]


@pytest.fixture
def patients() -> list[Patient]:
    return [
        Patient(id="p1", name="Amit Kumar", gender="male"),
        Patient(id="p3", name="Sunita Singh", gender="female"),
    ]


@pytest.fixture
def make_appointment():
    """Build an appointment with sensible defaults."""
    counter = iter(range(1, 10_000))

    def _create(**overrides) -> Appointment:
        data = {
            "id": f"a{next(counter)}",
            "date": DAY,
            "slot": "09:00",
            "room_id": "r1",
            "therapist_ids": ["t1"],
            "client_id": "p1",
        }
        data.update(overrides)
        return Appointment(**data)

    return _create
