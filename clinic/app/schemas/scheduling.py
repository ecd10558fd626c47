"""
Pydantic schemas for the therapy scheduling core.

Rosters (rooms, therapists, patients), appointments and the structures
derived from them (matrix cells, alternatives, recommendations).
"""

import re
from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


SLOT_PATTERN = re.compile(r"^(\d{1,2}):(\d{1,2})(?::\d{1,2})?$")

ACTIVE_STATUSES = ("scheduled", "completed")


def normalize_slot(value: str) -> str:
    """
    Normalize a clock time to "HH:MM".

    Accepts "9:00", "09:00", "09:00:00". Raises ValueError otherwise.
    """
    match = SLOT_PATTERN.match(str(value).strip())
    if not match:
        raise ValueError(f"Time must be in HH:MM format, got {value!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"Time out of range: {value!r}")
    return f"{hour:02d}:{minute:02d}"


def _normalize_gender(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip().lower()
    return value or None


# ── Rosters ──────────────────────────────────────────────────────────────


class Room(BaseModel):
    id: str
    name: str = ""

    model_config = {"from_attributes": True}

    @property
    def display_name(self) -> str:
        return self.name or self.id


class TherapistRef(BaseModel):
    """Therapist as listed inside a matrix cell (no calendar)."""
    id: str
    name: str = ""
    gender: str

    model_config = {"from_attributes": True}


class Therapist(BaseModel):
    """
    Therapist with a per-date availability ceiling.

    availability maps a date to the slots the therapist could work that day.
    It says nothing about bookings.
    """
    id: str
    name: str = ""
    gender: str
    availability: dict[date, set[str]] = Field(default_factory=dict)

    model_config = {"from_attributes": True}

    @field_validator("gender", mode="before")
    @classmethod
    def lower_gender(cls, v: str) -> str:
        gender = _normalize_gender(v)
        if gender is None:
            raise ValueError("Therapist gender is required")
        return gender

    @field_validator("availability", mode="before")
    @classmethod
    def normalize_availability(cls, v):
        if not v:
            return {}
        return {day: {normalize_slot(s) for s in slots} for day, slots in dict(v).items()}

    def is_available(self, target_date: date, slot: str) -> bool:
        """True if slot is inside the therapist's calendar on target_date."""
        return slot in self.availability.get(target_date, ())

    def as_ref(self) -> TherapistRef:
        return TherapistRef(id=self.id, name=self.name, gender=self.gender)


class Patient(BaseModel):
    id: str
    name: str = ""
    gender: Optional[str] = None

    model_config = {"from_attributes": True}

    @field_validator("gender", mode="before")
    @classmethod
    def lower_gender(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_gender(v)


# ── Appointments ─────────────────────────────────────────────────────────


class Appointment(BaseModel):
    """
    One booking: one room, one slot, one date, all listed therapists.

    Legacy payloads carry the slot under "time"; it is folded into "slot"
    here so the rest of the code reads a single field.
    """
    id: str
    date: date
    slot: str
    room_id: Optional[str] = None
    therapist_ids: list[str] = Field(default_factory=list)
    client_id: str
    duration: int = Field(60, gt=0, description="Length in minutes")
    tab: Literal["Doctor", "Therapy"] = "Therapy"
    status: Literal["scheduled", "completed", "cancelled"] = "scheduled"

    model_config = {"from_attributes": True}

    @model_validator(mode="before")
    @classmethod
    def collapse_time_into_slot(cls, data):
        if isinstance(data, dict) and "time" in data:
            data = dict(data)
            legacy = data.pop("time")
            if not data.get("slot"):
                data["slot"] = legacy
        return data

    @field_validator("slot", mode="before")
    @classmethod
    def normalize_slot_field(cls, v: str) -> str:
        return normalize_slot(v)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES


# ── Derived structures ───────────────────────────────────────────────────


class MatrixCell(BaseModel):
    """State of one room at one slot of one date."""
    slot: str
    is_past: bool = False
    is_room_available: bool
    is_booked: bool
    available_therapists: list[TherapistRef] = Field(default_factory=list)
    booking: Optional[Appointment] = None


class RoomMatrix(BaseModel):
    id: str
    room_name: str
    slots: list[MatrixCell]


class Alternative(BaseModel):
    """Substitute (slot, room) offered instead of the requested one."""
    slot: str
    room_number: str


class AlternativeResult(BaseModel):
    """Outcome of one day of a recurring request."""
    available: bool
    reason: Optional[str] = None
    alternatives: list[Alternative] = Field(default_factory=list)


class TherapistConflict(BaseModel):
    date: date
    slot: str
    therapist_ids: list[str]


class RecurringDayAvailability(BaseModel):
    date: date
    available: bool
    reason: Optional[str] = None


class SlotRecommendation(BaseModel):
    room_number: str
    slot: str
    therapist_id: str
    reason: Literal["same therapist", "same gender", "other"]


class BookingResult(BaseModel):
    """Outcome of appending an appointment to the booking store."""
    ok: bool
    appointment: Optional[Appointment] = None
    reason: Optional[str] = None
