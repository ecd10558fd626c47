# clinic/app/schemas/bookings.py

from datetime import date
from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from .scheduling import normalize_slot


class AppointmentCreate(BaseModel):
    id: Optional[str] = None  # generated when omitted
    date: date
    slot: str
    room_id: str
    therapist_ids: list[str] = Field(default_factory=list)
    client_id: str
    duration: int = Field(60, gt=0, description="Length in minutes")
    tab: Literal["Doctor", "Therapy"] = "Therapy"

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
    def validate_slot(cls, v: str) -> str:
        return normalize_slot(v)


class BookingCheckRequest(BaseModel):
    room_id: Optional[str] = None
    therapist_ids: list[str] = Field(default_factory=list)
    date: date
    slot: str

    @field_validator("slot", mode="before")
    @classmethod
    def validate_slot(cls, v: str) -> str:
        return normalize_slot(v)


class BookingCheckResponse(BaseModel):
    available: bool
    therapist_conflicts: list[str] = Field(default_factory=list)


class RecurringAlternativesRequest(BaseModel):
    """
    Recurring booking request.

    duration is a course length in days (1/3/7/14/21); custom_mode switches
    to custom_duration for any other number of days.
    """
    start_date: date
    duration: Optional[int] = None
    custom_mode: bool = False
    custom_duration: Optional[int | str] = None
    requested_slot: str
    selected_therapists: list[str] = Field(default_factory=list)
    selected_room: str
    patient_id: str

    @field_validator("requested_slot", mode="before")
    @classmethod
    def validate_slot(cls, v: str) -> str:
        return normalize_slot(v)
