"""Test boundary validation of scheduling payloads."""
from datetime import date

import pytest
from pydantic import ValidationError

from clinic.app.schemas.bookings import AppointmentCreate, RecurringAlternativesRequest
from clinic.app.schemas.scheduling import Appointment, Patient, Therapist, normalize_slot


class TestSlotNormalization:

    @pytest.mark.parametrize("raw, expected", [
        ("09:00", "09:00"),
        ("9:00", "09:00"),
        ("09:00:00", "09:00"),
        (" 15:30 ", "15:30"),
    ])
    def test_accepted_forms(self, raw, expected):
        assert normalize_slot(raw) == expected

    @pytest.mark.parametrize("raw", ["", "nine", "25:00", "09:75", "0900"])
    def test_rejected_forms(self, raw):
        with pytest.raises(ValueError):
            normalize_slot(raw)


class TestAppointment:

    def _payload(self, **overrides):
        data = {
            "id": "a1",
            "date": "2025-05-20",
            "room_id": "r1",
            "therapist_ids": ["t1"],
            "client_id": "p1",
        }
        data.update(overrides)
        return data

    def test_time_field_folded_into_slot(self):
        appointment = Appointment(**self._payload(time="9:00"))

        assert appointment.slot == "09:00"
        assert "time" not in appointment.model_dump()

    def test_slot_wins_over_time(self):
        appointment = Appointment(**self._payload(slot="10:00", time="09:00"))

        assert appointment.slot == "10:00"

    def test_missing_slot_rejected(self):
        with pytest.raises(ValidationError):
            Appointment(**self._payload())

    def test_defaults(self):
        appointment = Appointment(**self._payload(slot="09:00"))

        assert appointment.date == date(2025, 5, 20)
        assert appointment.duration == 60
        assert appointment.tab == "Therapy"
        assert appointment.is_active

    def test_cancelled_is_inactive(self):
        assert not Appointment(**self._payload(slot="09:00", status="cancelled")).is_active

    def test_duration_must_be_positive(self):
        with pytest.raises(ValidationError):
            Appointment(**self._payload(slot="09:00", duration=0))

    def test_create_payload_accepts_time(self):
        data = AppointmentCreate(**self._payload(time="07:00"))

        assert data.slot == "07:00"


class TestRoster:

    def test_gender_lowercased(self):
        assert Therapist(id="t1", gender="Male").gender == "male"
        assert Patient(id="p1", gender=" FEMALE ").gender == "female"
        assert Patient(id="p2", gender="").gender is None

    def test_therapist_gender_required(self):
        with pytest.raises(ValidationError):
            Therapist(id="t1", gender="")

    def test_availability_normalized(self):
        therapist = Therapist(id="t1", gender="male", availability={"2025-05-20": ["9:00"]})

        assert therapist.is_available(date(2025, 5, 20), "09:00")
        assert not therapist.is_available(date(2025, 5, 21), "09:00")


def test_recurring_request_custom_duration_text():
    data = RecurringAlternativesRequest(
        start_date="2025-05-20",
        custom_mode=True,
        custom_duration="abc",
        requested_slot="9:00",
        selected_room="r1",
        patient_id="p1",
    )

    assert data.custom_duration == "abc"
    assert data.requested_slot == "09:00"
