"""Test the clinic timing table and date helpers."""
from datetime import date, datetime

import pytest

from clinic.app.services.scheduling.config import (
    ClinicTimings,
    minutes_to_time_str,
    time_str_to_minutes,
)
from clinic.app.services.scheduling.dates import (
    add_days,
    as_date,
    date_range,
    is_slot_in_past,
    slot_datetime,
)


class TestClinicTimings:
    """Slot grid generation."""

    def test_default_grid_skips_midday_gap(self, timings):
        assert timings.slot_starts == [
            "07:00", "08:00", "09:00", "10:00", "11:00", "12:00",
            "15:00", "16:00", "17:00",
        ]

    def test_grid_without_break(self):
        timings = ClinicTimings(day_start="09:00", day_end="12:00", break_start=None, break_end=None)
        assert timings.slot_starts == ["09:00", "10:00", "11:00"]

    def test_half_hour_grid(self):
        timings = ClinicTimings(
            slot_duration_minutes=30, day_start="09:00", day_end="11:00",
            break_start=None, break_end=None,
        )
        assert timings.slot_starts == ["09:00", "09:30", "10:00", "10:30"]

    def test_invalid_step_rejected(self):
        with pytest.raises(ValueError):
            ClinicTimings(slot_duration_minutes=45)

    def test_start_after_end_rejected(self):
        with pytest.raises(ValueError):
            ClinicTimings(day_start="18:00", day_end="07:00")

    def test_half_configured_break_rejected(self):
        with pytest.raises(ValueError):
            ClinicTimings(break_start="13:00", break_end=None)

    def test_unknown_weekday_rejected(self):
        with pytest.raises(ValueError):
            ClinicTimings(weekly_off=frozenset({"funday"}))

    def test_weekly_off_day_has_no_slots(self):
        timings = ClinicTimings(weekly_off=frozenset({"Monday"}))

        assert timings.slots_for(date(2025, 5, 19)) == []  # Monday
        assert timings.slots_for(date(2025, 5, 20)) == timings.slot_starts
        assert not timings.is_working_day(date(2025, 5, 19))

    def test_slots_after_ascending(self, timings):
        assert timings.slots_after("11:00") == ["12:00", "15:00", "16:00", "17:00"]

    def test_slots_before_nearest_first(self, timings):
        assert timings.slots_before("09:00") == ["08:00", "07:00"]


class TestTimeHelpers:

    def test_minutes_round_trip_values(self):
        assert time_str_to_minutes("09:30") == 570
        assert minutes_to_time_str(570) == "09:30"
        assert time_str_to_minutes("7:5") == 425

    def test_slot_datetime(self, day):
        assert slot_datetime(day, "15:00") == datetime(2025, 5, 20, 15, 0)

    def test_slot_starting_now_is_past(self, day):
        assert is_slot_in_past(day, "09:00", datetime(2025, 5, 20, 9, 0))
        assert not is_slot_in_past(day, "09:00", datetime(2025, 5, 20, 8, 59))

    def test_add_days_crosses_month(self):
        assert add_days(date(2025, 5, 31), 1) == date(2025, 6, 1)

    def test_date_range(self, day):
        assert date_range(day, 3) == [date(2025, 5, 20), date(2025, 5, 21), date(2025, 5, 22)]
        assert date_range(day, 0) == []
        assert date_range(day, -2) == []

    def test_as_date(self, day):
        assert as_date(day) == day
        assert as_date("2025-05-20") == day
        assert as_date(datetime(2025, 5, 20, 9, 30)) == day

    def test_as_date_rejects_other_types(self):
        with pytest.raises(TypeError):
            as_date(None)
        with pytest.raises(ValueError):
            as_date("May 20")
