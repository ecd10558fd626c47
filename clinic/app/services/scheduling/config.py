"""
Clinic timing table: working days and the fixed slot grid.
"""

from dataclasses import dataclass, field
from datetime import date
from functools import lru_cache

from ...schemas.scheduling import normalize_slot


WEEKDAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def time_str_to_minutes(time_str: str) -> int:
    """Convert "HH:MM" to minutes since midnight."""
    hour, minute = normalize_slot(time_str).split(":")
    return int(hour) * 60 + int(minute)


def minutes_to_time_str(minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass(frozen=True)
class ClinicTimings:
    """
    Timing table of the clinic.

    Attributes:
        slot_duration_minutes: Width of every slot (15/30/60)
        day_start: First slot start "HH:MM"
        day_end: End of the working day "HH:MM" (exclusive)
        break_start: Start of the mid-day gap, or None
        break_end: End of the mid-day gap, or None
        weekly_off: Lowercase weekday names the clinic is closed
    """
    slot_duration_minutes: int = 60
    day_start: str = "07:00"
    day_end: str = "18:00"
    break_start: str | None = "13:00"
    break_end: str | None = "15:00"
    weekly_off: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        """Validate configuration."""
        if self.slot_duration_minutes not in (15, 30, 60):
            raise ValueError(
                f"slot_duration_minutes must be 15, 30, or 60, got {self.slot_duration_minutes}"
            )
        if time_str_to_minutes(self.day_start) >= time_str_to_minutes(self.day_end):
            raise ValueError(f"day_start {self.day_start} must be before day_end {self.day_end}")
        if bool(self.break_start) != bool(self.break_end):
            raise ValueError("break_start and break_end must be set together")
        unknown = {d.lower() for d in self.weekly_off} - set(WEEKDAY_NAMES)
        if unknown:
            raise ValueError(f"Unknown weekday names in weekly_off: {sorted(unknown)}")
        object.__setattr__(self, "weekly_off", frozenset(d.lower() for d in self.weekly_off))

    @property
    def slot_starts(self) -> list[str]:
        """
        Ordered slot start times of a working day.

        Slots starting inside the break are skipped, e.g. 07:00..12:00 and
        15:00..17:00 for the default table.
        """
        start = time_str_to_minutes(self.day_start)
        end = time_str_to_minutes(self.day_end)
        gap = None
        if self.break_start and self.break_end:
            gap = (time_str_to_minutes(self.break_start), time_str_to_minutes(self.break_end))

        slots = []
        t = start
        while t < end:
            if gap and gap[0] <= t < gap[1]:
                t = gap[1]
                continue
            slots.append(minutes_to_time_str(t))
            t += self.slot_duration_minutes
        return slots

    def is_working_day(self, target_date: date) -> bool:
        return WEEKDAY_NAMES[target_date.weekday()] not in self.weekly_off

    def slots_for(self, target_date: date) -> list[str]:
        """Slots of target_date; empty on a weekly-off day."""
        if not self.is_working_day(target_date):
            return []
        return self.slot_starts

    def slots_after(self, slot: str) -> list[str]:
        """Slots strictly after slot, ascending."""
        return [s for s in self.slot_starts if s > slot]

    def slots_before(self, slot: str) -> list[str]:
        """Slots strictly before slot, nearest first."""
        return [s for s in reversed(self.slot_starts) if s < slot]


@lru_cache
def get_clinic_timings() -> ClinicTimings:
    """Clinic timing table built from settings (singleton)."""
    from ...config import settings

    return ClinicTimings(
        slot_duration_minutes=settings.slot_duration_minutes,
        day_start=settings.day_start,
        day_end=settings.day_end,
        break_start=settings.break_start,
        break_end=settings.break_end,
        weekly_off=frozenset(settings.weekly_off),
    )
