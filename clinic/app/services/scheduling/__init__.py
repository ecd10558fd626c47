"""
Therapy appointment scheduling core.

Pure functions over a snapshot of appointments:
- build_schedule_matrix: Room x Slot availability for one date
- can_book_appointment: atomic room + therapist non-conflict check
- get_recurring_slot_alternatives: per-day result and substitutes
- filter_therapists_by_gender: optional gender-match policy
"""

from .config import ClinicTimings, get_clinic_timings
from .matrix import build_schedule_matrix
from .rules import can_book_appointment, filter_therapists_by_gender
from .alternatives import get_recurring_slot_alternatives, resolve_days
from .conflicts import (
    check_recurring_slot_availability,
    get_recurring_conflicts,
    get_therapist_conflicts,
)
from .recommendations import get_recommended_slots
from .registry import ClinicRegistry, default_registry, load_registry
from .repository import (
    AppointmentRepository,
    InMemoryAppointmentRepository,
    SqlAppointmentRepository,
)

__all__ = [
    "ClinicTimings",
    "get_clinic_timings",
    "build_schedule_matrix",
    "can_book_appointment",
    "filter_therapists_by_gender",
    "get_recurring_slot_alternatives",
    "resolve_days",
    "check_recurring_slot_availability",
    "get_recurring_conflicts",
    "get_therapist_conflicts",
    "get_recommended_slots",
    "ClinicRegistry",
    "default_registry",
    "load_registry",
    "AppointmentRepository",
    "InMemoryAppointmentRepository",
    "SqlAppointmentRepository",
]
