"""FastAPI dependency functions for the scheduling routers."""
from datetime import datetime

from fastapi import Depends
from sqlalchemy.orm import Session

from .database import get_db
from .services.scheduling import (
    ClinicRegistry,
    ClinicTimings,
    SqlAppointmentRepository,
    get_clinic_timings,
    load_registry,
)


def get_now() -> datetime:
    """Current naive local time. Overridden in tests to pin the clock."""
    return datetime.now()


def get_timings() -> ClinicTimings:
    return get_clinic_timings()


def get_registry(db: Session = Depends(get_db)) -> ClinicRegistry:
    return load_registry(db)


def get_repository(db: Session = Depends(get_db)) -> SqlAppointmentRepository:
    return SqlAppointmentRepository(db)
