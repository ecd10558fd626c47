import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import settings
from .database import SessionLocal, init_db
from .routers import appointments, schedule
from .services.scheduling.registry import ensure_registry

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    if settings.seed_default_registry:
        db = SessionLocal()
        try:
            ensure_registry(db)
        finally:
            db.close()
    logger.info("Clinic scheduling API started")
    yield


app = FastAPI(title="Clinic Scheduling API", lifespan=lifespan)

app.include_router(schedule.router)
app.include_router(appointments.router)


@app.get("/health")
def health():
    return {"status": "ok"}
