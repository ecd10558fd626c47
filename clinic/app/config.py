# clinic/app/config.py

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]  # repository root


class Settings(BaseSettings):
    database_url: str = "sqlite:///./clinic.db"

    # Scheduling policy
    enforce_gender_match: bool = True
    seed_default_registry: bool = True

    # Clinic timing table
    slot_duration_minutes: int = 60
    day_start: str = "07:00"
    day_end: str = "18:00"
    break_start: str | None = "13:00"
    break_end: str | None = "15:00"
    weekly_off: list[str] = []

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        extra="ignore",
    )

    @property
    def resolved_database_url(self) -> str:
        url = self.database_url
        if url.startswith("sqlite:///./"):
            # Relative sqlite path is resolved against the repository root
            relative_path = url.replace("sqlite:///./", "")
            absolute_path = BASE_DIR / relative_path
            return f"sqlite:///{absolute_path}"
        return url


settings = Settings()
