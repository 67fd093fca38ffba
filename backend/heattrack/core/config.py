from pydantic_settings import BaseSettings
from pydantic import field_validator

from heattrack.core.constants import (
    FIX_TIMEOUT_S,
    HEAT_RADIUS_M,
    MOVEMENT_THRESHOLD_M,
    SAMPLE_PERIOD_S,
    STATUS_HISTORY,
)


class Settings(BaseSettings):
    # Embedded SQLite file next to the working dir by default
    database_url: str = "sqlite:///./locations.db3"

    # Where fixes come from: "queue" (pushed via POST /fixes),
    # "gpx" or "fit" (replay of a recorded track at replay_path)
    location_source: str = "queue"
    replay_path: str | None = None

    # Stand-in for the OS permission prompt: "granted" or "denied"
    location_permission: str = "granted"
    # Accuracy hint passed to the source: lowest, low, medium, high, best
    accuracy: str = "best"

    movement_threshold_m: float = MOVEMENT_THRESHOLD_M
    sample_period_s: float = SAMPLE_PERIOD_S
    fix_timeout_s: float = FIX_TIMEOUT_S
    heat_radius_m: float = HEAT_RADIUS_M

    status_history: int = STATUS_HISTORY
    # Start the sampling loop as soon as the app comes up
    autostart: bool = False
    log_level: str = "INFO"

    # Allow empty env strings for optional fields
    @field_validator("replay_path", mode="before")
    @classmethod
    def _empty_to_none(cls, v):
        if v in ("", None, "null", "None"):
            return None
        return v

    @field_validator("location_source", "location_permission", "accuracy", mode="before")
    @classmethod
    def _lower(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    class Config:
        env_file = ".env"


settings = Settings()
