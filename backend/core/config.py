import os

from dotenv import load_dotenv

load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


APP_ENV = os.getenv("APP_ENV", "development")
SQL_ECHO = _get_bool(os.getenv("SQL_ECHO"), default=False)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./calendar.db")

CORS_ALLOWED_ORIGINS = _get_list(os.getenv("CORS_ALLOWED_ORIGINS"), ["http://localhost:4200"])

DEFAULT_TIME_ZONE = os.getenv("DEFAULT_TIME_ZONE", "America/Chicago")

SLOT_GRID_START_HOUR = int(os.getenv("SLOT_GRID_START_HOUR", "6"))
SLOT_GRID_END_HOUR = int(os.getenv("SLOT_GRID_END_HOUR", "22"))
SLOT_STEP_MINUTES = int(os.getenv("SLOT_STEP_MINUTES", "30"))

SCHEDULE_CACHE_SIZE = int(os.getenv("SCHEDULE_CACHE_SIZE", "256"))
MAX_RANGE_DAYS = int(os.getenv("MAX_RANGE_DAYS", "62"))


def validate_runtime_config() -> None:
    from backend.scheduling.errors import InvalidTimeZone
    from backend.scheduling.time_normalization import resolve_time_zone

    try:
        resolve_time_zone(DEFAULT_TIME_ZONE)
    except InvalidTimeZone as exc:
        raise RuntimeError(f"DEFAULT_TIME_ZONE '{DEFAULT_TIME_ZONE}' is not a valid IANA time zone.") from exc

    if not 0 <= SLOT_GRID_START_HOUR < SLOT_GRID_END_HOUR <= 24:
        raise RuntimeError("SLOT_GRID_START_HOUR must be before SLOT_GRID_END_HOUR.")

    if SLOT_STEP_MINUTES <= 0 or 60 % SLOT_STEP_MINUTES != 0:
        raise RuntimeError("SLOT_STEP_MINUTES must evenly divide an hour.")
