"""Process configuration read from the environment at startup."""
import os
from dataclasses import dataclass, field


def _split_origins(raw: str) -> list[str]:
    return [o.strip() for o in raw.split(",") if o.strip()]


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    database_url: str | None = None
    cors_origins: list[str] = field(default_factory=list)
    slow_threshold_ms: int = 300
    log_level: str = "INFO"


def load_settings() -> Settings:
    return Settings(
        database_url=os.getenv("DATABASE_URL") or None,
        cors_origins=_split_origins(
            os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
        ),
        slow_threshold_ms=_int_env("SLOW_THRESHOLD_MS", 300),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def debug_enabled() -> bool:
    return os.getenv("DEBUG", "").lower() in ("1", "true", "yes")
