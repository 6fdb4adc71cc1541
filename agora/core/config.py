"""
Configuration helpers for the Agora backend.

Routers and services receive a Settings instance instead of reading
os.environ directly, so tests can build an app around a temporary data file.
"""

from dataclasses import dataclass, field
from functools import lru_cache
import os

PRESETS = ("blog", "research", "full")


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str = "dev"
    data_file: str = "data.json"
    preset: str = "full"
    admin_name: str = "admin"
    atomic_writes: bool = True
    cors_origins: tuple[str, ...] = field(default_factory=tuple)
    log_level: str = "INFO"
    session_ttl_seconds: int = 86400

    @property
    def blog_enabled(self) -> bool:
        return self.preset in ("blog", "full")

    @property
    def research_enabled(self) -> bool:
        return self.preset in ("research", "full")

    @property
    def debug_enabled(self) -> bool:
        return self.app_env != "prod"


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    preset = (os.getenv("AGORA_PRESET") or "full").strip().lower()
    if preset not in PRESETS:
        preset = "full"
    origins = os.getenv("AGORA_CORS_ORIGINS", "")

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        data_file=os.getenv("AGORA_DATA_FILE", "data.json"),
        preset=preset,
        admin_name=(os.getenv("AGORA_ADMIN_NAME") or "admin").strip(),
        atomic_writes=_bool(os.getenv("AGORA_ATOMIC_WRITES"), True),
        cors_origins=tuple(o.strip().rstrip("/") for o in origins.split(",") if o.strip()),
        log_level=(os.getenv("AGORA_LOG_LEVEL") or "INFO").upper(),
        session_ttl_seconds=_int(os.getenv("SESSION_TTL_SECONDS", "86400"), 86400),
    )
