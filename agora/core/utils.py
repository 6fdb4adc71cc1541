"""
Utility helpers shared across routers/services.
"""

from datetime import datetime, timezone
import math
import time


def now_iso() -> str:
    """UTC timestamp in ISO-8601 with millisecond precision and a ``Z`` suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def now_ms() -> int:
    return int(time.time() * 1000)


def parse_iso(value: str | None) -> datetime | None:
    """Parse the timestamps written by :func:`now_iso` (and plain dates)."""
    if not value:
        return None
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
