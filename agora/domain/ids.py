"""Id helpers for aggregates, comments, milestones and members."""
from __future__ import annotations

import re
import secrets

from agora.core.utils import now_ms

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
_UNSAFE_CHAR = re.compile(r"[^a-z0-9]")
_UNSAFE_RUN = re.compile(r"[^a-z0-9]+")


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("base36 requires a non-negative integer")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


def random_suffix(length: int = 5) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def safe_author(author: str | None) -> str:
    """Lowercase the author and replace anything outside [a-z0-9] with '-' (max 10 chars)."""
    value = (author or "").strip() or "anonymous"
    return _UNSAFE_CHAR.sub("-", value.lower())[:10]


def generate_id(author: str | None = "anonymous") -> str:
    """
    Build an aggregate id: ``<author>-<base36 ms>-<random>``.

    Ids are not checked against existing keys; the millisecond clock plus
    five random characters keeps collisions negligible.
    """
    return f"{safe_author(author)}-{to_base36(now_ms())}-{random_suffix()}"


def prefixed_id(prefix: str) -> str:
    """Id for owned children (comments, milestones): ``<prefix>-<ms>-<random>``."""
    return f"{prefix}-{now_ms()}-{random_suffix()}"


def member_id(name: str | None) -> str:
    """
    Derive a stable member id from a display name ("Dr. Ada L." -> "dr-ada-l").

    Names without a single letter or digit have no id and yield ``""``.
    """
    return _UNSAFE_RUN.sub("-", (name or "").strip().lower()).strip("-")
