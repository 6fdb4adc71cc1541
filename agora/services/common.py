"""Helpers shared by the aggregate services (lookups, ownership, comments)."""
from __future__ import annotations

from agora.core.errors import AuthorizationError, NotFoundError, ValidationError
from agora.core.utils import now_iso
from agora.domain.ids import prefixed_id
from agora.services.session_service import ANONYMOUS, Caller


def require_text(*values: str | None, message: str) -> None:
    if any(not (v or "").strip() for v in values):
        raise ValidationError(message)


def get_or_404(collection: dict, item_id: str, label: str) -> dict:
    item = collection.get(item_id)
    if not isinstance(item, dict):
        raise NotFoundError(f"{label} not found")
    return item


def ensure_owner(caller: Caller, owner: str | None) -> None:
    if not caller.owns(owner):
        raise AuthorizationError("Not authorized")


def soft_delete(item: dict, caller: Caller) -> None:
    stamp = now_iso()
    item["status"] = "deleted"
    item["deletedAt"] = stamp
    item["deletedBy"] = caller.name


def append_comment(item: dict, author: str | None, content: str | None) -> dict:
    """Append a comment to the owning aggregate (insertion order preserved)."""
    require_text(content, message="Comment content is required")
    comment = {
        "id": prefixed_id("comment"),
        "author": (author or "").strip() or ANONYMOUS,
        "content": (content or "").strip(),
        "date": now_iso(),
        "likes": 0,
    }
    item.setdefault("comments", []).append(comment)
    return comment
