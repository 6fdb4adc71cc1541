"""Session helpers (issue tokens, cookies, caller resolution)."""
from __future__ import annotations

from dataclasses import dataclass
import secrets
import time

from fastapi import Request, Response

from agora.core.config import Settings
from agora.domain.ids import member_id
from agora.repositories.json_storage import JsonStorage

SESSION_COOKIE_NAME = "session"
SESSION_HEADER_NAME = "x-session-token"
ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class Caller:
    """Who is making the request, as seen by the services."""

    name: str
    member_id: str
    is_admin: bool = False
    via_session: bool = False

    def owns(self, owner: str | None) -> bool:
        return self.is_admin or (owner or "") == self.name


class SessionService:
    """Issues and resolves plaintext-name sessions stored in the data file."""

    def __init__(self, storage: JsonStorage, settings: Settings) -> None:
        self.storage = storage
        self.settings = settings

    def issue_session(self, db: dict, member: str) -> str:
        """Create a session token inside an open transaction document."""
        token = secrets.token_urlsafe(32)
        now = int(time.time())
        ttl = max(60, self.settings.session_ttl_seconds)
        sessions = db.setdefault("sessions", {})
        for key in [k for k, s in sessions.items() if int(s.get("expiresAt") or 0) < now]:
            sessions.pop(key, None)
        sessions[token] = {"memberId": member, "createdAt": now, "expiresAt": now + ttl}
        return token

    def session_member(self, token: str | None) -> dict | None:
        """Return the member behind a live session token, if any."""
        if not token:
            return None
        db = self.storage.snapshot()
        entry = db["sessions"].get(token)
        if not entry or int(entry.get("expiresAt") or 0) < int(time.time()):
            return None
        return db["members"].get(entry.get("memberId") or "")

    def caller(self, request: Request, claimed: str | None = None) -> Caller:
        """
        Resolve the caller: a live session wins over the name claimed in the
        body, which wins over ``anonymous``.
        """
        member = self.session_member(request_token(request))
        if member:
            name = member.get("name") or member.get("id") or ANONYMOUS
            return Caller(
                name=name,
                member_id=member.get("id") or member_id(name),
                is_admin=name == self.settings.admin_name,
                via_session=True,
            )
        name = (claimed or "").strip() or ANONYMOUS
        return Caller(name=name, member_id=member_id(name), is_admin=name == self.settings.admin_name)


def request_token(request: Request) -> str | None:
    return request.cookies.get(SESSION_COOKIE_NAME) or request.headers.get(SESSION_HEADER_NAME)


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        httponly=True,
        secure=settings.app_env == "prod",
        samesite="strict",
        max_age=settings.session_ttl_seconds,
        path="/",
    )
