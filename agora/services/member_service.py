"""Members, plaintext-name login and the current-user lookup."""
from __future__ import annotations

import logging

from agora.core.errors import AuthorizationError, ValidationError
from agora.core.utils import now_iso
from agora.domain import query
from agora.domain.ids import member_id
from agora.repositories.json_storage import JsonStorage
from agora.services.common import require_text
from agora.services.session_service import SessionService

log = logging.getLogger("agora.members")


def upsert_member(db: dict, name: str, *, role: str | None = None, institution: str | None = None) -> dict:
    """Create the member on first sight; later calls only fill in new details."""
    clean = name.strip()
    mid = member_id(clean)
    if not mid:
        raise ValidationError("Name must contain a letter or digit")
    members = db.setdefault("members", {})
    member = members.get(mid)
    if member is None:
        member = {
            "id": mid,
            "name": clean,
            "role": (role or "").strip() or "member",
            "institution": (institution or "").strip(),
            "projects": [],
            "joinedAt": now_iso(),
        }
        members[mid] = member
        log.info("Member registered: %s", mid)
        return member
    if role and role.strip() and member.get("role") != "lead":
        member["role"] = role.strip()
    if institution and institution.strip():
        member["institution"] = institution.strip()
    return member


class MemberService:
    def __init__(self, storage: JsonStorage, sessions: SessionService) -> None:
        self.storage = storage
        self.sessions = sessions

    def login(self, name: str | None, institution: str | None = None, role: str | None = None) -> tuple[dict, str]:
        """Register-or-fetch the member by name and open a session for it."""
        require_text(name, message="Name is required")
        with self.storage.transaction() as db:
            member = upsert_member(db, name, role=role, institution=institution)
            token = self.sessions.issue_session(db, member["id"])
        log.info("Login: %s", member["id"])
        return member, token

    def current_user(self, token: str | None) -> dict:
        member = self.sessions.session_member(token)
        if not member:
            raise AuthorizationError("Not logged in")
        return member

    def list_members(self, *, institution: str | None = None, role: str | None = None) -> list[dict]:
        members = list(self.storage.snapshot()["members"].values())
        found = query.filter_records(members, equals={"institution": institution, "role": role})
        return sorted(found, key=lambda m: (m.get("name") or "").lower())
