"""Accessors for the services the app factory stores on ``app.state``."""
from __future__ import annotations

from fastapi import Request

from agora.core.config import Settings
from agora.services.analytics_service import AnalyticsService
from agora.services.discussion_service import DiscussionService
from agora.services.member_service import MemberService
from agora.services.post_service import PostService
from agora.services.project_service import ProjectService
from agora.services.session_service import Caller, SessionService


def _state(request: Request, name: str):
    svc = getattr(getattr(request.app, "state", None), name, None)
    if svc is None:
        raise RuntimeError(f"{name} not configured")
    return svc


def settings(request: Request) -> Settings:
    return _state(request, "settings")


def posts(request: Request) -> PostService:
    return _state(request, "post_service")


def projects(request: Request) -> ProjectService:
    return _state(request, "project_service")


def discussions(request: Request) -> DiscussionService:
    return _state(request, "discussion_service")


def members(request: Request) -> MemberService:
    return _state(request, "member_service")


def analytics(request: Request) -> AnalyticsService:
    return _state(request, "analytics_service")


def caller(request: Request, claimed: str | None = None) -> Caller:
    sessions: SessionService = _state(request, "session_service")
    return sessions.caller(request, claimed)
