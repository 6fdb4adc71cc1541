from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from agora.routers import deps
from agora.schemas import LoginRequest
from agora.services.session_service import request_token, set_session_cookie

router = APIRouter(prefix="/api", tags=["members"])


@router.post("/login")
def login(payload: LoginRequest, request: Request):
    member, token = deps.members(request).login(payload.name, payload.institution, payload.role)
    response = JSONResponse({"success": True, "user": member, "token": token})
    set_session_cookie(response, token, deps.settings(request))
    return response


@router.get("/user")
def current_user(request: Request):
    return {"success": True, "user": deps.members(request).current_user(request_token(request))}


@router.get("/members")
def list_members(request: Request, institution: Optional[str] = None, role: Optional[str] = None):
    members = deps.members(request).list_members(institution=institution, role=role)
    return {"success": True, "members": members, "count": len(members)}
