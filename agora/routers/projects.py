from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Request

from agora.routers import deps
from agora.schemas import (
    AuthorOnly,
    CommentCreate,
    MilestoneCreate,
    MilestoneUpdate,
    ProjectCreate,
    ProjectUpdate,
    TeamMemberAdd,
)

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("")
def list_projects(
    request: Request,
    lead: Optional[str] = None,
    institution: Optional[str] = None,
    status: Optional[str] = None,
    tag: Optional[str] = None,
    priority: Optional[str] = None,
    search: Optional[str] = None,
):
    projects = deps.projects(request).list_projects(
        lead=lead, institution=institution, status=status, tag=tag, priority=priority, search=search
    )
    return {"success": True, "projects": projects, "count": len(projects)}


@router.get("/{project_id}")
def get_project(project_id: str, request: Request):
    return {"success": True, "project": deps.projects(request).view_project(project_id)}


@router.post("")
def create_project(payload: ProjectCreate, request: Request):
    who = deps.caller(request, payload.lead)
    project = deps.projects(request).create_project(who, payload)
    return {"success": True, "message": "Project created successfully!", "project": project, "id": project["id"]}


@router.put("/{project_id}")
def update_project(project_id: str, payload: ProjectUpdate, request: Request):
    who = deps.caller(request, payload.author)
    project = deps.projects(request).update_project(who, project_id, payload.updates)
    return {"success": True, "message": "Project updated successfully", "project": project}


@router.delete("/{project_id}")
def delete_project(project_id: str, request: Request, payload: Optional[AuthorOnly] = None):
    who = deps.caller(request, payload.author if payload else None)
    deps.projects(request).delete_project(who, project_id)
    return {"success": True, "message": "Project deleted successfully"}


@router.get("/{project_id}/team")
def get_team(project_id: str, request: Request):
    team = deps.projects(request).team(project_id)
    return {"success": True, "team": team, "count": len(team)}


@router.post("/{project_id}/team")
def add_team_member(project_id: str, payload: TeamMemberAdd, request: Request):
    member, team = deps.projects(request).add_team_member(
        project_id, payload.name, role=payload.role, institution=payload.institution
    )
    return {"success": True, "member": member, "team": team}


@router.post("/{project_id}/milestones")
def add_milestone(project_id: str, payload: MilestoneCreate, request: Request):
    milestone = deps.projects(request).add_milestone(project_id, payload.title, payload.status, payload.date)
    return {"success": True, "milestone": milestone}


@router.put("/{project_id}/milestones/{milestone_id}")
def update_milestone(project_id: str, milestone_id: str, payload: MilestoneUpdate, request: Request):
    milestone = deps.projects(request).update_milestone(project_id, milestone_id, payload)
    return {"success": True, "milestone": milestone}


@router.post("/{project_id}/comments")
def add_comment(project_id: str, payload: CommentCreate, request: Request):
    who = deps.caller(request, payload.author)
    comment = deps.projects(request).add_comment(project_id, who.name, payload.content)
    return {"success": True, "comment": comment}
