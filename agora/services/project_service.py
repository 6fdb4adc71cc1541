"""Research projects: CRUD, team membership, milestones and comments."""
from __future__ import annotations

import logging

from agora.core.errors import AuthorizationError, NotFoundError
from agora.core.utils import now_iso, today
from agora.domain import query
from agora.domain.ids import generate_id, prefixed_id
from agora.repositories.json_storage import JsonStorage
from agora.schemas import MilestoneUpdate, ProjectCreate, ProjectUpdates
from agora.services.common import append_comment, ensure_owner, get_or_404, require_text, soft_delete
from agora.services.member_service import upsert_member
from agora.services.session_service import Caller

log = logging.getLogger("agora.projects")


class ProjectService:
    def __init__(self, storage: JsonStorage) -> None:
        self.storage = storage

    def list_projects(
        self,
        *,
        lead: str | None = None,
        institution: str | None = None,
        status: str | None = None,
        tag: str | None = None,
        priority: str | None = None,
        search: str | None = None,
    ) -> list[dict]:
        projects = list(self.storage.snapshot()["projects"].values())
        found = query.filter_records(
            projects,
            equals={"lead": lead, "status": status, "priority": priority},
            contains={"institutions": institution, "tags": tag},
            search=search,
            search_fields=("title", "description"),
        )
        return query.sort_by_priority(found)

    def view_project(self, project_id: str) -> dict:
        with self.storage.transaction() as db:
            project = get_or_404(db["projects"], project_id, "Project")
            project["views"] = int(project.get("views") or 0) + 1
        return project

    def create_project(self, caller: Caller, payload: ProjectCreate) -> dict:
        require_text(payload.title, payload.description, message="Title and description are required")
        institutions = list(payload.institutions)
        if payload.institution and payload.institution.strip() not in institutions:
            institutions.insert(0, payload.institution.strip())
        stamp = now_iso()
        with self.storage.transaction() as db:
            project_id = generate_id(caller.name)
            lead = upsert_member(
                db,
                caller.name,
                role="lead",
                institution=institutions[0] if institutions else None,
            )
            project = {
                "id": project_id,
                "lead": caller.name,
                "title": payload.title.strip(),
                "description": payload.description.strip(),
                "institutions": institutions,
                "tags": list(payload.tags),
                "status": payload.status,
                "priority": payload.priority,
                "phase": (payload.phase or "").strip() or "ideation",
                "team": [lead["id"]],
                "milestones": [],
                "comments": [],
                "views": 0,
                "createdAt": stamp,
                "updatedAt": stamp,
            }
            db["projects"][project_id] = project
            _link(lead, project_id)
        log.info("Project created: %s led by %s", project_id, caller.name)
        return project

    def update_project(self, caller: Caller, project_id: str, updates: ProjectUpdates) -> dict:
        with self.storage.transaction() as db:
            project = get_or_404(db["projects"], project_id, "Project")
            ensure_owner(caller, project.get("lead"))
            changes = updates.model_dump(exclude_unset=True, exclude_none=True)
            for key in ("title", "description"):
                if key in changes:
                    require_text(changes[key], message=f"{key.capitalize()} cannot be empty")
            for key in ("title", "description", "phase"):
                if key in changes:
                    changes[key] = changes[key].strip()
            project.update(changes)
            project["updatedAt"] = now_iso()
        log.info("Project %s updated by %s", project_id, caller.name)
        return project

    def delete_project(self, caller: Caller, project_id: str) -> None:
        with self.storage.transaction() as db:
            project = get_or_404(db["projects"], project_id, "Project")
            ensure_owner(caller, project.get("lead"))
            soft_delete(project, caller)
            project["updatedAt"] = project["deletedAt"]
        log.info("Project %s soft-deleted by %s", project_id, caller.name)

    # -------------------------- team --------------------------
    def team(self, project_id: str) -> list[dict]:
        db = self.storage.snapshot()
        project = get_or_404(db["projects"], project_id, "Project")
        members = db["members"]
        return [members.get(mid) or {"id": mid, "name": mid} for mid in project.get("team") or []]

    def add_team_member(
        self, project_id: str, name: str | None, role: str | None = None, institution: str | None = None
    ) -> tuple[dict, list[str]]:
        require_text(name, message="Member name is required")
        with self.storage.transaction() as db:
            project = get_or_404(db["projects"], project_id, "Project")
            member = upsert_member(db, name, role=role, institution=institution)
            team = project.setdefault("team", [])
            if member["id"] not in team:
                team.append(member["id"])
            _link(member, project_id)
            project["updatedAt"] = now_iso()
        log.info("Member %s joined project %s", member["id"], project_id)
        return member, list(team)

    # -------------------------- milestones --------------------------
    def add_milestone(self, project_id: str, title: str | None, status: str, date: str | None) -> dict:
        require_text(title, message="Milestone title is required")
        with self.storage.transaction() as db:
            _milestones_enabled(db)
            project = get_or_404(db["projects"], project_id, "Project")
            stamp = now_iso()
            milestone = {
                "id": prefixed_id("milestone"),
                "title": title.strip(),
                "status": status,
                "date": (date or "").strip() or today(),
                "createdAt": stamp,
            }
            project.setdefault("milestones", []).append(milestone)
            project["updatedAt"] = stamp
        return milestone

    def update_milestone(self, project_id: str, milestone_id: str, changes: MilestoneUpdate) -> dict:
        with self.storage.transaction() as db:
            _milestones_enabled(db)
            project = get_or_404(db["projects"], project_id, "Project")
            milestone = next((m for m in project.get("milestones") or [] if m.get("id") == milestone_id), None)
            if milestone is None:
                raise NotFoundError("Milestone not found")
            milestone.update(changes.model_dump(exclude_unset=True, exclude_none=True))
            stamp = now_iso()
            milestone["updatedAt"] = stamp
            project["updatedAt"] = stamp
        return milestone

    def add_comment(self, project_id: str, author: str | None, content: str | None) -> dict:
        require_text(content, message="Comment content is required")
        with self.storage.transaction() as db:
            project = get_or_404(db["projects"], project_id, "Project")
            comment = append_comment(project, author, content)
        return comment


def _link(member: dict, project_id: str) -> None:
    projects = member.setdefault("projects", [])
    if project_id not in projects:
        projects.append(project_id)


def _milestones_enabled(db: dict) -> None:
    if not db["config"].get("milestonesEnabled", True):
        raise AuthorizationError("Milestones are disabled")


