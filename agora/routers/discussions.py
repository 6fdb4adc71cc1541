from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Request

from agora.domain.query import net_score
from agora.routers import deps
from agora.schemas import CommentCreate, DiscussionCreate, VoteCast

router = APIRouter(prefix="/api/discussions", tags=["discussions"])


@router.get("")
def list_discussions(
    request: Request,
    projectId: Optional[str] = None,
    author: Optional[str] = None,
    tag: Optional[str] = None,
    search: Optional[str] = None,
    sort: Optional[Literal["score", "recent"]] = None,
):
    discussions = deps.discussions(request).list_discussions(
        project_id=projectId, author=author, tag=tag, search=search, sort=sort
    )
    return {"success": True, "discussions": discussions, "count": len(discussions)}


@router.get("/{discussion_id}")
def get_discussion(discussion_id: str, request: Request):
    return {"success": True, "discussion": deps.discussions(request).get_discussion(discussion_id)}


@router.post("")
def create_discussion(payload: DiscussionCreate, request: Request):
    who = deps.caller(request, payload.author)
    discussion = deps.discussions(request).create_discussion(
        who, payload.title, payload.content, payload.project_id, payload.tags
    )
    return {"success": True, "discussion": discussion, "id": discussion["id"]}


@router.post("/{discussion_id}/vote")
def vote(discussion_id: str, payload: VoteCast, request: Request):
    who = deps.caller(request, payload.user)
    discussion = deps.discussions(request).vote(who, discussion_id, payload.vote)
    return {
        "success": True,
        "upvotes": discussion["upvotes"],
        "downvotes": discussion["downvotes"],
        "score": net_score(discussion),
        "vote": payload.vote,
    }


@router.post("/{discussion_id}/comments")
def add_comment(discussion_id: str, payload: CommentCreate, request: Request):
    who = deps.caller(request, payload.author)
    comment = deps.discussions(request).add_comment(discussion_id, who.name, payload.content)
    return {"success": True, "comment": comment}
