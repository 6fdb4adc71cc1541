"""
Request schemas

One pydantic model per request body. Update payloads forbid unknown keys so
callers cannot overwrite ids, counters or timestamps through ``updates``.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

PostStatus = Literal["draft", "pending", "published", "deleted"]
ProjectStatus = Literal["planning", "active", "completed", "deleted"]
Priority = Literal["high", "medium", "low"]
MilestoneStatus = Literal["pending", "in-progress", "completed"]
VoteDirection = Literal["up", "down"]


def _split_tags(value):
    """Accept ``["a", "b"]`` or ``"a, b"``; drop blanks."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    if isinstance(value, (list, tuple)):
        return [str(t).strip() for t in value if str(t).strip()]
    return value


class _Tagged(BaseModel):
    tags: list[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, value):
        return _split_tags(value)


# ---------------------------------------------------------------- posts
class PostCreate(_Tagged):
    author: Optional[str] = Field(None, description="Plaintext author name")
    title: Optional[str] = None
    content: Optional[str] = None


class PostUpdates(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[list[str]] = None
    status: Optional[PostStatus] = None

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, value):
        return None if value is None else _split_tags(value)


class PostUpdate(BaseModel):
    author: Optional[str] = None
    updates: PostUpdates = Field(default_factory=PostUpdates)


class AuthorOnly(BaseModel):
    author: Optional[str] = None


class CommentCreate(BaseModel):
    author: Optional[str] = None
    content: Optional[str] = None


# ---------------------------------------------------------------- projects
class ProjectCreate(_Tagged):
    lead: Optional[str] = Field(None, validation_alias=AliasChoices("lead", "author"))
    title: Optional[str] = None
    description: Optional[str] = None
    institution: Optional[str] = None
    institutions: list[str] = Field(default_factory=list)
    priority: Priority = "medium"
    phase: Optional[str] = None
    status: Literal["planning", "active", "completed"] = "planning"


class ProjectUpdates(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    institutions: Optional[list[str]] = None
    tags: Optional[list[str]] = None
    status: Optional[ProjectStatus] = None
    priority: Optional[Priority] = None
    phase: Optional[str] = None

    @field_validator("tags", "institutions", mode="before")
    @classmethod
    def _lists(cls, value):
        return None if value is None else _split_tags(value)


class ProjectUpdate(BaseModel):
    author: Optional[str] = None
    updates: ProjectUpdates = Field(default_factory=ProjectUpdates)


class TeamMemberAdd(BaseModel):
    name: Optional[str] = None
    role: Optional[str] = None
    institution: Optional[str] = None


class MilestoneCreate(BaseModel):
    title: Optional[str] = None
    status: MilestoneStatus = "pending"
    date: Optional[str] = None


class MilestoneUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    status: Optional[MilestoneStatus] = None
    date: Optional[str] = None


# ---------------------------------------------------------------- discussions
class DiscussionCreate(_Tagged):
    author: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None
    project_id: Optional[str] = Field(None, validation_alias=AliasChoices("projectId", "project_id"))


class VoteCast(BaseModel):
    user: Optional[str] = Field(None, validation_alias=AliasChoices("user", "userId", "author"))
    vote: VoteDirection


# ---------------------------------------------------------------- members
class LoginRequest(BaseModel):
    name: Optional[str] = None
    institution: Optional[str] = None
    role: Optional[str] = None
