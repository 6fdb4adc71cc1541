"""Seed documents written the first time a data file is created."""
from __future__ import annotations

from agora.core.utils import now_iso, today

VERSION = "1.0.0"

COLLECTIONS = ("posts", "projects", "discussions", "members", "sessions")

DEFAULT_CONFIG = {
    "allowPublicPosts": True,
    "requireApproval": False,
    "maxPostsPerUser": 100,
    "votingEnabled": True,
    "milestonesEnabled": True,
}


def db_defaults(db: dict) -> dict:
    """Fill missing top-level keys so older or single-variant files keep loading."""
    for name in COLLECTIONS:
        db.setdefault(name, {})
    config = db.setdefault("config", {})
    for key, value in DEFAULT_CONFIG.items():
        config.setdefault(key, value)
    db.setdefault("meta", {"createdAt": now_iso(), "version": VERSION})
    return db


def _blog_posts(stamp: str, day: str) -> dict:
    return {
        "welcome": {
            "id": "welcome",
            "author": "admin",
            "title": "Welcome to Agora",
            "content": (
                "# Hello!\n\n"
                "Every post gets its own id, so nobody overwrites anybody else.\n\n"
                "- Markdown content\n- Tags, search and filters\n- Likes and comments\n\n"
                "Create a post to get started."
            ),
            "date": day,
            "created": stamp,
            "tags": ["welcome", "platform", "demo"],
            "status": "published",
            "views": 0,
            "likes": 0,
            "comments": [],
        },
        "example": {
            "id": "example",
            "author": "demo",
            "title": "Example User Post",
            "content": (
                "# This is an example\n\n"
                "Posts support **bold**, *italic*, `code` and [links](https://example.com).\n\n"
                "Edit this one or write your own."
            ),
            "date": day,
            "created": stamp,
            "tags": ["example", "demo", "tutorial"],
            "status": "published",
            "views": 0,
            "likes": 0,
            "comments": [],
        },
    }


def _research_content(stamp: str, day: str) -> tuple[dict, dict, dict]:
    projects = {
        "open-lab-notebook": {
            "id": "open-lab-notebook",
            "lead": "admin",
            "title": "Open Lab Notebook",
            "description": "Shared protocols and results for reproducible experiments.",
            "institutions": ["Agora Institute"],
            "tags": ["open-science", "demo"],
            "status": "active",
            "priority": "high",
            "phase": "ideation",
            "team": ["admin"],
            "milestones": [
                {
                    "id": "milestone-protocols",
                    "title": "Publish first protocols",
                    "status": "in-progress",
                    "date": day,
                    "createdAt": stamp,
                }
            ],
            "comments": [],
            "views": 0,
            "createdAt": stamp,
            "updatedAt": stamp,
        }
    }
    discussions = {
        "welcome-discussion": {
            "id": "welcome-discussion",
            "projectId": "open-lab-notebook",
            "author": "admin",
            "title": "Which notebook format should we standardize on?",
            "content": "Vote and comment to reach consensus before the first milestone.",
            "tags": ["process"],
            "votes": {},
            "upvotes": 0,
            "downvotes": 0,
            "comments": [],
            "status": "open",
            "createdAt": stamp,
            "updatedAt": stamp,
        }
    }
    members = {
        "admin": {
            "id": "admin",
            "name": "admin",
            "role": "lead",
            "institution": "Agora Institute",
            "projects": ["open-lab-notebook"],
            "joinedAt": stamp,
        }
    }
    return projects, discussions, members


def seed_document(preset: str = "full") -> dict:
    """Demo content for the preset; deterministic apart from timestamps."""
    stamp = now_iso()
    day = today()
    db: dict = {name: {} for name in COLLECTIONS}
    if preset in ("blog", "full"):
        db["posts"] = _blog_posts(stamp, day)
    if preset in ("research", "full"):
        db["projects"], db["discussions"], db["members"] = _research_content(stamp, day)
    db["config"] = dict(DEFAULT_CONFIG)
    if preset == "blog":
        db["config"]["votingEnabled"] = False
        db["config"]["milestonesEnabled"] = False
    db["meta"] = {"createdAt": stamp, "version": VERSION, "preset": preset}
    return db
