"""Read-only aggregations: research analytics, cross-collection search, debug info."""
from __future__ import annotations

import platform

from agora.core.errors import ValidationError
from agora.core.utils import now_iso
from agora.domain import query
from agora.repositories.json_storage import JsonStorage

SEARCH_TYPES = ("posts", "projects", "discussions")

_SEARCH_FIELDS = {
    "posts": ("title", "content"),
    "projects": ("title", "description"),
    "discussions": ("title", "content"),
}


class AnalyticsService:
    def __init__(self, storage: JsonStorage) -> None:
        self.storage = storage

    def analytics(self) -> dict:
        db = self.storage.snapshot()
        projects = query.filter_records(db["projects"].values())
        discussions = query.filter_records(db["discussions"].values())
        members = list(db["members"].values())
        milestones = [m for p in projects for m in p.get("milestones") or []]

        upvotes = query.total(discussions, "upvotes")
        downvotes = query.total(discussions, "downvotes")
        institutions = {i for p in projects for i in p.get("institutions") or []}
        institutions.update(m.get("institution") for m in members if m.get("institution"))

        return {
            "totalProjects": len(projects),
            "projectsByStatus": query.count_by(projects, "status"),
            "projectsByPriority": query.count_by(projects, "priority"),
            "projectsByPhase": query.count_by(projects, "phase"),
            "totalMilestones": len(milestones),
            "milestonesByStatus": query.count_by(milestones, "status"),
            "totalDiscussions": len(discussions),
            "totalComments": query.total_len(discussions, "comments") + query.total_len(projects, "comments"),
            "totalUpvotes": upvotes,
            "totalDownvotes": downvotes,
            "totalVotes": upvotes + downvotes,
            "consensusRate": query.consensus_rate(upvotes, downvotes),
            "topDiscussions": [
                {
                    "id": d.get("id"),
                    "title": d.get("title"),
                    "upvotes": int(d.get("upvotes") or 0),
                    "downvotes": int(d.get("downvotes") or 0),
                    "score": query.net_score(d),
                }
                for d in query.top_n(discussions, 5, key=lambda d: int(d.get("upvotes") or 0))
            ],
            "totalMembers": len(members),
            "totalInstitutions": len(institutions),
            "totalViews": query.total(projects, "views"),
        }

    def search(self, q: str | None, types: str | None = None) -> dict[str, list[dict]]:
        """Case-insensitive substring search over titles and bodies of every collection."""
        text = (q or "").strip()
        if not text:
            raise ValidationError("Search query is required")
        wanted = SEARCH_TYPES
        if types:
            wanted = tuple(t.strip() for t in types.split(",") if t.strip())
            unknown = [t for t in wanted if t not in SEARCH_TYPES]
            if unknown:
                raise ValidationError(f"Unknown search type: {', '.join(unknown)}")
        db = self.storage.snapshot()
        results: dict[str, list[dict]] = {}
        for name in wanted:
            found = query.filter_records(db[name].values(), search=text, search_fields=_SEARCH_FIELDS[name])
            if name == "projects":
                results[name] = query.sort_by_priority(found)
            elif name == "posts":
                results[name] = query.sort_newest(found, "date", tiebreak="created")
            else:
                results[name] = query.sort_newest(found, "createdAt")
        return results

    def debug_info(self) -> dict:
        db = self.storage.snapshot()
        exists = self.storage.exists()
        posts = list(db["posts"].values())
        return {
            "fileExists": exists,
            "dataFile": str(self.storage.path),
            "postCount": len(posts),
            "projectCount": len(db["projects"]),
            "discussionCount": len(db["discussions"]),
            "memberCount": len(db["members"]),
            "fileSize": self.storage.size(),
            "samplePosts": [
                {"id": p.get("id"), "title": p.get("title"), "author": p.get("author"), "status": p.get("status")}
                for p in posts[:3]
            ],
            "serverTime": now_iso(),
            "pythonVersion": platform.python_version(),
        }
