"""Blog use cases: posts, likes, comments and stats."""
from __future__ import annotations

import logging

from agora.core.errors import AuthorizationError, ValidationError
from agora.core.utils import now_iso, parse_iso, today
from agora.domain import query
from agora.domain.ids import generate_id
from agora.repositories.json_storage import JsonStorage
from agora.schemas import PostUpdates
from agora.services.common import append_comment, ensure_owner, get_or_404, require_text, soft_delete
from agora.services.session_service import ANONYMOUS, Caller

log = logging.getLogger("agora.posts")


class PostService:
    """Create/read/update/soft-delete posts; every call is one load-mutate-save cycle."""

    def __init__(self, storage: JsonStorage) -> None:
        self.storage = storage

    def list_posts(
        self,
        *,
        author: str | None = None,
        tag: str | None = None,
        status: str | None = None,
        search: str | None = None,
    ) -> list[dict]:
        posts = list(self.storage.snapshot()["posts"].values())
        found = query.filter_records(
            posts,
            equals={"author": author, "status": status},
            contains={"tags": tag},
            search=search,
            search_fields=("title", "content"),
        )
        return query.sort_newest(found, "date", tiebreak="created")

    def view_post(self, post_id: str) -> dict:
        """Fetch one post; each call counts one view."""
        with self.storage.transaction() as db:
            post = get_or_404(db["posts"], post_id, "Post")
            post["views"] = int(post.get("views") or 0) + 1
        return post

    def create_post(self, caller: Caller, title: str | None, content: str | None, tags: list[str]) -> dict:
        require_text(title, content, message="Title and content are required")
        with self.storage.transaction() as db:
            config = db["config"]
            if caller.name == ANONYMOUS and not config.get("allowPublicPosts", True):
                raise AuthorizationError("Anonymous posts are disabled")
            limit = int(config.get("maxPostsPerUser") or 0)
            if limit:
                owned = [p for p in db["posts"].values() if p.get("author") == caller.name and p.get("status") != "deleted"]
                if len(owned) >= limit:
                    raise ValidationError(f"Post limit reached ({limit} per user)")
            post_id = generate_id(caller.name)
            post = {
                "id": post_id,
                "author": caller.name,
                "title": title.strip(),
                "content": content.strip(),
                "date": today(),
                "tags": list(tags),
                "status": "pending" if config.get("requireApproval") else "published",
                "views": 0,
                "likes": 0,
                "comments": [],
                "created": now_iso(),
            }
            db["posts"][post_id] = post
        log.info("Post created: %s by %s", post_id, caller.name)
        return post

    def update_post(self, caller: Caller, post_id: str, updates: PostUpdates) -> dict:
        with self.storage.transaction() as db:
            post = get_or_404(db["posts"], post_id, "Post")
            ensure_owner(caller, post.get("author"))
            changes = updates.model_dump(exclude_unset=True, exclude_none=True)
            for key in ("title", "content"):
                if key in changes:
                    require_text(changes[key], message=f"{key.capitalize()} cannot be empty")
                    changes[key] = changes[key].strip()
            post.update(changes)
            post["updated"] = now_iso()
        log.info("Post %s updated by %s", post_id, caller.name)
        return post

    def delete_post(self, caller: Caller, post_id: str) -> None:
        with self.storage.transaction() as db:
            post = get_or_404(db["posts"], post_id, "Post")
            ensure_owner(caller, post.get("author"))
            soft_delete(post, caller)
        log.info("Post %s soft-deleted by %s", post_id, caller.name)

    def like_post(self, post_id: str) -> int:
        with self.storage.transaction() as db:
            post = get_or_404(db["posts"], post_id, "Post")
            post["likes"] = int(post.get("likes") or 0) + 1
        return post["likes"]

    def add_comment(self, post_id: str, author: str | None, content: str | None) -> dict:
        require_text(content, message="Comment content is required")
        with self.storage.transaction() as db:
            post = get_or_404(db["posts"], post_id, "Post")
            comment = append_comment(post, author, content)
        log.info("Comment added to post %s by %s", post_id, comment["author"])
        return comment

    def stats(self) -> dict:
        db = self.storage.snapshot()
        posts = list(db["posts"].values())
        published = [p for p in posts if p.get("status") == "published"]
        created = parse_iso(db["meta"].get("createdAt"))
        now = parse_iso(now_iso())
        uptime = int((now - created).total_seconds() * 1000) if created and now else 0
        return {
            "totalPosts": len(posts),
            "publishedPosts": len(published),
            "totalViews": query.total(posts, "views"),
            "totalLikes": query.total(posts, "likes"),
            "totalComments": query.total_len(posts, "comments"),
            "topAuthors": query.top_counts((p.get("author") or ANONYMOUS for p in posts), 5),
            "recentPosts": [
                {"id": p.get("id"), "title": p.get("title"), "author": p.get("author")}
                for p in query.sort_newest(published, "date", tiebreak="created")[:5]
            ],
            "platformUptime": uptime,
        }
