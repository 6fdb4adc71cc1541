"""Discussions linked to projects, with one up/down vote per member."""
from __future__ import annotations

import logging

from agora.core.errors import AuthorizationError, ValidationError
from agora.core.utils import now_iso
from agora.domain import query
from agora.domain.ids import generate_id
from agora.repositories.json_storage import JsonStorage
from agora.services.common import append_comment, get_or_404, require_text
from agora.services.session_service import ANONYMOUS, Caller

log = logging.getLogger("agora.discussions")

_COUNTERS = {"up": "upvotes", "down": "downvotes"}


def apply_vote(discussion: dict, voter_id: str, direction: str) -> None:
    """
    Record ``direction`` as the voter's only vote.

    A previous vote is taken off its counter before the new one is added, so
    switching from up to down moves one count between the totals and
    repeating the same vote changes nothing.
    """
    votes = discussion.setdefault("votes", {})
    previous = votes.get(voter_id)
    if previous in _COUNTERS:
        counter = _COUNTERS[previous]
        discussion[counter] = max(0, int(discussion.get(counter) or 0) - 1)
    counter = _COUNTERS[direction]
    discussion[counter] = int(discussion.get(counter) or 0) + 1
    votes[voter_id] = direction


class DiscussionService:
    def __init__(self, storage: JsonStorage) -> None:
        self.storage = storage

    def list_discussions(
        self,
        *,
        project_id: str | None = None,
        author: str | None = None,
        tag: str | None = None,
        search: str | None = None,
        sort: str | None = None,
    ) -> list[dict]:
        db = self.storage.snapshot()
        found = query.filter_records(
            db["discussions"].values(),
            equals={"projectId": project_id, "author": author},
            contains={"tags": tag},
            search=search,
            search_fields=("title", "content"),
        )
        by_score = sort == "score" or (sort != "recent" and db["config"].get("votingEnabled", True))
        if by_score:
            return query.sort_by_score(found)
        return query.sort_newest(found, "createdAt")

    def get_discussion(self, discussion_id: str) -> dict:
        return get_or_404(self.storage.snapshot()["discussions"], discussion_id, "Discussion")

    def create_discussion(
        self,
        caller: Caller,
        title: str | None,
        content: str | None,
        project_id: str | None,
        tags: list[str],
    ) -> dict:
        require_text(title, content, message="Title and content are required")
        with self.storage.transaction() as db:
            if project_id:
                get_or_404(db["projects"], project_id, "Project")
            discussion_id = generate_id(caller.name)
            stamp = now_iso()
            discussion = {
                "id": discussion_id,
                "projectId": project_id or None,
                "author": caller.name,
                "title": title.strip(),
                "content": content.strip(),
                "tags": list(tags),
                "votes": {},
                "upvotes": 0,
                "downvotes": 0,
                "comments": [],
                "status": "open",
                "createdAt": stamp,
                "updatedAt": stamp,
            }
            db["discussions"][discussion_id] = discussion
        log.info("Discussion created: %s by %s", discussion_id, caller.name)
        return discussion

    def vote(self, caller: Caller, discussion_id: str, direction: str) -> dict:
        if caller.member_id in ("", ANONYMOUS):
            raise ValidationError("User is required to vote")
        with self.storage.transaction() as db:
            if not db["config"].get("votingEnabled", True):
                raise AuthorizationError("Voting is disabled")
            discussion = get_or_404(db["discussions"], discussion_id, "Discussion")
            apply_vote(discussion, caller.member_id, direction)
            discussion["updatedAt"] = now_iso()
        log.info("Vote %s on %s by %s", direction, discussion_id, caller.member_id)
        return discussion

    def add_comment(self, discussion_id: str, author: str | None, content: str | None) -> dict:
        require_text(content, message="Comment content is required")
        with self.storage.transaction() as db:
            discussion = get_or_404(db["discussions"], discussion_id, "Discussion")
            comment = append_comment(discussion, author, content)
            discussion["updatedAt"] = comment["date"]
        return comment
