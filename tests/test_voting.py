from __future__ import annotations

import pytest

from conftest import set_config
from agora.services.discussion_service import apply_vote

URL = "/api/discussions/welcome-discussion/vote"


def _vote(client, user, vote):
    resp = client.post(URL, json={"user": user, "vote": vote})
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_apply_vote_keeps_one_vote_per_user():
    discussion = {"upvotes": 0, "downvotes": 0}
    apply_vote(discussion, "ann", "up")
    apply_vote(discussion, "ann", "up")
    assert (discussion["upvotes"], discussion["downvotes"]) == (1, 0)
    apply_vote(discussion, "ann", "down")
    assert (discussion["upvotes"], discussion["downvotes"]) == (0, 1)
    assert discussion["votes"] == {"ann": "down"}


def test_apply_vote_never_goes_negative():
    discussion = {"votes": {"ann": "up"}, "upvotes": 0, "downvotes": 0}
    apply_vote(discussion, "ann", "down")
    assert (discussion["upvotes"], discussion["downvotes"]) == (0, 1)


def test_switching_vote_moves_the_count(client):
    only_up = _vote(client, "ann", "up")
    assert (only_up["upvotes"], only_up["downvotes"]) == (1, 0)
    switched = _vote(client, "ann", "down")
    assert switched["upvotes"] == only_up["upvotes"] - 1
    assert switched["downvotes"] == only_up["downvotes"] + 1
    assert switched["score"] == -1

    stored = client.get("/api/discussions/welcome-discussion").json()["discussion"]
    assert stored["votes"] == {"ann": "down"}


def test_votes_from_different_users_accumulate(client):
    _vote(client, "ann", "up")
    _vote(client, "Bob", "up")
    result = _vote(client, "bob", "down")  # same member id as "Bob"
    assert (result["upvotes"], result["downvotes"]) == (1, 1)


@pytest.mark.parametrize(
    "body, status",
    [
        ({"user": "ann", "vote": "sideways"}, 400),
        ({"user": "ann"}, 400),
        ({"vote": "up"}, 400),
    ],
)
def test_invalid_votes(client, body, status):
    resp = client.post(URL, json=body)
    assert resp.status_code == status
    assert resp.json()["success"] is False


def test_vote_on_unknown_discussion(client):
    resp = client.post("/api/discussions/ghost/vote", json={"user": "ann", "vote": "up"})
    assert resp.status_code == 404


def test_voting_disabled(client):
    set_config(client, votingEnabled=False)
    assert client.post(URL, json={"user": "ann", "vote": "up"}).status_code == 403


def test_discussions_sorted_by_score_or_recency(client):
    created = []
    for n in range(3):
        resp = client.post("/api/discussions", json={"author": "ann", "title": f"D{n}", "content": "c"})
        created.append(resp.json()["id"])
    client.post(f"/api/discussions/{created[0]}/vote", json={"user": "x", "vote": "up"})
    client.post(f"/api/discussions/{created[0]}/vote", json={"user": "y", "vote": "up"})
    client.post(f"/api/discussions/{created[1]}/vote", json={"user": "x", "vote": "down"})

    listed = client.get("/api/discussions").json()["discussions"]
    scores = [d["upvotes"] - d["downvotes"] for d in listed]
    assert scores == sorted(scores, reverse=True)
    assert listed[0]["id"] == created[0]
    assert listed[-1]["id"] == created[1]

    recent = client.get("/api/discussions?sort=recent").json()["discussions"]
    stamps = [d["createdAt"] for d in recent]
    assert stamps == sorted(stamps, reverse=True)
    assert client.get("/api/discussions?sort=random").status_code == 400


@pytest.mark.parametrize("user", ["!!!", "  ???  "])
def test_names_without_letters_cannot_vote(client, user):
    resp = client.post(URL, json={"user": user, "vote": "up"})
    assert resp.status_code == 400
    stored = client.get("/api/discussions/welcome-discussion").json()["discussion"]
    assert stored["votes"] == {}
    assert stored["upvotes"] == 0
