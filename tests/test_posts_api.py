from __future__ import annotations

import json

from conftest import set_config


def _create(client, **body):
    payload = {"author": "alice", "title": "Title", "content": "Body"}
    payload.update(body)
    resp = client.post("/api/posts", json=payload)
    assert resp.status_code == 200, resp.text
    return resp.json()["post"]


def test_create_view_like_flow(client):
    resp = client.post("/api/posts", json={"title": "T", "content": "C"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["post"]["status"] == "published"
    assert body["post"]["author"] == "anonymous"
    post_id = body["id"]

    viewed = client.get(f"/api/posts/{post_id}").json()
    assert viewed["post"]["views"] == 1
    assert client.get(f"/api/posts/{post_id}").json()["post"]["views"] == 2

    client.post(f"/api/posts/{post_id}/like")
    liked = client.post(f"/api/posts/{post_id}/like").json()
    assert liked == {"success": True, "likes": 2, "message": "Post liked!"}


def test_created_ids_are_unique_and_retrievable(client):
    ids = {_create(client, title=f"Post {n}")["id"] for n in range(5)}
    assert len(ids) == 5
    listed = {p["id"] for p in client.get("/api/posts").json()["posts"]}
    assert ids <= listed
    for post_id in ids:
        assert client.get(f"/api/posts/{post_id}").json()["post"]["id"] == post_id


def test_missing_title_or_content_is_400(client):
    resp = client.post("/api/posts", json={"author": "alice", "title": "only title"})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Title and content are required"}


def test_tags_accept_comma_separated_string(client):
    post = _create(client, tags="python, fastapi , ,json")
    assert post["tags"] == ["python", "fastapi", "json"]


def test_list_is_idempotent_and_newest_first(client):
    _create(client)
    first = client.get("/api/posts").json()
    second = client.get("/api/posts").json()
    assert first["posts"] == second["posts"]
    assert first["count"] == len(first["posts"]) == 3
    dates = [p["date"] for p in first["posts"]]
    assert dates == sorted(dates, reverse=True)


def test_filters_compose(client):
    _create(client, tags=["x"])
    draft = _create(client, tags=["x", "y"])
    client.put(f"/api/posts/{draft['id']}", json={"author": "alice", "updates": {"status": "draft"}})
    _create(client, author="bob", tags=["y"])

    def ids(query):
        return {p["id"] for p in client.get(f"/api/posts?{query}").json()["posts"]}

    assert ids("status=published&tag=x") == ids("status=published") & ids("tag=x")
    assert ids("status=draft") == {draft["id"]}
    assert ids("author=bob&tag=y") == ids("author=bob") & ids("tag=y")
    assert ids("search=TITLE") >= ids("author=bob")


def test_update_by_owner_and_admin(client):
    post = _create(client)
    resp = client.put(f"/api/posts/{post['id']}", json={"author": "alice", "updates": {"title": " New "}})
    assert resp.status_code == 200
    assert resp.json()["post"]["title"] == "New"
    assert "updated" in resp.json()["post"]

    resp = client.put(f"/api/posts/{post['id']}", json={"author": "admin", "updates": {"tags": ["mod"]}})
    assert resp.json()["post"]["tags"] == ["mod"]


def test_update_by_stranger_is_403_and_unchanged(client, data_file):
    post = _create(client)
    before = json.loads(data_file.read_text(encoding="utf-8"))["posts"][post["id"]]
    resp = client.put(f"/api/posts/{post['id']}", json={"author": "mallory", "updates": {"title": "pwned"}})
    assert resp.status_code == 403
    assert resp.json() == {"success": False, "error": "Not authorized"}
    after = json.loads(data_file.read_text(encoding="utf-8"))["posts"][post["id"]]
    assert after == before


def test_update_rejects_unknown_fields(client):
    post = _create(client)
    resp = client.put(f"/api/posts/{post['id']}", json={"author": "alice", "updates": {"views": 999}})
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_soft_delete(client, data_file):
    post = _create(client)
    assert client.request("DELETE", f"/api/posts/{post['id']}", json={"author": "bob"}).status_code == 403
    resp = client.request("DELETE", f"/api/posts/{post['id']}", json={"author": "alice"})
    assert resp.json() == {"success": True, "message": "Post deleted successfully"}

    stored = json.loads(data_file.read_text(encoding="utf-8"))["posts"][post["id"]]
    assert stored["status"] == "deleted"
    assert stored["deletedBy"] == "alice"
    assert post["id"] in {p["id"] for p in client.get("/api/posts?status=deleted").json()["posts"]}
    assert post["id"] not in {p["id"] for p in client.get("/api/posts?status=published").json()["posts"]}


def test_deleted_posts_stay_listed_and_counted(client):
    post = _create(client)
    client.request("DELETE", f"/api/posts/{post['id']}", json={"author": "alice"})

    listed = client.get("/api/posts").json()
    stats = client.get("/api/stats").json()["stats"]
    assert post["id"] in {p["id"] for p in listed["posts"]}
    assert listed["count"] == stats["totalPosts"] == 3
    assert stats["publishedPosts"] == 2


def test_unknown_post_is_404(client):
    assert client.get("/api/posts/nope").json() == {"success": False, "error": "Post not found"}
    assert client.post("/api/posts/nope/like").status_code == 404
    assert client.put("/api/posts/nope", json={"author": "a", "updates": {}}).status_code == 404


def test_comments_append_in_order(client):
    post = _create(client)
    assert client.post(f"/api/posts/{post['id']}/comments", json={"author": "bob"}).status_code == 400
    first = client.post(f"/api/posts/{post['id']}/comments", json={"author": "bob", "content": " one "}).json()
    client.post(f"/api/posts/{post['id']}/comments", json={"content": "two"})
    assert first["comment"]["content"] == "one"
    comments = client.get(f"/api/posts/{post['id']}").json()["post"]["comments"]
    assert [c["content"] for c in comments] == ["one", "two"]
    assert comments[1]["author"] == "anonymous"


def test_config_rules(client):
    set_config(client, requireApproval=True)
    assert _create(client)["status"] == "pending"

    set_config(client, allowPublicPosts=False)
    resp = client.post("/api/posts", json={"title": "T", "content": "C"})
    assert resp.status_code == 403

    set_config(client, maxPostsPerUser=1)
    resp = client.post("/api/posts", json={"author": "alice", "title": "T", "content": "C"})
    assert resp.status_code == 400


def test_stats(client):
    post = _create(client, author="demo")
    client.get(f"/api/posts/{post['id']}")
    client.post(f"/api/posts/{post['id']}/like")
    client.post(f"/api/posts/{post['id']}/comments", json={"content": "hi"})

    stats = client.get("/api/stats").json()["stats"]
    assert stats["totalPosts"] == 3
    assert stats["publishedPosts"] == 3
    assert stats["totalViews"] == 1
    assert stats["totalLikes"] == 1
    assert stats["totalComments"] == 1
    assert stats["topAuthors"][0] == ["demo", 2]
    assert len(stats["recentPosts"]) == 3
    assert stats["platformUptime"] >= 0


def test_malformed_store_returns_500_and_recovers(client, data_file):
    client.get("/api/posts")
    good = data_file.read_text(encoding="utf-8")
    data_file.write_text("{broken", encoding="utf-8")
    resp = client.get("/api/posts")
    assert resp.status_code == 500
    assert resp.json()["success"] is False

    data_file.write_text(good, encoding="utf-8")
    assert client.get("/api/posts").status_code == 200


def test_update_rejects_blank_title(client, data_file):
    post = _create(client)
    resp = client.put(f"/api/posts/{post['id']}", json={"author": "alice", "updates": {"title": "   "}})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Title cannot be empty"}
    stored = json.loads(data_file.read_text(encoding="utf-8"))["posts"][post["id"]]
    assert stored["title"] == "Title"
