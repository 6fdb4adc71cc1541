"""
Tests for the whole-document JSON store.
"""
from __future__ import annotations

import json
import threading

import pytest

from agora.core.errors import StorageError
from agora.domain.seeds import seed_document
from agora.repositories.json_storage import JsonStorage


def test_load_creates_seed_when_missing(data_file):
    storage = JsonStorage(data_file, seed=lambda: seed_document("blog"))
    assert not data_file.exists()
    db = storage.load()
    assert data_file.exists()
    assert set(db["posts"]) == {"welcome", "example"}
    assert db["projects"] == {}
    assert db["config"]["requireApproval"] is False
    on_disk = json.loads(data_file.read_text(encoding="utf-8"))
    assert on_disk["meta"]["preset"] == "blog"


def test_missing_keys_are_filled_on_load(data_file):
    data_file.write_text(json.dumps({"posts": {}, "users": {}, "config": {"requireApproval": True}}), encoding="utf-8")
    db = JsonStorage(data_file).load()
    for key in ("projects", "discussions", "members", "sessions", "meta"):
        assert key in db
    assert db["config"]["requireApproval"] is True
    assert db["config"]["maxPostsPerUser"] == 100


def test_malformed_file_raises_storage_error(data_file):
    data_file.write_text("{not json", encoding="utf-8")
    with pytest.raises(StorageError):
        JsonStorage(data_file).load()


def test_non_object_document_is_rejected(data_file):
    data_file.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(StorageError):
        JsonStorage(data_file).load()


def test_transaction_saves_on_success(data_file):
    storage = JsonStorage(data_file)
    with storage.transaction() as db:
        db["posts"]["welcome"]["likes"] = 7
    assert storage.load()["posts"]["welcome"]["likes"] == 7


def test_transaction_does_not_write_when_body_fails(data_file):
    storage = JsonStorage(data_file)
    storage.load()
    before = data_file.read_text(encoding="utf-8")
    with pytest.raises(RuntimeError):
        with storage.transaction() as db:
            db["posts"]["welcome"]["likes"] = 99
            raise RuntimeError("boom")
    assert data_file.read_text(encoding="utf-8") == before


@pytest.mark.parametrize("atomic", [True, False])
def test_save_leaves_no_temp_files(data_file, atomic):
    storage = JsonStorage(data_file, atomic_writes=atomic)
    storage.save({"posts": {"p": {"title": "çà"}}})
    assert [p.name for p in data_file.parent.iterdir()] == ["data.json"]
    assert storage.load()["posts"]["p"]["title"] == "çà"


def test_concurrent_transactions_do_not_lose_updates(data_file):
    storage = JsonStorage(data_file)
    storage.load()

    def like():
        for _ in range(10):
            with storage.transaction() as db:
                post = db["posts"]["welcome"]
                post["likes"] = post.get("likes", 0) + 1

    threads = [threading.Thread(target=like) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert storage.load()["posts"]["welcome"]["likes"] == 80


def test_reset_overwrites_with_seed(data_file):
    storage = JsonStorage(data_file, seed=lambda: seed_document("research"))
    storage.save({"posts": {"x": {}}})
    storage.reset()
    db = storage.load()
    assert db["posts"] == {}
    assert "open-lab-notebook" in db["projects"]
