"""
JSON-file persistence adapter.

The whole dataset is one JSON document. Every request reads it from disk and
every mutation rewrites it completely; there is no cache between requests.
Load/save cycles are serialized through one process-wide lock, and writes go
through a temp file plus ``os.replace`` when atomic writes are enabled.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator
import json
import logging
import os
import tempfile
import threading

from agora.core.errors import StorageError
from agora.domain.seeds import db_defaults, seed_document

log = logging.getLogger("agora.storage")


class JsonStorage:
    """Whole-document store backed by a single JSON file."""

    def __init__(
        self,
        path: str | Path,
        *,
        seed: Callable[[], dict] | None = None,
        atomic_writes: bool = True,
    ) -> None:
        self.path = Path(path)
        self._seed = seed or seed_document
        self._atomic = atomic_writes
        self._lock = threading.RLock()

    # -------------------------- raw io --------------------------
    def load(self) -> dict:
        """Read the document, writing the seed first when the file is missing."""
        with self._lock:
            if not self.path.exists():
                log.info("Creating %s with seed content", self.path)
                db = self._seed()
                self.save(db)
                return db_defaults(db)
            try:
                with self.path.open("r", encoding="utf-8") as f:
                    db = json.load(f)
            except json.JSONDecodeError as exc:
                log.error("Malformed data file %s: %s", self.path, exc)
                raise StorageError(f"Data file is not valid JSON: {exc}") from exc
            except OSError as exc:
                log.error("Could not read %s: %s", self.path, exc)
                raise StorageError(f"Could not read data file: {exc}") from exc
            if not isinstance(db, dict):
                raise StorageError("Data file must contain a JSON object")
            return db_defaults(db)

    def save(self, db: dict) -> None:
        with self._lock:
            try:
                payload = json.dumps(db, ensure_ascii=False, indent=2)
                if self._atomic:
                    self._replace(payload)
                else:
                    self.path.write_text(payload, encoding="utf-8")
            except (OSError, TypeError, ValueError) as exc:
                log.error("Could not write %s: %s", self.path, exc)
                raise StorageError(f"Could not write data file: {exc}") from exc

    def _replace(self, payload: str) -> None:
        directory = self.path.resolve().parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_path, self.path)
        except Exception:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise

    # -------------------------- cycles --------------------------
    def snapshot(self) -> dict:
        """Fresh copy of the document for read-only handlers."""
        return self.load()

    @contextmanager
    def transaction(self) -> Iterator[dict]:
        """
        Load, hand the document to the caller, then save it.

        The lock is held for the whole cycle so concurrent requests in this
        process cannot interleave their read-modify-write. When the body
        raises, nothing is written.
        """
        with self._lock:
            db = self.load()
            yield db
            self.save(db)

    def exists(self) -> bool:
        return self.path.exists()

    def size(self) -> int:
        try:
            return self.path.stat().st_size
        except OSError:
            return 0

    def reset(self, db: dict | None = None) -> dict:
        """Overwrite the file with ``db`` (or fresh seed content)."""
        with self._lock:
            doc = db if db is not None else self._seed()
            self.save(doc)
            return doc
