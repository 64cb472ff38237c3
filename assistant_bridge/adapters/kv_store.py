"""Key-value store adapter implementing the TinyDB-backed port.

Account links live in the ``account_links`` table as ``{"key": ..., "value": ...}``
documents. TinyDB has no transactions, so every operation runs under a
thread lock plus a file lock next to the database. The file lock serializes the
server workers and the CLI when they share one ``links.json``.
"""

from __future__ import annotations

from contextlib import contextmanager
from json import JSONDecodeError
from pathlib import Path
from threading import Lock
from typing import TYPE_CHECKING, Any, Dict, Iterator, Optional, cast

from filelock import FileLock
from tinydb import Query, TinyDB

from assistant_bridge.core.config import settings
from assistant_bridge.core.exceptions import StorageError
from assistant_bridge.core.ports import KeyValueStorePort

# Provide a QueryLike alias for static checkers; at runtime use Any.
if TYPE_CHECKING:  # pragma: no cover - typing only
    from tinydb.queries import QueryLike  # type: ignore
else:
    QueryLike = Any  # type: ignore[misc,assignment]

LINKS_TABLE = "account_links"
LOCK_TIMEOUT_SECONDS = 10.0


class KeyValueStoreAdapter(KeyValueStorePort):
    """TinyDB-backed string key-value store."""

    def __init__(self, db_path: Path | None = None, *, table: str = LINKS_TABLE) -> None:
        if db_path is None:
            data_dir = Path(getattr(settings, "DATA_DIR", Path("/data")))
            data_dir.mkdir(parents=True, exist_ok=True)
            db_path = data_dir / "links.json"
        self._db_path = db_path
        self._db = TinyDB(str(db_path))
        self._table = self._db.table(table)
        self._lock = Lock()
        self._file_lock = FileLock(str(db_path.with_suffix(".lock")), timeout=LOCK_TIMEOUT_SECONDS)

    @property
    def db_path(self) -> Path:
        """Location of the backing JSON file."""
        return self._db_path

    def close(self) -> None:
        """Release the underlying TinyDB file handle."""
        self._db.close()

    @contextmanager
    def _locked(self) -> Iterator[None]:
        # filelock.Timeout is an OSError, so lock contention surfaces as StorageError.
        with self._lock, self._file_lock:
            yield

    def _doc(self, key: str) -> Optional[Dict[str, Any]]:
        cond = cast(QueryLike, Query().key == key)
        return cast(Optional[Dict[str, Any]], self._table.get(cond))

    def get(self, key: str) -> Optional[str]:
        try:
            with self._locked():
                doc = self._doc(key)
        except (OSError, JSONDecodeError) as exc:
            raise StorageError(f"get {key!r}: {exc}") from exc
        if doc is None:
            return None
        return cast(str, doc.get("value"))

    def compare_and_set(self, key: str, old_value: Optional[str], new_value: str) -> bool:
        try:
            with self._locked():
                doc = self._doc(key)
                current = doc.get("value") if doc is not None else None
                if current != old_value:
                    return False
                if doc is None:
                    self._table.insert({"key": key, "value": new_value})
                else:
                    self._table.update({"value": new_value}, cast(QueryLike, Query().key == key))
                return True
        except (OSError, JSONDecodeError) as exc:
            raise StorageError(f"compare_and_set {key!r}: {exc}") from exc

    def delete(self, key: str) -> bool:
        try:
            with self._locked():
                removed = self._table.remove(cast(QueryLike, Query().key == key))
        except (OSError, JSONDecodeError) as exc:
            raise StorageError(f"delete {key!r}: {exc}") from exc
        return bool(removed)

    def list_keys(self, page: int, per_page: int) -> list[str]:
        if page < 0 or per_page <= 0:
            raise ValueError("page must be >= 0 and per_page must be positive")
        try:
            with self._locked():
                docs = self._table.all()
        except (OSError, JSONDecodeError) as exc:
            raise StorageError(f"list_keys page={page}: {exc}") from exc
        start = page * per_page
        return [str(doc["key"]) for doc in docs[start : start + per_page]]


__all__ = ["KeyValueStoreAdapter", "LINKS_TABLE"]
