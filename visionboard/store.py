"""
Board storage backends.

Two adapters share the read/write contract of BoardStore:
  LocalBoardStore - sqlite key-value table, one document under a fixed key
  FileBoardStore  - one JSON file on disk, used by the HTTP API

Reads never raise: absent or unreadable data becomes the default document,
and load() reports which of the two happened. Writes raise StorageError.
"""
import json
import logging
import os
import sqlite3
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .board import truncate_images
from .config import Config
from .schema import default_document, normalize_document

logger = logging.getLogger(__name__)

DEFAULT_LOCAL_KEY = "dreamBoard2025"
DEFAULT_IMAGE_LIMIT = 1_000_000


class StorageError(Exception):
    """Raised when a board document cannot be written."""
    pass


class LoadStatus(Enum):
    """Outcome of reading a stored board."""
    OK = "ok"               # Stored document parsed
    DEFAULT = "default"     # Nothing stored yet
    FALLBACK = "fallback"   # Stored data unreadable, default substituted


@dataclass
class LoadResult:
    document: Dict[str, Any]
    status: LoadStatus
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == LoadStatus.OK


class BoardStore:
    """Base adapter: subclasses implement load() and write()."""

    def load(self) -> LoadResult:
        raise NotImplementedError

    def write(self, document: Dict[str, Any]) -> None:
        raise NotImplementedError

    def read(self) -> Dict[str, Any]:
        """Return the stored document, or the default one. Never raises."""
        return self.load().document


def _connect(db_path: str) -> sqlite3.Connection:
    """Open a connection in WAL mode."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")
    return conn


class LocalBoardStore(BoardStore):
    """
    Local key-value store holding the whole board as one JSON string.

    Sticker images are truncated to `image_limit` UTF-8 bytes on write.
    """

    def __init__(
        self,
        db_path: str = None,
        key: str = DEFAULT_LOCAL_KEY,
        image_limit: int = DEFAULT_IMAGE_LIMIT,
    ):
        if db_path is None:
            db_path = str(Path.home() / ".local" / "share" / "visionboard" / "local.db")
        self.db_path = db_path
        self.key = key
        self.image_limit = image_limit
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    @classmethod
    def from_config(cls, cfg: Config) -> "LocalBoardStore":
        return cls(cfg.local_db, key=cfg.local_key, image_limit=int(cfg.image_limit))

    def _init_schema(self):
        with _connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS local_storage (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()

    def get_raw(self) -> Optional[str]:
        """Stored string for this store's key, or None."""
        with _connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT value FROM local_storage WHERE key = ?", (self.key,)
            ).fetchone()
        return row["value"] if row else None

    def _set_raw(self, value: str):
        now = datetime.now(timezone.utc).isoformat()
        with _connect(self.db_path) as conn:
            conn.execute("""
                INSERT INTO local_storage (key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at
            """, (self.key, value, now))
            conn.commit()

    def load(self) -> LoadResult:
        try:
            raw = self.get_raw()
        except sqlite3.Error as e:
            logger.warning(f"Local board read failed ({self.key}): {e}")
            return LoadResult(default_document(), LoadStatus.FALLBACK, str(e))

        if raw is None:
            return LoadResult(self._reset(), LoadStatus.DEFAULT)

        try:
            return LoadResult(normalize_document(json.loads(raw)), LoadStatus.OK)
        except ValueError as e:
            logger.warning(f"Local board data under {self.key!r} is unreadable, resetting: {e}")
            return LoadResult(self._reset(), LoadStatus.FALLBACK, str(e))

    def _reset(self) -> Dict[str, Any]:
        doc = default_document()
        try:
            self.write(doc)
        except StorageError:
            pass  # Already logged; an unwritable store still reads as empty
        return doc

    def write(self, document: Dict[str, Any]) -> None:
        try:
            payload = json.dumps(
                truncate_images(document, self.image_limit),
                ensure_ascii=False,
                separators=(",", ":"),
            )
            self._set_raw(payload)
        except (sqlite3.Error, OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save local board ({self.key}): {e}")
            raise StorageError(f"Save failed: {e}") from e


class FileBoardStore(BoardStore):
    """
    Board document in a single JSON file.

    Reads are side-effecting: a missing or corrupt file is replaced by the
    default document. update() serializes read-modify-write cycles with a
    lock, so one process never loses a concurrent update.
    """

    def __init__(self, path: str):
        self.path = Path(path)
        self._lock = threading.RLock()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self.write(default_document())
            logger.info(f"Initialized board file {self.path}")

    def load(self) -> LoadResult:
        with self._lock:
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    return LoadResult(normalize_document(json.load(f)), LoadStatus.OK)
            except FileNotFoundError:
                status, error = LoadStatus.DEFAULT, None
            except (OSError, ValueError) as e:
                logger.warning(f"Board file {self.path} unreadable, resetting: {e}")
                status, error = LoadStatus.FALLBACK, str(e)

            doc = default_document()
            try:
                self.write(doc)
            except StorageError:
                pass  # Already logged; reads never raise
            return LoadResult(doc, status, error)

    def write(self, document: Dict[str, Any]) -> None:
        # Atomic write: write to temp, then replace
        tmp_file = self.path.with_suffix(self.path.suffix + ".tmp")
        with self._lock:
            try:
                payload = json.dumps(document, indent=2, ensure_ascii=False)
                with open(tmp_file, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_file, self.path)
            except (OSError, TypeError, ValueError) as e:
                logger.error(f"Failed to write board file {self.path}: {e}")
                raise StorageError(f"Save failed: {e}") from e

    def update(self, mutator: Callable[[Dict[str, Any]], Dict[str, Any]]) -> Dict[str, Any]:
        """Read, apply `mutator`, write the result and return it, all under the lock."""
        with self._lock:
            doc = mutator(self.read())
            self.write(doc)
            return doc


_file_stores: Dict[str, FileBoardStore] = {}
_file_stores_lock = threading.Lock()


def open_file_store(path: str) -> FileBoardStore:
    """Return the shared FileBoardStore for `path`, creating it on first use."""
    key = str(Path(path).expanduser().resolve())
    with _file_stores_lock:
        store = _file_stores.get(key)
        if store is None:
            store = FileBoardStore(key)
            _file_stores[key] = store
        return store
