from __future__ import annotations
from pathlib import Path
from typing import List, Optional
import sqlite3
import threading

from loguru import logger

from glove_vectorizer.application.errors import StoreOpenError, StoreReadError

EMBEDDINGS_TABLE = "embeddings"
META_TABLE = "meta"


class SQLiteWordStore:
    """
    Persisted word -> vector store, opened strictly read-only.

    Schema (written by glove_loader.build_sqlite_store):
        embeddings(key BLOB PRIMARY KEY, value BLOB)
        meta(name TEXT PRIMARY KEY, value TEXT)

    Each thread gets its own read-only connection, so concurrent readers
    never share a sqlite3.Connection and need no locking.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        if self.path.is_dir():
            raise StoreOpenError(
                f"embedding store '{self.path}' is a directory; expected a sqlite file "
                "built with `glove-vectorizer build-store` (LevelDB stores are not supported)"
            )
        if not self.path.is_file():
            raise StoreOpenError(
                f"embedding store not found at '{self.path}'; "
                "build one with `glove-vectorizer build-store`"
            )

        self._local = threading.local()
        self._connections: List[sqlite3.Connection] = []
        self._lock = threading.Lock()  # guards _connections only
        self._closed = False

        conn = self._connection()
        try:
            tables = {
                row[0]
                for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            }
        except sqlite3.Error as e:
            self.close()
            raise StoreOpenError(f"cannot read embedding store '{self.path}': {e}") from e
        if EMBEDDINGS_TABLE not in tables:
            self.close()
            raise StoreOpenError(f"'{self.path}' has no '{EMBEDDINGS_TABLE}' table")

        try:
            self.dimension = self._read_dimension(conn) if META_TABLE in tables else None
        except (sqlite3.Error, ValueError) as e:
            self.close()
            raise StoreOpenError(f"bad '{META_TABLE}' table in '{self.path}': {e}") from e
        logger.info("Opened embedding store '{}' read-only (dim={})", self.path, self.dimension)

    def _connection(self) -> sqlite3.Connection:
        conn = getattr(self._local, "conn", None)
        if conn is not None:
            return conn
        if self._closed:
            raise StoreReadError(f"embedding store '{self.path}' is closed")
        uri = f"{self.path.resolve().as_uri()}?mode=ro"
        try:
            conn = sqlite3.connect(uri, uri=True, check_same_thread=False)
        except sqlite3.Error as e:
            raise StoreOpenError(f"cannot open embedding store '{self.path}': {e}") from e
        self._local.conn = conn
        with self._lock:
            self._connections.append(conn)
        return conn

    @staticmethod
    def _read_dimension(conn: sqlite3.Connection) -> Optional[int]:
        row = conn.execute(
            f"SELECT value FROM {META_TABLE} WHERE name = 'dimension'"
        ).fetchone()
        return int(row[0]) if row else None

    def get(self, key: bytes) -> Optional[bytes]:
        try:
            row = self._connection().execute(
                f"SELECT value FROM {EMBEDDINGS_TABLE} WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreReadError(f"lookup of {key!r} failed: {e}") from e
        return None if row is None else row[0]

    def __len__(self) -> int:
        return self._connection().execute(f"SELECT COUNT(*) FROM {EMBEDDINGS_TABLE}").fetchone()[0]

    def close(self) -> None:
        with self._lock:
            conns, self._connections = self._connections, []
            self._closed = True
        for conn in conns:
            conn.close()
        self._local = threading.local()
        if conns:
            logger.info("Closed embedding store '{}'", self.path)
