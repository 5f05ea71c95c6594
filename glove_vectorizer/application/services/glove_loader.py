from __future__ import annotations
from pathlib import Path
from typing import Iterator, List, Tuple
import sqlite3

from loguru import logger
import numpy as np

from glove_vectorizer.application.services.word_store import encode_vector
from glove_vectorizer.application.services.word_store_sqlite import EMBEDDINGS_TABLE, META_TABLE


def parse_glove_line(line: str, dimension: int) -> Tuple[str, np.ndarray]:
    """
    "word 0.1 0.2 ..." -> ("word", vector).

    The word is everything before the last `dimension` fields: a few
    GloVe 840B entries contain spaces (e.g. ". . .").
    """
    parts = line.rstrip("\r\n").rstrip(" ").split(" ")
    if len(parts) < dimension + 1:
        raise ValueError(f"expected a word and {dimension} values, got {len(parts)} fields")
    word = " ".join(parts[:-dimension])
    if not word:
        raise ValueError("empty word")
    vec = np.array([float(x) for x in parts[-dimension:]], dtype=np.float32)
    return word, vec


def iter_glove_vectors(path: Path | str, dimension: int) -> Iterator[Tuple[str, np.ndarray]]:
    with Path(path).open("r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                yield parse_glove_line(line, dimension)
            except ValueError as e:
                raise ValueError(f"{path}:{lineno}: {e}") from e


def build_sqlite_store(
    glove_path: Path | str,
    store_path: Path | str,
    dimension: int,
    batch_size: int = 10_000,
) -> int:
    """
    Write every vector of a GloVe text file into a new sqlite store.

    Duplicate words keep their first vector. Returns the number of stored words.
    """
    store_path = Path(store_path)
    if store_path.exists():
        raise FileExistsError(f"refusing to overwrite existing store '{store_path}'")
    store_path.parent.mkdir(parents=True, exist_ok=True)

    logger.info("Building embedding store '{}' from '{}' (dim={})", store_path, glove_path, dimension)
    conn = sqlite3.connect(store_path)
    try:
        conn.execute(f"CREATE TABLE {EMBEDDINGS_TABLE} (key BLOB PRIMARY KEY, value BLOB NOT NULL)")
        conn.execute(f"CREATE TABLE {META_TABLE} (name TEXT PRIMARY KEY, value TEXT NOT NULL)")
        conn.execute(f"INSERT INTO {META_TABLE} (name, value) VALUES ('dimension', ?)", (str(dimension),))

        batch: List[Tuple[bytes, bytes]] = []

        def flush() -> None:
            conn.executemany(
                f"INSERT OR IGNORE INTO {EMBEDDINGS_TABLE} (key, value) VALUES (?, ?)", batch
            )
            batch.clear()

        for word, vec in iter_glove_vectors(glove_path, dimension):
            batch.append((word.encode("utf-8"), encode_vector(vec)))
            if len(batch) >= batch_size:
                flush()
        if batch:
            flush()

        conn.commit()
        count = conn.execute(f"SELECT COUNT(*) FROM {EMBEDDINGS_TABLE}").fetchone()[0]
    except BaseException:
        conn.close()
        store_path.unlink(missing_ok=True)
        raise
    conn.close()

    logger.info("Stored {} word vector(s) in '{}'", count, store_path)
    return count
