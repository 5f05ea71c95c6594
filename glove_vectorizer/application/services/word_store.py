from __future__ import annotations
from typing import Dict, Iterable, Optional, Protocol, Tuple, runtime_checkable
import numpy as np

from glove_vectorizer.application.errors import StoreDecodeError

# Stored values are raw little-endian float32, dim * 4 bytes.
VALUE_DTYPE = np.dtype("<f4")


def encode_vector(vector: np.ndarray) -> bytes:
    return np.asarray(vector, dtype=VALUE_DTYPE).reshape(-1).tobytes()


def decode_vector(raw: bytes, dimension: int) -> np.ndarray:
    """bytes -> read-only float32 vector of exactly `dimension` values."""
    expected = dimension * VALUE_DTYPE.itemsize
    if not isinstance(raw, (bytes, bytearray, memoryview)):
        raise StoreDecodeError(f"stored value has type {type(raw).__name__}, expected bytes")
    if len(raw) != expected:
        raise StoreDecodeError(
            f"stored value has {len(raw)} bytes, expected {expected} (dim={dimension})"
        )
    # frombuffer over immutable bytes is already read-only; astype gives native order
    vec = np.frombuffer(bytes(raw), dtype=VALUE_DTYPE).astype(np.float32)
    if not np.isfinite(vec).all():
        raise StoreDecodeError("stored value contains NaN or Inf")
    vec.flags.writeable = False
    return vec


@runtime_checkable
class WordStore(Protocol):
    """Read-only, byte-oriented get-by-key. None means the key is absent."""

    def get(self, key: bytes) -> Optional[bytes]: ...

    def close(self) -> None: ...


class InMemoryWordStore:
    """Stores encoded vectors in a dict. Never written after construction."""

    def __init__(self, items: Dict[bytes, bytes] | None = None, dimension: int | None = None):
        # utf-8 key -> encoded float32 value
        self._items: Dict[bytes, bytes] = dict(items or {})
        self.dimension = dimension

    @classmethod
    def from_vectors(
        cls, vectors: Iterable[Tuple[str, np.ndarray]], dimension: int | None = None
    ) -> "InMemoryWordStore":
        # first occurrence of a word wins, like the sqlite builder
        items: Dict[bytes, bytes] = {}
        for word, vec in vectors:
            items.setdefault(word.encode("utf-8"), encode_vector(vec))
        return cls(items, dimension=dimension)

    def get(self, key: bytes) -> Optional[bytes]:
        return self._items.get(key)

    def close(self) -> None:
        pass

    def __len__(self) -> int:
        return len(self._items)
