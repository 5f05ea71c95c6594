import numpy as np
import pytest

from glove_vectorizer.application.settings import Settings
from glove_vectorizer.application.services.word_store import InMemoryWordStore, encode_vector
from glove_vectorizer.application.services.vectorizer_service import VectorizerService

DIM = 4

CAT = np.array([1.0, 2.0, 3.0, 4.0], dtype=np.float32)
DOG = np.array([3.0, 4.0, 5.0, 6.0], dtype=np.float32)


@pytest.fixture
def settings():
    return Settings(_env_file=None, embedding_dim=DIM, store_backend="memory")


@pytest.fixture
def animal_store():
    """Store containing vectors for "cat" and "dog" only."""
    return InMemoryWordStore.from_vectors([("cat", CAT), ("dog", DOG)], dimension=DIM)


@pytest.fixture
def service(settings, animal_store):
    return VectorizerService.from_store(settings, animal_store)


class RecordingStore:
    """Dict-backed store that records lookups and can fail on chosen keys."""

    def __init__(self, items=None, fail_on=(), fail_with=None):
        self.items = {k.encode("utf-8"): encode_vector(v) for k, v in (items or {}).items()}
        self.fail_on = {k.encode("utf-8") for k in fail_on}
        self.fail_with = fail_with
        self.calls = []

    def get(self, key):
        self.calls.append(key)
        if key in self.fail_on:
            raise self.fail_with
        return self.items.get(key)

    def close(self):
        pass


@pytest.fixture
def recording_store_cls():
    return RecordingStore


@pytest.fixture
def glove_file(tmp_path):
    path = tmp_path / "glove.txt"
    path.write_text(
        "cat 1.0 2.0 3.0 4.0\n"
        "dog 3.0 4.0 5.0 6.0\n"
        "Paris 0.5 0.5 0.5 0.5\n"
        "paris 9.0 9.0 9.0 9.0\n"
        ". . . 0.1 0.2 0.3 0.4\n"
        "cat 7.0 7.0 7.0 7.0\n",
        encoding="utf-8",
    )
    return path
