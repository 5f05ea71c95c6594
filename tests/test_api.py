import numpy as np
import pytest
from fastapi.testclient import TestClient

from glove_vectorizer.application.api import main
from glove_vectorizer.application.errors import StoreReadError
from glove_vectorizer.application.services.glove_loader import build_sqlite_store
from glove_vectorizer.application.services import vectorizer_service
from glove_vectorizer.application.services.vectorizer_service import VectorizerService
from glove_vectorizer.application.services.word_store import InMemoryWordStore
from glove_vectorizer.application.settings import get_settings

from conftest import CAT, DIM, DOG


@pytest.fixture
def client(service):
    main.app.dependency_overrides[main.vectorizer_dep] = lambda: service
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_vectorize_returns_centroid(client):
    response = client.post("/vectorize", json={"query": ["the cat and dog"]})

    assert response.status_code == 200
    vector = response.json()["vector"]
    assert len(vector) == DIM
    np.testing.assert_allclose(vector, (CAT + DOG) / 2)


def test_missing_query_field_is_bad_input(client):
    response = client.post("/vectorize", json={"text": ["cat"]})
    assert response.status_code == 422


def test_malformed_body_is_bad_input(client):
    response = client.post(
        "/vectorize", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 422


def test_nothing_to_vectorize_is_client_error(client):
    response = client.post("/vectorize", json={"query": ["xyzzyqux", "the"]})

    assert response.status_code == 400
    assert "no vectors found" in response.json()["detail"]


def test_store_failure_is_internal_error(settings, recording_store_cls):
    store = recording_store_cls({}, fail_on=["cat"], fail_with=StoreReadError("io failure"))
    svc = VectorizerService.from_store(settings, store)
    main.app.dependency_overrides[main.vectorizer_dep] = lambda: svc
    try:
        response = TestClient(main.app).post("/vectorize", json={"query": ["cat"]})
    finally:
        main.app.dependency_overrides.clear()

    assert response.status_code == 500
    assert "at query 0: io failure" in response.json()["detail"]


def test_uninitialized_service_is_unavailable():
    # no lifespan ran, so app.state has no vectorizer
    response = TestClient(main.app).post("/vectorize", json={"query": ["cat"]})
    assert response.status_code == 503


def test_lifespan_opens_store_from_settings(glove_file, tmp_path, monkeypatch):
    store_path = tmp_path / "embeddings.sqlite3"
    build_sqlite_store(glove_file, store_path, dimension=DIM)
    monkeypatch.setenv("STORE_BACKEND", "sqlite")
    monkeypatch.setenv("STORE_PATH", str(store_path))
    monkeypatch.setenv("EMBEDDING_DIM", str(DIM))
    get_settings.cache_clear()
    try:
        with TestClient(main.app) as client:
            response = client.post("/vectorize", json={"query": ["Dog"]})
            service = main.app.state.vectorizer
    finally:
        get_settings.cache_clear()
        del main.app.state.vectorizer

    assert response.status_code == 200
    np.testing.assert_allclose(response.json()["vector"], DOG)
    assert service.backend == "sqlite"


def test_corrupt_stored_vector_is_internal_error(settings):
    store = InMemoryWordStore.from_vectors(
        [("cat", np.array([np.nan, 1.0, 2.0, 3.0])), ("dog", np.ones(DIM))], dimension=DIM
    )
    main.app.dependency_overrides[main.vectorizer_dep] = lambda: VectorizerService.from_store(settings, store)
    try:
        response = TestClient(main.app).post("/vectorize", json={"query": ["cat dog"]})
    finally:
        main.app.dependency_overrides.clear()

    assert response.status_code == 500
    assert "NaN or Inf" in response.json()["detail"]


def test_aggregation_failure_is_internal_error(client, monkeypatch):
    monkeypatch.setattr(vectorizer_service, "occurrences_to_weights", lambda occ: [1.0, -1.0])

    response = client.post("/vectorize", json={"query": ["cat dog"]})

    assert response.status_code == 500
    assert "at centroid:" in response.json()["detail"]


def test_only_health_and_vectorize_are_served(client):
    assert client.get("/").status_code == 404
