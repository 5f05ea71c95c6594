from __future__ import annotations
from dataclasses import dataclass
from typing import List, Sequence
from loguru import logger
import numpy as np

from glove_vectorizer.application.errors import (
    AggregationError,
    NoVectorsError,
    QueryError,
    ShapeError,
    StoreError,
    StoreOpenError,
    WeightDegenerateError,
)
from glove_vectorizer.application.settings import Settings
from glove_vectorizer.application.services.centroid import weighted_centroid
from glove_vectorizer.application.services.glove_loader import iter_glove_vectors
from glove_vectorizer.application.services.tokenizer import StopwordFilter, tokenize
from glove_vectorizer.application.services.weights import occurrences_to_weights
from glove_vectorizer.application.services.word_store import InMemoryWordStore, WordStore
from glove_vectorizer.application.services.word_store_sqlite import SQLiteWordStore
from glove_vectorizer.application.services.word_vectors import WordVectorLookup


@dataclass
class VectorizerService:
    settings: Settings
    # store is either SQLiteWordStore or InMemoryWordStore
    store: WordStore
    backend: str  # "sqlite" or "memory"
    lookup: WordVectorLookup

    @classmethod
    def build(cls, settings: Settings) -> "VectorizerService":
        # stopwords first: a bad stopword file must not leak an open store
        if settings.stopwords_path is not None:
            stopwords = StopwordFilter.from_file(settings.stopwords_path)
        else:
            stopwords = StopwordFilter.default()

        if settings.store_backend == "memory":
            if settings.glove_path is None:
                raise StoreOpenError("store_backend='memory' requires glove_path")
            logger.info("Loading in-memory store from '{}'", settings.glove_path)
            store: WordStore = InMemoryWordStore.from_vectors(
                iter_glove_vectors(settings.glove_path, settings.embedding_dim),
                dimension=settings.embedding_dim,
            )
        else:
            store = SQLiteWordStore(settings.store_path)

        stored_dim = getattr(store, "dimension", None)
        if stored_dim is not None and stored_dim != settings.embedding_dim:
            store.close()
            raise StoreOpenError(
                f"store holds {stored_dim}-d vectors but embedding_dim is {settings.embedding_dim}"
            )

        logger.info("Using {} backend with {} stopword(s)", settings.store_backend, len(stopwords))

        return cls.from_store(settings, store, stopwords, backend=settings.store_backend)

    @classmethod
    def from_store(
        cls,
        settings: Settings,
        store: WordStore,
        stopwords: StopwordFilter | None = None,
        backend: str = "memory",
    ) -> "VectorizerService":
        lookup = WordVectorLookup(
            store=store,
            dimension=settings.embedding_dim,
            stopwords=stopwords or StopwordFilter.default(),
        )
        return cls(settings=settings, store=store, backend=backend, lookup=lookup)

    def collect_vectors(self, queries: Sequence[str]) -> List[np.ndarray]:
        """Vectors of every resolvable, non-stopword token across all queries."""
        vectors: List[np.ndarray] = []
        for i, query in enumerate(queries):
            tokens = tokenize(query)
            if not tokens:
                continue
            try:
                found = self.lookup.vectors_for_words(tokens)
            except StoreError as e:
                raise QueryError(i, e) from e
            logger.debug("Query {}: {} token(s), {} vector(s)", i, len(tokens), len(found))
            vectors.extend(found)
        return vectors

    def aggregate_queries(self, queries: Sequence[str]) -> np.ndarray:
        vectors = self.collect_vectors(queries)
        if not vectors:
            raise NoVectorsError("no vectors found for query")

        # every vector currently gets the same occurrence, so all weights are equal
        occurrences = [self.settings.synthetic_occurrence] * len(vectors)
        try:
            weights = occurrences_to_weights(occurrences)
        except WeightDegenerateError as e:
            raise AggregationError("weights", e) from e
        try:
            return weighted_centroid(vectors, weights)
        except (ShapeError, WeightDegenerateError) as e:
            raise AggregationError("centroid", e) from e

    def close(self) -> None:
        self.store.close()
