"""Error kinds raised by the vectorizer pipeline.

A lookup miss is not an error: the accessor returns None and the token is skipped.
"""
from __future__ import annotations


class VectorizerError(Exception):
    """Base class for every failure the pipeline reports."""


class StoreError(VectorizerError):
    """The persisted embedding store could not be used."""


class StoreOpenError(StoreError):
    pass


class StoreReadError(StoreError):
    pass


class StoreDecodeError(StoreError):
    """A stored value is not a vector of the configured dimension."""


class ShapeError(VectorizerError):
    """Empty input, length mismatch or dimension mismatch in the aggregator."""


class WeightDegenerateError(VectorizerError):
    """Weights would be undefined (log base <= 0, zero occurrence, zero weight sum)."""


class NoVectorsError(VectorizerError):
    """Nothing in the queries resolved to a vector. This is caused by the client input."""


class QueryError(VectorizerError):
    """Wraps a failure raised while processing one query of a batch."""

    def __init__(self, index: int, cause: Exception):
        self.index = index
        self.cause = cause
        super().__init__(f"at query {index}: {cause}")


class AggregationError(VectorizerError):
    """Wraps a failure of the weighting or centroid stage, after all queries resolved."""

    def __init__(self, stage: str, cause: Exception):
        self.stage = stage
        self.cause = cause
        super().__init__(f"at {stage}: {cause}")
