from __future__ import annotations
from typing import Sequence
import numpy as np

from glove_vectorizer.application.errors import ShapeError, WeightDegenerateError


def _readonly(vec: np.ndarray) -> np.ndarray:
    vec.flags.writeable = False
    return vec


def weighted_centroid(vectors: Sequence[np.ndarray], weights: Sequence[float]) -> np.ndarray:
    """
    Weighted mean of `vectors`, per dimension:

        sum_v(vectors[v][i] * weights[v]) / sum_v(weights[v])

    Returns a new float32 vector; input arrays are never aliased. A single
    vector comes back as a read-only copy with its own values and dtype.
    """
    if len(vectors) == 0:
        raise ShapeError("can not compute centroid of an empty list of vectors")
    if len(vectors) != len(weights):
        raise ShapeError(
            f"can not compute weighted centroid: {len(vectors)} vectors but {len(weights)} weights"
        )

    dim = np.shape(vectors[0])
    if len(dim) != 1:
        raise ShapeError(f"vectors must be 1-D, got shape {dim}")
    if len(vectors) == 1:
        return _readonly(np.array(vectors[0], copy=True))

    for i, vec in enumerate(vectors):
        if np.shape(vec) != dim:
            raise ShapeError(f"vector {i} has shape {np.shape(vec)}, expected {dim}")

    w = np.asarray(weights, dtype=np.float64)
    weight_sum = float(w.sum())
    if weight_sum == 0.0 or not np.isfinite(weight_sum):
        raise WeightDegenerateError(f"weight sum is {weight_sum}; can not normalize")

    # (n,) @ (n, d) -> (d,)
    matrix = np.stack([np.asarray(v, dtype=np.float64) for v in vectors])
    centroid = (w @ matrix) / weight_sum
    return _readonly(centroid.astype(np.float32))
