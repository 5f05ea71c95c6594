from __future__ import annotations
from typing import List, Sequence, Tuple
import math

from glove_vectorizer.application.errors import WeightDegenerateError

# 1 + the minimal weight share: the most frequent word keeps 2 * 0.05 = 0.1
FLOOR_OFFSET = 1.05


def min_max(values: Sequence[int]) -> Tuple[int, int]:
    if not values:
        raise ValueError("min_max() of an empty sequence")
    lo = hi = values[0]
    for v in values[1:]:
        if v < lo:
            lo = v
        if v > hi:
            hi = v
    return lo, hi


def occurrences_to_weights(occurrences: Sequence[int]) -> List[float]:
    """
    Log-scaled weights: frequent words count less, but never zero.

        weight(o) = 2 * (1.05 - log(o) / log(max))
    """
    if not occurrences:
        return []

    lo, hi = min_max(occurrences)
    if hi <= 1:
        raise WeightDegenerateError(f"max occurrence is {hi}; log(max) must be > 0")
    if lo <= 0:
        raise WeightDegenerateError(f"occurrence {lo} has no logarithm")

    log_max = math.log(hi)
    weights = [2.0 * (FLOOR_OFFSET - math.log(o) / log_max) for o in occurrences]
    if not all(math.isfinite(w) for w in weights):
        raise WeightDegenerateError("non-finite weight computed")
    return weights
