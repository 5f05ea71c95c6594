import pytest

from glove_vectorizer.application.errors import WeightDegenerateError
from glove_vectorizer.application.services.weights import min_max, occurrences_to_weights


def test_empty_occurrences_give_empty_weights():
    assert occurrences_to_weights([]) == []


def test_min_max_captures_both_ends():
    assert min_max([5, 1, 9, 3]) == (1, 9)
    assert min_max([9, 5, 1]) == (1, 9)
    assert min_max([7]) == (7, 7)


def test_min_max_of_empty_sequence_raises():
    with pytest.raises(ValueError):
        min_max([])


def test_most_frequent_word_keeps_floor_weight():
    weights = occurrences_to_weights([102, 102, 102])
    assert len(weights) == 3
    assert weights == pytest.approx([0.1, 0.1, 0.1])


def test_weights_follow_log_scale():
    weights = occurrences_to_weights([1, 10, 100])
    # 2 * (1.05 - log(o) / log(100))
    assert weights == pytest.approx([2.1, 1.1, 0.1])


def test_weights_keep_input_order():
    weights = occurrences_to_weights([100, 1])
    assert weights[0] < weights[1]


def test_max_of_one_is_degenerate():
    with pytest.raises(WeightDegenerateError):
        occurrences_to_weights([1, 1])


def test_zero_occurrence_is_degenerate():
    with pytest.raises(WeightDegenerateError):
        occurrences_to_weights([0, 10])
