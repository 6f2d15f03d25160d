from __future__ import annotations

from pathlib import Path
import sys

import cv2
import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from superpixel_tools.connectivity import split_connected
from superpixel_tools.guard import InvalidInputError
from superpixel_tools.size import (
    enforce_minimum_size,
    enforce_minimum_size_up_to,
    size_threshold_up_to,
)


def _surrounded_component() -> np.ndarray:
    labels = np.zeros((5, 5), dtype=np.int32)
    labels[2, 1:4] = 1
    return labels


def test_small_component_merges_into_surrounding_neighbor() -> None:
    labels = _surrounded_component()
    result = enforce_minimum_size(labels, 5)

    assert result.merges == 1
    assert result.residual == 0
    assert np.unique(result.labels).size == np.unique(labels).size - 1
    assert np.count_nonzero(result.labels == 0) == np.count_nonzero(labels == 0) + 3


def test_longest_shared_boundary_wins() -> None:
    labels = np.array(
        [
            [3, 3, 3, 3],
            [3, 0, 0, 3],
            [1, 1, 1, 1],
        ]
    )
    result = enforce_minimum_size(labels, 3)

    expected = np.array(
        [
            [3, 3, 3, 3],
            [3, 3, 3, 3],
            [1, 1, 1, 1],
        ]
    )
    np.testing.assert_array_equal(result.labels, expected)
    assert result.merges == 1


def test_boundary_tie_goes_to_lowest_label() -> None:
    labels = np.array(
        [
            [1, 1, 1],
            [1, 0, 2],
            [2, 2, 2],
        ]
    )
    result = enforce_minimum_size(labels, 2)

    expected = np.array(
        [
            [1, 1, 1],
            [1, 1, 2],
            [2, 2, 2],
        ]
    )
    np.testing.assert_array_equal(result.labels, expected)


def test_absorbing_component_is_reconsidered_in_same_pass() -> None:
    labels = np.array([[0, 1, 2, 2, 2, 2]])
    result = enforce_minimum_size(labels, 3)

    np.testing.assert_array_equal(result.labels, [[2, 2, 2, 2, 2, 2]])
    assert result.merges == 2
    assert result.residual == 0


def test_sparse_label_values_are_kept() -> None:
    labels = np.array([[10, 10, 40, 70, 70]])
    result = enforce_minimum_size(labels, 2)

    np.testing.assert_array_equal(result.labels, [[10, 10, 10, 70, 70]])


@pytest.mark.parametrize("min_size", [1, 2])
def test_large_label_values_are_not_truncated(min_size: int) -> None:
    labels = np.array([[0, 0, 2**32, 2**32, 2**32 + 7, 2**32 + 7]], dtype=np.int64)
    result = enforce_minimum_size(labels, min_size)

    assert result.labels.dtype == np.int64
    assert result.merges == 0
    np.testing.assert_array_equal(result.labels, labels)


def test_large_label_values_survive_merging() -> None:
    labels = np.array([[2**40, 2**40, 5, 2**33, 2**33, 2**33]], dtype=np.uint64)
    result = enforce_minimum_size(labels, 2)

    assert result.labels.dtype == np.uint64
    expected = np.array([[2**40, 2**40, 2**33, 2**33, 2**33, 2**33]], dtype=np.uint64)
    np.testing.assert_array_equal(result.labels, expected)


def test_threshold_larger_than_image_reports_residual() -> None:
    labels = np.array([[0, 1], [2, 3]])
    result = enforce_minimum_size(labels, 10)

    assert result.merges == 3
    assert result.residual == 1
    assert np.unique(result.labels).size == 1


def test_single_component_below_threshold() -> None:
    result = enforce_minimum_size(np.zeros((2, 2), dtype=np.int32), 5)

    assert result.merges == 0
    assert result.residual == 1


def test_trivial_thresholds_do_nothing() -> None:
    labels = _surrounded_component()
    for min_size in (0, 1):
        result = enforce_minimum_size(labels, min_size)
        assert result.merges == 0
        np.testing.assert_array_equal(result.labels, labels)


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_all_components_reach_minimum_size(seed: int) -> None:
    rng = np.random.default_rng(seed)
    split = split_connected(rng.integers(0, 5, size=(30, 40)))
    result = enforce_minimum_size(split.labels, 6)

    values, sizes = np.unique(result.labels, return_counts=True)
    assert result.residual == 0
    assert sizes.min() >= 6
    assert result.merges == split.count - values.size
    for value in values:
        mask = (result.labels == value).astype(np.uint8)
        count, _ = cv2.connectedComponents(mask, connectivity=4)
        assert count == 2


def test_input_is_not_modified() -> None:
    labels = _surrounded_component()
    original = labels.copy()
    enforce_minimum_size(labels, 5)
    np.testing.assert_array_equal(labels, original)


def test_size_threshold_up_to() -> None:
    labels = np.array([[0, 0, 0, 0, 1, 2, 2, 3, 3, 3]])

    assert size_threshold_up_to(labels, 0) == 0
    assert size_threshold_up_to(labels, 1) == 2
    assert size_threshold_up_to(labels, 2) == 3
    assert size_threshold_up_to(labels, 10) == 4


def test_enforce_up_to_merges_at_most_bound_components() -> None:
    labels = np.array([[0, 0, 0, 0, 1, 2, 2, 3, 3, 3]])

    once = enforce_minimum_size_up_to(labels, 1)
    np.testing.assert_array_equal(once.labels, [[0, 0, 0, 0, 0, 2, 2, 3, 3, 3]])
    assert once.merges == 1

    twice = enforce_minimum_size_up_to(labels, 2)
    np.testing.assert_array_equal(twice.labels, [[0, 0, 0, 0, 0, 0, 0, 3, 3, 3]])
    assert twice.merges == 2


def test_enforce_up_to_with_zero_bound() -> None:
    labels = np.array([[0, 0, 1, 2, 2]])
    result = enforce_minimum_size_up_to(labels, 0)

    assert result.merges == 0
    np.testing.assert_array_equal(result.labels, labels)


def test_enforce_up_to_with_large_bound() -> None:
    labels = np.array([[0, 0, 0, 0, 1, 2, 2, 3, 3, 3]])
    result = enforce_minimum_size_up_to(labels, 10)

    assert result.merges == 3
    np.testing.assert_array_equal(result.labels, np.zeros((1, 10)))


@pytest.mark.parametrize("threshold", [2.5, "3", None, True])
def test_non_integer_thresholds(threshold: object) -> None:
    with pytest.raises(InvalidInputError):
        enforce_minimum_size(_surrounded_component(), threshold)
    with pytest.raises(InvalidInputError):
        enforce_minimum_size_up_to(_surrounded_component(), threshold)
