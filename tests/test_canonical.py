from __future__ import annotations

from pathlib import Path
import sys

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from superpixel_tools.canonical import relabel, superpixel_count
from superpixel_tools.guard import InvalidInputError


def test_relabel_first_seen_order() -> None:
    result = relabel(np.array([[0, 2, 5, 5, 2, 0]]))

    assert result.dtype == np.int32
    np.testing.assert_array_equal(result, [[0, 1, 2, 2, 1, 0]])


def test_equivalent_partitions_relabel_identically() -> None:
    rng = np.random.default_rng(7)
    labels = rng.integers(0, 6, size=(12, 9))
    renamed = np.array([40, 3, 17, 1000, 8, 2])[labels]

    np.testing.assert_array_equal(relabel(labels), relabel(renamed))


@pytest.mark.parametrize("values", [1, 3, 50])
def test_relabel_is_dense_and_idempotent(values: int) -> None:
    rng = np.random.default_rng(values)
    labels = rng.integers(0, values, size=(15, 15)) * 11
    once = relabel(labels)

    k = superpixel_count(labels)
    assert set(np.unique(once).tolist()) == set(range(k))
    np.testing.assert_array_equal(relabel(once), once)


def test_superpixel_count() -> None:
    assert superpixel_count(np.array([[4, 4], [9, 1]])) == 3


def test_relabel_rejects_malformed_input() -> None:
    with pytest.raises(InvalidInputError):
        relabel(np.array([1, 2, 3]))
