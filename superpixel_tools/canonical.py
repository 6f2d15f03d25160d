from __future__ import annotations

import numpy as np

from .guard import as_label_map


def relabel(labels: np.ndarray) -> np.ndarray:
    """
    Renumber labels to ``0..K-1`` in the order they are first met when the
    map is scanned row by row.
    """
    array = as_label_map(labels)
    flat = array.ravel()
    _, first_index, inverse = np.unique(flat, return_index=True, return_inverse=True)

    rank = np.empty(len(first_index), dtype=np.int32)
    rank[np.argsort(first_index, kind="stable")] = np.arange(len(first_index), dtype=np.int32)
    return rank[inverse.ravel()].reshape(array.shape)


def superpixel_count(labels: np.ndarray) -> int:
    return int(np.unique(as_label_map(labels)).size)


__all__ = ["relabel", "superpixel_count"]
