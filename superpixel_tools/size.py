"""
Merge undersized superpixels into their neighbours.

Both entry points share one merge pass. Components below the threshold are
visited in ascending label order. Each one is absorbed by the neighbour it
shares the longest 4-adjacent boundary with, and ties go to the lowest label.
Sizes and boundary lengths are updated after every merge. A neighbour that
absorbs a component but is still too small is queued again within the same
pass.
"""
from __future__ import annotations

import heapq
from dataclasses import dataclass
from typing import Dict, List

import numpy as np

from .guard import as_label_map, as_threshold


@dataclass(frozen=True)
class MergeResult:
    """
    Labels after merging, the number of merges performed, and how many
    components are still below the threshold (only non-zero when a component
    has no neighbour left, i.e. the image is smaller than the bound).
    Labels keep the input's dtype and values.
    """

    labels: np.ndarray
    merges: int
    residual: int


def _boundary_table(index: np.ndarray, count: int) -> List[Dict[int, int]]:
    """Shared boundary length between every pair of touching components."""
    pairs = []
    for a, b in ((index[:, :-1], index[:, 1:]), (index[:-1, :], index[1:, :])):
        differs = a != b
        lo = np.minimum(a[differs], b[differs]).astype(np.int64)
        hi = np.maximum(a[differs], b[differs]).astype(np.int64)
        pairs.append(lo * count + hi)

    keys, lengths = np.unique(np.concatenate(pairs), return_counts=True)
    table: List[Dict[int, int]] = [{} for _ in range(count)]
    for key, length in zip(keys.tolist(), lengths.tolist()):
        lo, hi = divmod(key, count)
        table[lo][hi] = length
        table[hi][lo] = length
    return table


def _pick_neighbor(neighbors: Dict[int, int]) -> int:
    return min(neighbors, key=lambda other: (-neighbors[other], other))


def _merge_pass(array: np.ndarray, threshold: int) -> MergeResult:
    values, inverse, sizes = np.unique(array, return_inverse=True, return_counts=True)
    index = inverse.reshape(array.shape)
    count = len(values)
    sizes = sizes.tolist()

    if threshold <= 1 or count == 1:
        residual = sum(1 for size in sizes if size < threshold)
        return MergeResult(labels=array.copy(), merges=0, residual=residual)

    boundaries = _boundary_table(index, count)
    target = list(range(count))
    alive = [True] * count

    queue = [idx for idx in range(count) if sizes[idx] < threshold]
    heapq.heapify(queue)
    merges = 0

    while queue:
        small = heapq.heappop(queue)
        if not alive[small] or sizes[small] >= threshold:
            continue
        neighbors = boundaries[small]
        if not neighbors:
            continue

        big = _pick_neighbor(neighbors)
        del neighbors[big]
        del boundaries[big][small]
        for other, length in neighbors.items():
            del boundaries[other][small]
            boundaries[other][big] = boundaries[other].get(big, 0) + length
            boundaries[big][other] = boundaries[big].get(other, 0) + length
        boundaries[small] = {}

        target[small] = big
        alive[small] = False
        sizes[big] += sizes[small]
        merges += 1

        if sizes[big] < threshold:
            heapq.heappush(queue, big)

    # Resolve merge chains to the surviving component.
    for idx in range(count):
        root = idx
        while target[root] != root:
            root = target[root]
        target[idx] = root

    lookup = values[np.asarray(target)]
    residual = sum(1 for idx in range(count) if alive[idx] and sizes[idx] < threshold)
    return MergeResult(labels=lookup[index], merges=merges, residual=residual)


def enforce_minimum_size(labels: np.ndarray, min_size: int) -> MergeResult:
    """
    Merge every component smaller than ``min_size`` pixels into a neighbour.

    When ``min_size`` exceeds the image area the pass ends with a single
    component and ``residual == 1`` instead of failing.
    """
    array = as_label_map(labels)
    threshold = as_threshold(min_size, "min_size")
    return _merge_pass(array, threshold)


def size_threshold_up_to(labels: np.ndarray, bound: int) -> int:
    """
    Threshold used by :func:`enforce_minimum_size_up_to`: the size of the
    ``bound + 1``-th smallest component, so that at most ``bound`` components
    fall strictly below it.
    """
    array = as_label_map(labels)
    bound = as_threshold(bound, "bound")
    if bound <= 0:
        return 0
    _, sizes = np.unique(array, return_counts=True)
    sizes = np.sort(sizes)
    return int(sizes[min(bound, len(sizes) - 1)])


def enforce_minimum_size_up_to(labels: np.ndarray, bound: int) -> MergeResult:
    """
    Merge the smallest components, with the threshold derived from ``bound``
    (typically the number of fragments a connectivity repair just created).
    """
    array = as_label_map(labels)
    threshold = size_threshold_up_to(array, bound)
    return _merge_pass(array, threshold)


__all__ = [
    "MergeResult",
    "enforce_minimum_size",
    "enforce_minimum_size_up_to",
    "size_threshold_up_to",
]
