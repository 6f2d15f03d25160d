from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .canonical import relabel
from .connectivity import split_connected
from .guard import as_threshold
from .size import enforce_minimum_size, enforce_minimum_size_up_to


@dataclass(frozen=True)
class RepairResult:
    labels: np.ndarray
    components: int
    fragments: int
    merges: int
    residual: int
    superpixels: int


def repair(
    labels: np.ndarray,
    *,
    upto_passes: int = 0,
    min_size: Optional[int] = None,
) -> RepairResult:
    """
    Turn a raw label map into a connected, size-bounded, densely numbered
    partition.

    Parameters
    ----------
    labels:
        Raw per-pixel labels from a segmentation back end.
    upto_passes:
        How many times to merge the smallest components, with the number of
        fragments found by the connectivity repair as the bound. Stops early
        once a pass merges nothing.
    min_size:
        Optional fixed pixel threshold applied after the fragment merges.
    """
    upto_passes = as_threshold(upto_passes, "upto_passes")
    split = split_connected(labels)
    current = split.labels
    merges = 0
    residual = 0

    for _ in range(max(upto_passes, 0)):
        merged = enforce_minimum_size_up_to(current, split.fragments)
        current = merged.labels
        merges += merged.merges
        residual = merged.residual
        if merged.merges == 0:
            break

    if min_size is not None:
        merged = enforce_minimum_size(current, min_size)
        current = merged.labels
        merges += merged.merges
        residual = merged.residual

    canonical = relabel(current)
    return RepairResult(
        labels=canonical,
        components=split.count,
        fragments=split.fragments,
        merges=merges,
        residual=residual,
        superpixels=int(canonical.max()) + 1,
    )


__all__ = ["RepairResult", "repair"]
