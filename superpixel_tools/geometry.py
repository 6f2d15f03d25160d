"""
Initial region geometry for superpixel back ends.

Back ends seed their partition with a grid of blocks. The helpers below turn
a desired number of superpixels into the block size that produces it: a
square side, an aspect-preserving (height, width) pair, or a base block plus
a number of doubling levels for hierarchical methods such as SEEDS.

``fair=True`` forces square blocks so that every method compared on an
image starts from identically shaped seeds.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal, Tuple

import numpy as np

from .guard import InvalidInputError, assert_positive_area, assert_superpixels

PlanMode = Literal["square", "rect", "levels"]

# Hierarchical bases are halved while their shorter side stays at least this long.
MIN_BASE_SIDE = 2


def _half_up(value: float) -> int:
    return max(1, int(math.floor(value + 0.5)))


def _validate(width: int, height: int, superpixels: int) -> None:
    assert_positive_area(width, height)
    assert_superpixels(superpixels)


@dataclass(frozen=True)
class RegionPlan:
    region_height: int
    region_width: int
    levels: int = 1

    @property
    def coarsest_height(self) -> int:
        return self.region_height * 2 ** (self.levels - 1)

    @property
    def coarsest_width(self) -> int:
        return self.region_width * 2 ** (self.levels - 1)

    def coarsest_count(self, width: int, height: int) -> int:
        """Number of blocks the coarsest level lays over a ``width`` x ``height`` image."""
        rows = -(-int(height) // self.coarsest_height)
        cols = -(-int(width) // self.coarsest_width)
        return rows * cols


def region_size(width: int, height: int, superpixels: int) -> int:
    """Side of a square block so that ``superpixels`` blocks cover the image."""
    _validate(width, height, superpixels)
    return _half_up(math.sqrt(width * height / float(superpixels)))


def height_width(
    width: int,
    height: int,
    superpixels: int,
    fair: bool = False,
) -> Tuple[int, int]:
    """
    Block ``(height, width)`` keeping the image aspect ratio, such that
    ``superpixels`` blocks cover the image.
    """
    if fair:
        side = region_size(width, height, superpixels)
        return side, side

    _validate(width, height, superpixels)
    area = width * height / float(superpixels)
    region_height = _half_up(math.sqrt(area * height / float(width)))
    region_width = _half_up(math.sqrt(area * width / float(height)))
    return region_height, region_width


def height_width_levels(
    width: int,
    height: int,
    superpixels: int,
    fair: bool = False,
) -> RegionPlan:
    """
    Base block and level count for hierarchical back ends.

    The target block from :func:`height_width` is halved level by level;
    ``levels`` is the smallest count at which one more halving would shrink
    the shorter side below ``MIN_BASE_SIDE``. The base is the target divided
    by ``2 ** (levels - 1)`` and rounded half-up, so the coarsest level
    only approximates the requested number of superpixels. Rounding the base
    up can undershoot it noticeably: 100x100 with 400 superpixels gives a
    3x3 base over two levels, 6x6 coarsest blocks and a ``coarsest_count``
    of 289.
    """
    target_height, target_width = height_width(width, height, superpixels, fair=fair)
    shorter = min(target_height, target_width)

    levels = 1
    while shorter / 2.0 ** levels >= MIN_BASE_SIDE:
        levels += 1

    scale = 2.0 ** (levels - 1)
    return RegionPlan(
        region_height=_half_up(target_height / scale),
        region_width=_half_up(target_width / scale),
        levels=levels,
    )


def plan_region(
    width: int,
    height: int,
    superpixels: int,
    mode: PlanMode = "square",
    fair: bool = False,
) -> RegionPlan:
    if mode == "square":
        side = region_size(width, height, superpixels)
        return RegionPlan(region_height=side, region_width=side)
    if mode == "rect":
        region_height, region_width = height_width(width, height, superpixels, fair=fair)
        return RegionPlan(region_height=region_height, region_width=region_width)
    if mode == "levels":
        return height_width_levels(width, height, superpixels, fair=fair)
    raise ValueError(f"Unknown plan mode: '{mode}'. Available: ['square', 'rect', 'levels']")


def seed_grid(width: int, height: int, region_height: int, region_width: int) -> np.ndarray:
    """
    Block labelling a back end starts from: block ids increase row by row,
    and partial blocks at the right and bottom edges keep their own id.
    """
    assert_positive_area(width, height)
    if int(region_width) <= 0 or int(region_height) <= 0:
        raise InvalidInputError(
            f"Region size must be positive, got {region_height}x{region_width}"
        )
    cols = -(-int(width) // int(region_width))
    rows = np.arange(height) // int(region_height)
    columns = np.arange(width) // int(region_width)
    return (rows[:, None] * cols + columns[None, :]).astype(np.int32)


__all__ = [
    "MIN_BASE_SIDE",
    "PlanMode",
    "RegionPlan",
    "height_width",
    "height_width_levels",
    "plan_region",
    "region_size",
    "seed_grid",
]
