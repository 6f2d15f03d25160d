from __future__ import annotations

import numpy as np


class InvalidInputError(ValueError):
    """Raised for malformed label maps or impossible geometry requests."""


def assert_positive_area(width: int, height: int) -> None:
    if int(width) <= 0 or int(height) <= 0:
        raise InvalidInputError(
            f"Image must have a positive area, got width={width} height={height}"
        )


def assert_superpixels(superpixels: int) -> None:
    if int(superpixels) <= 0:
        raise InvalidInputError(
            f"Number of superpixels must be positive, got {superpixels}"
        )


def as_label_map(labels: object) -> np.ndarray:
    """
    Validate ``labels`` and return it as a 2-D integer array.

    The input is never modified; lists of rows are accepted as long as they
    form a rectangle.
    """
    try:
        array = np.asarray(labels)
    except ValueError as exc:
        raise InvalidInputError(f"Label map is not rectangular: {exc}") from exc

    if array.dtype == object:
        raise InvalidInputError("Label map is not rectangular.")
    if array.ndim != 2:
        raise InvalidInputError(f"Label map must be 2-D, got shape {array.shape}")
    if array.size == 0:
        raise InvalidInputError("Label map has zero area.")
    if array.dtype == bool or not np.issubdtype(array.dtype, np.integer):
        raise InvalidInputError(f"Label map must hold integers, got {array.dtype}")
    if array.min() < 0:
        raise InvalidInputError("Label map contains negative labels.")
    return array


def as_threshold(value: object, name: str) -> int:
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
        raise InvalidInputError(f"{name} must be an integer, got {value!r}")
    return int(value)


__all__ = [
    "InvalidInputError",
    "as_label_map",
    "as_threshold",
    "assert_positive_area",
    "assert_superpixels",
]
