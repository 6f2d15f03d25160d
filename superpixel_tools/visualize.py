from __future__ import annotations

from pathlib import Path
from typing import Dict, Tuple

import cv2
import numpy as np

from .guard import InvalidInputError, as_label_map


def _ensure_color(image: np.ndarray) -> np.ndarray:
    if image.ndim == 3 and image.shape[2] == 3:
        return image
    if image.ndim == 3 and image.shape[2] == 1:
        image = image[:, :, 0]
    return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)


def _check_shape(image: np.ndarray, labels: np.ndarray) -> None:
    if image.shape[:2] != labels.shape:
        raise InvalidInputError(
            f"Label map shape {labels.shape} does not match image shape {image.shape[:2]}"
        )


def boundary_mask(labels: np.ndarray) -> np.ndarray:
    """Pixels whose right or lower neighbour belongs to another superpixel."""
    array = as_label_map(labels)
    mask = np.zeros(array.shape, dtype=bool)
    mask[:, :-1] |= array[:, :-1] != array[:, 1:]
    mask[:-1, :] |= array[:-1, :] != array[1:, :]
    return mask


def draw_contours(
    image: np.ndarray,
    labels: np.ndarray,
    color: Tuple[int, int, int] = (0, 0, 255),
    copy: bool = True,
) -> np.ndarray:
    """
    Paint superpixel boundaries onto ``image``.

    Parameters
    ----------
    image:
        Canvas, BGR or grayscale. The command line tools pass a black image
        of the input's size.
    labels:
        Label map aligned with the image.
    color:
        BGR color of the boundary pixels.
    copy:
        When True, operate on a copy and keep the original untouched.
    """
    array = as_label_map(labels)
    output = _ensure_color(image)
    _check_shape(output, array)
    if copy:
        output = output.copy()
    output[boundary_mask(array)] = color
    return output


def draw_means(image: np.ndarray, labels: np.ndarray) -> np.ndarray:
    """Replace every pixel by the mean color of its superpixel."""
    array = as_label_map(labels)
    color = _ensure_color(image)
    _check_shape(color, array)

    _, index = np.unique(array.ravel(), return_inverse=True)
    index = index.ravel()
    counts = np.bincount(index).astype(np.float64)
    pixels = color.reshape(-1, 3).astype(np.float64)

    means = np.stack(
        [np.bincount(index, weights=pixels[:, channel]) / counts for channel in range(3)],
        axis=1,
    )
    output = np.clip(np.round(means[index]), 0, 255).astype(np.uint8)
    return output.reshape(color.shape)


def save_overlays(images: Dict[str, np.ndarray], output_dir: Path) -> None:
    output_dir.mkdir(parents=True, exist_ok=True)
    for name, data in images.items():
        cv2.imwrite(str(output_dir / name), data)


__all__ = ["boundary_mask", "draw_contours", "draw_means", "save_overlays"]
