from __future__ import annotations

from pathlib import Path

import numpy as np

from .guard import as_label_map

SUPPORTED_SUFFIXES = (".csv", ".npy")


def write_label_csv(path: str | Path, labels: np.ndarray) -> None:
    """Write one image row per line, labels separated by commas."""
    array = as_label_map(labels)
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    np.savetxt(target, array, fmt="%d", delimiter=",")


def read_label_csv(path: str | Path) -> np.ndarray:
    source = Path(path)
    if not source.is_file():
        raise FileNotFoundError(f"Label file '{path}' does not exist.")
    array = np.loadtxt(source, dtype=np.int64, delimiter=",", ndmin=2)
    return as_label_map(array)


def load_labels(path: str | Path) -> np.ndarray:
    source = Path(path)
    suffix = source.suffix.lower()
    if suffix == ".csv":
        return read_label_csv(source)
    if suffix == ".npy":
        if not source.is_file():
            raise FileNotFoundError(f"Label file '{path}' does not exist.")
        return as_label_map(np.load(source, allow_pickle=False))
    raise ValueError(f"Unsupported label file '{path}'. Use one of {SUPPORTED_SUFFIXES}")


def save_labels(path: str | Path, labels: np.ndarray) -> None:
    target = Path(path)
    suffix = target.suffix.lower()
    if suffix == ".csv":
        write_label_csv(target, labels)
        return
    if suffix == ".npy":
        target.parent.mkdir(parents=True, exist_ok=True)
        np.save(target, as_label_map(labels))
        return
    raise ValueError(f"Unsupported label file '{path}'. Use one of {SUPPORTED_SUFFIXES}")


__all__ = [
    "SUPPORTED_SUFFIXES",
    "load_labels",
    "read_label_csv",
    "save_labels",
    "write_label_csv",
]
