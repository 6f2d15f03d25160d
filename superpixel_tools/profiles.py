"""
Post-processing recipes of the supported superpixel back ends.

Each back end seeds itself from a different region plan and repairs its
output differently: some only split disconnected labels, others also merge
the fragments away once or twice, and VC additionally removes very small
superpixels. To add a back end, add an entry to ``_PROFILES``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .geometry import RegionPlan, plan_region
from .guard import as_label_map, assert_superpixels
from .pipeline import RepairResult, repair


@dataclass(frozen=True)
class Profile:
    name: str
    geometry: Optional[str] = None
    supports_fair: bool = False
    upto_passes: int = 0
    min_size_divisor: Optional[int] = None

    def min_size(self, width: int, height: int, superpixels: int) -> Optional[int]:
        if self.min_size_divisor is None:
            return None
        return int(width * height / float(superpixels) / self.min_size_divisor)


# name -> recipe
_PROFILES = {
    "slic": Profile("slic", geometry="square"),
    "etps": Profile("etps", geometry="square"),
    "pb": Profile("pb", geometry="square", upto_passes=1),
    "ccs": Profile("ccs", geometry="square", upto_passes=2),
    "ergc": Profile("ergc", geometry="rect", supports_fair=True),
    "lsc": Profile("lsc", geometry="rect", supports_fair=True, upto_passes=1),
    "crs": Profile("crs", geometry="rect", supports_fair=True, upto_passes=1),
    "seeds": Profile("seeds", geometry="levels", supports_fair=True),
    "reseeds": Profile("reseeds", geometry="levels", supports_fair=True),
    "refh": Profile("refh"),
    "vc": Profile("vc", upto_passes=1, min_size_divisor=10),
}


def list_profiles() -> List[str]:
    return list(_PROFILES.keys())


def get_profile(name: str) -> Profile:
    key = name.lower()
    if key not in _PROFILES:
        raise ValueError(f"Unknown profile: '{name}'. Available: {list_profiles()}")
    return _PROFILES[key]


def plan_for(
    name: str,
    width: int,
    height: int,
    superpixels: int,
    fair: bool = False,
) -> Optional[RegionPlan]:
    """Region plan the back end seeds from, or None when it picks its own."""
    profile = get_profile(name)
    if profile.geometry is None:
        return None
    return plan_region(
        width,
        height,
        superpixels,
        mode=profile.geometry,
        fair=fair and profile.supports_fair,
    )


def repair_for(name: str, labels: np.ndarray, superpixels: int) -> RepairResult:
    profile = get_profile(name)
    assert_superpixels(superpixels)
    labels = as_label_map(labels)
    height, width = labels.shape
    return repair(
        labels,
        upto_passes=profile.upto_passes,
        min_size=profile.min_size(width, height, superpixels),
    )


__all__ = ["Profile", "get_profile", "list_profiles", "plan_for", "repair_for"]
