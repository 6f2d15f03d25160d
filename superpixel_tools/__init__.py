from .canonical import relabel, superpixel_count
from .config import RepairConfig, from_json_file
from .connectivity import SplitResult, split_connected
from .geometry import (
    RegionPlan,
    height_width,
    height_width_levels,
    plan_region,
    region_size,
    seed_grid,
)
from .guard import InvalidInputError
from .label_io import load_labels, read_label_csv, save_labels, write_label_csv
from .pipeline import RepairResult, repair
from .profiles import get_profile, list_profiles, plan_for, repair_for
from .runner import main as cli_main, process_labels
from .size import MergeResult, enforce_minimum_size, enforce_minimum_size_up_to
from .visualize import draw_contours, draw_means, save_overlays

__all__ = [
    "region_size",
    "height_width",
    "height_width_levels",
    "plan_region",
    "seed_grid",
    "RegionPlan",
    "split_connected",
    "SplitResult",
    "enforce_minimum_size",
    "enforce_minimum_size_up_to",
    "MergeResult",
    "relabel",
    "superpixel_count",
    "repair",
    "RepairResult",
    "get_profile",
    "list_profiles",
    "plan_for",
    "repair_for",
    "draw_contours",
    "draw_means",
    "save_overlays",
    "load_labels",
    "save_labels",
    "read_label_csv",
    "write_label_csv",
    "RepairConfig",
    "from_json_file",
    "InvalidInputError",
    "process_labels",
    "cli_main",
]
