from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import cv2
import numpy as np

from .config import RepairConfig, from_json_file
from .geometry import plan_region
from .guard import as_label_map, assert_superpixels
from .label_io import SUPPORTED_SUFFIXES as LABEL_SUFFIXES
from .label_io import load_labels, save_labels
from .pipeline import RepairResult, repair
from .profiles import get_profile, list_profiles, plan_for, repair_for
from .visualize import draw_contours, draw_means, save_overlays

IMAGE_SUFFIXES: Sequence[str] = (".png", ".jpg", ".jpeg", ".bmp", ".tif", ".tiff")
COMMANDS = {"repair", "plan", "profiles"}


def _collect_label_files(inputs: Iterable[str]) -> List[Path]:
    files: List[Path] = []
    for entry in inputs:
        root = Path(entry).expanduser()
        if root.is_file():
            if root.suffix.lower() in LABEL_SUFFIXES:
                files.append(root)
            continue
        if root.is_dir():
            files.extend(
                sorted(
                    path
                    for path in root.rglob("*")
                    if path.is_file() and path.suffix.lower() in LABEL_SUFFIXES
                )
            )
    return files


def _find_image(image_dir: Optional[Path], stem: str) -> Optional[Path]:
    if image_dir is None:
        return None
    for suffix in IMAGE_SUFFIXES:
        candidate = image_dir / f"{stem}{suffix}"
        if candidate.is_file():
            return candidate
    return None


def repair_with_config(labels: np.ndarray, config: RepairConfig) -> RepairResult:
    """Run the profile's recipe unless the config pins the merge settings."""
    if config.upto_passes is None and config.min_size is None:
        return repair_for(config.profile, labels, config.superpixels)

    profile = get_profile(config.profile)
    labels = as_label_map(labels)
    upto_passes = profile.upto_passes if config.upto_passes is None else config.upto_passes
    min_size = config.min_size
    if min_size is None:
        assert_superpixels(config.superpixels)
        height, width = labels.shape
        min_size = profile.min_size(width, height, config.superpixels)
    return repair(labels, upto_passes=upto_passes, min_size=min_size)


def _summary_entry(path: Path, result: RepairResult) -> dict:
    return {
        "labels": str(path),
        "components": result.components,
        "fragments": result.fragments,
        "merges": result.merges,
        "residual": result.residual,
        "superpixels": result.superpixels,
    }


def process_labels(
    inputs: Sequence[str],
    output_dir: str,
    *,
    config: Optional[RepairConfig] = None,
    image_dir: Optional[str] = None,
    save_csv: bool = True,
    save_contours: bool = True,
    verbose: bool = True,
) -> List[dict]:
    config = config or RepairConfig()
    get_profile(config.profile)

    label_files = _collect_label_files(inputs)
    if not label_files:
        raise FileNotFoundError(f"No label files ({', '.join(LABEL_SUFFIXES)}) found in {list(inputs)}")

    images_root = Path(image_dir).expanduser() if image_dir else None
    out_root = Path(output_dir).expanduser()
    out_root.mkdir(parents=True, exist_ok=True)

    summary: List[dict] = []
    for idx, label_path in enumerate(label_files, start=1):
        labels = load_labels(label_path)
        result = repair_with_config(labels, config)
        stem = label_path.stem

        if save_csv:
            save_labels(out_root / f"{stem}.csv", result.labels)

        overlays = {}
        if save_contours:
            canvas = np.zeros(result.labels.shape + (3,), dtype=np.uint8)
            overlays[f"{stem}_contours.png"] = draw_contours(
                canvas, result.labels, color=tuple(config.contour_color)
            )

        image_path = _find_image(images_root, stem)
        if image_path is not None:
            image = cv2.imread(str(image_path))
            if image is None:
                raise FileNotFoundError(f"Unable to load image: {image_path}")
            overlays[f"{stem}_means.png"] = draw_means(image, result.labels)

        if overlays:
            save_overlays(overlays, out_root)

        summary.append(_summary_entry(label_path, result))
        if verbose:
            print(
                f"[{idx}/{len(label_files)}] {label_path.name} "
                f"(components={result.components} fragments={result.fragments} "
                f"merges={result.merges} residual={result.residual} "
                f"superpixels={result.superpixels})"
            )

    with (out_root / "summary.json").open("w", encoding="utf-8") as fh:
        json.dump(summary, fh, indent=2)

    return summary


def _run_plan(args: argparse.Namespace) -> None:
    config = from_json_file(args.config) if args.config else RepairConfig()
    superpixels = config.superpixels if args.superpixels is None else args.superpixels
    fair = args.fair or config.fair
    profile = args.profile
    if profile is None and args.mode is None and args.config:
        profile = config.profile

    if profile:
        plan = plan_for(profile, args.width, args.height, superpixels, fair=fair)
        if plan is None:
            print(f"{profile}: back end chooses its own initialization")
            return
    else:
        plan = plan_region(args.width, args.height, superpixels, mode=args.mode or "square", fair=fair)

    print(
        f"region_height={plan.region_height} region_width={plan.region_width} "
        f"levels={plan.levels} coarsest_count={plan.coarsest_count(args.width, args.height)}"
    )


def _run_profiles(args: argparse.Namespace) -> None:
    for name in list_profiles():
        profile = get_profile(name)
        print(
            f"{name}: geometry={profile.geometry or '-'} fair={profile.supports_fair} "
            f"upto_passes={profile.upto_passes}"
        )


def _run_repair(args: argparse.Namespace) -> None:
    config = from_json_file(args.config) if args.config else RepairConfig()
    config = config.merged(
        profile=args.profile,
        superpixels=args.superpixels,
        min_size=args.min_size,
        upto_passes=args.upto_passes,
    )
    process_labels(
        args.inputs,
        args.output,
        config=config,
        image_dir=args.images,
        save_csv=args.save_csv,
        save_contours=args.save_contours,
        verbose=not args.quiet,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Superpixel label map repair, planning and visualization utilities."
    )
    subparsers = parser.add_subparsers(dest="command")

    repair_parser = subparsers.add_parser("repair", help="Repair raw label maps.")
    repair_parser.add_argument("inputs", nargs="+", help="Label files (.csv/.npy) or directories.")
    repair_parser.add_argument(
        "-o",
        "--output",
        default="output",
        help="Directory where repaired labels and overlays are written.",
    )
    repair_parser.add_argument("--images", default=None, help="Directory with the source images.")
    repair_parser.add_argument("--config", default=None, help="JSON file with repair settings.")
    repair_parser.add_argument("--profile", default=None, choices=list_profiles())
    repair_parser.add_argument("-s", "--superpixels", type=int, default=None)
    repair_parser.add_argument("--min-size", type=int, default=None)
    repair_parser.add_argument("--upto-passes", type=int, default=None)
    repair_parser.add_argument("--no-csv", action="store_false", dest="save_csv")
    repair_parser.add_argument("--no-contours", action="store_false", dest="save_contours")
    repair_parser.add_argument("--quiet", action="store_true")

    plan_parser = subparsers.add_parser("plan", help="Compute initial region geometry.")
    plan_parser.add_argument("--width", type=int, required=True)
    plan_parser.add_argument("--height", type=int, required=True)
    plan_parser.add_argument("-s", "--superpixels", type=int, default=None)
    plan_parser.add_argument("--profile", default=None, choices=list_profiles())
    plan_parser.add_argument(
        "--mode",
        default=None,
        choices=("square", "rect", "levels"),
        help="Plan geometry when no profile is given (default: square).",
    )
    plan_parser.add_argument(
        "-f",
        "--fair",
        action="store_true",
        help="Use square blocks for a fair comparison between algorithms.",
    )
    plan_parser.add_argument(
        "--config",
        default=None,
        help="JSON file supplying profile, superpixels and fair defaults.",
    )

    subparsers.add_parser("profiles", help="List supported back ends.")

    return parser


def _inject_default_command(argv: List[str]) -> List[str]:
    if not argv:
        return argv
    first = argv[0]
    if first in COMMANDS or first in {"-h", "--help"}:
        return argv
    return ["repair", *argv]


def main(argv: List[str] | None = None) -> None:
    args_list = sys.argv[1:] if argv is None else argv
    parser = build_parser()
    parsed = parser.parse_args(_inject_default_command(args_list))

    if parsed.command == "repair":
        _run_repair(parsed)
        return

    if parsed.command == "plan":
        _run_plan(parsed)
        return

    if parsed.command == "profiles":
        _run_profiles(parsed)
        return

    parser.print_help()


__all__ = ["process_labels", "repair_with_config", "main"]
