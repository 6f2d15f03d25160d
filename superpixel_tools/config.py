from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional, Tuple


@dataclass
class RepairConfig:
    profile: str = "slic"
    superpixels: int = 400
    fair: bool = False
    min_size: Optional[int] = None
    upto_passes: Optional[int] = None
    contour_color: Tuple[int, int, int] = field(default=(0, 0, 255))

    def merged(self, **overrides: object) -> "RepairConfig":
        """Return a copy with every non-None override applied."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update({key: value for key, value in overrides.items() if value is not None})
        return RepairConfig(**values)


def from_json_file(path: str | Path) -> RepairConfig:
    file_path = Path(path)
    with file_path.open("r", encoding="utf-8") as fp:
        payload = json.load(fp)

    known = {f.name for f in fields(RepairConfig)}
    unknown = sorted(set(payload) - known)
    if unknown:
        raise ValueError(f"Unknown configuration keys in {path}: {unknown}")

    if "contour_color" in payload:
        payload["contour_color"] = tuple(int(channel) for channel in payload["contour_color"])
    return RepairConfig(**payload)


__all__ = ["RepairConfig", "from_json_file"]
