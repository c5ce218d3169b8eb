from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from tapfocus.contracts import FocusContractError
from tapfocus.core.sampling import DEFAULT_AXIS_SIGNS, AxisSigns

SCHEMA_VERSION = "tapfocus.config.v0"


class FocusConfigError(ValueError):
    pass


@dataclass(frozen=True)
class FocusConfig:
    target_sample_count: int = 60000
    max_distance_sq: float = math.inf
    axis_signs: AxisSigns = field(default=DEFAULT_AXIS_SIGNS)
    # On-screen focus indicator must land within this many pixels of the tap.
    halo_max_px: float = 36.0


def _require(cond: bool, msg: str) -> None:
    if not cond:
        raise FocusConfigError(msg)


def _number(cast, raw: Any, name: str):
    _require(not isinstance(raw, bool), f"{name} must be a number")
    try:
        return cast(raw)
    except (TypeError, ValueError) as e:
        raise FocusConfigError(f"{name} must be a number, got {raw!r}") from e


def load_focus_config(path: Path) -> FocusConfig:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return parse_focus_config(data)


def parse_focus_config(data: dict[str, Any]) -> FocusConfig:
    _require(isinstance(data, dict), "config must be a JSON object")
    schema_version = data.get("schema_version")
    _require(schema_version == SCHEMA_VERSION, f"schema_version must be {SCHEMA_VERSION}")

    sampling = data.get("sampling", {})
    matching = data.get("matching", {})
    feedback = data.get("feedback", {})
    for name, section in (("sampling", sampling), ("matching", matching), ("feedback", feedback)):
        _require(isinstance(section, dict), f"{name} must be a JSON object")

    target = _number(int, sampling.get("target_sample_count", FocusConfig.target_sample_count), "sampling.target_sample_count")
    _require(target >= 1, "sampling.target_sample_count must be >= 1")

    signs_raw = sampling.get("axis_signs", [DEFAULT_AXIS_SIGNS.x, DEFAULT_AXIS_SIGNS.y, DEFAULT_AXIS_SIGNS.z])
    _require(isinstance(signs_raw, (list, tuple)) and len(signs_raw) == 3, "sampling.axis_signs must be [sx,sy,sz]")
    try:
        axis_signs = AxisSigns.from_sequence(signs_raw)
    except (FocusContractError, TypeError, ValueError) as e:
        raise FocusConfigError(f"sampling.axis_signs: {e}") from e

    limit_raw = matching.get("max_distance_sq")
    max_distance_sq = math.inf if limit_raw is None else _number(float, limit_raw, "matching.max_distance_sq")
    _require(max_distance_sq >= 0.0, "matching.max_distance_sq must be >= 0 (or null for unbounded)")

    halo_max_px = _number(float, feedback.get("halo_max_px", FocusConfig.halo_max_px), "feedback.halo_max_px")
    _require(halo_max_px > 0.0, "feedback.halo_max_px must be > 0")

    return FocusConfig(
        target_sample_count=target,
        max_distance_sq=max_distance_sq,
        axis_signs=axis_signs,
        halo_max_px=halo_max_px,
    )


def focus_config_to_dict(config: FocusConfig) -> dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "sampling": {
            "target_sample_count": int(config.target_sample_count),
            "axis_signs": [config.axis_signs.x, config.axis_signs.y, config.axis_signs.z],
        },
        "matching": {
            "max_distance_sq": None if math.isinf(config.max_distance_sq) else float(config.max_distance_sq),
        },
        "feedback": {"halo_max_px": float(config.halo_max_px)},
    }
