import json
import math
from pathlib import Path

import pytest

from tapfocus.config import FocusConfigError, focus_config_to_dict, load_focus_config, parse_focus_config
from tapfocus.core.sampling import AxisSigns


def test_parse_focus_config_ok():
    cfg = parse_focus_config(
        {
            "schema_version": "tapfocus.config.v0",
            "sampling": {"target_sample_count": 20000, "axis_signs": [1, -1, 1]},
            "matching": {"max_distance_sq": 0.04},
            "feedback": {"halo_max_px": 24},
        }
    )
    assert cfg.target_sample_count == 20000
    assert cfg.axis_signs == AxisSigns(1, -1, 1)
    assert cfg.max_distance_sq == 0.04
    assert cfg.halo_max_px == 24.0


def test_defaults_and_unbounded_distance():
    cfg = parse_focus_config({"schema_version": "tapfocus.config.v0", "matching": {"max_distance_sq": None}})
    assert cfg.target_sample_count == 60000
    assert math.isinf(cfg.max_distance_sq)
    assert cfg.axis_signs == AxisSigns(-1, -1, 1)


def test_config_roundtrip_through_file(tmp_path: Path):
    cfg = parse_focus_config({"schema_version": "tapfocus.config.v0", "sampling": {"target_sample_count": 5}})
    path = tmp_path / "focus.json"
    path.write_text(json.dumps(focus_config_to_dict(cfg)), encoding="utf-8")
    assert load_focus_config(path) == cfg


@pytest.mark.parametrize(
    "data",
    [
        {"schema_version": "tapfocus.config.v1"},
        {"schema_version": "tapfocus.config.v0", "sampling": {"target_sample_count": 0}},
        {"schema_version": "tapfocus.config.v0", "sampling": {"axis_signs": [1, 1]}},
        {"schema_version": "tapfocus.config.v0", "sampling": {"axis_signs": [1, 0, 1]}},
        {"schema_version": "tapfocus.config.v0", "matching": {"max_distance_sq": -1}},
        {"schema_version": "tapfocus.config.v0", "feedback": {"halo_max_px": 0}},
        {"schema_version": "tapfocus.config.v0", "sampling": 5},
        {"schema_version": "tapfocus.config.v0", "sampling": {"target_sample_count": [1]}},
        {"schema_version": "tapfocus.config.v0", "sampling": {"axis_signs": ["a", 1, 1]}},
        {"schema_version": "tapfocus.config.v0", "matching": {"max_distance_sq": "far"}},
        {"schema_version": "tapfocus.config.v0", "feedback": {"halo_max_px": {}}},
    ],
)
def test_parse_focus_config_rejects_invalid(data):
    with pytest.raises(FocusConfigError):
        parse_focus_config(data)
