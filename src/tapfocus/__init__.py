from tapfocus import config
from tapfocus.api import (
    Ray,
    compute_screen_distance_px,
    decode_float16,
    find_closest_sample_to_ray,
    pick_focus_point,
    sample_points_for_focus,
)
from tapfocus.contracts import FocusContractError

__all__ = [
    "config",
    "FocusContractError",
    "Ray",
    "decode_float16",
    "sample_points_for_focus",
    "find_closest_sample_to_ray",
    "compute_screen_distance_px",
    "pick_focus_point",
]
