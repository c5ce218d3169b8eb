from tapfocus.core.half_float import decode_float16, decode_float16_array, encode_float16
from tapfocus.core.ray_match import Ray, RayMatch, find_closest_sample_to_ray
from tapfocus.core.sampling import AxisSigns, FocusSamples, sample_points_for_focus
from tapfocus.core.screen import compute_screen_distance_px
from tapfocus.focus import FocusOutcome, FocusPick, evaluate_focus, pick_focus_point

__all__ = [
    "decode_float16",
    "decode_float16_array",
    "encode_float16",
    "AxisSigns",
    "FocusSamples",
    "sample_points_for_focus",
    "Ray",
    "RayMatch",
    "find_closest_sample_to_ray",
    "compute_screen_distance_px",
    "FocusPick",
    "FocusOutcome",
    "pick_focus_point",
    "evaluate_focus",
]
