from __future__ import annotations

import math


def ndc_to_pixel(ndc_x: float, ndc_y: float, viewport_width: float, viewport_height: float) -> tuple[float, float]:
    """
    Map normalized device coordinates to viewport pixels.

    Convention: NDC y up, pixel y down; (-1, 1) is the top-left pixel corner.
    """
    x_px = (ndc_x + 1.0) / 2.0 * viewport_width
    y_px = (1.0 - ndc_y) / 2.0 * viewport_height
    return x_px, y_px


def pixel_to_ndc(x_px: float, y_px: float, viewport_width: float, viewport_height: float) -> tuple[float, float]:
    """Inverse of `ndc_to_pixel`."""
    ndc_x = x_px / viewport_width * 2.0 - 1.0
    ndc_y = 1.0 - y_px / viewport_height * 2.0
    return ndc_x, ndc_y


def compute_screen_distance_px(
    ndc_x: float,
    ndc_y: float,
    viewport_width: float,
    viewport_height: float,
    pointer_x: float,
    pointer_y: float,
) -> float:
    x_px, y_px = ndc_to_pixel(ndc_x, ndc_y, viewport_width, viewport_height)
    return math.hypot(x_px - pointer_x, y_px - pointer_y)
