"""
Tap-to-focus pipeline: decimate the encoded cloud, then pick the sample nearest to the tap ray.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Literal

import numpy as np

from tapfocus.config import FocusConfig
from tapfocus.core.ray_match import DIRECTION_EPS, Ray, RayMatch, find_closest_sample_to_ray
from tapfocus.core.sampling import sample_points_for_focus

log = logging.getLogger(__name__)

RejectionReason = Literal["degenerate-ray", "no-candidate"]


@dataclass(frozen=True)
class FocusPick:
    point: np.ndarray  # (3,) engine coordinates of the matched sample
    point_index: int  # index of the source point in the encoded buffer
    match: RayMatch
    stride: int
    sampled_point_count: int


@dataclass(frozen=True)
class FocusOutcome:
    pick: FocusPick | None
    rejected_reason: RejectionReason | None = None

    @property
    def ok(self) -> bool:
        return self.pick is not None


def evaluate_focus(
    encoded: np.ndarray,
    point_count: int,
    ray: Ray,
    config: FocusConfig | None = None,
) -> FocusOutcome:
    cfg = config if config is not None else FocusConfig()

    if not (math.hypot(*ray.direction) > DIRECTION_EPS):
        log.debug("tap rejected: degenerate ray direction %s", ray.direction)
        return FocusOutcome(pick=None, rejected_reason="degenerate-ray")

    sampled = sample_points_for_focus(
        encoded,
        point_count,
        cfg.target_sample_count,
        axis_signs=cfg.axis_signs,
    )
    log.debug(
        "sampled %d/%d points (stride=%d)",
        sampled.sampled_point_count,
        point_count,
        sampled.stride,
    )

    match = find_closest_sample_to_ray(
        sampled.samples,
        ray.origin,
        ray.direction,
        max_distance_sq=cfg.max_distance_sq,
    )
    if match is None:
        log.debug("tap rejected: no sample in front of the ray within max_distance_sq=%g", cfg.max_distance_sq)
        return FocusOutcome(pick=None, rejected_reason="no-candidate")

    pick = FocusPick(
        point=match.point(sampled.samples),
        point_index=match.point_index * sampled.stride,
        match=match,
        stride=sampled.stride,
        sampled_point_count=sampled.sampled_point_count,
    )
    log.debug(
        "tap selected point %d (distance_sq=%.6g, ray_distance=%.6g)",
        pick.point_index,
        match.distance_sq,
        match.ray_distance,
    )
    return FocusOutcome(pick=pick)


def pick_focus_point(
    encoded: np.ndarray,
    point_count: int,
    ray: Ray,
    config: FocusConfig | None = None,
) -> FocusPick | None:
    """Selected point for a tap ray, or None when the tap should be ignored."""
    return evaluate_focus(encoded, point_count, ray, config).pick
