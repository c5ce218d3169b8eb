"""
Read-only viewer state snapshots and the checks applied to a recorded tap-focus transition.

A transition is four snapshots around one tap: `before` the tap, `early` (~60 ms after),
`mid` (~180 ms) and `after` the animation window (~460 ms).
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any


class TapTransitionError(AssertionError):
    pass


@dataclass(frozen=True)
class FocusState:
    transition_active: bool
    success_count: int
    active_loader_point_count: int = 0
    last_rejected_reason: str | None = None


@dataclass(frozen=True)
class CameraState:
    target: tuple[float, float, float]
    position: tuple[float, float, float] | None = None


@dataclass(frozen=True)
class FeedbackState:
    active: bool
    center_x: float
    center_y: float
    opacity: float
    display: str = "block"

    @property
    def visible(self) -> bool:
        return self.active or self.opacity > 0.02


@dataclass(frozen=True)
class ViewerSnapshot:
    focus: FocusState
    camera: CameraState
    feedback: FeedbackState | None = None


@dataclass(frozen=True)
class TapTransition:
    pointer_type: str
    tap_x: float
    tap_y: float
    before: ViewerSnapshot
    early: ViewerSnapshot
    mid: ViewerSnapshot
    after: ViewerSnapshot


@dataclass(frozen=True)
class TransitionLimits:
    min_move: float = 0.01
    early_fraction: float = 0.95
    min_progress: float = 0.001
    halo_max_px: float = 36.0
    min_feedback_travel_px: float = 2.0


def _vec3(raw: Any, name: str) -> tuple[float, float, float]:
    if isinstance(raw, dict):
        vals = (raw.get("x"), raw.get("y"), raw.get("z"))
    elif isinstance(raw, (list, tuple)) and len(raw) == 3:
        vals = tuple(raw)
    else:
        raise ValueError(f"{name} must be {{x,y,z}} or [x,y,z]")
    if any(v is None for v in vals):
        raise ValueError(f"{name} is missing a component")
    return float(vals[0]), float(vals[1]), float(vals[2])


def parse_viewer_snapshot(data: dict[str, Any]) -> ViewerSnapshot:
    """Parse the JSON state exposed by the viewer (camelCase keys)."""
    try:
        focus_raw = data["focus"]
        camera_raw = data["camera"]
    except KeyError as e:
        raise ValueError(f"snapshot missing key: {e}") from e

    focus = FocusState(
        transition_active=bool(focus_raw.get("transitionActive", False)),
        success_count=int(focus_raw.get("successCount", 0)),
        active_loader_point_count=int(focus_raw.get("activeLoaderPointCount", 0)),
        last_rejected_reason=focus_raw.get("lastRejectedReason") or None,
    )
    position_raw = camera_raw.get("position")
    camera = CameraState(
        target=_vec3(camera_raw.get("target"), "camera.target"),
        position=None if position_raw is None else _vec3(position_raw, "camera.position"),
    )

    feedback = None
    fb = data.get("feedback")
    if fb is not None:
        feedback = FeedbackState(
            active=bool(fb.get("active", False)),
            center_x=float(fb["centerX"]),
            center_y=float(fb["centerY"]),
            opacity=float(fb.get("opacity", 0.0)),
            display=str(fb.get("display", "block")),
        )
    return ViewerSnapshot(focus=focus, camera=camera, feedback=feedback)


def parse_tap_transition(data: dict[str, Any]) -> TapTransition:
    tap = data.get("tap", {})
    try:
        return TapTransition(
            pointer_type=str(data.get("pointerType", "pointer")),
            tap_x=float(tap["x"]),
            tap_y=float(tap["y"]),
            before=parse_viewer_snapshot(data["before"]),
            early=parse_viewer_snapshot(data["early"]),
            mid=parse_viewer_snapshot(data["mid"]),
            after=parse_viewer_snapshot(data["after"]),
        )
    except KeyError as e:
        raise ValueError(f"transition missing key: {e}") from e


def load_tap_transition(path: Path) -> TapTransition:
    return parse_tap_transition(json.loads(Path(path).read_text(encoding="utf-8")))


def focus_moved(before: ViewerSnapshot, after: ViewerSnapshot) -> float:
    """Distance travelled by the camera target between two snapshots."""
    a, b = after.camera.target, before.camera.target
    return math.hypot(a[0] - b[0], a[1] - b[1], a[2] - b[2])


def did_focus(before: ViewerSnapshot, after: ViewerSnapshot, min_move: float = 0.01) -> bool:
    return after.focus.success_count > before.focus.success_count and focus_moved(before, after) > min_move


def validate_tap_transition(transition: TapTransition, limits: TransitionLimits | None = None) -> None:
    """
    Check that a tap produced an animated (not instantaneous) focus move and that the
    on-screen indicator appeared at the tap and followed the focus point.
    Raises TapTransitionError describing the first failed expectation.
    """
    lim = limits if limits is not None else TransitionLimits()
    who = transition.pointer_type
    before, early, mid, after = transition.before, transition.early, transition.mid, transition.after

    total_move = focus_moved(before, after)
    early_move = focus_moved(before, early)
    mid_move = focus_moved(before, mid)

    if not (total_move > lim.min_move):
        raise TapTransitionError(f"{who} tap focus move too small ({total_move:.5f}).")
    # An early frame already at the final target means a hard jump.
    if not (early_move < total_move * lim.early_fraction):
        raise TapTransitionError(
            f"{who} tap focus appears non-animated (early={early_move:.5f}, total={total_move:.5f})."
        )
    if not (early.focus.transition_active or mid.focus.transition_active):
        raise TapTransitionError(f"{who} tap focus transition flag was never active.")
    if not (mid_move > early_move + lim.min_progress):
        raise TapTransitionError(
            f"{who} tap focus did not progress smoothly (early={early_move:.5f}, mid={mid_move:.5f})."
        )
    if after.focus.transition_active:
        raise TapTransitionError(f"{who} tap focus transition did not settle after animation window.")

    fb = early.feedback
    if fb is None:
        raise TapTransitionError(f"{who} tap feedback halo element was missing.")
    halo_distance = math.hypot(fb.center_x - transition.tap_x, fb.center_y - transition.tap_y)
    if halo_distance > lim.halo_max_px:
        raise TapTransitionError(f"{who} tap feedback halo was misplaced (distance={halo_distance:.2f}px).")
    if not fb.visible:
        raise TapTransitionError(
            f"{who} tap feedback halo was not visible (active={fb.active}, opacity={fb.opacity}, display={fb.display})."
        )

    mid_fb = mid.feedback
    if mid_fb is None:
        raise TapTransitionError(f"{who} mid-transition feedback snapshot missing.")
    travel = math.hypot(mid_fb.center_x - fb.center_x, mid_fb.center_y - fb.center_y)
    if travel < lim.min_feedback_travel_px:
        raise TapTransitionError(f"{who} feedback ring did not track 3D focus point (travel={travel:.3f}px).")
