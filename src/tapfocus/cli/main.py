from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from tapfocus.config import FocusConfig, load_focus_config
from tapfocus.contracts import FocusContractError
from tapfocus.core.camera import parse_camera, ray_from_tap
from tapfocus.core.ray_match import Ray
from tapfocus.core.screen import compute_screen_distance_px
from tapfocus.focus import evaluate_focus
from tapfocus.point_io import load_encoded_points
from tapfocus.snapshot import (
    TapTransitionError,
    TransitionLimits,
    focus_moved,
    load_tap_transition,
    validate_tap_transition,
)

log = logging.getLogger(__name__)


def _resolve_ray(args: argparse.Namespace) -> Ray:
    if args.camera is not None:
        if args.tap is None or args.viewport is None:
            raise FocusContractError("--camera requires --tap X Y and --viewport W H")
        camera = parse_camera(json.loads(args.camera.read_text(encoding="utf-8")))
        return ray_from_tap(camera, args.tap[0], args.tap[1], args.viewport[0], args.viewport[1])
    if args.origin is None or args.direction is None:
        raise FocusContractError("either --origin/--direction or --camera/--tap/--viewport is required")
    return Ray(origin=tuple(args.origin), direction=tuple(args.direction))


def _run_pick(args: argparse.Namespace) -> int:
    config = load_focus_config(args.config) if args.config is not None else FocusConfig()
    if args.target_samples is not None:
        config = FocusConfig(
            target_sample_count=args.target_samples,
            max_distance_sq=config.max_distance_sq,
            axis_signs=config.axis_signs,
            halo_max_px=config.halo_max_px,
        )
    encoded, point_count = load_encoded_points(args.points)
    ray = _resolve_ray(args)
    log.info("picking among %d points (target_sample_count=%d)", point_count, config.target_sample_count)

    outcome = evaluate_focus(encoded, point_count, ray, config)
    report: dict = {"ray": {"origin": list(ray.origin), "direction": list(ray.direction)}}
    if outcome.pick is None:
        report["match"] = None
        report["rejected_reason"] = outcome.rejected_reason
    else:
        pick = outcome.pick
        report["match"] = {
            "point": [float(v) for v in pick.point],
            "point_index": int(pick.point_index),
            "sample_offset": int(pick.match.sample_offset),
            "distance_sq": float(pick.match.distance_sq),
            "ray_distance": float(pick.match.ray_distance),
            "stride": int(pick.stride),
            "sampled_point_count": int(pick.sampled_point_count),
        }
    print(json.dumps(report, indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="tapfocus")
    parser.add_argument("--log-level", type=str, default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="cmd", required=True)

    pick = sub.add_parser("pick", help="Select the point a tap ray targets in a half-precision point buffer.")
    pick.add_argument("points", type=Path, help="Encoded points (.npz with key 'points', or .npy uint16).")
    pick.add_argument("--config", type=Path, default=None, help="Focus config JSON (tapfocus.config.v0).")
    pick.add_argument("--target-samples", type=int, default=None, help="Override sampling.target_sample_count.")
    pick.add_argument("--origin", type=float, nargs=3, default=None, metavar=("X", "Y", "Z"))
    pick.add_argument("--direction", type=float, nargs=3, default=None, metavar=("X", "Y", "Z"))
    pick.add_argument("--camera", type=Path, default=None, help="Camera JSON (position, target, up, fov_y_deg, aspect).")
    pick.add_argument("--tap", type=float, nargs=2, default=None, metavar=("X", "Y"), help="Tap position in pixels.")
    pick.add_argument("--viewport", type=float, nargs=2, default=None, metavar=("W", "H"))

    dist = sub.add_parser("screen-distance", help="Pixel distance between an NDC position and a pointer.")
    dist.add_argument("--ndc", type=float, nargs=2, required=True, metavar=("X", "Y"))
    dist.add_argument("--viewport", type=float, nargs=2, required=True, metavar=("W", "H"))
    dist.add_argument("--pointer", type=float, nargs=2, required=True, metavar=("X", "Y"))

    check = sub.add_parser("check-transition", help="Validate a recorded tap-focus transition (JSON snapshots).")
    check.add_argument("transition", type=Path)
    check.add_argument("--config", type=Path, default=None, help="Focus config JSON; provides feedback.halo_max_px.")
    check.add_argument("--halo-max-px", type=float, default=None, help="Override the halo placement tolerance.")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.cmd == "pick":
        try:
            return _run_pick(args)
        except (ValueError, FileNotFoundError) as e:
            print(f"error: {e}", file=sys.stderr)
            return 1

    if args.cmd == "screen-distance":
        d = compute_screen_distance_px(
            args.ndc[0], args.ndc[1], args.viewport[0], args.viewport[1], args.pointer[0], args.pointer[1]
        )
        print(f"{d:.6f}")
        return 0

    if args.cmd == "check-transition":
        try:
            halo_max_px = args.halo_max_px
            if halo_max_px is None:
                config = load_focus_config(args.config) if args.config is not None else FocusConfig()
                halo_max_px = config.halo_max_px
            limits = TransitionLimits(halo_max_px=halo_max_px)
            transition = load_tap_transition(args.transition)
            validate_tap_transition(transition, limits)
        except (ValueError, FileNotFoundError, TapTransitionError) as e:
            print(f"error: {e}", file=sys.stderr)
            return 1
        moved = focus_moved(transition.before, transition.after)
        print(f"{transition.pointer_type} focus moved target by {moved:.4f} at ({transition.tap_x:g}, {transition.tap_y:g})")
        return 0

    raise AssertionError(f"Unhandled cmd: {args.cmd}")


if __name__ == "__main__":
    raise SystemExit(main())
