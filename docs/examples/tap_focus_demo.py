"""
Tap-to-focus demo (synthetic point cloud).

This script is meant to be:
- readable,
- runnable (numpy only),
- a worked example of the kernel as an input handler would use it.

It does:
1) build a synthetic cloud and encode it to half precision (as a loader would),
2) simulate taps on a viewport and turn them into rays,
3) pick the focus point with stride sampling + ray matching,
4) check that the point projects back near the tap (where the marker is drawn).
"""

from __future__ import annotations

import argparse
import json
import logging

import numpy as np

from tapfocus.config import FocusConfig
from tapfocus.core.camera import PerspectiveCamera, ray_from_tap
from tapfocus.core.half_float import encode_float16_array
from tapfocus.core.sampling import DEFAULT_AXIS_SIGNS
from tapfocus.core.screen import compute_screen_distance_px
from tapfocus.focus import evaluate_focus


def summarize(vals: list[float]) -> dict[str, float]:
    if not vals:
        return {"n": 0, "p50": float("nan"), "p95": float("nan"), "max": float("nan")}
    v = np.asarray(vals, dtype=np.float64)
    return {
        "n": int(v.size),
        "p50": float(np.quantile(v, 0.50)),
        "p95": float(np.quantile(v, 0.95)),
        "max": float(np.max(v)),
    }


def synthetic_cloud(n: int, seed: int) -> np.ndarray:
    """Noisy sphere shell plus a ground plane, in loader coordinates."""
    rng = np.random.default_rng(seed)
    n_sphere = n // 2
    dirs = rng.normal(size=(n_sphere, 3))
    dirs /= np.linalg.norm(dirs, axis=1, keepdims=True)
    sphere = dirs * (3.0 + rng.normal(scale=0.02, size=(n_sphere, 1)))
    plane = np.stack(
        [rng.uniform(-10, 10, n - n_sphere), np.full(n - n_sphere, 3.5), rng.uniform(-10, 10, n - n_sphere)],
        axis=1,
    )
    return np.concatenate([sphere, plane], axis=0)


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--points", type=int, default=400_000)
    parser.add_argument("--target-samples", type=int, default=60_000)
    parser.add_argument("--viewport", type=int, nargs=2, default=(1440, 900))
    parser.add_argument("--taps", type=int, default=50)
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    cloud = synthetic_cloud(args.points, args.seed)
    encoded = encode_float16_array(cloud)

    w, h = args.viewport
    camera = PerspectiveCamera(position=(0.0, -2.0, 12.0), target=(0.0, 0.0, 0.0), fov_y_deg=50.0, aspect=w / h)
    # Pick radius grows with depth in practice; a fixed one is enough here.
    config = FocusConfig(target_sample_count=args.target_samples, max_distance_sq=0.05**2, axis_signs=DEFAULT_AXIS_SIGNS)

    rng = np.random.default_rng(args.seed + 1)
    marker_px: list[float] = []
    rejected: dict[str, int] = {}
    for _ in range(args.taps):
        tap_x = float(rng.uniform(0.2, 0.8) * w)
        tap_y = float(rng.uniform(0.2, 0.8) * h)
        outcome = evaluate_focus(encoded, args.points, ray_from_tap(camera, tap_x, tap_y, w, h), config)
        if outcome.pick is None:
            rejected[str(outcome.rejected_reason)] = rejected.get(str(outcome.rejected_reason), 0) + 1
            continue
        projected = camera.project_to_ndc(outcome.pick.point)
        if projected is None:
            continue
        marker_px.append(compute_screen_distance_px(projected[0], projected[1], w, h, tap_x, tap_y))

    report = {
        "points": args.points,
        "target_sample_count": args.target_samples,
        "marker_distance_px": summarize(marker_px),
        "rejected": rejected,
    }
    print(json.dumps(report, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
