from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from tapfocus.contracts import _require

DIRECTION_EPS = 1e-12
TIE_EPS = 1e-12


@dataclass(frozen=True)
class Ray:
    origin: tuple[float, float, float]
    direction: tuple[float, float, float]

    @classmethod
    def through(cls, origin, target) -> "Ray":
        """Ray from `origin` towards `target`."""
        o = np.asarray(origin, dtype=np.float64).reshape(3)
        t = np.asarray(target, dtype=np.float64).reshape(3)
        return cls(origin=tuple(float(v) for v in o), direction=tuple(float(v) for v in (t - o)))


@dataclass(frozen=True)
class RayMatch:
    sample_offset: int
    distance_sq: float
    ray_distance: float

    @property
    def point_index(self) -> int:
        return self.sample_offset // 3

    def point(self, samples: np.ndarray) -> np.ndarray:
        flat = np.asarray(samples, dtype=np.float64).reshape(-1)
        return flat[self.sample_offset : self.sample_offset + 3].copy()


def _vec3(v, name: str) -> tuple[float, float, float]:
    arr = np.asarray(v, dtype=np.float64).reshape(-1)
    _require(arr.size == 3, f"{name} must have 3 components")
    return float(arr[0]), float(arr[1]), float(arr[2])


def find_closest_sample_to_ray(
    samples: np.ndarray,
    ray_origin,
    ray_direction,
    max_distance_sq: float = math.inf,
) -> RayMatch | None:
    """
    Pick the sample closest to the ray line, in front of the origin, within `max_distance_sq`.

    Candidates are ranked by squared perpendicular distance; distances within 1e-12 of
    each other are ranked by distance along the ray (closer to the viewer wins). The
    ranking is resolved in buffer order, matching a plain sequential scan.
    Returns None for a degenerate direction or when nothing qualifies.
    """
    flat = np.asarray(samples, dtype=np.float64).reshape(-1)
    _require(flat.size % 3 == 0, f"sample buffer length must be a multiple of 3, got {flat.size}")

    ox, oy, oz = _vec3(ray_origin, "ray_origin")
    rx, ry, rz = _vec3(ray_direction, "ray_direction")
    length = math.hypot(rx, ry, rz)
    if not (length > DIRECTION_EPS):
        return None
    dx, dy, dz = rx / length, ry / length, rz / length

    if flat.size == 0:
        return None
    pts = flat.reshape(-1, 3)
    px, py, pz = pts[:, 0], pts[:, 1], pts[:, 2]

    with np.errstate(invalid="ignore", over="ignore"):
        vx = px - ox
        vy = py - oy
        vz = pz - oz
        ray_distance = vx * dx + vy * dy + vz * dz

        # Closest point on the ray line, then the perpendicular offset.
        ddx = px - (ox + dx * ray_distance)
        ddy = py - (oy + dy * ray_distance)
        ddz = pz - (oz + dz * ray_distance)
        distance_sq = ddx * ddx + ddy * ddy + ddz * ddz

        valid = (ray_distance > 0) & (distance_sq <= max_distance_sq)
    candidates = np.flatnonzero(valid)
    if candidates.size == 0:
        return None

    # The sequential tie rule can only drift one TIE_EPS per accepted candidate above the
    # minimum, so anything outside this window can never be the final winner.
    window = float(distance_sq[candidates].min()) + TIE_EPS * (candidates.size + 1)
    near = candidates[distance_sq[candidates] <= window]

    best = -1
    best_d2 = math.inf
    best_t = math.inf
    for i in near.tolist():
        d2 = float(distance_sq[i])
        t = float(ray_distance[i])
        if d2 < best_d2 or (abs(d2 - best_d2) <= TIE_EPS and t < best_t):
            best, best_d2, best_t = i, d2, t

    # Overflowed distances (inf) never win the scan.
    if best < 0:
        return None
    return RayMatch(sample_offset=best * 3, distance_sq=best_d2, ray_distance=best_t)
