from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

import numpy as np

from tapfocus.contracts import _require
from tapfocus.core.ray_match import Ray
from tapfocus.core.screen import pixel_to_ndc


@dataclass(frozen=True)
class PerspectiveCamera:
    """
    Look-at perspective camera as used by the viewer (right-handed, looking down -z in view space).

    `fov_y_deg` is the full vertical field of view; `aspect` is width / height.
    """

    position: tuple[float, float, float]
    target: tuple[float, float, float]
    up: tuple[float, float, float] = (0.0, 1.0, 0.0)
    fov_y_deg: float = 60.0
    aspect: float = 1.0

    def __post_init__(self) -> None:
        _require(0.0 < float(self.fov_y_deg) < 180.0, "fov_y_deg must be in (0, 180)")
        _require(float(self.aspect) > 0.0, "aspect must be > 0")
        # Raises on a degenerate basis.
        self.basis()

    def basis(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Returns (right, up, forward) unit vectors in world space."""
        pos = np.asarray(self.position, dtype=np.float64).reshape(3)
        tgt = np.asarray(self.target, dtype=np.float64).reshape(3)
        up = np.asarray(self.up, dtype=np.float64).reshape(3)

        fwd = tgt - pos
        n = np.linalg.norm(fwd)
        _require(n > 1e-12, "camera target must differ from position")
        fwd = fwd / n

        right = np.cross(fwd, up)
        n = np.linalg.norm(right)
        _require(n > 1e-12, "camera up must not be parallel to the view direction")
        right = right / n
        true_up = np.cross(right, fwd)
        return right, true_up, fwd

    def ray_from_ndc(self, ndc_x: float, ndc_y: float) -> Ray:
        right, up, fwd = self.basis()
        tan_half = math.tan(math.radians(float(self.fov_y_deg)) / 2.0)
        d = fwd + right * (ndc_x * tan_half * float(self.aspect)) + up * (ndc_y * tan_half)
        d = d / np.linalg.norm(d)
        return Ray(
            origin=tuple(float(v) for v in self.position),
            direction=(float(d[0]), float(d[1]), float(d[2])),
        )

    def project_to_ndc(self, point) -> tuple[float, float, float] | None:
        """
        Project a world point to (ndc_x, ndc_y, depth). Depth is the distance along the view axis.
        Returns None for points on or behind the camera plane.
        """
        right, up, fwd = self.basis()
        v = np.asarray(point, dtype=np.float64).reshape(3) - np.asarray(self.position, dtype=np.float64)
        depth = float(v @ fwd)
        if depth <= 0.0:
            return None
        tan_half = math.tan(math.radians(float(self.fov_y_deg)) / 2.0)
        ndc_x = float(v @ right) / (depth * tan_half * float(self.aspect))
        ndc_y = float(v @ up) / (depth * tan_half)
        return ndc_x, ndc_y, depth


def ray_from_tap(
    camera: PerspectiveCamera,
    pointer_x: float,
    pointer_y: float,
    viewport_width: float,
    viewport_height: float,
) -> Ray:
    """Ray through the tapped pixel."""
    _require(viewport_width > 0 and viewport_height > 0, "viewport size must be > 0")
    ndc_x, ndc_y = pixel_to_ndc(pointer_x, pointer_y, viewport_width, viewport_height)
    return camera.ray_from_ndc(ndc_x, ndc_y)


def parse_camera(data: dict[str, Any]) -> PerspectiveCamera:
    """Camera from a JSON object: {"position":[..], "target":[..], "up":[..], "fov_y_deg":.., "aspect":..}."""
    try:
        position = tuple(float(v) for v in data["position"])
        target = tuple(float(v) for v in data["target"])
    except KeyError as e:
        raise ValueError(f"camera missing key: {e}") from e
    up = tuple(float(v) for v in data.get("up", (0.0, 1.0, 0.0)))
    _require(len(position) == 3 and len(target) == 3 and len(up) == 3, "camera vectors must have 3 components")
    return PerspectiveCamera(
        position=position,  # type: ignore[arg-type]
        target=target,  # type: ignore[arg-type]
        up=up,  # type: ignore[arg-type]
        fov_y_deg=float(data.get("fov_y_deg", 60.0)),
        aspect=float(data.get("aspect", 1.0)),
    )
