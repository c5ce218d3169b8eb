from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from tapfocus.contracts import FocusContractError, _require
from tapfocus.core.half_float import decode_float16_array


@dataclass(frozen=True)
class AxisSigns:
    """
    Per-axis sign applied while decoding, mapping loader coordinates to engine coordinates.

    The default is the viewer engine convention: x and y flipped, z kept.
    """

    x: int = -1
    y: int = -1
    z: int = 1

    def __post_init__(self) -> None:
        for name in ("x", "y", "z"):
            if getattr(self, name) not in (-1, 1):
                raise FocusContractError(f"axis sign {name} must be +1 or -1")

    @classmethod
    def from_sequence(cls, signs) -> "AxisSigns":
        _require(len(signs) == 3, "axis signs must be [sx,sy,sz]")
        return cls(*(int(s) for s in signs))

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)


DEFAULT_AXIS_SIGNS = AxisSigns()


@dataclass(frozen=True)
class FocusSamples:
    stride: int
    sampled_point_count: int
    samples: np.ndarray  # flat float64, length 3 * sampled_point_count

    def points(self) -> np.ndarray:
        """View of `samples` shaped (N,3)."""
        return self.samples.reshape(-1, 3)


def sample_stride(point_count: int, target_sample_count: int) -> int:
    """Stride of the decimation walk; the walk never yields more than `target_sample_count` points."""
    _require(point_count > 0, "point_count must be > 0")
    _require(target_sample_count >= 1, "target_sample_count must be >= 1")
    return max(1, math.ceil(point_count / target_sample_count))


def sample_points_for_focus(
    encoded: np.ndarray,
    point_count: int,
    target_sample_count: int,
    axis_signs: AxisSigns = DEFAULT_AXIS_SIGNS,
) -> FocusSamples:
    """
    Decimate a half-precision (x,y,z) buffer into float64 samples for ray picking.

    Points 0, stride, 2*stride, ... below `point_count` are decoded and sign-adjusted.
    Values past `point_count * 3` are never read.
    """
    point_count = int(point_count)
    target_sample_count = int(target_sample_count)
    stride = sample_stride(point_count, target_sample_count)

    flat = np.asarray(encoded).reshape(-1)
    _require(flat.size % 3 == 0, f"encoded buffer length must be a multiple of 3, got {flat.size}")
    _require(
        point_count * 3 <= flat.size,
        f"point_count={point_count} exceeds buffer capacity of {flat.size // 3} points",
    )

    picked = flat[: point_count * 3].reshape(point_count, 3)[::stride]
    samples = decode_float16_array(picked) * axis_signs.as_array()
    sampled = int(picked.shape[0])
    return FocusSamples(stride=stride, sampled_point_count=sampled, samples=samples.reshape(-1))
