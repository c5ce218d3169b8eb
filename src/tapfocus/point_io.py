from __future__ import annotations

from pathlib import Path

import numpy as np

from tapfocus.contracts import _require


def save_encoded_points(path: Path, encoded: np.ndarray, point_count: int | None = None) -> Path:
    """
    Save a half-precision point buffer as NPZ:

      points (uint16, (N,3)) + point_count (int64 scalar)

    `point_count` may be smaller than N when the tail of the buffer is unused capacity.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    pts = np.asarray(encoded, dtype=np.uint16).reshape(-1, 3)
    n = int(pts.shape[0]) if point_count is None else int(point_count)
    _require(0 <= n <= pts.shape[0], "point_count must be within the buffer")
    np.savez_compressed(path, points=pts, point_count=np.int64(n))
    return path


def load_encoded_points(path: Path) -> tuple[np.ndarray, int]:
    """
    Load (encoded, point_count) from `.npz` (keys: points, optional point_count) or `.npy`.
    """
    path = Path(path)
    if path.suffix.lower() == ".npy":
        pts = np.load(str(path))
        count = None
    else:
        with np.load(str(path)) as z:
            if "points" not in z:
                raise ValueError(f"{path} missing key: points")
            pts = np.asarray(z["points"])
            count = int(z["point_count"]) if "point_count" in z else None

    _require(pts.dtype == np.uint16, f"{path}: encoded points must be uint16 half-precision bits, got {pts.dtype}")
    flat = pts.reshape(-1)
    _require(flat.size % 3 == 0, f"{path}: encoded buffer length must be a multiple of 3")
    n = flat.size // 3 if count is None else count
    return flat.reshape(-1, 3), n
