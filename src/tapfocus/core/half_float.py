from __future__ import annotations

import numpy as np

from tapfocus.contracts import _require


def decode_float16(bits: int) -> float:
    """
    Decode one IEEE-754 half-precision bit pattern (1 sign, 5 exponent, 10 mantissa bits).

    Every 16-bit pattern is valid: exponent 0 gives signed zero or a subnormal,
    exponent 31 gives +/-inf (mantissa 0) or NaN.
    """
    bits = int(bits)
    _require(0 <= bits <= 0xFFFF, f"half-precision pattern out of range: {bits:#x}")

    sign = -1.0 if bits & 0x8000 else 1.0
    exponent = (bits >> 10) & 0x1F
    mantissa = bits & 0x03FF

    if exponent == 0:
        # Subnormal: mantissa * 2^-24 (exact in float64), keeps the sign of zero.
        return sign * mantissa * 2.0**-24
    if exponent == 0x1F:
        return sign * float("inf") if mantissa == 0 else float("nan")
    return sign * (1.0 + mantissa / 1024.0) * 2.0 ** (exponent - 15)


def decode_float16_array(bits: np.ndarray) -> np.ndarray:
    """Vectorized `decode_float16` for a whole buffer; returns float64 with the input shape."""
    arr = np.asarray(bits)
    if arr.dtype != np.uint16:
        _require(arr.size == 0 or (int(arr.min()) >= 0 and int(arr.max()) <= 0xFFFF), "half-precision patterns out of range")
        arr = arr.astype(np.uint16)
    return arr.view(np.float16).astype(np.float64)


def encode_float16(value: float) -> int:
    """Round-to-nearest-even half-precision encoding of `value` (NaN -> 0x7e00)."""
    if np.isnan(value):
        return 0x7E00
    with np.errstate(over="ignore"):
        return int(np.array([value], dtype=np.float16).view(np.uint16)[0])


def encode_float16_array(values: np.ndarray) -> np.ndarray:
    with np.errstate(over="ignore"):
        return np.asarray(values, dtype=np.float64).astype(np.float16).view(np.uint16)
