from __future__ import annotations


class FocusContractError(ValueError):
    """Raised when a caller hands the kernel an inconsistent buffer, count or camera."""


def _require(cond: bool, msg: str) -> None:
    if not cond:
        raise FocusContractError(msg)
