from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def percentage(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return round_half_up(part / whole * 100)


def mean_rounded(values: list[int]) -> int:
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


__all__ = ["mean_rounded", "percentage", "round_half_up"]
