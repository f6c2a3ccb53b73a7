from __future__ import annotations
import math


def round_half_up(value: float) -> int:
    """Round halves towards positive infinity, like JavaScript's Math.round.

    Python's round() uses banker's rounding (round(26.5) == 26); stored scores
    were produced by the browser, which gives 27.
    """
    return int(math.floor(value + 0.5))
