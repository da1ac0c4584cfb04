# chess_tracker/core/formatting.py
"""
Small, pure helpers shared by the aggregators and the insight generator for
turning numbers and internal keys into display text.
"""

import re
from decimal import ROUND_HALF_UP, Decimal

_CAPITAL_BOUNDARY = re.compile(r"([A-Z])")


def round_half_up(value: float, places: int = 0) -> float:
    """
    Rounds a value with halves rounded away from zero, so a 12.5% win rate
    displays as 13% rather than the 12% of the built-in `round`.

    Args:
        value: The number to round.
        places: The number of decimal places to keep.

    Returns:
        The rounded value as a float.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def format_fixed(value: float, places: int) -> str:
    """Formats a number with a fixed number of decimals, rounding halves up."""
    return f"{round_half_up(value, places):.{places}f}"


def format_key(key: str) -> str:
    """
    Renders an internal category key human-readably.

    A space is inserted before each capital letter and underscores become
    spaces, e.g. "backRank" -> "back Rank", "removal_of_defender" ->
    "removal of defender".
    """
    if not key:
        return ""
    return _CAPITAL_BOUNDARY.sub(r" \1", key).replace("_", " ").strip()


def pluralize(count: int, singular: str, plural: str = "") -> str:
    return singular if count == 1 else (plural or f"{singular}s")
