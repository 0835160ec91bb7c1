"""
Tolerant parsing helpers for scraped numeric fields.

Scraped units carry rents like "$1,234", square footage like "850 sq ft" and
bedroom counts that may only be recoverable from the unit type label. None of
these helpers raise: anything that cannot be read as a number is "missing".
"""
import math
import re
from typing import Any, Optional

import numpy as np

_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")
_BEDROOM_RE = re.compile(r"(?<![\d.])(\d+)\s*(?:bed|br|bd)")


def round_half_up(value: float, ndigits: int = 0):
    """
    Round half away from negative infinity, like JavaScript's Math.round.

    Returns an int when `ndigits` is 0, otherwise a float.
    """
    factor = 10 ** ndigits
    rounded = math.floor(value * factor + 0.5)
    if ndigits == 0:
        return int(rounded)
    return rounded / factor


def clamp(value: float, lower: float = 0, upper: float = 100):
    return max(lower, min(value, upper))


def parse_number(value: Any) -> Optional[float]:
    """
    Parse a scraped numeric value.

    Args:
        value: int, float, numpy scalar, or a formatted string such as "$1,234".

    Returns:
        Optional[float]: The parsed number, or None when missing or unparsable.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, np.integer)):
        return float(value)
    if isinstance(value, (float, np.floating)):
        # Treat NaN as missing
        if np.isnan(value):
            return None
        return float(value)
    if isinstance(value, str):
        s = value.strip().replace("$", "").replace(",", "")
        match = _NUMBER_RE.search(s)
        if not match:
            return None
        return float(match.group(0))
    return None


def parse_bedroom_count(bedrooms: Any, unit_type: Optional[str]) -> int:
    """
    Resolve a unit's bedroom count.

    The numeric `bedrooms` field wins; otherwise the count is read from the
    unit type label ("Studio", "2 Bed / 1 Bath", "1BR", "3x2"). Labels that
    cannot be read fall back to 0.
    """
    count = parse_number(bedrooms)
    if count is not None:
        return int(count)

    label = (unit_type or "").lower().strip()
    if not label or "studio" in label:
        return 0
    match = _BEDROOM_RE.search(label)
    if match:
        return int(match.group(1))
    if label[0].isdigit():
        return int(label[0])
    return 0
