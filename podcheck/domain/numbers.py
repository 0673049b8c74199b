"""Numeric sanitizing for confidences coming from OCR and image heuristics."""

import math
from typing import Any

from podcheck.config.settings import CONFIDENCE_MIN, CONFIDENCE_MAX


def sanitize_confidence(value: Any) -> float:
    """
    Coerce a confidence into the 0..100 range.

    None, non-numeric values, NaN and infinities become 0. Finite values are
    clamped, never rejected.
    """
    if value is None or isinstance(value, bool):
        return CONFIDENCE_MIN
    try:
        number = float(value)
    except (TypeError, ValueError):
        return CONFIDENCE_MIN
    if not math.isfinite(number):
        return CONFIDENCE_MIN
    return max(CONFIDENCE_MIN, min(CONFIDENCE_MAX, number))
