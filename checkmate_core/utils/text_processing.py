import math
import re


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs (including newlines) into single spaces and trim."""
    return re.sub(r"\s+", " ", text or "").strip()


def clamp_unit(value, *, default: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp value into [low, high]; non-numeric or non-finite input yields default."""
    if isinstance(value, bool):
        return default
    try:
        val = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(val):
        return default
    return max(low, min(high, val))
