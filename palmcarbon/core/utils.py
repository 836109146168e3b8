import math


def finite_or(value: float, default: float = 0.0) -> float:
    """Return *value* when it is a finite number, else *default*."""
    return value if math.isfinite(value) else default


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round *value* to *ndigits* decimals with halves rounded towards +inf.

    Python's built-in :func:`round` uses banker's rounding, which would turn
    ``0.5`` into ``0``; published figures round halves up. NaN and infinities
    are returned unchanged.
    """
    if not math.isfinite(value):
        return value
    factor = 10**ndigits
    scaled = value * factor + 0.5
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled) / factor


def clamp(value: float, low: float = -1.0, high: float = 1.0) -> float:
    """Clamp *value* into the closed interval [low, high]."""
    return max(low, min(high, value))
