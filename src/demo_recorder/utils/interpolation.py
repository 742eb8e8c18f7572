"""
Linear interpolation helpers for continuous controls.
"""


def inverse_lerp(value: float, lo: float, hi: float) -> float:
    """
    Map a domain value to its fractional position between lo and hi.

    ``lo`` may be greater than ``hi`` (e.g. a vertical slider whose top
    edge is the maximum). The result is not clamped.

    Raises:
        ValueError: If the range is empty
    """
    if hi == lo:
        raise ValueError(f"Empty range: lo and hi are both {lo}")
    return (value - lo) / (hi - lo)


def lerp(lo: float, hi: float, fraction: float) -> float:
    """Map a fractional position back to the domain value."""
    return lo + fraction * (hi - lo)
