"""Range mapping helpers shared by training data and live driving."""

import math


def map_range(new_from: float, new_to: float, orig_from: float, orig_to: float, value: float) -> float:
    """
    Linearly map ``value`` from [orig_from, orig_to] onto [new_from, new_to].

    Values at or beyond an original endpoint map to the matching new endpoint,
    so the result never leaves the new range. Swapping new_from and new_to
    reverses the direction.

    Example:
        >>> map_range(0, 1, -1, 1, 0.0)
        0.5
        >>> map_range(0, 1, -1, 1, -3.0)
        0
    """
    if value <= orig_from:
        return new_from
    if value >= orig_to:
        return new_to
    return (new_to - new_from) * ((value - orig_from) / (orig_to - orig_from)) + new_from


def round_half_away(x: float) -> float:
    """Round to the nearest integer, halves away from zero."""
    return math.copysign(math.floor(abs(x) + 0.5), x)


def proximity(distance: float, visible_distance: float) -> float:
    """
    Quantized closeness of a ray hit.

    The hit distance as a fraction of the sensor range is rounded to a whole
    number and halved, so a hit reads 1.0 when it is in the near half of the
    range and 0.5 when it is in the far half.
    """
    return 1 - round_half_away(distance / visible_distance) / 2.0
