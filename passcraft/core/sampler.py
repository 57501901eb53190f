from __future__ import annotations

import math

from passcraft.core.random_source import RandomBytes, secure_random_bytes


def _as_bound(value: object, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{name} must be a number")
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError("min and max must be finite numbers")
        if not value.is_integer():
            raise ValueError(f"{name} must be an integer")
        return int(value)
    return value


def bytes_needed(span: int) -> int:
    """Smallest k with 256**k >= span."""
    return max(1, ((span - 1).bit_length() + 7) // 8)


def random_int(minimum: int, maximum: int, random_bytes: RandomBytes = secure_random_bytes) -> int:
    """Uniform integer in ``[minimum, maximum)`` drawn by rejection sampling."""
    lo = _as_bound(minimum, "min")
    hi = _as_bound(maximum, "max")
    if hi <= lo:
        raise ValueError("max must be greater than min")

    span = hi - lo
    if span == 1:
        return lo

    nbytes = bytes_needed(span)
    space = 1 << (8 * nbytes)
    limit = space - (space % span)

    while True:
        value = int.from_bytes(random_bytes(nbytes), "big", signed=False)
        if value < limit:
            return lo + (value % span)
