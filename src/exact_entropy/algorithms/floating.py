"""Bit-exact uniform floating-point sampling.

:func:`rand_flt` behaves as if it drew a real number uniformly from
``[lower, upper]`` with infinite precision and rounded it to the nearest
double. Each representable value in range is therefore returned with
probability proportional to the width of its rounding neighborhood within
the interval: values in high exponent bands are proportionally more likely
than values in low ones, every subnormal is reachable, and the two bounds
(whose neighborhoods are cut in half by the interval ends) are reachable too.

No infinite precision is needed. Measure the line in units of
``2 ** -1075``: every double and every rounding boundary between two
neighboring doubles lies on an integer multiple of that unit, so the
rounding of a real is decided by the unit cell it falls in. The sampler
picks a coarse aligned block of cells uniformly (about 2**24 blocks span the
interval, so the first draw lands in the primary bound's exponent band or
just below it), then subdivides the chosen block with at most 28 fresh bits
at a time until every real in it rounds to the same double. A block that
drifts outside the interval is rejected and the selection starts over; that
rejection step keeps the result exact despite the coarse first draw.
"""

from __future__ import annotations

import math
import sys

from exact_entropy.context import entropy_source
from exact_entropy.exceptions import InvalidArgumentError

# The smallest subnormal is 2 ** (min_exp - mant_dig) = 2 ** -1074; rounding
# boundaries fall halfway between doubles, hence one more bit.
_UNIT_BITS = sys.float_info.mant_dig - sys.float_info.min_exp + 1

_TOP_BITS = 24
_REFINE_BITS = 28


def _to_units(x: float) -> int:
    """Exact value of finite *x* in units of ``2 ** -_UNIT_BITS``."""
    numerator, denominator = x.as_integer_ratio()
    return (numerator << _UNIT_BITS) // denominator


def _nearest(cell: int) -> float:
    """The double nearest to the middle of unit cell ``[cell, cell + 1)``.

    The midpoint is never a rounding boundary, so there are no ties.
    Correctly rounded int division takes care of subnormals.
    """
    twice = 2 * cell + 1
    magnitude = abs(twice) / (1 << (_UNIT_BITS + 1))
    return -magnitude if twice < 0 else magnitude


def _as_bound(value: float, what: str) -> float:
    try:
        bound = float(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"{what} must be a real number, got {value!r}") from None
    if not math.isfinite(bound):
        raise InvalidArgumentError(f"{what} must be finite, got {bound!r}")
    return bound


def rand_flt(lower: float, upper: float) -> float:
    """Return a uniformly random double in the closed interval ``[lower, upper]``.

    The bounds may be given in either order. If they are equal that value
    is returned, except that ``rand_flt(0.0, -0.0)`` returns a zero of
    uniformly random sign. A result of zero carries the sign of the side it
    was rounded from.

    Raises:
        InvalidArgumentError: If either bound is infinite or NaN.
    """
    lower = _as_bound(lower, "lower")
    upper = _as_bound(upper, "upper")
    if lower > upper:
        lower, upper = upper, lower

    source = entropy_source()
    if lower == upper:
        if math.copysign(1.0, lower) != math.copysign(1.0, upper):
            return -0.0 if source.get_int(2) else 0.0
        return lower

    start = _to_units(lower)
    stop = _to_units(upper)

    # Blocks of 2**top_shift cells; the span covers 2**(_TOP_BITS-1) to 2**_TOP_BITS + 1 of them.
    top_shift = max(0, (stop - start).bit_length() - _TOP_BITS)
    first_block = start >> top_shift
    num_blocks = ((stop - 1) >> top_shift) - first_block + 1

    while True:
        block = first_block + source.get_int(num_blocks)
        shift = top_shift
        while True:
            low = block << shift
            high = low + (1 << shift)
            if high <= start or low >= stop:
                break
            if low >= start and high <= stop and (low < 0) == (high <= 0):
                candidate = _nearest(low)
                if candidate == _nearest(high - 1):
                    return candidate
            step = min(_REFINE_BITS, shift)
            block = (block << step) + source.get_int(1 << step)
            shift -= step
