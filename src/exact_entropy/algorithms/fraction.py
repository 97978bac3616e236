"""Fixed-point random fractions.

:func:`rand_fix` builds a multiple of ``2 ** -nbits`` from independent
chunks of at most 24 random bits. Every chunk value and every scaled
partial sum is exactly representable in a double, so no rounding ever
touches the result.
"""

from __future__ import annotations

import math
import sys

from exact_entropy.context import entropy_source
from exact_entropy.exceptions import InvalidArgumentError
from exact_entropy.source import as_integer

_CHUNK_BITS = 24

# Significand bits of a double (52 stored + the implicit leading one).
MAX_FIX_BITS = sys.float_info.mant_dig


def rand_fix(nbits: int) -> float:
    """Return a uniform multiple of ``2 ** -nbits`` in ``[0, 1)``.

    Args:
        nbits: Precision, from 0 (always ``0.0``) to :data:`MAX_FIX_BITS`.

    Raises:
        InvalidArgumentError: If *nbits* is negative or too large.
    """
    nbits = as_integer(nbits, "nbits")
    if nbits < 0:
        raise InvalidArgumentError(f"Need a non-negative number of bits, got {nbits}")
    if nbits > MAX_FIX_BITS:
        raise InvalidArgumentError(
            f"Can't generate more than {MAX_FIX_BITS} bits of fixed-point fraction"
        )
    source = entropy_source()
    frac = 0.0
    for pos in range(_CHUNK_BITS, nbits + 1, _CHUNK_BITS):
        frac += math.ldexp(source.get_int(1 << _CHUNK_BITS), -pos)
    frac += math.ldexp(source.get_int(1 << (nbits % _CHUNK_BITS)), -nbits)
    return frac


def rand(limit: float | None = None) -> float:
    """Drop-in replacement for a drand48-style ``rand(limit)``.

    Returns ``rand_fix(48) * limit``, where a missing or zero *limit*
    counts as 1. This reproduces the output range of the legacy generator
    exactly; it is not a good way to get integers (``int(rand(n))`` is
    biased unless *n* is a power of two) and should not be used in new
    code. Use :func:`rand_int` or :func:`rand_flt` instead.
    """
    return rand_fix(48) * (limit if limit else 1.0)
