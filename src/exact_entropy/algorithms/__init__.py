"""Entropy-using algorithms built on the current entropy source.

None of these take a source argument: they draw from
:func:`exact_entropy.context.entropy_source`. Select a source with
:func:`exact_entropy.context.using_entropy_source`.
"""

from exact_entropy.algorithms.combinatorics import (
    choose,
    choose_r,
    pick,
    pick_r,
    shuffle,
    shuffle_r,
)
from exact_entropy.algorithms.floating import rand_flt
from exact_entropy.algorithms.fraction import MAX_FIX_BITS, rand, rand_fix
from exact_entropy.algorithms.integers import rand_bits, rand_int, rand_prob

__all__ = [
    "MAX_FIX_BITS",
    "choose",
    "choose_r",
    "pick",
    "pick_r",
    "rand",
    "rand_bits",
    "rand_fix",
    "rand_flt",
    "rand_int",
    "rand_prob",
    "shuffle",
    "shuffle_r",
]
