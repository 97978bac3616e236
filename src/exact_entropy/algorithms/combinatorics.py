"""Uniform choice, combinations and permutations of sequences.

Each operation has a ``*_r`` alias kept for callers used to the
reference-taking spelling; both names share one implementation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from exact_entropy.context import entropy_source
from exact_entropy.exceptions import InvalidArgumentError
from exact_entropy.source import as_integer

if TYPE_CHECKING:
    from collections.abc import Sequence

_T = TypeVar("_T")


def pick(items: Sequence[_T]) -> _T:
    """Return one element of *items*, each with equal probability.

    Raises:
        InvalidArgumentError: If *items* is empty.
    """
    if len(items) == 0:
        raise InvalidArgumentError("Need a non-empty sequence to pick from")
    return items[entropy_source().get_int(len(items))]


def choose(k: int, items: Sequence[_T]) -> list[_T]:
    """Return a uniformly random *k*-element subset of *items*, in input order.

    A single forward pass: each element is kept with probability
    ``still_needed / still_unscanned``. Every *k*-subset comes out with
    probability exactly ``1 / C(n, k)``.

    Raises:
        InvalidArgumentError: If ``k < 0`` or ``k > len(items)``.
    """
    k = as_integer(k, "k")
    if k < 0:
        raise InvalidArgumentError(f"Need a non-negative number of items to choose, got {k}")
    if k > len(items):
        raise InvalidArgumentError(f"Can't choose {k} of {len(items)} items")

    source = entropy_source()
    to_choose = k
    to_leave = len(items) - k
    chosen: list[_T] = []
    for item in items:
        if to_choose == 0:
            break
        if source.get_bool_weighted(to_leave, to_choose):
            chosen.append(item)
            to_choose -= 1
        else:
            to_leave -= 1
    return chosen


def shuffle(items: Sequence[_T]) -> list[_T]:
    """Return a uniformly random permutation of *items* as a new list.

    Fisher-Yates on a copy; *items* itself is left untouched.
    """
    result = list(items)
    source = entropy_source()
    for i in range(len(result), 1, -1):
        j = source.get_int(i)
        result[i - 1], result[j] = result[j], result[i - 1]
    return result


pick_r = pick
choose_r = choose
shuffle_r = shuffle
