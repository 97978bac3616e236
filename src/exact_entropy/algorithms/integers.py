"""Uniform bits, uniform integers and weighted discrete choice."""

from __future__ import annotations

from typing import TYPE_CHECKING

from exact_entropy.context import entropy_source
from exact_entropy.exceptions import InvalidArgumentError
from exact_entropy.source import as_integer

if TYPE_CHECKING:
    from collections.abc import Sequence


def rand_bits(nbits: int) -> bytes:
    """Return *nbits* random bits as octets; see :meth:`EntropySource.get_bits`."""
    return entropy_source().get_bits(nbits)


def rand_int(limit: int) -> int:
    """Return an integer uniformly distributed in ``[0, limit)``.

    *limit* may be any positive integer, however large.
    """
    return entropy_source().get_int(limit)


def rand_prob(weights: Sequence[int]) -> int:
    """Return index *i* with probability ``weights[i] / sum(weights)``.

    Indices are tried from last to first. Index *i* wins with probability
    ``weights[i] / (weights[0] + ... + weights[i])``, the weight it holds
    among the indices not yet ruled out, which makes the overall
    probability exactly proportional to its weight.

    Args:
        weights: Non-negative integers, at least one positive.

    Raises:
        InvalidArgumentError: On a negative weight, or if all are zero.
    """
    weights = [as_integer(w, "weight") for w in weights]
    if any(w < 0 for w in weights):
        raise InvalidArgumentError("Weights must be non-negative")
    remaining = sum(weights)
    if remaining == 0:
        raise InvalidArgumentError("At least one weight must be positive")

    source = entropy_source()
    for index in range(len(weights) - 1, -1, -1):
        weight = weights[index]
        remaining -= weight
        if source.get_bool_weighted(remaining, weight):
            return index
    raise AssertionError("unreachable: index 0 is always accepted")
