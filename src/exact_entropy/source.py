"""Bit extraction and exact uniform sampling on top of a raw octet provider.

:class:`EntropySource` is the layer every algorithm goes through. It turns
raw octets into bit strings, uniform integers below an arbitrary-precision
limit, and booleans with arbitrary rational weights, without bias.

Uniform integers use plain rejection sampling: for ``limit`` with
``k = (limit - 1).bit_length()``, draw *k* bits; if the value is not below
``limit``, throw it away and draw again. The expected number of attempts is
below 2, and since rejected values are discarded outright, the accepted
value is exactly uniform however many rejections happen.
"""

from __future__ import annotations

import operator
import time
from typing import TYPE_CHECKING, Any

from exact_entropy.exceptions import InvalidArgumentError, SourceFailureError
from exact_entropy.logging.types import DrawRecord

if TYPE_CHECKING:
    from exact_entropy.logging.logger import DrawLogger
    from exact_entropy.raw.base import RawOctetProvider


def as_integer(value: Any, what: str) -> int:
    """Coerce *value* to ``int`` via ``__index__``.

    Raises:
        InvalidArgumentError: If *value* is not integer-like.
    """
    try:
        return operator.index(value)
    except TypeError:
        raise InvalidArgumentError(f"{what} must be an integer, got {value!r}") from None


class EntropySource:
    """Exact sampling front end owning one raw octet provider.

    Not safe for concurrent use: give each thread its own source.

    Args:
        raw: The provider octets are pulled from. Owned: ``close()`` closes it.
        draw_logger: Optional diagnostics sink for ``get_int`` draws.
    """

    def __init__(self, raw: RawOctetProvider, draw_logger: DrawLogger | None = None) -> None:
        self._raw = raw
        self._draw_logger = draw_logger if draw_logger is not None and draw_logger.enabled else None
        self.octets_consumed = 0

    @property
    def raw(self) -> RawOctetProvider:
        return self._raw

    @property
    def name(self) -> str:
        return self._raw.name

    @property
    def draw_logger(self) -> DrawLogger | None:
        return self._draw_logger

    def _octets(self, n: int) -> bytes:
        data = self._raw.read(n)
        self.octets_consumed += len(data)
        if len(data) < n:
            raise SourceFailureError(
                f"{self._raw.name} supplied {len(data)} of {n} octets (end of stream)"
            )
        return data

    def get_bits(self, nbits: int) -> bytes:
        """Return *nbits* random bits as ``ceil(nbits / 8)`` octets.

        Bits are packed little-endian: the last octet carries the
        highest-order bits, and when *nbits* is not a multiple of eight its
        unused top bits are zero.

        Raises:
            InvalidArgumentError: If *nbits* is negative.
            SourceFailureError: If the provider cannot supply the octets.
        """
        nbits = as_integer(nbits, "nbits")
        if nbits < 0:
            raise InvalidArgumentError(f"Need a non-negative number of bits, got {nbits}")
        nbytes, spare = divmod(nbits, 8)
        if not spare:
            return self._octets(nbytes)
        data = bytearray(self._octets(nbytes + 1))
        data[-1] &= (1 << spare) - 1
        return bytes(data)

    def get_octet(self) -> int:
        """Return one uniformly random octet."""
        return self._octets(1)[0]

    def get_int(self, limit: int) -> int:
        """Return an integer uniformly distributed in ``[0, limit)``.

        Args:
            limit: Exclusive upper bound, any positive integer.

        Raises:
            InvalidArgumentError: If *limit* is not a positive integer.
            SourceFailureError: If the provider runs dry mid-draw.
        """
        limit = as_integer(limit, "limit")
        if limit <= 0:
            raise InvalidArgumentError(f"Need a positive upper limit, got {limit}")
        nbits = (limit - 1).bit_length()
        start_ns = time.perf_counter_ns()
        start_octets = self.octets_consumed
        attempts = 0
        while True:
            attempts += 1
            value = int.from_bytes(self.get_bits(nbits), "little")
            if value < limit:
                break
        if self._draw_logger is not None:
            self._draw_logger.log_draw(
                DrawRecord(
                    timestamp_ns=time.time_ns(),
                    operation="get_int",
                    limit_bits=nbits,
                    attempts=attempts,
                    octets_consumed=self.octets_consumed - start_octets,
                    source_name=self._raw.name,
                    elapsed_ms=(time.perf_counter_ns() - start_ns) / 1e6,
                )
            )
        return value

    def get_bool_weighted(self, weight_false: int, weight_true: int) -> bool:
        """Return ``True`` with probability ``weight_true / (weight_false + weight_true)``.

        Both weights are non-negative integers of any size.

        Raises:
            InvalidArgumentError: If a weight is negative or both are zero.
        """
        weight_false = as_integer(weight_false, "weight")
        weight_true = as_integer(weight_true, "weight")
        if weight_false < 0 or weight_true < 0:
            raise InvalidArgumentError("Weights must be non-negative")
        total = weight_false + weight_true
        if total == 0:
            raise InvalidArgumentError("At least one weight must be positive")
        return self.get_int(total) < weight_true

    def close(self) -> None:
        """Close the owned provider."""
        self._raw.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._raw.name!r})"
