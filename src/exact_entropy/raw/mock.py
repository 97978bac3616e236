"""Seeded mock raw octet provider for tests and reproducible runs.

Octets are drawn uniformly from numpy's ``default_rng`` (PCG64), so a fixed
seed replays the same stream. Not an entropy source in any real sense.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from exact_entropy.exceptions import InvalidArgumentError
from exact_entropy.raw.base import RawOctetProvider
from exact_entropy.raw.registry import register_raw_source

if TYPE_CHECKING:
    from exact_entropy.config import EntropyConfig


@register_raw_source("mock_uniform")
class MockUniformSource(RawOctetProvider):
    """Uniform pseudo-random octets from a seeded numpy generator.

    Args:
        seed: Optional RNG seed for reproducible output.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._seed = seed
        self._rng = np.random.default_rng(seed)
        self._pushback: list[int] = []
        self.octets_served = 0

    @classmethod
    def from_config(cls, config: EntropyConfig) -> MockUniformSource:
        """Build from ``mock_seed``."""
        return cls(config.mock_seed)

    @property
    def name(self) -> str:
        """Return ``'mock_uniform'``."""
        return "mock_uniform"

    @property
    def is_available(self) -> bool:
        """Always returns ``True``."""
        return True

    def getc(self) -> int | None:
        return self.read(1)[0]

    def ungetc(self, octet: int) -> None:
        self._pushback.append(octet & 0xFF)
        self.octets_served -= 1

    def read(self, n: int) -> bytes:
        if n < 0:
            raise InvalidArgumentError(f"Cannot read a negative number of octets: {n}")
        if n == 0:
            return b""
        head = bytearray()
        while self._pushback and len(head) < n:
            head.append(self._pushback.pop())
        fresh = self._rng.integers(0, 256, size=n - len(head), dtype=np.uint8)
        self.octets_served += n
        return bytes(head) + fresh.tobytes()

    def close(self) -> None:
        """No-op -- no resources to release."""
