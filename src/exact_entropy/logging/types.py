"""Data types for the draw diagnostics subsystem."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DrawRecord:
    """Immutable record of one uniform integer draw.

    Attributes:
        timestamp_ns: Wall-clock time of the draw (nanoseconds since epoch).
        operation: Name of the sampling operation (``"get_int"``).
        limit_bits: Bit length of ``limit - 1``, i.e. bits drawn per attempt.
        attempts: Number of candidate values drawn; all but the last were rejected.
        octets_consumed: Raw octets pulled from the provider for this draw.
        source_name: Name of the raw provider.
        elapsed_ms: Time spent in the draw, provider I/O included (ms).
    """

    timestamp_ns: int
    operation: str
    limit_bits: int
    attempts: int
    octets_consumed: int
    source_name: str
    elapsed_ms: float

    @property
    def rejections(self) -> int:
        return self.attempts - 1
