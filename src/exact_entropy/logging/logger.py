"""Diagnostic logger for uniform integer draws.

Everything goes through the ``"exact_entropy"`` logger of the standard
``logging`` module. Verbosity is chosen by ``log_level``; independently,
diagnostic mode keeps every record in memory so rejection rates and entropy
consumption can be inspected after the fact.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from exact_entropy.config import EntropyConfig
    from exact_entropy.logging.types import DrawRecord

logger = logging.getLogger("exact_entropy")


class DrawLogger:
    """Per-draw diagnostic logger.

    Log levels:
        ``"none"``: Silent. Records are still kept when
        ``diagnostic_mode=True``.

        ``"summary"``: One line per draw (bits, attempts, octets, source).

        ``"full"``: Every record field, as one JSON object.
    """

    def __init__(self, config: EntropyConfig) -> None:
        self._log_level = config.log_level
        self._diagnostic_mode = config.diagnostic_mode
        self._records: list[DrawRecord] = []

    @property
    def enabled(self) -> bool:
        """Whether records are emitted or stored at all."""
        return self._diagnostic_mode or self._log_level != "none"

    def log_draw(self, record: DrawRecord) -> None:
        """Log a single draw.

        Args:
            record: Immutable record of the draw.
        """
        if self._diagnostic_mode:
            self._records.append(record)

        if self._log_level == "summary":
            logger.info(
                "%s bits=%d attempts=%d octets=%d source=%s elapsed=%.3fms",
                record.operation,
                record.limit_bits,
                record.attempts,
                record.octets_consumed,
                record.source_name,
                record.elapsed_ms,
            )
        elif self._log_level == "full":
            logger.info("draw_record: %s", json.dumps(asdict(record), default=str))

    def get_diagnostic_data(self) -> list[DrawRecord]:
        """Return all stored records (empty unless ``diagnostic_mode=True``)."""
        return list(self._records)

    def get_summary_stats(self) -> dict[str, Any]:
        """Aggregate the stored records.

        Returns:
            Totals and means keyed by name; empty when nothing was stored.
        """
        if not self._records:
            return {}

        n = len(self._records)
        attempts = sum(r.attempts for r in self._records)
        return {
            "total_draws": n,
            "total_attempts": attempts,
            "mean_attempts": attempts / n,
            "rejection_rate": (attempts - n) / attempts,
            "total_octets": sum(r.octets_consumed for r in self._records),
            "mean_elapsed_ms": sum(r.elapsed_ms for r in self._records) / n,
            "max_elapsed_ms": max(r.elapsed_ms for r in self._records),
        }
