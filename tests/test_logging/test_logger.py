"""Tests for DrawLogger and DrawRecord."""

from __future__ import annotations

import dataclasses
import json
import logging

import pytest

from exact_entropy.config import EntropyConfig
from exact_entropy.logging.logger import DrawLogger
from exact_entropy.logging.types import DrawRecord


def _make_record(**overrides) -> DrawRecord:
    defaults = {
        "timestamp_ns": 1_000_000_000,
        "operation": "get_int",
        "limit_bits": 3,
        "attempts": 2,
        "octets_consumed": 2,
        "source_name": "mock_uniform",
        "elapsed_ms": 0.5,
    }
    defaults.update(overrides)
    return DrawRecord(**defaults)


def _logger(**fields) -> DrawLogger:
    return DrawLogger(EntropyConfig(_env_file=None, **fields))  # type: ignore[call-arg]


class TestDrawRecord:
    def test_frozen(self) -> None:
        record = _make_record()
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.attempts = 5  # type: ignore[misc]

    def test_rejections(self) -> None:
        assert _make_record(attempts=1).rejections == 0
        assert _make_record(attempts=4).rejections == 3


class TestDrawLogger:
    def test_disabled_by_default(self) -> None:
        assert _logger().enabled is False

    @pytest.mark.parametrize(
        "fields", [{"log_level": "summary"}, {"log_level": "full"}, {"diagnostic_mode": True}]
    )
    def test_enabled(self, fields: dict) -> None:
        assert _logger(**fields).enabled is True

    def test_none_level_is_silent(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="exact_entropy"):
            _logger().log_draw(_make_record())
        assert caplog.records == []

    def test_summary_level(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="exact_entropy"):
            _logger(log_level="summary").log_draw(_make_record())
        assert "get_int bits=3 attempts=2 octets=2 source=mock_uniform" in caplog.text

    def test_full_level_is_json(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="exact_entropy"):
            _logger(log_level="full").log_draw(_make_record())
        (message,) = caplog.messages
        prefix = "draw_record: "
        assert message.startswith(prefix)
        assert json.loads(message[len(prefix) :])["source_name"] == "mock_uniform"

    def test_records_kept_only_in_diagnostic_mode(self) -> None:
        quiet = _logger(log_level="summary")
        quiet.log_draw(_make_record())
        assert quiet.get_diagnostic_data() == []

        diag = _logger(diagnostic_mode=True)
        diag.log_draw(_make_record())
        assert len(diag.get_diagnostic_data()) == 1

    def test_diagnostic_data_is_a_copy(self) -> None:
        diag = _logger(diagnostic_mode=True)
        diag.log_draw(_make_record())
        diag.get_diagnostic_data().clear()
        assert len(diag.get_diagnostic_data()) == 1

    def test_summary_stats_empty(self) -> None:
        assert _logger(diagnostic_mode=True).get_summary_stats() == {}

    def test_summary_stats(self) -> None:
        diag = _logger(diagnostic_mode=True)
        diag.log_draw(_make_record(attempts=1, octets_consumed=1, elapsed_ms=1.0))
        diag.log_draw(_make_record(attempts=3, octets_consumed=3, elapsed_ms=3.0))
        stats = diag.get_summary_stats()
        assert stats["total_draws"] == 2
        assert stats["total_attempts"] == 4
        assert stats["mean_attempts"] == pytest.approx(2.0)
        assert stats["rejection_rate"] == pytest.approx(0.5)
        assert stats["total_octets"] == 4
        assert stats["mean_elapsed_ms"] == pytest.approx(2.0)
        assert stats["max_elapsed_ms"] == pytest.approx(3.0)
