"""Tests for LocalRawSource (os.urandom and file-backed)."""

from __future__ import annotations

import pytest

from exact_entropy.exceptions import InvalidArgumentError, SourceFailureError
from exact_entropy.raw.local import LocalRawSource


class TestUrandomMode:
    def test_name_and_availability(self) -> None:
        source = LocalRawSource()
        assert source.name == "local"
        assert source.path is None
        assert source.is_available is True

    def test_returns_requested_count(self) -> None:
        source = LocalRawSource()
        for n in (0, 1, 10, 1024):
            assert len(source.read(n)) == n

    def test_never_reaches_eof(self) -> None:
        source = LocalRawSource()
        source.read(4096)
        assert source.eof() is False

    def test_getc_returns_octet(self) -> None:
        octet = LocalRawSource().getc()
        assert octet is not None
        assert 0 <= octet <= 255

    def test_pushback_served_first(self) -> None:
        source = LocalRawSource()
        source.ungetc(0x41)
        source.ungetc(0x42)
        assert source.read(2) == b"\x42\x41"

    def test_closed_source_fails(self) -> None:
        source = LocalRawSource()
        source.close()
        assert source.is_available is False
        with pytest.raises(SourceFailureError, match="closed"):
            source.read(1)
        assert source.error() is True

    def test_negative_read_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            LocalRawSource().read(-1)


class TestFileMode:
    def test_reads_file_then_eof(self, tmp_path) -> None:
        path = tmp_path / "pool.bin"
        path.write_bytes(b"\x00\x01\x02")
        source = LocalRawSource(str(path))
        assert source.getc() == 0
        assert source.read(5) == b"\x01\x02"
        assert source.eof() is True
        assert source.getc() is None
        source.close()

    def test_ungetc_after_eof(self, tmp_path) -> None:
        path = tmp_path / "pool.bin"
        path.write_bytes(b"\x09")
        source = LocalRawSource(str(path))
        assert source.read(2) == b"\x09"
        source.ungetc(0x09)
        assert source.eof() is False
        assert source.getc() == 0x09
        source.close()

    def test_missing_file_sets_error(self, tmp_path) -> None:
        source = LocalRawSource(str(tmp_path / "missing"))
        with pytest.raises(SourceFailureError, match="Cannot open"):
            source.getc()
        assert source.error() is True
        assert source.is_available is False
        source.clearerr()
        assert source.error() is False

    def test_health_check(self, tmp_path) -> None:
        path = tmp_path / "pool.bin"
        path.write_bytes(b"\x00")
        health = LocalRawSource(str(path)).health_check()
        assert health == {"source": "local", "healthy": True}
