"""Tests for the dynamically scoped current entropy source."""

from __future__ import annotations

import threading

import pytest

from exact_entropy.context import (
    default_source,
    entropy_source,
    set_default_source,
    using_entropy_source,
    with_entropy_source,
)
from exact_entropy.exceptions import InvalidArgumentError
from exact_entropy.raw.mock import MockUniformSource
from exact_entropy.source import EntropySource


def _source(seed: int) -> EntropySource:
    return EntropySource(MockUniformSource(seed=seed))


@pytest.fixture
def pinned_default():
    """Install a known default source for the duration of a test."""
    default = _source(0)
    previous = set_default_source(default)
    yield default
    set_default_source(previous)


class TestSourceContext:
    def test_default_when_no_scope(self, pinned_default: EntropySource) -> None:
        assert entropy_source() is pinned_default

    def test_scope_makes_source_current(self, pinned_default: EntropySource) -> None:
        scoped = _source(1)
        with using_entropy_source(scoped) as inside:
            assert inside is scoped
            assert entropy_source() is scoped
        assert entropy_source() is pinned_default

    def test_nested_scopes_unwind_in_order(self, pinned_default: EntropySource) -> None:
        outer, inner = _source(1), _source(2)
        with using_entropy_source(outer):
            with using_entropy_source(inner):
                assert entropy_source() is inner
            assert entropy_source() is outer
        assert entropy_source() is pinned_default

    def test_restored_when_body_raises(self, pinned_default: EntropySource) -> None:
        scoped = _source(1)
        with pytest.raises(RuntimeError):
            with using_entropy_source(scoped):
                raise RuntimeError("boom")
        assert entropy_source() is pinned_default

    def test_with_entropy_source_returns_result(self, pinned_default: EntropySource) -> None:
        scoped = _source(1)
        result = with_entropy_source(scoped, lambda a, b=0: (entropy_source(), a + b), 2, b=3)
        assert result == (scoped, 5)
        assert entropy_source() is pinned_default

    def test_with_entropy_source_restores_on_error(self, pinned_default: EntropySource) -> None:
        def fail() -> None:
            raise ValueError("inner failure")

        with pytest.raises(ValueError, match="inner failure"):
            with_entropy_source(_source(1), fail)
        assert entropy_source() is pinned_default

    def test_rejects_non_sources(self) -> None:
        with pytest.raises(InvalidArgumentError, match="EntropySource"):
            with using_entropy_source("not a source"):  # type: ignore[arg-type]
                pass

    def test_scopes_are_per_thread(self, pinned_default: EntropySource) -> None:
        seen: list[EntropySource] = []
        with using_entropy_source(_source(1)):
            thread = threading.Thread(target=lambda: seen.append(entropy_source()))
            thread.start()
            thread.join()
        assert seen == [pinned_default]


class TestDefaultSource:
    def test_built_from_config_when_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EXACT_ENTROPY_RAW_SOURCE_TYPE", "mock_uniform")
        monkeypatch.setenv("EXACT_ENTROPY_MOCK_SEED", "5")
        previous = set_default_source(None)
        try:
            built = default_source()
            assert built.name == "mock_uniform"
            assert default_source() is built
        finally:
            set_default_source(previous)

    def test_set_default_returns_previous(self) -> None:
        first, second = _source(1), _source(2)
        original = set_default_source(first)
        try:
            assert set_default_source(second) is first
            assert entropy_source() is second
        finally:
            set_default_source(original)
