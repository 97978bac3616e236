"""Shared pytest fixtures for exact-entropy tests.

Provides scripted and seeded raw providers, toy and real block ciphers,
and entropy sources installed as the current source for algorithm tests.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from exact_entropy.context import using_entropy_source
from exact_entropy.raw.base import RawOctetProvider
from exact_entropy.raw.cipher import EcbBlockCipher
from exact_entropy.raw.mock import MockUniformSource
from exact_entropy.source import EntropySource

AES_KEY = bytes(range(16))


class ScriptedSource(RawOctetProvider):
    """Test double: serves a fixed octet string, then end of stream."""

    def __init__(self, data: bytes | list[int]) -> None:
        self._data = bytes(data)
        self._pos = 0

    @property
    def name(self) -> str:
        return "scripted"

    @property
    def is_available(self) -> bool:
        return self._pos < len(self._data)

    @property
    def position(self) -> int:
        return self._pos

    def getc(self) -> int | None:
        if self._pos >= len(self._data):
            return None
        octet = self._data[self._pos]
        self._pos += 1
        return octet

    def eof(self) -> bool:
        return self._pos >= len(self._data)

    def close(self) -> None:
        pass


class ByteCipher:
    """Toy 1-byte block cipher: an affine permutation of octets.

    Small enough that the whole counter space (256 blocks) can be walked.
    """

    block_size = 1

    def __init__(self) -> None:
        self.calls = 0

    def encrypt_block(self, block: bytes) -> bytes:
        self.calls += 1
        return bytes([(block[0] * 167 + 13) & 0xFF])


class CountingCipher:
    """Wraps a cipher and counts ``encrypt_block`` calls."""

    def __init__(self, inner: EcbBlockCipher) -> None:
        self._inner = inner
        self.calls = 0

    @property
    def block_size(self) -> int:
        return self._inner.block_size

    def encrypt_block(self, block: bytes) -> bytes:
        self.calls += 1
        return self._inner.encrypt_block(block)


def scripted_source(data: bytes | list[int]) -> EntropySource:
    """EntropySource over a :class:`ScriptedSource`."""
    return EntropySource(ScriptedSource(data))


@pytest.fixture
def aes_cipher() -> EcbBlockCipher:
    """AES-128 with a fixed key."""
    return EcbBlockCipher.aes(AES_KEY)


@pytest.fixture
def byte_cipher() -> ByteCipher:
    return ByteCipher()


@pytest.fixture
def mock_source() -> EntropySource:
    """Seeded mock source for reproducible statistics."""
    return EntropySource(MockUniformSource(seed=20240611))


@pytest.fixture
def current_source(mock_source: EntropySource) -> Iterator[EntropySource]:
    """The seeded mock source, installed as the current source."""
    with using_entropy_source(mock_source):
        yield mock_source


@pytest.fixture
def scripted():
    """Factory: ``scripted(data)`` -> EntropySource serving exactly *data*."""
    return scripted_source


@pytest.fixture
def scripted_raw():
    """Factory: ``scripted_raw(data)`` -> :class:`ScriptedSource`."""
    return ScriptedSource


@pytest.fixture
def counting_cipher(aes_cipher: EcbBlockCipher) -> CountingCipher:
    return CountingCipher(aes_cipher)
