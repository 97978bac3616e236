"""Block cipher capability consumed by the counter-mode stream.

The stream needs only two things from a cipher: its block width in octets
and a keyed single-block encryption. :class:`Cipher` states that as a
structural protocol; :class:`EcbBlockCipher` satisfies it for any
``cryptography`` block cipher algorithm by running it in ECB mode, one
block per call.
"""

from __future__ import annotations

import unicodedata
from typing import Protocol, runtime_checkable

from cryptography.hazmat.primitives.ciphers import BlockCipherAlgorithm
from cryptography.hazmat.primitives.ciphers import Cipher as _CryptoCipher
from cryptography.hazmat.primitives.ciphers import algorithms, modes
from cryptography.hazmat.primitives.hashes import SHA256, Hash

from exact_entropy.exceptions import InvalidArgumentError


@runtime_checkable
class Cipher(Protocol):
    """A keyed block cipher, used one block at a time."""

    @property
    def block_size(self) -> int:
        """Block width in octets."""
        ...

    def encrypt_block(self, block: bytes) -> bytes:
        """Encrypt exactly one block of ``block_size`` octets."""
        ...


class EcbBlockCipher:
    """Adapter from a ``cryptography`` block algorithm to :class:`Cipher`.

    Args:
        algorithm: A keyed ``cryptography`` block cipher algorithm instance,
            e.g. ``algorithms.AES(key)`` or ``algorithms.Camellia(key)``.
    """

    def __init__(self, algorithm: BlockCipherAlgorithm) -> None:
        self._algorithm = algorithm
        self._block_size = algorithm.block_size // 8
        self._encryptor = _CryptoCipher(algorithm, modes.ECB()).encryptor()

    @classmethod
    def aes(cls, key: bytes) -> EcbBlockCipher:
        """AES with a 16, 24 or 32 octet key."""
        if len(key) not in (16, 24, 32):
            raise InvalidArgumentError(f"AES key must be 16, 24 or 32 bytes, got {len(key)}")
        return cls(algorithms.AES(key))

    @classmethod
    def aes_from_seed(cls, seed: str) -> EcbBlockCipher:
        """AES-128 keyed by the SHA-256 of the NFKD-normalized *seed*."""
        hasher = Hash(SHA256())
        hasher.update(unicodedata.normalize("NFKD", seed).encode("utf-8"))
        return cls.aes(hasher.finalize()[:16])

    @property
    def block_size(self) -> int:
        return self._block_size

    @property
    def algorithm_name(self) -> str:
        return self._algorithm.name

    def encrypt_block(self, block: bytes) -> bytes:
        if len(block) != self._block_size:
            raise InvalidArgumentError(
                f"{self._algorithm.name} block must be {self._block_size} bytes, got {len(block)}"
            )
        # ECB is stateless per block, so a single encryptor can be fed forever.
        return self._encryptor.update(block)
