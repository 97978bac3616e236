"""Counter-mode block cipher keystream exposed as a seekable virtual file.

The virtual file holds ``E(0) || E(1) || E(2) || ...`` where ``E(c)`` is the
encryption of counter value *c* written little-endian in one cipher block.
Octet *p* of the file is therefore ``E(p // block_size)[p % block_size]``.
The file ends after ``2 ** (8 * block_size)`` blocks; for a 128-bit cipher
that is 2**132 octets, so in practice it is an unbounded, randomly
addressable pseudorandom tape keyed by a single secret.

The stream contains only as much entropy as the key does. It appears to
contain far more to the extent that the cipher is secure, which makes it a
reproducible pseudorandom source, not a true entropy source.

Positions come in two forms:

- **Integer offsets** (``tell()``/``seek()``) limited to ``offset_bits``
  bits, like an ``off_t``. Past that width both raise
  :class:`~exact_entropy.exceptions.UnrepresentablePositionError`.
- **Opaque positions** (``getpos()``/``setpos()``): the immutable state
  object itself, valid anywhere in the file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from exact_entropy.exceptions import (
    ConfigValidationError,
    InvalidArgumentError,
    UnrepresentablePositionError,
)
from exact_entropy.raw.base import RawOctetProvider
from exact_entropy.raw.cipher import EcbBlockCipher
from exact_entropy.raw.registry import register_raw_source

if TYPE_CHECKING:
    from exact_entropy.config import EntropyConfig
    from exact_entropy.raw.cipher import Cipher

logger = logging.getLogger("exact_entropy")

_DEFAULT_OFFSET_BITS = 64


@dataclass(frozen=True, slots=True)
class ActiveState:
    """Reading block *counter*, next octet at *cursor* within it."""

    counter: int
    cursor: int


@dataclass(frozen=True, slots=True)
class ExhaustedState:
    """Every counter value has been consumed. Terminal, not an error."""


EXHAUSTED = ExhaustedState()

CounterPosition = Union[ActiveState, ExhaustedState]


@register_raw_source("crypt_counter")
class CounterCipherStream(RawOctetProvider):
    """Read-only virtual file of block cipher counter-mode output.

    The cipher is borrowed: the stream never closes or rekeys it.

    Args:
        cipher: Any keyed block cipher exposing ``block_size`` (octets) and
            ``encrypt_block()``.
        offset_bits: Width of the integer offsets used by ``tell()`` and
            ``seek()``.
    """

    def __init__(self, cipher: Cipher, offset_bits: int = _DEFAULT_OFFSET_BITS) -> None:
        block_size = cipher.block_size
        if block_size < 1:
            raise InvalidArgumentError(f"Cipher block size must be positive, got {block_size}")
        if offset_bits < 1:
            raise InvalidArgumentError(f"offset_bits must be positive, got {offset_bits}")
        self._cipher = cipher
        self._block_size = block_size
        self._num_blocks = 1 << (8 * block_size)
        self._max_offset = (1 << offset_bits) - 1
        self._state: CounterPosition = ActiveState(0, 0)
        self._block: bytes | None = None

    @classmethod
    def from_seed(cls, seed: str, offset_bits: int = _DEFAULT_OFFSET_BITS) -> CounterCipherStream:
        """AES-128 counter stream keyed by a hash of *seed*."""
        return cls(EcbBlockCipher.aes_from_seed(seed), offset_bits)

    @classmethod
    def from_config(cls, config: EntropyConfig) -> CounterCipherStream:
        """Build from ``counter_key_hex`` or, failing that, ``counter_seed``."""
        if config.counter_key_hex:
            try:
                key = bytes.fromhex(config.counter_key_hex)
            except ValueError as exc:
                raise ConfigValidationError(f"counter_key_hex is not valid hex: {exc}") from exc
            try:
                return cls(EcbBlockCipher.aes(key))
            except InvalidArgumentError as exc:
                raise ConfigValidationError(str(exc)) from exc
        if config.counter_seed:
            return cls.from_seed(config.counter_seed)
        raise ConfigValidationError(
            "crypt_counter source needs counter_key_hex or counter_seed to be set"
        )

    @property
    def name(self) -> str:
        """Return ``'crypt_counter'``."""
        return "crypt_counter"

    @property
    def is_available(self) -> bool:
        """``True`` until the counter space is used up."""
        return not self.eof()

    @property
    def block_size(self) -> int:
        return self._block_size

    @property
    def size(self) -> int:
        """Length of the virtual file in octets."""
        return self._num_blocks * self._block_size

    # -- state transitions ------------------------------------------------

    def _set_state(self, state: CounterPosition) -> None:
        old = self._state
        if not (
            isinstance(old, ActiveState)
            and isinstance(state, ActiveState)
            and old.counter == state.counter
        ):
            self._block = None
        self._state = state

    def _keystream(self, counter: int) -> bytes:
        if self._block is None:
            block = self._cipher.encrypt_block(counter.to_bytes(self._block_size, "little"))
            if len(block) != self._block_size:
                raise InvalidArgumentError(
                    f"Cipher returned {len(block)} bytes for a {self._block_size}-byte block"
                )
            self._block = block
        return self._block

    def _next_block(self, counter: int) -> CounterPosition:
        counter += 1
        if counter == self._num_blocks:
            logger.debug("Counter space exhausted after %d blocks", self._num_blocks)
            return EXHAUSTED
        return ActiveState(counter, 0)

    # -- reading ------------------------------------------------------------

    def getc(self) -> int | None:
        """Return the next keystream octet, or ``None`` once exhausted."""
        state = self._state
        if not isinstance(state, ActiveState):
            return None
        octet = self._keystream(state.counter)[state.cursor]
        cursor = state.cursor + 1
        if cursor == self._block_size:
            self._set_state(self._next_block(state.counter))
        else:
            self._state = ActiveState(state.counter, cursor)
        return octet

    def ungetc(self, octet: int | None = None) -> None:
        """Step back one octet. The value is ignored: the file is read-only.

        At the start of the file this does nothing. From the exhausted
        state it returns to the final octet of the file.
        """
        state = self._state
        if not isinstance(state, ActiveState):
            self._set_state(ActiveState(self._num_blocks - 1, self._block_size - 1))
        elif state.cursor > 0:
            self._state = ActiveState(state.counter, state.cursor - 1)
        elif state.counter > 0:
            self._set_state(ActiveState(state.counter - 1, self._block_size - 1))

    def read(self, n: int) -> bytes:
        """Return the next *n* octets, fewer only when the file runs out."""
        if n < 0:
            raise InvalidArgumentError(f"Cannot read a negative number of octets: {n}")
        out = bytearray()
        while len(out) < n:
            state = self._state
            if not isinstance(state, ActiveState):
                break
            block = self._keystream(state.counter)
            take = min(n - len(out), self._block_size - state.cursor)
            out += block[state.cursor : state.cursor + take]
            cursor = state.cursor + take
            if cursor == self._block_size:
                self._set_state(self._next_block(state.counter))
            else:
                self._state = ActiveState(state.counter, cursor)
        return bytes(out)

    def eof(self) -> bool:
        return isinstance(self._state, ExhaustedState)

    # -- positioning ------------------------------------------------------

    def _offset_of(self, state: CounterPosition) -> int:
        if isinstance(state, ActiveState):
            return state.counter * self._block_size + state.cursor
        return self.size

    def tell(self) -> int:
        """Current position as an integer offset.

        Raises:
            UnrepresentablePositionError: If the offset exceeds ``offset_bits``.
        """
        offset = self._offset_of(self._state)
        if offset > self._max_offset:
            raise UnrepresentablePositionError(
                f"Position {offset} does not fit a {self._max_offset.bit_length()}-bit offset; "
                "use getpos()"
            )
        return offset

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        """Move to an integer offset and return the new position.

        Args:
            offset: Target, interpreted according to *whence*.
            whence: ``os.SEEK_SET``, ``os.SEEK_CUR`` or ``os.SEEK_END``.

        Raises:
            InvalidArgumentError: For a bad *whence* or a target outside the file.
            UnrepresentablePositionError: If the target, or for ``SEEK_CUR``
                the current position, exceeds ``offset_bits``.
        """
        if whence == os.SEEK_SET:
            target = offset
        elif whence == os.SEEK_CUR:
            target = self.tell() + offset
        elif whence == os.SEEK_END:
            if offset > 0:
                raise InvalidArgumentError("Cannot seek past the end of the keystream")
            target = self.size + offset
        else:
            raise InvalidArgumentError(f"Invalid whence: {whence!r}")

        if target < 0:
            raise InvalidArgumentError(f"Cannot seek to negative offset {target}")
        if target > self._max_offset:
            raise UnrepresentablePositionError(
                f"Offset {target} does not fit a {self._max_offset.bit_length()}-bit offset; "
                "use setpos()"
            )
        if target > self.size:
            raise InvalidArgumentError(f"Offset {target} is beyond the end ({self.size})")

        if target == self.size:
            self._set_state(EXHAUSTED)
        else:
            counter, cursor = divmod(target, self._block_size)
            self._set_state(ActiveState(counter, cursor))
        logger.debug("Seeked %s to offset %d", self.name, target)
        return target

    def getpos(self) -> CounterPosition:
        """Opaque position valid across the whole file."""
        return self._state

    def setpos(self, pos: CounterPosition) -> None:
        """Return to a position obtained from ``getpos()``.

        Raises:
            InvalidArgumentError: If *pos* is not a position of this stream.
        """
        if isinstance(pos, ActiveState):
            if not 0 <= pos.counter < self._num_blocks:
                raise InvalidArgumentError(f"Counter {pos.counter} out of range")
            if not 0 <= pos.cursor < self._block_size:
                raise InvalidArgumentError(f"Cursor {pos.cursor} out of range")
        elif not isinstance(pos, ExhaustedState):
            raise InvalidArgumentError(f"Not a counter stream position: {pos!r}")
        self._set_state(pos)

    def close(self) -> None:
        """No-op -- the cipher is borrowed, not owned."""

    def health_check(self) -> dict[str, Any]:
        return {
            "source": self.name,
            "healthy": self.is_available,
            "block_size": self._block_size,
            "exhausted": self.eof(),
        }
