"""Local raw octet provider: the OS CSPRNG or a device/file on disk.

With no path this wraps ``os.urandom()``, which is always available and
never ends. With a path (``/dev/hwrng``, ``/dev/random``, a file of
pre-recorded noise) octets are read from that file until it runs out.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, BinaryIO

from exact_entropy.exceptions import InvalidArgumentError, SourceFailureError
from exact_entropy.raw.base import RawOctetProvider
from exact_entropy.raw.registry import register_raw_source

if TYPE_CHECKING:
    from exact_entropy.config import EntropyConfig

logger = logging.getLogger("exact_entropy")


@register_raw_source("local")
class LocalRawSource(RawOctetProvider):
    """Octets from the local machine.

    Args:
        path: Device or file to read. ``None`` or empty selects ``os.urandom()``.
    """

    def __init__(self, path: str | None = None) -> None:
        self._path = path or None
        self._pushback: list[int] = []
        self._handle: BinaryIO | None = None
        self._at_eof = False
        self._closed = False

    @classmethod
    def from_config(cls, config: EntropyConfig) -> LocalRawSource:
        """Build from ``local_device_path``."""
        return cls(config.local_device_path)

    @property
    def name(self) -> str:
        """Return ``'local'``."""
        return "local"

    @property
    def path(self) -> str | None:
        """The file being read, or ``None`` for ``os.urandom()``."""
        return self._path

    @property
    def is_available(self) -> bool:
        """``True`` until closed, unless the error flag is set."""
        return not self._closed and not self._error

    def _file(self) -> BinaryIO:
        if self._handle is None:
            try:
                self._handle = open(self._path, "rb")  # noqa: SIM115 -- closed in close()
            except OSError as exc:
                self._error = True
                raise SourceFailureError(f"Cannot open {self._path!r}: {exc}") from exc
        return self._handle

    def _fetch(self, n: int) -> bytes:
        if self._closed:
            self._error = True
            raise SourceFailureError("Local source is closed")
        if self._path is None:
            return os.urandom(n)
        try:
            data = self._file().read(n)
        except OSError as exc:
            self._error = True
            logger.warning("Read from %r failed: %s", self._path, exc)
            raise SourceFailureError(f"Read from {self._path!r} failed: {exc}") from exc
        if len(data) < n:
            self._at_eof = True
        return data

    def getc(self) -> int | None:
        """Return the next octet, or ``None`` once the file is exhausted."""
        if self._pushback:
            return self._pushback.pop()
        data = self._fetch(1)
        return data[0] if data else None

    def ungetc(self, octet: int) -> None:
        """Push *octet* back; any number of octets may be stacked."""
        self._pushback.append(octet & 0xFF)
        self._at_eof = False

    def read(self, n: int) -> bytes:
        """Return up to *n* octets, serving pushed-back octets first."""
        if n < 0:
            raise InvalidArgumentError(f"Cannot read a negative number of octets: {n}")
        if n == 0:
            return b""
        head = bytearray()
        while self._pushback and len(head) < n:
            head.append(self._pushback.pop())
        if len(head) == n:
            return bytes(head)
        return bytes(head) + self._fetch(n - len(head))

    def eof(self) -> bool:
        """``True`` once a file read came up short; never for ``os.urandom()``."""
        return self._at_eof and not self._pushback

    def close(self) -> None:
        """Close the underlying file, if any."""
        self._closed = True
        if self._handle is not None:
            self._handle.close()
            self._handle = None
