"""Abstract base class for all raw octet providers.

Every raw backend -- OS randomness, a device file, a block cipher in counter
mode, a network service, or a test mock -- implements this interface. It is
shaped like a read-only binary I/O handle: ``getc()`` yields one octet,
``read()``/``readinto()`` yield many, ``ungetc()`` pushes one back. The ABC
supplies ``read()``, ``readinto()`` and the error-flag methods on top of
``getc()``; subclasses must implement ``name``, ``is_available``,
``getc()`` and ``close()``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from exact_entropy.exceptions import InvalidArgumentError


class RawOctetProvider(ABC):
    """Abstract base for all raw octet providers.

    A provider signals end of stream by returning ``None`` from ``getc()``
    (and short reads from ``read()``). Transport and device failures raise
    :class:`~exact_entropy.exceptions.SourceFailureError`.
    """

    _error: bool = False

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable provider identifier (e.g., ``'local'``, ``'crypt_counter'``)."""

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Whether the provider can currently supply octets."""

    @abstractmethod
    def getc(self) -> int | None:
        """Return the next octet, or ``None`` at end of stream.

        Raises:
            SourceFailureError: If the provider cannot supply an octet.
        """

    def ungetc(self, octet: int) -> None:
        """Push *octet* back so that the next ``getc()`` returns it.

        Raises:
            NotImplementedError: If the provider does not support push-back.
        """
        raise NotImplementedError(f"{self.name} does not support ungetc()")

    def read(self, n: int) -> bytes:
        """Return up to *n* octets; fewer only at end of stream.

        The default implementation loops over ``getc()``. Backends with a
        cheaper bulk path override it.

        Args:
            n: Number of octets wanted.

        Returns:
            The octets produced, in stream order.

        Raises:
            InvalidArgumentError: If *n* is negative.
        """
        if n < 0:
            raise InvalidArgumentError(f"Cannot read a negative number of octets: {n}")
        out = bytearray()
        while len(out) < n:
            octet = self.getc()
            if octet is None:
                break
            out.append(octet)
        return bytes(out)

    def readinto(self, buffer: bytearray | memoryview) -> int:
        """Fill *buffer* from the stream and return the number of octets produced."""
        data = self.read(len(buffer))
        buffer[: len(data)] = data
        return len(data)

    def eof(self) -> bool:
        """Whether the stream has reached its end. Unbounded streams never do."""
        return False

    def error(self) -> bool:
        """Whether a failure has been recorded since the last ``clearerr()``."""
        return self._error

    def clearerr(self) -> None:
        """Reset the error flag."""
        self._error = False

    @abstractmethod
    def close(self) -> None:
        """Release resources (file handles, HTTP sessions)."""

    def health_check(self) -> dict[str, Any]:
        """Return a status dictionary for this provider.

        Returns:
            Dictionary with at least ``'source'`` and ``'healthy'`` keys.
        """
        return {"source": self.name, "healthy": self.is_available}
