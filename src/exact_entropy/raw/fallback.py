"""Fallback raw provider -- composition wrapper with transparent failover.

``FallbackRawSource`` wraps a *primary* and a *fallback* provider. When the
primary raises :class:`~exact_entropy.exceptions.SourceFailureError`, the
octets are taken from the fallback instead. Any other exception propagates
unchanged, and so does end of stream: a primary that simply runs out is not
a failure, and its short read is returned as is.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from exact_entropy.exceptions import SourceFailureError
from exact_entropy.raw.base import RawOctetProvider

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger("exact_entropy")


class FallbackRawSource(RawOctetProvider):
    """Tries the primary, falls back on ``SourceFailureError``.

    Args:
        primary: The preferred provider.
        fallback: The provider used while the primary is failing.
    """

    def __init__(self, primary: RawOctetProvider, fallback: RawOctetProvider) -> None:
        self._primary = primary
        self._fallback = fallback
        self._last_used: RawOctetProvider = primary

    @property
    def name(self) -> str:
        """Return a compound name: ``'<primary>+<fallback>'``."""
        return f"{self._primary.name}+{self._fallback.name}"

    @property
    def is_available(self) -> bool:
        return self._primary.is_available or self._fallback.is_available

    @property
    def last_source_used(self) -> str:
        """Name of the provider that served the last request."""
        return self._last_used.name

    def _call(self, op: Callable[[RawOctetProvider], Any]) -> Any:
        try:
            result = op(self._primary)
        except SourceFailureError:
            logger.warning(
                "Primary raw source %r failed, falling back to %r",
                self._primary.name,
                self._fallback.name,
            )
            result = op(self._fallback)
            self._last_used = self._fallback
        else:
            self._last_used = self._primary
        return result

    def getc(self) -> int | None:
        return self._call(lambda src: src.getc())

    def read(self, n: int) -> bytes:
        return self._call(lambda src: src.read(n))

    def ungetc(self, octet: int) -> None:
        """Push back into whichever provider served the last octet."""
        self._last_used.ungetc(octet)

    def eof(self) -> bool:
        return self._last_used.eof()

    def error(self) -> bool:
        return self._primary.error() and self._fallback.error()

    def clearerr(self) -> None:
        self._primary.clearerr()
        self._fallback.clearerr()

    def close(self) -> None:
        """Close both providers."""
        self._primary.close()
        self._fallback.close()

    def health_check(self) -> dict[str, Any]:
        """Return health status for both providers."""
        return {
            "source": self.name,
            "healthy": self.is_available,
            "primary": self._primary.health_check(),
            "fallback": self._fallback.health_check(),
            "last_source_used": self.last_source_used,
        }
