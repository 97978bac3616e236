"""Network raw octet provider backed by a remote random-number service.

Octets are fetched in fixed-size batches over HTTP (random.org by default)
and served from memory until the batch is used up. The service asks clients
to back off when its own entropy buffer runs low, so before each refill the
fill level is queried and the stream throttles itself:

- fill below ``throttle_low_pct``: sleep ``throttle_wait_s`` and query again,
  for as long as it takes;
- fill in ``[throttle_low_pct, throttle_high_pct)``: sleep once, for
  ``(throttle_high_pct - fill) * throttle_backoff_s_per_pct`` seconds;
- otherwise fetch immediately.

A transport failure sets a sticky error flag: every later read fails until
``clearerr()`` is called. The stream is forward-only with a one-octet
push-back.
"""

from __future__ import annotations

import logging
import re
import time
from typing import TYPE_CHECKING, Any, Protocol

import requests

from exact_entropy.exceptions import InvalidArgumentError, SourceFailureError
from exact_entropy.raw.base import RawOctetProvider
from exact_entropy.raw.registry import register_raw_source

if TYPE_CHECKING:
    from collections.abc import Callable

    from exact_entropy.config import EntropyConfig

logger = logging.getLogger("exact_entropy")

_FILL_LEVEL_RE = re.compile(r"\s*(\d{1,3})%\s*")


class HttpClient(Protocol):
    """Minimal HTTP capability: a GET returning status code and raw body."""

    def get(self, url: str) -> tuple[int, bytes]: ...


class RequestsHttpClient:
    """:class:`HttpClient` on a pooled ``requests.Session``.

    Connection-level errors surface as ``requests.RequestException``.
    """

    def __init__(self, timeout_s: float = 10.0) -> None:
        self._timeout_s = timeout_s
        self._session = requests.Session()

    def get(self, url: str) -> tuple[int, bytes]:
        response = self._session.get(url, timeout=self._timeout_s)
        return response.status_code, response.content

    def close(self) -> None:
        self._session.close()


@register_raw_source("random_org")
class NetworkStream(RawOctetProvider):
    """Batched, throttled octet stream from a remote service.

    Args:
        http: Transport; defaults to a :class:`RequestsHttpClient`.
        checkbuf_url: Endpoint returning the fill level as ``"NN%"``.
        batch_url: Endpoint returning one batch of raw octets.
        low_pct: Fill level below which the stream waits.
        high_pct: Fill level from which the stream fetches without delay.
        wait_s: Sleep between fill-level queries below *low_pct*.
        backoff_s_per_pct: Sleep per point of fill short of *high_pct*.
        sleep: Sleep function, injectable for tests.
    """

    def __init__(
        self,
        http: HttpClient | None = None,
        *,
        checkbuf_url: str = "https://www.random.org/cgi-bin/checkbuf",
        batch_url: str = "https://www.random.org/cgi-bin/randbyte?nbytes=256&format=f",
        low_pct: int = 20,
        high_pct: int = 50,
        wait_s: float = 10.0,
        backoff_s_per_pct: float = 0.2,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._owns_http = http is None
        self._http: HttpClient = http if http is not None else RequestsHttpClient()
        self._checkbuf_url = checkbuf_url
        self._batch_url = batch_url
        self._low_pct = low_pct
        self._high_pct = high_pct
        self._wait_s = wait_s
        self._backoff_s_per_pct = backoff_s_per_pct
        self._sleep = sleep

        self._buffer = b""
        self._pos = 0
        self._error = False
        self.batches_fetched = 0

    @classmethod
    def from_config(cls, config: EntropyConfig) -> NetworkStream:
        """Build from the ``network_*`` and ``throttle_*`` fields."""
        return cls(
            RequestsHttpClient(config.network_timeout_s),
            checkbuf_url=config.network_checkbuf_url,
            batch_url=config.network_batch_url,
            low_pct=config.throttle_low_pct,
            high_pct=config.throttle_high_pct,
            wait_s=config.throttle_wait_s,
            backoff_s_per_pct=config.throttle_backoff_s_per_pct,
        )

    @property
    def name(self) -> str:
        """Return ``'random_org'``."""
        return "random_org"

    @property
    def is_available(self) -> bool:
        """``False`` while the sticky error flag is set."""
        return not self._error

    def _get(self, url: str) -> bytes:
        try:
            status, body = self._http.get(url)
        except requests.RequestException as exc:
            raise SourceFailureError(f"GET {url} failed: {exc}") from exc
        if status != 200:
            raise SourceFailureError(f"GET {url} returned HTTP {status}")
        return body

    def fill_level(self) -> int:
        """Query the remote buffer fill level, in percent."""
        body = self._get(self._checkbuf_url)
        match = _FILL_LEVEL_RE.fullmatch(body.decode("ascii", errors="replace"))
        if match is None:
            raise SourceFailureError(f"Unparseable fill level from {self._checkbuf_url}: {body!r}")
        return int(match.group(1))

    def _throttle(self) -> None:
        while True:
            fill = self.fill_level()
            if fill >= self._low_pct:
                break
            logger.info("Remote buffer at %d%%, waiting %.1fs", fill, self._wait_s)
            self._sleep(self._wait_s)
        if fill < self._high_pct:
            delay = (self._high_pct - fill) * self._backoff_s_per_pct
            logger.info("Remote buffer at %d%%, backing off %.1fs", fill, delay)
            self._sleep(delay)

    def _refill(self) -> None:
        self._throttle()
        batch = self._get(self._batch_url)
        if not batch:
            raise SourceFailureError(f"Empty batch from {self._batch_url}")
        self._buffer = batch
        self._pos = 0
        self.batches_fetched += 1
        logger.debug("Fetched batch of %d octets from %s", len(batch), self._batch_url)

    def _ensure_buffer(self) -> None:
        if self._error:
            raise SourceFailureError(f"{self.name} error flag is set; call clearerr() to retry")
        if self._pos < len(self._buffer):
            return
        try:
            self._refill()
        except SourceFailureError:
            self._error = True
            logger.warning("Refill from %s failed, error flag set", self.name, exc_info=True)
            raise

    def getc(self) -> int | None:
        self._ensure_buffer()
        octet = self._buffer[self._pos]
        self._pos += 1
        return octet

    def read(self, n: int) -> bytes:
        if n < 0:
            raise InvalidArgumentError(f"Cannot read a negative number of octets: {n}")
        out = bytearray()
        while len(out) < n:
            self._ensure_buffer()
            take = min(n - len(out), len(self._buffer) - self._pos)
            out += self._buffer[self._pos : self._pos + take]
            self._pos += take
        return bytes(out)

    def ungetc(self, octet: int) -> None:
        """Push back one octet. Only the most recent octet can be pushed back."""
        if self._pos > 0:
            self._pos -= 1
        else:
            self._buffer = bytes([octet & 0xFF]) + self._buffer

    def close(self) -> None:
        """Close the HTTP session if this stream created it."""
        if self._owns_http and isinstance(self._http, RequestsHttpClient):
            self._http.close()

    def health_check(self) -> dict[str, Any]:
        return {
            "source": self.name,
            "healthy": self.is_available,
            "buffered": len(self._buffer) - self._pos,
            "batches_fetched": self.batches_fetched,
        }
