"""Raw octet provider subsystem for exact-entropy.

Re-exports the ABC, registry, and all built-in providers for convenient
access::

    from exact_entropy.raw import RawOctetProvider, RawSourceRegistry
    from exact_entropy.raw import CounterCipherStream, LocalRawSource
"""

from exact_entropy.raw.base import RawOctetProvider
from exact_entropy.raw.cipher import Cipher, EcbBlockCipher
from exact_entropy.raw.counter import (
    EXHAUSTED,
    ActiveState,
    CounterCipherStream,
    CounterPosition,
    ExhaustedState,
)
from exact_entropy.raw.fallback import FallbackRawSource
from exact_entropy.raw.local import LocalRawSource
from exact_entropy.raw.mock import MockUniformSource
from exact_entropy.raw.network import HttpClient, NetworkStream, RequestsHttpClient
from exact_entropy.raw.registry import RawSourceRegistry, register_raw_source

__all__ = [
    "EXHAUSTED",
    "ActiveState",
    "Cipher",
    "CounterCipherStream",
    "CounterPosition",
    "EcbBlockCipher",
    "ExhaustedState",
    "FallbackRawSource",
    "HttpClient",
    "LocalRawSource",
    "MockUniformSource",
    "NetworkStream",
    "RawOctetProvider",
    "RawSourceRegistry",
    "RequestsHttpClient",
    "register_raw_source",
]
