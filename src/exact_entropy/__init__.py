"""exact-entropy: exact, bias-free random values from any octet source.

Turns raw octets -- from the OS, a device, a network service, or a block
cipher in counter mode -- into exactly uniform integers, weighted choices,
fixed-point and floating-point fractions, combinations and permutations.
"""

from __future__ import annotations

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("exact-entropy")
except PackageNotFoundError:
    __version__ = "0.0.0"

from exact_entropy.algorithms import (
    choose,
    choose_r,
    pick,
    pick_r,
    rand,
    rand_bits,
    rand_fix,
    rand_flt,
    rand_int,
    rand_prob,
    shuffle,
    shuffle_r,
)
from exact_entropy.config import EntropyConfig, resolve_config
from exact_entropy.context import (
    entropy_source,
    set_default_source,
    using_entropy_source,
    with_entropy_source,
)
from exact_entropy.exceptions import (
    ConfigValidationError,
    ExactEntropyError,
    InvalidArgumentError,
    SourceFailureError,
    UnrepresentablePositionError,
)
from exact_entropy.factory import build_entropy_source, build_raw_source
from exact_entropy.source import EntropySource

__all__ = [
    "ConfigValidationError",
    "EntropyConfig",
    "EntropySource",
    "ExactEntropyError",
    "InvalidArgumentError",
    "SourceFailureError",
    "UnrepresentablePositionError",
    "__version__",
    "build_entropy_source",
    "build_raw_source",
    "choose",
    "choose_r",
    "entropy_source",
    "pick",
    "pick_r",
    "rand",
    "rand_bits",
    "rand_fix",
    "rand_flt",
    "rand_int",
    "rand_prob",
    "resolve_config",
    "set_default_source",
    "shuffle",
    "shuffle_r",
    "using_entropy_source",
    "with_entropy_source",
]
