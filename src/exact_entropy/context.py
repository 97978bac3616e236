"""Dynamically scoped "current entropy source".

The algorithms in :mod:`exact_entropy.algorithms` never take a source
argument; they use whatever source is current. The current source is the
top of a stack held in a :class:`contextvars.ContextVar`, so each thread
and each asyncio task sees its own stack, and a scope entered with
:func:`using_entropy_source` is always unwound, whether the body returns
or raises.

When the stack is empty the process default is used, built on first use
from :class:`~exact_entropy.config.EntropyConfig` (environment and
``.env`` included).
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, TypeVar

from exact_entropy.exceptions import InvalidArgumentError
from exact_entropy.source import EntropySource

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

_T = TypeVar("_T")

_stack: ContextVar[tuple[EntropySource, ...]] = ContextVar("exact_entropy_sources", default=())

_default_lock = threading.Lock()
_default_source: EntropySource | None = None


def default_source() -> EntropySource:
    """Return the process default source, building it if needed."""
    global _default_source
    with _default_lock:
        if _default_source is None:
            from exact_entropy.factory import build_entropy_source

            _default_source = build_entropy_source()
        return _default_source


def set_default_source(source: EntropySource | None) -> EntropySource | None:
    """Replace the process default source and return the previous one.

    ``None`` drops the default so that the next use rebuilds it from config.
    The previous source is not closed.
    """
    global _default_source
    with _default_lock:
        previous, _default_source = _default_source, source
    return previous


def entropy_source() -> EntropySource:
    """Return the current source: innermost scope, else the default."""
    stack = _stack.get()
    if stack:
        return stack[-1]
    return default_source()


@contextmanager
def using_entropy_source(source: EntropySource) -> Iterator[EntropySource]:
    """Make *source* current for the duration of a ``with`` block.

    Example::

        with using_entropy_source(EntropySource(CounterCipherStream.from_seed("demo"))):
            hand = choose(5, deck)
    """
    if not isinstance(source, EntropySource):
        raise InvalidArgumentError(f"Expected an EntropySource, got {type(source).__name__}")
    token = _stack.set((*_stack.get(), source))
    try:
        yield source
    finally:
        _stack.reset(token)


def with_entropy_source(
    source: EntropySource, func: Callable[..., _T], *args: Any, **kwargs: Any
) -> _T:
    """Call ``func(*args, **kwargs)`` with *source* current and return its result."""
    with using_entropy_source(source):
        return func(*args, **kwargs)
