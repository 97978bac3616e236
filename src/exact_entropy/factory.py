"""Config-driven construction of raw providers and entropy sources.

This is the wiring point between :class:`~exact_entropy.config.EntropyConfig`
and the backends: ``raw_source_type`` is resolved through the
:class:`~exact_entropy.raw.registry.RawSourceRegistry` and the result is
wrapped in a :class:`~exact_entropy.raw.fallback.FallbackRawSource` when
``fallback_mode`` asks for one.
"""

from __future__ import annotations

import logging
from typing import Any

# Imported for their @register_raw_source side effects.
import exact_entropy.raw  # noqa: F401
from exact_entropy.config import EntropyConfig, resolve_config
from exact_entropy.exceptions import ConfigValidationError
from exact_entropy.logging.logger import DrawLogger
from exact_entropy.raw.base import RawOctetProvider
from exact_entropy.raw.fallback import FallbackRawSource
from exact_entropy.raw.registry import RawSourceRegistry
from exact_entropy.source import EntropySource

logger = logging.getLogger("exact_entropy")

_FALLBACK_MODES: frozenset[str] = frozenset({"error", "local", "mock_uniform"})


def build_raw_source(config: EntropyConfig) -> RawOctetProvider:
    """Build the raw provider chain described by *config*.

    Raises:
        ConfigValidationError: For an unknown source type or fallback mode.
    """
    try:
        primary = RawSourceRegistry.build(config.raw_source_type, config)
    except KeyError as exc:
        raise ConfigValidationError(str(exc.args[0])) from exc

    if config.fallback_mode not in _FALLBACK_MODES:
        raise ConfigValidationError(
            f"Unknown fallback_mode {config.fallback_mode!r}; "
            f"expected one of {', '.join(sorted(_FALLBACK_MODES))}"
        )
    if config.fallback_mode == "error":
        return primary
    if config.fallback_mode == config.raw_source_type:
        logger.warning("fallback_mode equals raw_source_type %r; no fallback added", primary.name)
        return primary

    fallback = RawSourceRegistry.build(config.fallback_mode, config)
    return FallbackRawSource(primary, fallback)


def build_entropy_source(config: EntropyConfig | None = None, **overrides: Any) -> EntropySource:
    """Build an :class:`EntropySource` from config plus keyword overrides.

    Example::

        source = build_entropy_source(raw_source_type="crypt_counter", counter_seed="demo")
    """
    config = resolve_config(config if config is not None else EntropyConfig(), overrides)
    draw_logger = DrawLogger(config)
    return EntropySource(build_raw_source(config), draw_logger)
