"""Raw octet provider registry with entry-point auto-discovery.

Bundled backends register themselves at import time through the
``@register_raw_source`` decorator. Backends shipped by other packages are
picked up lazily, the first time a lookup misses, from the
``exact_entropy.raw_sources`` entry-point group.
"""

from __future__ import annotations

import importlib.metadata
import inspect
import logging
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from collections.abc import Callable

    from exact_entropy.config import EntropyConfig
    from exact_entropy.raw.base import RawOctetProvider

logger = logging.getLogger("exact_entropy")

_ENTRY_POINT_GROUP = "exact_entropy.raw_sources"


def _accepts_config(cls: type) -> bool:
    """Check whether a provider constructor takes an ``EntropyConfig`` first.

    A first parameter annotated ``EntropyConfig`` (or, unannotated, named
    ``config``) counts.
    """
    try:
        params = list(inspect.signature(cls).parameters.values())
    except (ValueError, TypeError):
        return False
    if not params:
        return False
    first = params[0]
    if first.annotation is inspect.Parameter.empty:
        return first.name == "config"
    annotation = first.annotation
    if isinstance(annotation, str):
        return "EntropyConfig" in annotation
    return getattr(annotation, "__name__", "") == "EntropyConfig"


class RawSourceRegistry:
    """Name -> class mapping for raw octet providers.

    Lookup order:

    1. Classes registered with ``@register_raw_source``
    2. Entry points in ``exact_entropy.raw_sources`` (loaded once, on the
       first miss)
    """

    _registry: ClassVar[dict[str, type[RawOctetProvider]]] = {}
    _entry_points_loaded: ClassVar[bool] = False

    @classmethod
    def register(cls, name: str) -> Callable[[type[RawOctetProvider]], type[RawOctetProvider]]:
        """Decorator registering a provider class under *name*.

        Example::

            @RawSourceRegistry.register("hwrng")
            class HardwareSource(RawOctetProvider):
                ...
        """

        def decorator(source_cls: type[RawOctetProvider]) -> type[RawOctetProvider]:
            cls._registry[name] = source_cls
            return source_cls

        return decorator

    @classmethod
    def get(cls, name: str) -> type[RawOctetProvider]:
        """Look up a provider class by name.

        Raises:
            KeyError: If *name* is unknown even after loading entry points.
        """
        if name not in cls._registry and not cls._entry_points_loaded:
            cls._load_entry_points()
        try:
            return cls._registry[name]
        except KeyError:
            available = ", ".join(sorted(cls._registry)) or "(none)"
            raise KeyError(f"Unknown raw source: {name!r}. Available: {available}") from None

    @classmethod
    def build(cls, name: str, config: EntropyConfig) -> RawOctetProvider:
        """Instantiate the provider registered as *name*.

        A ``from_config`` classmethod is preferred; otherwise the config is
        passed only to constructors that ask for it.
        """
        source_cls = cls.get(name)
        from_config = getattr(source_cls, "from_config", None)
        if from_config is not None:
            return from_config(config)
        if _accepts_config(source_cls):
            return source_cls(config)  # type: ignore[call-arg]
        return source_cls()

    @classmethod
    def list_available(cls) -> list[str]:
        """Return all registered provider names, entry points included."""
        if not cls._entry_points_loaded:
            cls._load_entry_points()
        return sorted(cls._registry)

    @classmethod
    def _load_entry_points(cls) -> None:
        """Register providers advertised through the entry-point group.

        A broken entry point is logged and skipped; it never hides the
        others. Decorator registrations win over entry points of the same name.
        """
        cls._entry_points_loaded = True
        try:
            eps = importlib.metadata.entry_points(group=_ENTRY_POINT_GROUP)
        except Exception:  # Intentional: broken metadata must not break lookups
            logger.warning("Failed to load entry points for %s", _ENTRY_POINT_GROUP, exc_info=True)
            return

        for ep in eps:
            if ep.name in cls._registry:
                continue
            try:
                cls._registry[ep.name] = ep.load()
            except Exception:  # Intentional: one bad plugin must not block others
                logger.warning(
                    "Failed to load raw source entry point %r: %s",
                    ep.name,
                    ep.value,
                    exc_info=True,
                )
            else:
                logger.debug("Loaded raw source %r from entry point", ep.name)

    @classmethod
    def _reset(cls) -> None:
        """Reset registry state. **Test-only** -- not part of public API."""
        cls._registry.clear()
        cls._entry_points_loaded = False


register_raw_source = RawSourceRegistry.register
