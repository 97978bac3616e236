"""Draw diagnostics logging subsystem."""

from exact_entropy.logging.logger import DrawLogger
from exact_entropy.logging.types import DrawRecord

__all__ = [
    "DrawLogger",
    "DrawRecord",
]
