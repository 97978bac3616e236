"""Exception hierarchy for exact-entropy.

All exceptions derive from ExactEntropyError, enabling broad catch patterns
at the application boundary while allowing fine-grained handling internally.
"""


class ExactEntropyError(Exception):
    """Base exception for all exact-entropy errors."""


class InvalidArgumentError(ExactEntropyError):
    """An operation was called with parameters outside its domain.

    Raised for negative bit counts, non-positive limits, negative or
    all-zero weights, impossible selection sizes, non-finite floating-point
    bounds and empty inputs to choice operations.
    """


class UnrepresentablePositionError(InvalidArgumentError):
    """A stream position does not fit the fixed-width offset form.

    The opaque ``getpos()``/``setpos()`` form remains valid; only the
    integer offset interface (``tell()``/``seek()``) gives up.
    """


class SourceFailureError(ExactEntropyError):
    """The raw octet provider could not supply the required octets.

    Raised when a stream is exhausted, a transport error occurs, a sticky
    error flag is set, or the counter space of a cipher stream is used up.
    """


class ConfigValidationError(ExactEntropyError):
    """Configuration field validation failed.

    Raised when overrides name unknown fields or when a backend is
    configured inconsistently (e.g. a counter stream without a key).
    """
