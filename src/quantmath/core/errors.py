"""
quantmath.core.errors
=====================

Exception hierarchy shared by every quantmath module.

Each family also derives from the matching built-in exception:
``ValueError`` for bad input, ``TypeError`` for mixing incompatible
quantities and ``NotImplementedError`` for unsupported operations.
"""

from __future__ import annotations


class QuantityError(Exception):
    """Base class for all errors raised by quantmath."""


# --- Parsing -----------------------------------------------------------------

class ParseError(QuantityError, ValueError):
    """A unit expression (or Q string) could not be parsed."""


class UnableToParseUnitError(ParseError):
    """The token is neither a known unit, a custom unit, nor a valid prefix+unit."""

    def __init__(self, token: str) -> None:
        super().__init__(f'Unable to parse the unit "{token}"')
        self.token = token


# --- Dimensions --------------------------------------------------------------

class DimensionError(QuantityError, ValueError):
    """A dimension vector could not be built or combined."""


class TooManyCustomDimensionsError(DimensionError):
    """More than the supported number of named custom dimensions."""


class InvalidExponentError(ParseError, DimensionError):
    """An exponent is not a nonzero integer (parser) or not an integer (pow)."""


# --- Incompatible operations -------------------------------------------------

class IncompatibleOperationError(QuantityError, TypeError):
    """The operands cannot be combined, e.g. adding metres to seconds."""


class ConflictingSpecError(IncompatibleOperationError):
    """Both ``units`` and ``dimensions`` were passed to the constructor."""


class InvalidConversionError(IncompatibleOperationError):
    """The requested conversion is not possible, e.g. converting metres to seconds."""

    def __init__(self, message: str = "Cannot convert units that aren't compatible.") -> None:
        super().__init__(message)


class UnsupportedOperationError(QuantityError, NotImplementedError):
    """The operation is recognised but deliberately not implemented."""


__all__ = [
    "QuantityError",
    "ParseError",
    "UnableToParseUnitError",
    "DimensionError",
    "TooManyCustomDimensionsError",
    "InvalidExponentError",
    "IncompatibleOperationError",
    "ConflictingSpecError",
    "InvalidConversionError",
    "UnsupportedOperationError",
]
