"""
quantmath: physical quantities with units, uncertainty and dimensional safety.

quantmath parses unit expressions such as ``"kg⋅m/s^2"`` or ``"pphpd"``,
checks dimensions on every operation, propagates ``±`` uncertainties and
picks compact units for display (``kg⋅m/s^2`` prints as ``N``).
This module exposes a minimal, stable public API. Heavy subsystems (e.g. the units registry)
are imported lazily to avoid import-time side effects and circular imports.
"""

import logging
from importlib import import_module
from importlib import metadata as _metadata
from pathlib import Path
from typing import TYPE_CHECKING, Any

__author__ = "quantmath contributors"
__license__ = "MIT"

# Try to read the installed package version first; fall back to pyproject.toml for local dev.
try:
    __version__ = _metadata.version("quantmath")
except _metadata.PackageNotFoundError:
    import tomllib
    with open(Path(__file__).resolve().parents[2] / "pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

logging.getLogger(__name__).addHandler(logging.NullHandler())

if TYPE_CHECKING:  # pragma: no cover - typing aid only
    from quantmath.core.dimensions import Dimensions
    from quantmath.core.quantity import Quantity, SerializedQuantity
    from quantmath.q import Q
    from quantmath.units.parser import ParsedUnit
    from quantmath.units.registry import UnitsRegistry

# Lazy access helpers -------------------------------------------------------

# public name -> defining module
_EXPORTS = {
    "Quantity": "quantmath.core.quantity",
    "SerializedQuantity": "quantmath.core.quantity",
    "Dimensions": "quantmath.core.dimensions",
    "DIMENSIONLESS": "quantmath.core.dimensions",
    "Q": "quantmath.q",
    "ParsedUnit": "quantmath.units.parser",
    "parse_units": "quantmath.units.parser",
    "format_units": "quantmath.units.parser",
    "UnitsRegistry": "quantmath.units.registry",
    "DEFAULT_REGISTRY": "quantmath.units.registry",
    "UnitSimplifier": "quantmath.core.unit_simplifier",
    "SI_BASIS": "quantmath.core.unit_simplifier",
    "QuantityError": "quantmath.core.errors",
    "ParseError": "quantmath.core.errors",
    "UnableToParseUnitError": "quantmath.core.errors",
    "DimensionError": "quantmath.core.errors",
    "TooManyCustomDimensionsError": "quantmath.core.errors",
    "InvalidExponentError": "quantmath.core.errors",
    "IncompatibleOperationError": "quantmath.core.errors",
    "ConflictingSpecError": "quantmath.core.errors",
    "InvalidConversionError": "quantmath.core.errors",
    "UnsupportedOperationError": "quantmath.core.errors",
}

# Public names exposed by the package. Keep this minimal and stable.
__all__ = ["__version__", "__author__", "__license__", *_EXPORTS]


def __getattr__(name: str) -> Any:
    """
    Lazy attribute access. ``quantmath.Quantity`` imports the quantity module
    (and with it the default registry) on first use.
    """
    module = _EXPORTS.get(name)
    if module is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    value = getattr(import_module(module), name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    # Improve discoverability in REPL / autocomplete.
    return sorted(list(globals().keys()) + list(_EXPORTS))
