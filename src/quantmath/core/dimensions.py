# quantmath.core.dimensions

from __future__ import annotations

from dataclasses import dataclass, field
from numbers import Integral
from typing import Any, Iterable, Sequence, Tuple

from quantmath.core.errors import (
    DimensionError,
    InvalidExponentError,
    TooManyCustomDimensionsError,
)

# How many basic dimensions there are, as opposed to custom dimensions like the
# "pax" and "direction" in "passengers per hour per direction".
NUM_BASE_DIMENSIONS = 9
MAX_CUSTOM_DIMENSIONS = 4

BASE_DIMENSION_NAMES: Tuple[str, ...] = (
    "mass",
    "length",
    "time",
    "temperature",
    "current",
    "substance",
    "luminosity",
    "information",
    "angle",
)

# short labels used by __repr__
_LABELS = ("M", "L", "T", "Θ", "I", "N", "J", "B", "A")


def _as_int(value: Any) -> int:
    """Coerce an exponent to int, rejecting anything that isn't integral."""
    if isinstance(value, bool):
        raise InvalidExponentError(f"Dimension exponents must be integers, got {value!r}")
    if isinstance(value, Integral):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise InvalidExponentError(f"Dimension exponents must be integers, got {value!r}")


@dataclass(frozen=True, slots=True, init=False, eq=False)
class Dimensions:
    """
    Immutable vector of integer exponents over the 9 base dimensions
    (mass, length, time, temperature, current, substance, luminosity,
    information, angle), plus up to 4 named custom dimensions.

    ``exponents`` holds the 9 base exponents followed by one exponent per
    entry of ``custom_names``. Custom names must be unique and sorted.

    >>> Dimensions((0, 0, -1, 0, 0, 0, 0, 0, 0, -1, 1), ("direction", "pax"))
    [T^-1]{direction^-1}{pax^1}
    """

    base: Tuple[int, ...]
    custom_names: Tuple[str, ...]
    custom_values: Tuple[int, ...]
    dimensionality: int = field(repr=False)

    def __init__(self, exponents: Iterable[Any], custom_names: Sequence[str] = ()) -> None:
        values = tuple(_as_int(x) for x in exponents)
        names = tuple(custom_names)

        if len(values) < NUM_BASE_DIMENSIONS:
            raise DimensionError("not enough dimensions specified for Quantity.")
        if len(values) != NUM_BASE_DIMENSIONS + len(names):
            raise DimensionError(
                "If a Quantity includes custom dimensions, they must be named via custom_names"
            )
        if len(names) > MAX_CUSTOM_DIMENSIONS:
            raise TooManyCustomDimensionsError(
                f"At most {MAX_CUSTOM_DIMENSIONS} custom dimensions are supported, got {len(names)}."
            )
        # strictly ascending also rules out duplicates like ("a", "a")
        if any(names[i] <= names[i - 1] for i in range(1, len(names))):
            raise DimensionError("custom_names is not sorted into the correct alphabetical order.")

        object.__setattr__(self, "base", values[:NUM_BASE_DIMENSIONS])
        object.__setattr__(self, "custom_names", names)
        object.__setattr__(self, "custom_values", values[NUM_BASE_DIMENSIONS:])
        object.__setattr__(self, "dimensionality", sum(abs(x) for x in values))

    # --- Helpers ---
    @property
    def exponents(self) -> Tuple[int, ...]:
        return self.base + self.custom_values

    @property
    def custom(self) -> dict[str, int]:
        return dict(zip(self.custom_names, self.custom_values))

    @property
    def is_dimensionless(self) -> bool:
        return self is DIMENSIONLESS or self.dimensionality == 0

    def _custom_key(self) -> Tuple[Tuple[str, int], ...]:
        # zero-valued custom entries don't affect equality
        return tuple((n, v) for n, v in zip(self.custom_names, self.custom_values) if v != 0)

    def equal_to(self, other: "Dimensions") -> bool:
        """Compare base exponents, then custom exponents over the union of names."""
        return self.base == other.base and self._custom_key() == other._custom_key()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dimensions):
            return NotImplemented
        return self.equal_to(other)

    def __hash__(self) -> int:
        return hash((self.base, self._custom_key()))

    # --- Algebra ---
    def multiply(self, other: "Dimensions") -> "Dimensions":
        """Add exponents; custom dimensions are merged by name."""
        base = tuple(x + y for x, y in zip(self.base, other.base, strict=True))
        if not self.custom_names and not other.custom_names:
            return Dimensions(base)

        mine = {n: v for n, v in self.custom.items() if v != 0}
        theirs = {n: v for n, v in other.custom.items() if v != 0}
        names = sorted(set(mine) | set(theirs))
        # the limit applies to the union, even if some exponents cancel below
        if len(names) > MAX_CUSTOM_DIMENSIONS:
            raise TooManyCustomDimensionsError(
                f"Cannot combine custom dimensions {self.custom_names} and {other.custom_names}: "
                f"more than {MAX_CUSTOM_DIMENSIONS} custom dimensions."
            )
        merged = {n: mine.get(n, 0) + theirs.get(n, 0) for n in names}
        merged = {n: v for n, v in merged.items() if v != 0}
        return Dimensions(base + tuple(merged.values()), tuple(merged))

    def invert(self) -> "Dimensions":
        return Dimensions(tuple(-x for x in self.exponents), self.custom_names)

    def pow(self, n: Any) -> "Dimensions":
        if isinstance(n, bool) or not (
            isinstance(n, Integral) or (isinstance(n, float) and n.is_integer())
        ):
            raise InvalidExponentError("Dimensions.pow(n): n must be an integer")
        n = int(n)
        if n == 0:
            return DIMENSIONLESS
        return Dimensions(tuple(x * n for x in self.exponents), self.custom_names)

    # --- Operator overloads ---
    def __mul__(self, other: "Dimensions") -> "Dimensions":
        if not isinstance(other, Dimensions):
            return NotImplemented
        return self.multiply(other)

    def __pow__(self, n: int, modulo: Any | None = None) -> "Dimensions":
        if modulo is not None:
            raise TypeError("Modulo exponentiation is not supported for Dimensions.")
        return self.pow(n)

    def __invert__(self) -> "Dimensions":
        return self.invert()

    def __repr__(self) -> str:
        parts = "".join(f"[{label}^{v}]" for label, v in zip(_LABELS, self.base) if v != 0)
        parts += "".join(f"{{{n}^{v}}}" for n, v in zip(self.custom_names, self.custom_values))
        return parts or "[1]"


# --- Public constants --------------------------------------------------------

def _base(index: int) -> Dimensions:
    exps = [0] * NUM_BASE_DIMENSIONS
    exps[index] = 1
    return Dimensions(exps)


DIMENSIONLESS = Dimensions((0,) * NUM_BASE_DIMENSIONS)
MASS        = _base(0)
LENGTH      = _base(1)
TIME        = _base(2)
TEMPERATURE = _base(3)
CURRENT     = _base(4)
SUBSTANCE   = _base(5)
LUMINOSITY  = _base(6)
INFORMATION = _base(7)
ANGLE       = _base(8)


def custom_dimension(name: str) -> Dimensions:
    """A single named custom dimension with exponent 1."""
    return Dimensions((0,) * NUM_BASE_DIMENSIONS + (1,), (name,))


__all__ = [
    "Dimensions",
    "DIMENSIONLESS",
    "MASS",
    "LENGTH",
    "TIME",
    "TEMPERATURE",
    "CURRENT",
    "SUBSTANCE",
    "LUMINOSITY",
    "INFORMATION",
    "ANGLE",
    "BASE_DIMENSION_NAMES",
    "MAX_CUSTOM_DIMENSIONS",
    "custom_dimension",
]
