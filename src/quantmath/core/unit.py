from __future__ import annotations

from dataclasses import dataclass, field
from math import isclose, isfinite
from typing import Optional, Protocol, runtime_checkable

from quantmath.core.dimensions import Dimensions, custom_dimension
from quantmath.units.prefixes import Prefix


@runtime_checkable
class Unit(Protocol):
    symbol: str

    @property
    def scale_to_si(self) -> float: ...

    @property
    def dim(self) -> Dimensions: ...

    # Additive shift to canonical units (°C, °F); None for purely multiplicative units.
    @property
    def offset(self) -> Optional[float]: ...

    @property
    def is_affine(self) -> bool: ...

    def accepts_prefix(self, prefix: Prefix) -> bool: ...


@dataclass(frozen=True, slots=True)
class UnitDefinition:
    """A registry entry: how one unit relates to the canonical base units."""

    symbol: str
    scale_to_si: float
    dim: Dimensions
    offset: Optional[float] = None
    prefixable: bool = False
    binary_prefixable: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.dim, Dimensions):
            raise TypeError("dim must be a Dimensions instance")
        if not (self.scale_to_si > 0 and isfinite(self.scale_to_si)):
            raise ValueError("scale_to_si must be a positive, finite number")
        if self.is_affine and (self.prefixable or self.binary_prefixable):
            raise ValueError(f"Offset unit '{self.symbol}' cannot accept prefixes")

    @property
    def is_affine(self) -> bool:
        return bool(self.offset)

    def accepts_prefix(self, prefix: Prefix) -> bool:
        return self.binary_prefixable if prefix.binary else self.prefixable

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UnitDefinition):
            return NotImplemented
        # dimension must match exactly; scale_to_si can have tiny FP noise
        return (
            self.symbol == other.symbol
            and self.dim == other.dim
            and isclose(self.scale_to_si, other.scale_to_si, rel_tol=1e-12, abs_tol=0.0)
            and (self.offset or 0.0) == (other.offset or 0.0)
        )

    def __hash__(self) -> int:
        return hash((self.symbol, self.dim))


@dataclass(frozen=True, slots=True)
class CustomUnit:
    """
    An ad hoc unit such as ``_foo``: scale 1, one custom dimension named after
    the symbol without its leading underscore. Never prefixable and never
    stored in a registry.
    """

    symbol: str
    dim: Dimensions = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.symbol.startswith("_") or len(self.symbol) < 2:
            raise ValueError(f"Custom unit symbols start with '_': got {self.symbol!r}")
        object.__setattr__(self, "dim", custom_dimension(self.symbol[1:]))

    @property
    def scale_to_si(self) -> float:
        return 1.0

    @property
    def offset(self) -> Optional[float]:
        return None

    @property
    def is_affine(self) -> bool:
        return False

    def accepts_prefix(self, prefix: Prefix) -> bool:
        return False


def is_custom_symbol(symbol: str) -> bool:
    return symbol.startswith("_")


__all__ = ["Unit", "UnitDefinition", "CustomUnit", "is_custom_symbol"]
