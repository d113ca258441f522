"""
quantmath.core.quantity
=======================

Defines the `Quantity` value type: a magnitude tied to `Dimensions`, with an
optional uncertainty (``plus_minus``) and an optional memory of the units it
was written in.

- The magnitude is always stored in canonical base units (kg, m, s, K, A,
  mol, cd, bit, rad), so arithmetic never needs to know about display units.
- The remembered units (``unit_hint``) are only used to choose output units
  in `to_string` / `get`; they never change a result's value.
- Quantities are immutable. Every operation returns a new instance.

Example
-------
>>> x = Quantity(500, units="g")
>>> y = Quantity(5, units="kg")
>>> str(x + y)
'5500 g'
>>> (y + x).get()
{'magnitude': 5.5, 'units': 'kg'}
"""

from __future__ import annotations

import logging
import math
from typing import NotRequired, Optional, Sequence, Tuple, TypedDict, Union

from quantmath.core.dimensions import DIMENSIONLESS, Dimensions
from quantmath.core.errors import (
    ConflictingSpecError,
    IncompatibleOperationError,
    InvalidConversionError,
    UnsupportedOperationError,
)
from quantmath.core.unit_simplifier import SI_BASIS, UnitSimplifier
from quantmath.core.utils import format_value
from quantmath.units.parser import ParsedUnit, ParsedUnits, format_units, parse_units
from quantmath.units.prefixes import prefix_factor
from quantmath.units.registry import DEFAULT_REGISTRY

logger = logging.getLogger(__name__)

Number = Union[int, float]
UnitsLike = Union[str, Sequence[ParsedUnit]]

# 0.01 %, used by equals_approx when neither side has an uncertainty
DEFAULT_RELATIVE_TOLERANCE = 1e-4

_SIMPLIFIER = UnitSimplifier(DEFAULT_REGISTRY)


class SerializedQuantity(TypedDict):
    """JSON-friendly form returned by `Quantity.get` and friends."""

    magnitude: float
    units: str
    significantFigures: NotRequired[int]
    plusMinus: NotRequired[float]


def _as_parsed(units: UnitsLike) -> ParsedUnits:
    if isinstance(units, str):
        return parse_units(units)
    parsed = tuple(units)
    for pu in parsed:
        if not isinstance(pu, ParsedUnit):
            raise TypeError(f"units must be a string or a sequence of ParsedUnit, got {pu!r}")
    return parsed


def _unit_dim(pu: ParsedUnit) -> Dimensions:
    return DEFAULT_REGISTRY.unit_for(pu.unit).dim


def _is_single_dimensionless(hint: Optional[ParsedUnits]) -> bool:
    return hint is not None and len(hint) == 1 and _unit_dim(hint[0]).is_dimensionless


def _normalize_hint(units: Sequence[ParsedUnit]) -> Optional[ParsedUnits]:
    kept = tuple(pu for pu in units if pu.power != 0)
    return kept or None


def _union_hints(first: Optional[ParsedUnits], second: Optional[ParsedUnits]) -> Optional[ParsedUnits]:
    """Units of both hints, de-duplicated by symbol; earlier entries win."""
    seen: dict[str, ParsedUnit] = {}
    for pu in (first or ()) + (second or ()):
        seen.setdefault(pu.symbol, pu)
    return _normalize_hint(tuple(seen.values()))


def _merge_hints_by_dimension(
    first: Optional[ParsedUnits], second: Optional[ParsedUnits]
) -> Optional[ParsedUnits]:
    """
    Hint for a product. ``ft`` times ``in`` stays ``ft^2``; ``ft`` times
    ``lb`` becomes ``ft⋅lb``. A lone dimensionless unit such as ``%`` gives
    way to the other side's units, so ``50 % * 400 g`` prints in grams.
    """
    if _is_single_dimensionless(first) and second:
        return second
    if _is_single_dimensionless(second) and first:
        return first

    merged = list(first or ())
    for pu in second or ():
        dim = _unit_dim(pu)
        for i, existing in enumerate(merged):
            if _unit_dim(existing) == dim:
                merged[i] = existing.with_power(existing.power + pu.power)
                break
        else:
            merged.append(pu)
    return _normalize_hint(merged)


class Quantity:
    """
    A magnitude with dimensions, an optional uncertainty and optional
    remembered units.

    Parameters
    ----------
    magnitude : float
        The numeric value, expressed in ``units`` if given.
    dimensions : Dimensions, optional
        Explicit dimensions for a magnitude already in canonical units.
        Cannot be combined with ``units``.
    units : str or sequence of ParsedUnit, optional
        E.g. ``"km/h"``. The magnitude (and ``plus_minus``) are converted to
        canonical units and the units are remembered for display.
    significant_figures : int, optional
        Precision used by `to_string`.
    plus_minus : float, optional
        Absolute uncertainty, in the same units as ``magnitude``.

    Raises
    ------
    ConflictingSpecError
        If both ``units`` and ``dimensions`` are given.
    IncompatibleOperationError
        If an offset unit (``degC``, ``degF``) is combined with other units
        or raised to a power.
    """

    __slots__ = (
        "_magnitude",
        "_dimensions",
        "_plus_minus",
        "_significant_figures",
        "_unit_hint",
        "_applied_offset",
    )

    def __init__(
        self,
        magnitude: Number,
        *,
        dimensions: Optional[Dimensions] = None,
        units: Optional[UnitsLike] = None,
        significant_figures: Optional[int] = None,
        plus_minus: Optional[Number] = None,
    ) -> None:
        if units is not None and dimensions is not None:
            raise ConflictingSpecError("You can specify units or dimensions, but not both.")
        if dimensions is not None and not isinstance(dimensions, Dimensions):
            raise TypeError("dimensions must be a Dimensions instance")
        if significant_figures is not None and significant_figures < 1:
            raise ValueError("significant_figures must be a positive integer")

        self._magnitude = float(magnitude)
        self._dimensions = dimensions if dimensions is not None else DIMENSIONLESS
        self._plus_minus = None if plus_minus is None else float(plus_minus)
        self._significant_figures = significant_figures
        self._unit_hint: Optional[ParsedUnits] = None
        self._applied_offset: Optional[float] = None

        if units is not None:
            parsed = _as_parsed(units)
            self._unit_hint = _normalize_hint(parsed)
            self._fold_units(parsed)

    def _fold_units(self, parsed: ParsedUnits) -> None:
        offset: Optional[float] = None
        for pu in parsed:
            unit = DEFAULT_REGISTRY.unit_for(pu.unit)
            if unit.is_affine:
                if len(parsed) != 1 or pu.power != 1:
                    raise IncompatibleOperationError(
                        "It is not permitted to use compound units that include the offset "
                        f"unit \"{unit.symbol}\". Try using K, deltaC, or the equivalent."
                    )
                offset = unit.offset
            scale = (unit.scale_to_si * prefix_factor(pu.prefix)) ** pu.power
            self._magnitude *= scale
            if self._plus_minus is not None:
                self._plus_minus *= scale
            self._dimensions = self._dimensions * unit.dim ** pu.power

        if offset is not None:
            self._magnitude += offset
            self._applied_offset = offset

    @classmethod
    def _from_parts(
        cls,
        magnitude: float,
        dimensions: Dimensions,
        *,
        plus_minus: Optional[float] = None,
        significant_figures: Optional[int] = None,
        unit_hint: Optional[ParsedUnits] = None,
    ) -> "Quantity":
        """Build a quantity from canonical values without parsing anything."""
        q = cls.__new__(cls)
        q._magnitude = magnitude
        q._dimensions = dimensions
        q._plus_minus = plus_minus
        q._significant_figures = significant_figures
        q._unit_hint = _normalize_hint(unit_hint) if unit_hint else None
        q._applied_offset = None
        return q

    def _with_hint(self, unit_hint: Optional[ParsedUnits]) -> "Quantity":
        return Quantity._from_parts(
            self._magnitude,
            self._dimensions,
            plus_minus=self._plus_minus,
            significant_figures=self._significant_figures,
            unit_hint=unit_hint,
        )

    # --- Read-only attributes ---
    @property
    def magnitude(self) -> float:
        """Value in canonical base units (kg, m, s, K, ...)."""
        return self._magnitude

    @property
    def dimensions(self) -> Dimensions:
        return self._dimensions

    @property
    def plus_minus(self) -> Optional[float]:
        """Absolute uncertainty in canonical base units, or None."""
        return self._plus_minus

    @property
    def significant_figures(self) -> Optional[int]:
        return self._significant_figures

    @property
    def unit_hint(self) -> Optional[ParsedUnits]:
        return self._unit_hint

    @property
    def is_dimensionless(self) -> bool:
        return self._dimensions.is_dimensionless

    # --- Arithmetic ---
    def _check_no_sig_figs(self, other: "Quantity", op: str) -> None:
        if self._significant_figures is not None or other._significant_figures is not None:
            raise UnsupportedOperationError(
                f"{op} is not implemented for quantities with significant_figures set."
            )

    def add(self, y: "Quantity") -> "Quantity":
        """
        Add two quantities of the same dimensions.

        The absolute uncertainties are summed. The result remembers the
        units of both operands, this one's first.
        """
        if not self._dimensions.equal_to(y._dimensions):
            raise IncompatibleOperationError("Cannot add quantities with different units.")
        self._check_no_sig_figs(y, "add")

        if self._plus_minus is None and y._plus_minus is None:
            plus_minus = None
        else:
            plus_minus = abs(self._plus_minus or 0.0) + abs(y._plus_minus or 0.0)

        return Quantity._from_parts(
            self._magnitude + y._magnitude,
            self._dimensions,
            plus_minus=plus_minus,
            unit_hint=_union_hints(self._unit_hint, y._unit_hint),
        )

    def negate(self) -> "Quantity":
        return Quantity._from_parts(
            -self._magnitude,
            self._dimensions,
            plus_minus=self._plus_minus,
            significant_figures=self._significant_figures,
            unit_hint=self._unit_hint,
        )

    def sub(self, y: "Quantity") -> "Quantity":
        return self.add(y.negate())

    def multiply(self, y: "Quantity") -> "Quantity":
        """
        Multiply two quantities.

        If only one side is uncertain its uncertainty is scaled by the other
        magnitude; if both are, their relative uncertainties are added.
        """
        self._check_no_sig_figs(y, "multiply")
        m1, m2 = self._magnitude, y._magnitude
        u1, u2 = self._plus_minus, y._plus_minus

        if u1 is None and u2 is None:
            plus_minus = None
        elif u2 is None:
            plus_minus = abs(u1 * m2)
        elif u1 is None:
            plus_minus = abs(u2 * m1)
        elif m1 != 0 and m2 != 0:
            plus_minus = abs((u1 / m1 + u2 / m2) * (m1 * m2))
        else:
            plus_minus = abs(u1 * m2 + u2 * m1)

        return Quantity._from_parts(
            m1 * m2,
            self._dimensions * y._dimensions,
            plus_minus=plus_minus,
            unit_hint=_merge_hints_by_dimension(self._unit_hint, y._unit_hint),
        )

    def pow(self, n: int) -> "Quantity":
        """
        Raise to an integer power.

        The uncertainty becomes the relative uncertainty times ``n``; it is
        not rescaled by the new magnitude. Zero raised to a negative power,
        or a result too large for a float, gives an infinite magnitude.
        """
        dimensions = self._dimensions.pow(n)
        n = int(n)
        if self._significant_figures is not None:
            raise UnsupportedOperationError(
                "pow is not implemented for quantities with significant_figures set."
            )

        plus_minus = self._plus_minus
        if plus_minus and self._magnitude != 0:
            plus_minus = (plus_minus / self._magnitude) * n

        hint = None
        if n != 0 and self._unit_hint:
            hint = tuple(pu.with_power(pu.power * n) for pu in self._unit_hint)

        try:
            magnitude = self._magnitude ** n
        except ZeroDivisionError:
            # 0 ** -n, like 1 / 0.0 in IEEE arithmetic
            magnitude = math.inf
        except OverflowError:
            magnitude = math.copysign(math.inf, self._magnitude) if n % 2 else math.inf

        return Quantity._from_parts(
            magnitude,
            dimensions,
            plus_minus=plus_minus,
            unit_hint=hint,
        )

    # --- Equality & comparison ---
    def equals(self, other: "Quantity") -> bool:
        """Exact equality: dimensions, magnitude, uncertainty and significant figures."""
        return (
            self._dimensions.equal_to(other._dimensions)
            and self._magnitude == other._magnitude
            and self._plus_minus == other._plus_minus
            and self._significant_figures == other._significant_figures
        )

    @staticmethod
    def compare(a: "Quantity", b: "Quantity", ignore_units: bool = False) -> int:
        """
        Three-way comparison of magnitudes: -1, 0 or 1.

        Works as a sort key with `functools.cmp_to_key`:

        >>> sorted(quantities, key=cmp_to_key(Quantity.compare))  # doctest: +SKIP
        """
        if not ignore_units and not a._dimensions.equal_to(b._dimensions):
            raise IncompatibleOperationError(
                "Cannot compare quantities with different dimensions."
            )
        if a._magnitude < b._magnitude:
            return -1
        if a._magnitude > b._magnitude:
            return 1
        return 0

    def equals_approx(self, other: "Quantity") -> bool:
        """
        Tolerance-aware equality.

        If either side has an uncertainty, the other's magnitude must lie
        within ``magnitude ± plus_minus`` of it. Otherwise the relative
        difference must be within `DEFAULT_RELATIVE_TOLERANCE`.
        """
        if not self._dimensions.equal_to(other._dimensions):
            return False

        a, b = self._magnitude, other._magnitude
        if self._plus_minus or other._plus_minus:
            return any(
                bool(u) and abs(candidate - center) <= abs(u)
                for center, u, candidate in (
                    (a, self._plus_minus, b),
                    (b, other._plus_minus, a),
                )
            )

        if a == b:
            return True
        return abs(a - b) / max(abs(a), abs(b)) <= DEFAULT_RELATIVE_TOLERANCE

    # --- Units & conversion ---
    def _output_units(self) -> ParsedUnits:
        """Remembered units if they can express this quantity, otherwise SI."""
        if self._unit_hint:
            try:
                return _SIMPLIFIER.select_units(self._dimensions, self._unit_hint)
            except InvalidConversionError:
                logger.debug(
                    "Remembered units %s cannot express %r; using SI",
                    format_units(self._unit_hint),
                    self._dimensions,
                )
        return _SIMPLIFIER.select_units(self._dimensions, SI_BASIS)

    def _value_in(self, units: ParsedUnits) -> Tuple[float, Optional[float]]:
        """Magnitude and uncertainty expressed in ``units``."""
        unit_q = Quantity(1, units=units)
        if not unit_q._dimensions.equal_to(self._dimensions):
            raise InvalidConversionError()
        offset = unit_q._applied_offset or 0.0
        scale = unit_q._magnitude - offset
        value = (self._magnitude - offset) / scale
        plus_minus = None if self._plus_minus is None else self._plus_minus / scale
        return value, plus_minus

    def _serialize(self, units: ParsedUnits, units_text: str) -> SerializedQuantity:
        value, plus_minus = self._value_in(units)
        result: SerializedQuantity = {"magnitude": value, "units": units_text}
        if self._significant_figures is not None:
            result["significantFigures"] = self._significant_figures
        if plus_minus is not None:
            result["plusMinus"] = plus_minus
        return result

    def convert(self, units: UnitsLike) -> "Quantity":
        """
        Return the same quantity, remembering ``units`` for display.

        >>> Quantity(1, units="km").convert("mi").get()  # doctest: +SKIP
        {'magnitude': 0.621371192237334, 'units': 'mi'}
        """
        parsed = _as_parsed(units)
        if not Quantity(1, units=parsed)._dimensions.equal_to(self._dimensions):
            raise InvalidConversionError()
        return self._with_hint(parsed)

    def get(self) -> SerializedQuantity:
        """Serialize in the remembered units (or SI when there are none)."""
        units = self._output_units()
        return self._serialize(units, format_units(units))

    def get_with_units(self, units: str) -> SerializedQuantity:
        """Serialize in the given units; ``units`` is echoed back verbatim."""
        return self._serialize(parse_units(units), units)

    def get_si(self) -> SerializedQuantity:
        units = _SIMPLIFIER.select_units(self._dimensions, SI_BASIS)
        return self._serialize(units, format_units(units))

    def to_si(self) -> "Quantity":
        """Same quantity, displayed in the SI basis (``N``, ``W``, ``kg⋅m^2``, ...)."""
        return self._with_hint(_SIMPLIFIER.select_units(self._dimensions, SI_BASIS))

    def to_string(self) -> str:
        units = self._output_units()
        value, plus_minus = self._value_in(units)
        text = format_value(value, plus_minus, self._significant_figures)
        unit_text = format_units(units)
        return f"{text} {unit_text}" if unit_text else text

    # --- Python protocols ---
    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        try:
            return f"Quantity('{self.to_string()}')"
        except InvalidConversionError:
            # custom dimensions with no remembered units have no printable unit
            return f"Quantity({self._magnitude!r}, dimensions={self._dimensions!r})"

    def __format__(self, spec: str) -> str:
        """
        Supported specifiers
        --------------------
        "" (empty), or "native"
            Display the quantity in its remembered units (default).
        "si"
            Display the quantity in SI units.

        >>> f"{Quantity(1500, units='g⋅m/s^2'):si}"
        '1.5 N'
        """
        spec = (spec or "").strip().lower()
        if spec in ("", "native"):
            return self.to_string()
        if spec == "si":
            return self.to_si().to_string()
        raise ValueError("Unknown format spec; use '', 'native', or 'si'")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return hash((self._magnitude, self._dimensions, self._plus_minus, self._significant_figures))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        return Quantity.compare(self, other) < 0

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        return Quantity.compare(self, other) <= 0

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        return Quantity.compare(self, other) > 0

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        return Quantity.compare(self, other) >= 0

    def __add__(self, other: "Quantity") -> "Quantity":
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: "Quantity") -> "Quantity":
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.sub(other)

    def __neg__(self) -> "Quantity":
        return self.negate()

    def __mul__(self, other: "Quantity | Number") -> "Quantity":
        # scalar × quantity
        if isinstance(other, (int, float)) and not isinstance(other, bool):
            other = Quantity(other)
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.multiply(other)

    def __rmul__(self, other: Number) -> "Quantity":
        # allows 3 * (2 m) -> 6 m
        if isinstance(other, (int, float)) and not isinstance(other, bool):
            return Quantity(other).multiply(self)
        return NotImplemented

    def __pow__(self, n: int) -> "Quantity":
        return self.pow(n)


__all__ = [
    "Quantity",
    "SerializedQuantity",
    "DEFAULT_RELATIVE_TOLERANCE",
]
