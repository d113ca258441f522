from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Iterable, Optional, Tuple

from quantmath.core.errors import InvalidExponentError, ParseError, UnableToParseUnitError

if TYPE_CHECKING:
    from quantmath.units.registry import UnitsRegistry

# middle dot used when rendering; U+00B7 is accepted on input as well
UNIT_SEPARATOR = "⋅"
_SEPARATOR_RE = re.compile(r"[\s⋅·]+")
_EXPONENT_RE = re.compile(r"[+-]?\d+")


@dataclass(frozen=True, slots=True)
class ParsedUnit:
    """One factor of a compound unit, e.g. ``km^2`` -> (unit="m", power=2, prefix="k")."""

    unit: str
    power: int = 1
    prefix: Optional[str] = None

    @property
    def symbol(self) -> str:
        """The prefixed symbol without its power, e.g. ``"km"``."""
        return f"{self.prefix or ''}{self.unit}"

    def with_power(self, power: int) -> "ParsedUnit":
        return ParsedUnit(self.unit, power, self.prefix)

    def __str__(self) -> str:
        if self.power == 1:
            return self.symbol
        return f"{self.symbol}^{self.power}"


ParsedUnits = Tuple[ParsedUnit, ...]


def _parse_single_unit(token: str, reg: "UnitsRegistry") -> ParsedUnit:
    """Parse one factor like ``"km^2"``; compound expressions are not accepted here."""
    base, caret, exp_text = token.partition("^")
    power = 1
    if caret:
        if not _EXPONENT_RE.fullmatch(exp_text) or int(exp_text) == 0:
            raise InvalidExponentError(f'Invalid exponent/power on unit "{token}"')
        power = int(exp_text)

    resolved = reg.resolve(base)
    if resolved is None:
        raise UnableToParseUnitError(token)
    prefix, unit = resolved
    return ParsedUnit(unit, power, prefix)


def _split_tokens(section: str) -> list[str]:
    section = section.strip()
    if not section:
        return []
    return _SEPARATOR_RE.split(section)


# Cache the parsed result per (expression, registry). Results are immutable tuples.
@lru_cache(maxsize=4096)
def _compile_units(text: str, reg: "UnitsRegistry") -> ParsedUnits:
    sections = text.split("/")
    if len(sections) > 2:
        raise ParseError(f"too many '/' characters in unit \"{text}\"")

    numerator = [_parse_single_unit(t, reg) for t in _split_tokens(sections[0])]
    if len(sections) == 1:
        return tuple(numerator)

    denominator_tokens = _split_tokens(sections[1])
    if not denominator_tokens:
        raise ParseError(f"Missing denominator in unit \"{text}\"")
    denominator = [
        pu.with_power(-pu.power)
        for pu in (_parse_single_unit(t, reg) for t in denominator_tokens)
    ]
    return tuple(numerator + denominator)


def parse_units(text: str, reg: "UnitsRegistry | None" = None) -> ParsedUnits:
    """
    Parse a compound unit string such as ``"km^2"``, ``"kg⋅m/s^2"`` or
    ``"kg m / s^2"`` into `ParsedUnit` factors.

    Grammar:
      units  := factors ['/' factors]
      factors:= factor ((whitespace | '⋅') factor)*
      factor := [prefix] symbol ['^' nonzero_int]  |  '_' name ['^' nonzero_int]

    Numerator factors come first, in order, followed by denominator factors
    with their powers negated. An empty string parses to ``()``
    (dimensionless).

    Raises:
      ParseError: more than one ``/``.
      InvalidExponentError: an exponent that is not a nonzero integer.
      UnableToParseUnitError: an unknown unit or disallowed prefix.
    """
    if reg is None:
        from quantmath.units.registry import DEFAULT_REGISTRY
        reg = DEFAULT_REGISTRY
    if not reg.frozen:
        # a registry that can still change must not be served from the cache
        return _compile_units.__wrapped__(text, reg)
    return _compile_units(text, reg)


def format_units(units: Iterable[ParsedUnit]) -> str:
    """Render factors back to text: ``km⋅s^-1``. No factors gives ``""``."""
    return UNIT_SEPARATOR.join(str(u) for u in units)


__all__ = [
    "ParsedUnit",
    "ParsedUnits",
    "UNIT_SEPARATOR",
    "parse_units",
    "format_units",
]
