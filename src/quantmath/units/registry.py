"""
quantmath.units.registry
========================

The table of known units and the prefixes each one accepts.

- `UnitsRegistry` maps canonical unit symbols to `UnitDefinition` entries.
- The default registry is bootstrapped once from data tables and then frozen;
  after that it is a read-only mapping, safe to share between threads.
- Ad hoc custom units (``_foo``) are resolved here too, but as `CustomUnit`
  values: they are never written into the table.
- Prefixed symbols (``km``, ``KiB``) are not stored either. `resolve` splits
  them into a prefix and a base unit on demand.
"""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from quantmath.core.dimensions import (
    ANGLE,
    CURRENT,
    DIMENSIONLESS,
    INFORMATION,
    LENGTH,
    LUMINOSITY,
    MASS,
    SUBSTANCE,
    TEMPERATURE,
    TIME,
    Dimensions,
)
from quantmath.core.unit import CustomUnit, Unit, UnitDefinition, is_custom_symbol
from quantmath.units.prefixes import BINARY_PREFIXES, LINEAR_PREFIXES, Prefix, get_prefix

logger = logging.getLogger(__name__)


class UnitsRegistry:
    """Registry of `UnitDefinition` objects.

    Units are registered while the registry is being built; `freeze` makes it
    read-only. This registry does *not* parse compound expressions such as
    ``"m/s^2"``; see `quantmath.units.parser` for that.
    """

    def __init__(self) -> None:
        self._units: Dict[str, UnitDefinition] = {}
        self._frozen = False

    # -------------------------- building -----------------------------------
    def register(self, unit: UnitDefinition) -> None:
        """Register a `UnitDefinition` under its symbol."""
        if self._frozen:
            raise RuntimeError("Cannot register units on a frozen registry.")
        if is_custom_symbol(unit.symbol):
            raise ValueError(
                f"Cannot register unit '{unit.symbol}': symbols starting with '_' are reserved for custom units."
            )
        if unit.symbol in self._units:
            raise ValueError(
                f"Cannot register unit '{unit.symbol}': a unit with this name already exists."
            )
        self._units[unit.symbol] = unit

    def freeze(self) -> "UnitsRegistry":
        if not self._frozen:
            self._units = MappingProxyType(dict(self._units))  # type: ignore[assignment]
            self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    # -------------------------- public API ---------------------------------
    def __contains__(self, symbol: object) -> bool:
        return symbol in self._units

    def __iter__(self) -> Iterator[str]:
        return iter(self._units)

    def __len__(self) -> int:
        return len(self._units)

    def has(self, symbol: str) -> bool:
        return symbol in self._units

    def get(self, symbol: str) -> UnitDefinition:
        """Lookup a unit by its exact (unprefixed) symbol.

        Raises `KeyError` if unknown.
        """
        try:
            return self._units[symbol]
        except KeyError:
            raise KeyError(f"Unknown unit symbol: {symbol}") from None

    def all(self) -> Mapping[str, UnitDefinition]:
        return MappingProxyType(dict(self._units)) if not self._frozen else self._units

    def unit_for(self, symbol: str) -> Unit:
        """The unit behind a bare symbol: a registry entry or an ad hoc custom unit."""
        if is_custom_symbol(symbol):
            return CustomUnit(symbol)
        return self.get(symbol)

    def resolve(self, text: str) -> Optional[Tuple[Optional[str], str]]:
        """Split ``text`` into ``(prefix, unit_symbol)``, or return None.

        Resolution order: exact symbol, ad hoc custom unit, then a 1- or
        2-character prefix whose family the remaining unit accepts.
        """
        if not text:
            return None
        if text in self._units:
            return None, text
        if is_custom_symbol(text):
            return (None, text) if len(text) > 1 else None
        for size in (1, 2):
            prefix = get_prefix(text[:size])
            rest = text[size:]
            if prefix is None or not rest:
                continue
            unit = self._units.get(rest)
            if unit is not None and unit.accepts_prefix(prefix):
                return prefix.symbol, rest
        return None

    # -------------------------- consistency --------------------------------
    def prefix_collisions(self) -> List[Tuple[str, str, Optional[Tuple[Optional[str], str]]]]:
        """Prefix/unit pairs that would not parse back to themselves.

        Each entry is ``(prefix, unit, what_it_resolves_to)``. An empty list
        means no unit symbol collides with a prefixed form of another unit.
        """
        problems = []
        for symbol, unit in self._units.items():
            for prefix in _compatible_prefixes(unit):
                got = self.resolve(prefix.symbol + symbol)
                if got != (prefix.symbol, symbol):
                    problems.append((prefix.symbol, symbol, got))
        return problems


def _compatible_prefixes(unit: UnitDefinition) -> List[Prefix]:
    out: List[Prefix] = []
    if unit.prefixable:
        out.extend(LINEAR_PREFIXES)
    if unit.binary_prefixable:
        out.extend(BINARY_PREFIXES)
    return out


# ---------------------------------------------------------------------------
# Bootstrap a default registry
# ---------------------------------------------------------------------------

def _bootstrap_default_registry() -> UnitsRegistry:
    reg = UnitsRegistry()

    # --- Helpful composite dimensions (readable + reuse) ---
    FREQUENCY    = TIME ** -1
    SPEED        = LENGTH * FREQUENCY
    FORCE        = MASS * LENGTH * TIME ** -2                                     # N
    PRESSURE     = FORCE * LENGTH ** -2                                           # Pa
    ENERGY       = FORCE * LENGTH                                                 # J
    POWER        = ENERGY * FREQUENCY                                             # W
    CHARGE       = CURRENT * TIME                                                 # C
    VOLTAGE      = POWER * CURRENT ** -1                                          # V
    CAPACITANCE  = CHARGE * VOLTAGE ** -1                                         # F
    RESISTANCE   = VOLTAGE * CURRENT ** -1                                        # Ω
    CONDUCTANCE  = RESISTANCE ** -1                                               # S
    FLUX         = VOLTAGE * TIME                                                 # Wb
    FLUX_DENSITY = FLUX * LENGTH ** -2                                            # T (tesla)
    INDUCTANCE   = FLUX * CURRENT ** -1                                           # H
    VOLUME       = LENGTH ** 3
    # passengers per hour per direction
    RIDERSHIP    = Dimensions((0, 0, -1, 0, 0, 0, 0, 0, 0, -1, 1), ("direction", "pax"))

    # (symbol, scale_to_si, dim, linear prefixes?, binary prefixes?)
    units: Tuple[Tuple[str, float, Dimensions, bool, bool], ...] = (
        # Dimensionless
        ("%",      1e-2,                 DIMENSIONLESS, False, False),  # percent
        ("ppm",    1e-6,                 DIMENSIONLESS, False, False),  # parts per million

        # Mass (the canonical unit is the kilogram, so "g" is 1e-3)
        ("g",      1e-3,                 MASS,          True,  False),
        ("lb",     4.5359237e-1,         MASS,          False, False),  # pound

        # Length
        ("m",      1.0,                  LENGTH,        True,  False),
        ("in",     2.54e-2,              LENGTH,        False, False),
        ("ft",     3.048e-1,             LENGTH,        False, False),
        ("mi",     1.609344e+3,          LENGTH,        False, False),

        # Time. NIST: prefixes are not used with min, h, day.
        ("s",      1.0,                  TIME,          True,  False),
        ("min",    6e+1,                 TIME,          False, False),
        ("h",      3.6e+3,               TIME,          False, False),
        ("day",    8.64e+4,              TIME,          False, False),
        ("week",   6.048e+5,             TIME,          False, False),
        ("yr",     3.1536e+7,            TIME,          False, False),  # 365 days
        # prefixed years use "a" (annum); only these three are accepted
        ("ka",     3.1536e+10,           TIME,          False, False),
        ("Ma",     3.1536e+13,           TIME,          False, False),
        ("Ga",     3.1536e+16,           TIME,          False, False),

        # Temperature (relative); absolute °C/°F are registered below with offsets
        ("K",      1.0,                  TEMPERATURE,   True,  False),
        ("deltaC", 1.0,                  TEMPERATURE,   False, False),

        # Other base dimensions
        ("A",      1.0,                  CURRENT,       True,  False),
        ("mol",    1.0,                  SUBSTANCE,     True,  False),
        ("cd",     1.0,                  LUMINOSITY,    True,  False),
        ("b",      1.0,                  INFORMATION,   True,  True),   # bit
        ("B",      8.0,                  INFORMATION,   True,  True),   # byte
        ("rad",    1.0,                  ANGLE,         True,  False),
        ("deg",    1.7453292519943295e-2, ANGLE,        False, False),

        # Derived
        ("Hz",     1.0,                  FREQUENCY,     True,  False),
        ("N",      1.0,                  FORCE,         True,  False),
        ("Pa",     1.0,                  PRESSURE,      True,  False),
        ("J",      1.0,                  ENERGY,        True,  False),
        ("Wh",     3.6e+3,               ENERGY,        True,  False),
        ("W",      1.0,                  POWER,         True,  False),
        ("HP",     7.4569987158227e+2,   POWER,         False, False),  # mechanical horsepower
        ("C",      1.0,                  CHARGE,        True,  False),
        ("V",      1.0,                  VOLTAGE,       True,  False),
        ("F",      1.0,                  CAPACITANCE,   True,  False),
        ("Ω",      1.0,                  RESISTANCE,    True,  False),
        ("S",      1.0,                  CONDUCTANCE,   True,  False),
        ("Wb",     1.0,                  FLUX,          True,  False),
        ("T",      1.0,                  FLUX_DENSITY,  True,  False),
        ("H",      1.0,                  INDUCTANCE,    True,  False),
        ("L",      1e-3,                 VOLUME,        True,  False),  # litre
        ("c",      2.99792458e+8,        SPEED,         False, False),  # speed of light

        # Misc.
        ("pphpd",  1 / 3600,             RIDERSHIP,     False, False),
    )

    for sym, scale, dim, prefixable, binary in units:
        reg.register(UnitDefinition(sym, scale, dim, prefixable=prefixable, binary_prefixable=binary))

    # Absolute temperatures, e.g. "water freezes at 0 degC"
    reg.register(UnitDefinition("degC", 1.0, TEMPERATURE, offset=273.15))
    reg.register(UnitDefinition("degF", 5 / 9, TEMPERATURE, offset=2.553722222222222e+2))

    reg.freeze()
    logger.debug("Bootstrapped default unit registry with %d units", len(reg))
    return reg


# Public, shared default registry
DEFAULT_REGISTRY: UnitsRegistry = _bootstrap_default_registry()


__all__ = [
    "UnitsRegistry",
    "DEFAULT_REGISTRY",
]
