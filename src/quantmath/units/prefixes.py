"""
quantmath.units.prefixes
========================

Linear (SI) and binary (IEC) magnitude prefixes.

The two families are kept apart: a unit decides independently whether it
accepts linear prefixes (``km``), binary prefixes (``KiB``), or both.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


@dataclass(frozen=True, slots=True)
class Prefix:
    symbol: str
    factor: float
    binary: bool = False


LINEAR_PREFIXES: Tuple[Prefix, ...] = (
    Prefix("q",  1e-30),
    Prefix("r",  1e-27),
    Prefix("y",  1e-24),
    Prefix("z",  1e-21),
    Prefix("a",  1e-18),
    Prefix("f",  1e-15),
    Prefix("p",  1e-12),
    Prefix("n",  1e-9),
    Prefix("u",  1e-6),   # ASCII spelling of micro
    Prefix("µ",  1e-6),
    Prefix("m",  1e-3),
    Prefix("c",  1e-2),
    Prefix("d",  1e-1),
    Prefix("da", 1e+1),
    Prefix("h",  1e+2),
    Prefix("k",  1e+3),
    Prefix("M",  1e+6),
    Prefix("G",  1e+9),
    Prefix("T",  1e+12),
    Prefix("P",  1e+15),
    Prefix("E",  1e+18),
    Prefix("Z",  1e+21),
    Prefix("Y",  1e+24),
    Prefix("R",  1e+27),
    Prefix("Q",  1e+30),
)

BINARY_PREFIXES: Tuple[Prefix, ...] = tuple(
    Prefix(sym, float(1024 ** power), binary=True)
    for power, sym in enumerate(("Ki", "Mi", "Gi", "Ti", "Pi", "Ei", "Zi", "Yi"), start=1)
)

PREFIXES: Tuple[Prefix, ...] = LINEAR_PREFIXES + BINARY_PREFIXES

_BY_SYMBOL: Mapping[str, Prefix] = MappingProxyType({p.symbol: p for p in PREFIXES})


def get_prefix(symbol: str) -> Optional[Prefix]:
    return _BY_SYMBOL.get(symbol)


def prefix_factor(symbol: Optional[str]) -> float:
    """Scale factor of a prefix symbol; ``None`` means no prefix."""
    if symbol is None:
        return 1.0
    p = _BY_SYMBOL.get(symbol)
    if p is None:
        raise KeyError(f"Unknown prefix: {symbol}")
    return p.factor


__all__ = [
    "Prefix",
    "LINEAR_PREFIXES",
    "BINARY_PREFIXES",
    "PREFIXES",
    "get_prefix",
    "prefix_factor",
]
