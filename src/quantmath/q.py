"""
quantmath.q
===========

``Q`` builds a `Quantity` from a single human-readable string::

    >>> Q("15.5 ± 0.2 kg")
    Quantity('15.5±0.2 kg')
    >>> Q("-.05123 kg m s^-2").get_si()
    {'magnitude': -0.05123, 'units': 'N'}

Several fragments may be passed; they are joined with ``str()`` first, so
``Q(width, " mm")`` works for any number ``width``.
"""

from __future__ import annotations

import re
from typing import Any

from quantmath.core.errors import ParseError
from quantmath.core.quantity import Quantity

# [sign]digits[.digits] [± tolerance] [units]
_Q_RE = re.compile(r"^\s*([-+]?\d*\.?\d*)(?:\s*±\s*([\d.]+))?\s*(.*)$", re.DOTALL)


def Q(*parts: Any) -> Quantity:
    text = "".join(str(p) for p in parts)
    match = _Q_RE.match(text)
    if match is None:  # pragma: no cover - the pattern matches any string
        raise ParseError(f"Unable to parse Q template string: {text}")

    magnitude_text, plus_minus_text, units = match.groups()
    try:
        magnitude = float(magnitude_text)
        plus_minus = float(plus_minus_text) if plus_minus_text else None
    except ValueError:
        raise ParseError(f"Unable to parse Q template string: {text}") from None

    return Quantity(magnitude, units=units.strip(), plus_minus=plus_minus)


__all__ = ["Q"]
