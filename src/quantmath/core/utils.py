"""
quantmath.core.utils
====================

Number formatting helpers used by `Quantity.to_string`.

Magnitudes are printed with up to 12 significant digits. That hides the
rounding error of a few float operations, such as ``0.1 + 0.2`` or a
``degC`` to ``degF`` conversion through the offsets.
Uncertainties are printed to one significant digit, or two when the
leading digit is ``1``, and the magnitude is trimmed to match.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Tuple


def format_magnitude(value: float) -> str:
    """
    Up to 12 significant digits: ``0.1 + 0.2`` prints as ``0.3`` and
    ``77.0000000000017`` as ``77``. `Quantity.get` keeps the full float.
    """
    # adding 0.0 turns -0.0 into 0.0
    return f"{value + 0.0:.12g}"


def to_precision(value: float, digits: int) -> str:
    """
    Round to ``digits`` significant figures, keeping trailing zeros.

    >>> to_precision(9.04, 3)
    '9.04'
    >>> to_precision(5, 3)
    '5.00'
    """
    if digits < 1:
        raise ValueError("significant figures must be at least 1")
    return f"{value + 0.0:#.{digits}g}".rstrip(".")


def _decimal(value: float) -> Decimal:
    # repr() is the shortest string that round-trips, so 2.5e-05 stays 2.5e-05
    return Decimal(repr(float(value)))


def _quantize(value: Decimal, places: int) -> Decimal:
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def decimal_places(value: float) -> int:
    """Number of digits after the decimal point in the shortest repr of ``value``."""
    exponent = _decimal(value).as_tuple().exponent
    return max(-exponent, 0) if isinstance(exponent, int) else 0


def round_uncertainty(plus_minus: float) -> Tuple[str, int]:
    """
    Round an uncertainty for display.

    Returns the rendered value and the number of decimal places it uses.

    >>> round_uncertainty(1.2345)
    ('1.2', 1)
    >>> round_uncertainty(2.345)
    ('2', 0)
    >>> round_uncertainty(0.000025)
    ('0.00003', 5)
    """
    u = abs(_decimal(plus_minus))
    if u == 0:
        return "0", 0
    leading = u.as_tuple().digits[0]
    sig = 2 if leading == 1 else 1
    places = sig - 1 - u.adjusted()
    rounded = _quantize(u, places)
    return format(rounded, "f"), max(places, 0)


def format_value(
    magnitude: float,
    plus_minus: Optional[float] = None,
    significant_figures: Optional[int] = None,
) -> str:
    """
    Render a magnitude with its optional uncertainty, e.g. ``"0.38121±0.00003"``.

    An explicit ``significant_figures`` decides the magnitude's precision;
    otherwise the magnitude is trimmed to the decimal places of the rounded
    uncertainty. A zero uncertainty is not printed.
    """
    if significant_figures is not None:
        text = to_precision(magnitude, significant_figures)
    else:
        text = format_magnitude(magnitude)

    if not plus_minus:
        return text

    u_text, u_places = round_uncertainty(plus_minus)
    if significant_figures is None and decimal_places(magnitude) > u_places:
        text = format(_quantize(_decimal(magnitude), u_places), "f")
    return f"{text}±{u_text}"


__all__ = [
    "format_magnitude",
    "to_precision",
    "decimal_places",
    "round_uncertainty",
    "format_value",
]
