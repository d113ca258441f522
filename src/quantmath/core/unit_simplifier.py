"""Choosing output units for a quantity.

Given a target dimension and a *basis* (a list of candidate units, without
powers), ``UnitSimplifier`` picks integer powers for a subset of the basis
that reproduce the target. The search is greedy: at every step it takes the
single unit (or its inverse) that leaves the smallest remaining
dimensionality. That is enough for everyday bases such as the remembered
units of a quantity or the SI list below, but it is not a linear-algebra
solver: a basis that only reaches the target through a combination that is
not locally better at each step (amperes from coulombs and seconds, for
instance) is rejected with ``InvalidConversionError``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

from quantmath.core.dimensions import Dimensions
from quantmath.core.errors import InvalidConversionError, TooManyCustomDimensionsError
from quantmath.units.parser import ParsedUnit

if TYPE_CHECKING:  # pragma: no cover - import only used for typing
    from quantmath.units.registry import UnitsRegistry

logger = logging.getLogger(__name__)

Selection = List[Tuple[int, int]]

# Priority-ordered canonical basis. The order is a tie-break input of the
# search, so changing it changes the output of to_si()/get_si().
SI_BASIS: Tuple[ParsedUnit, ...] = (
    ParsedUnit("g", prefix="k"),
    ParsedUnit("m"),
    ParsedUnit("s"),
    ParsedUnit("K"),
    ParsedUnit("A"),
    ParsedUnit("mol"),
    ParsedUnit("cd"),
    ParsedUnit("b"),
    ParsedUnit("rad"),
    ParsedUnit("N"),
    ParsedUnit("Pa"),
    ParsedUnit("J"),
    ParsedUnit("W"),
    ParsedUnit("C"),
    ParsedUnit("V"),
    ParsedUnit("F"),
    ParsedUnit("Ω"),
    ParsedUnit("S"),
    ParsedUnit("Wb"),
    ParsedUnit("T"),
    ParsedUnit("H"),
)


class UnitSimplifier:
    """Greedy basis reduction over a unit registry."""

    def __init__(self, registry: "UnitsRegistry | None" = None) -> None:
        if registry is None:
            from quantmath.units.registry import DEFAULT_REGISTRY
            registry = DEFAULT_REGISTRY
        self._registry = registry

    def dimensions_of(self, unit: ParsedUnit) -> Dimensions:
        """Dimensions of one basis unit, ignoring its power."""
        return self._registry.unit_for(unit.unit).dim

    @staticmethod
    def _step(remainder: Dimensions, factor: Dimensions) -> Optional[Dimensions]:
        try:
            return remainder.multiply(factor)
        except TooManyCustomDimensionsError:
            # this candidate would need a fifth custom dimension; it can't help
            return None

    def simplify(self, target: Dimensions, basis: Sequence[ParsedUnit]) -> Selection:
        """
        Pick powers for a subset of ``basis`` whose combined dimensions equal ``target``.

        Returns ``(index, power)`` pairs in basis order. Raises
        `InvalidConversionError` if the greedy search stalls.

        Examples
        --------
        >>> simplifier.simplify(FORCE, SI_BASIS)        # doctest: +SKIP
        [(9, 1)]                                         # N
        >>> simplifier.simplify(LENGTH ** 2, [ParsedUnit("ft")])  # doctest: +SKIP
        [(0, 2)]                                         # ft^2
        """
        dims = [self.dimensions_of(u) for u in basis]
        remainder = target
        chosen: Dict[int, int] = {}

        while remainder.dimensionality > 0:
            # (resulting dimensionality, index, power, resulting remainder)
            best: Optional[Tuple[int, int, int, Dimensions]] = None
            for idx, dim in enumerate(dims):
                positive = self._step(remainder, dim.invert())
                if positive is not None and (
                    best is None
                    or positive.dimensionality < best[0]
                    or (positive.dimensionality == best[0] and best[2] < 0)
                ):
                    best = (positive.dimensionality, idx, 1, positive)
                    if positive.dimensionality == 0:
                        break

                inverse = self._step(remainder, dim)
                if inverse is not None and (best is None or inverse.dimensionality < best[0]):
                    best = (inverse.dimensionality, idx, -1, inverse)

            if best is None or best[0] >= remainder.dimensionality:
                logger.debug("Basis %s cannot represent %r (stuck at %r)", list(map(str, basis)), target, remainder)
                raise InvalidConversionError(
                    f"Cannot express dimensions {target!r} using the units "
                    f"{', '.join(str(u) for u in basis) or '(none)'}."
                )

            _, idx, power, remainder = best
            chosen[idx] = chosen.get(idx, 0) + power
            logger.debug("Selected %s^%d, remaining %r", basis[idx], power, remainder)

        if not chosen:
            # keep e.g. "%" on a quantity that was built in percent
            dimensionless = [i for i, d in enumerate(dims) if d.is_dimensionless]
            if len(dimensionless) == 1:
                chosen[dimensionless[0]] = 1

        return [(idx, chosen[idx]) for idx in sorted(chosen) if chosen[idx] != 0]

    @staticmethod
    def to_parsed_units(basis: Sequence[ParsedUnit], selection: Selection) -> Tuple[ParsedUnit, ...]:
        return tuple(basis[idx].with_power(power) for idx, power in selection)

    def select_units(self, target: Dimensions, basis: Sequence[ParsedUnit]) -> Tuple[ParsedUnit, ...]:
        """`simplify` followed by `to_parsed_units`."""
        return self.to_parsed_units(basis, self.simplify(target, basis))


__all__ = ["SI_BASIS", "Selection", "UnitSimplifier"]
