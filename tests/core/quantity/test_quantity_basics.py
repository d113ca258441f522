import pytest

from quantmath.core.dimensions import (
    DIMENSIONLESS,
    LENGTH,
    MASS,
    TEMPERATURE,
    TIME,
    Dimensions,
)
from quantmath.core.errors import (
    ConflictingSpecError,
    IncompatibleOperationError,
    UnableToParseUnitError,
)
from quantmath.core.quantity import Quantity
from quantmath.units.parser import ParsedUnit

FORCE = MASS * LENGTH * TIME ** -2

# -------------------------------
# Quantity: construction
# -------------------------------

def test_dimensionless_by_default():
    q = Quantity(15)
    assert q.magnitude == 15
    assert q.dimensions is DIMENSIONLESS
    assert q.unit_hint is None
    assert q.plus_minus is None
    assert q.significant_figures is None
    assert q.is_dimensionless


@pytest.mark.parametrize("units, magnitude, dim", [
    ("m", 15, LENGTH),
    ("km", 15_000, LENGTH),
    ("kg", 15, MASS),
    ("g", 0.015, MASS),
    ("kg⋅m/s^2", 15, FORCE),
    ("min", 900, TIME),
])
def test_units_are_folded_into_canonical_magnitude(units, magnitude, dim):
    q = Quantity(15, units=units)
    assert q.magnitude == pytest.approx(magnitude)
    assert q.dimensions == dim


def test_prefix_and_power():
    # 3 km^2 is 3e6 m^2
    q = Quantity(3, units="km^2")
    assert q.magnitude == 3_000_000
    assert q.dimensions == LENGTH ** 2

    # 400 cubic millimetres is 4e-7 cubic metres
    q = Quantity(400, units="mm^3")
    assert q.magnitude == pytest.approx(4e-7)
    assert q.dimensions == LENGTH ** 3


def test_units_are_remembered_as_hint():
    q = Quantity(12, units="kg⋅m/s^2")
    assert q.unit_hint == (ParsedUnit("g", 1, "k"), ParsedUnit("m"), ParsedUnit("s", -2))


def test_empty_units_are_dimensionless_without_hint():
    q = Quantity(2, units="")
    assert q.dimensions == DIMENSIONLESS
    assert q.unit_hint is None


def test_parsed_units_are_accepted():
    q = Quantity(2, units=[ParsedUnit("m", 1, "k")])
    assert q.magnitude == 2000
    assert q.unit_hint == (ParsedUnit("m", 1, "k"),)


def test_units_must_be_str_or_parsed_units():
    with pytest.raises(TypeError):
        Quantity(2, units=[("m", 1)])


def test_unknown_unit():
    with pytest.raises(UnableToParseUnitError):
        Quantity(2, units="parsec")


def test_explicit_dimensions():
    q = Quantity(9.8, dimensions=LENGTH * TIME ** -2)
    assert q.magnitude == 9.8
    assert q.dimensions == LENGTH * TIME ** -2
    assert q.unit_hint is None


def test_dimensions_must_be_dimensions():
    with pytest.raises(TypeError):
        Quantity(1, dimensions=(0, 1, 0, 0, 0, 0, 0, 0, 0))


def test_units_and_dimensions_conflict():
    with pytest.raises(ConflictingSpecError):
        Quantity(1, units="m", dimensions=LENGTH)
    # still a TypeError for callers that catch built-ins
    with pytest.raises(TypeError):
        Quantity(1, units="m", dimensions=LENGTH)


def test_significant_figures_must_be_positive():
    with pytest.raises(ValueError):
        Quantity(1, significant_figures=0)


def test_plus_minus_is_scaled_like_the_magnitude():
    q = Quantity(5, units="cm", plus_minus=0.2)
    assert q.magnitude == pytest.approx(0.05)
    assert q.plus_minus == pytest.approx(0.002)


def test_custom_dimensions_from_pphpd():
    q = Quantity(3400, units="pphpd")
    assert q.dimensions == Dimensions((0, 0, -1, 0, 0, 0, 0, 0, 0, -1, 1), ("direction", "pax"))
    assert q.magnitude == pytest.approx(3400 / 3600)

# -------------------------------
# Offset (absolute temperature) units
# -------------------------------

def test_degc_adds_its_offset():
    q = Quantity(20, units="degC")
    assert q.magnitude == pytest.approx(293.15)
    assert q.dimensions == TEMPERATURE


def test_degf_scales_then_offsets():
    # 32 °F is 0 °C
    assert Quantity(32, units="degF").magnitude == pytest.approx(273.15)


@pytest.mark.parametrize("units", ["degC^2", "degC m", "degF/s", "m⋅degC"])
def test_offset_units_cannot_be_compounded(units):
    with pytest.raises(IncompatibleOperationError, match="offset unit"):
        Quantity(1, units=units)


def test_delta_units_can_be_compounded():
    q = Quantity(2, units="deltaC/s")
    assert q.magnitude == 2
    assert q.dimensions == TEMPERATURE * TIME ** -1

# -------------------------------
# Immutability
# -------------------------------

def test_quantity_is_immutable():
    q = Quantity(1, units="m")
    with pytest.raises(AttributeError):
        q.magnitude = 2
    with pytest.raises(AttributeError):
        q.anything = 2
