import pytest

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
    custom_dimension,
)
from quantmath.core.errors import (
    DimensionError,
    InvalidExponentError,
    TooManyCustomDimensionsError,
)

FORCE = MASS * LENGTH * TIME ** -2
PAX_PER_HOUR_PER_DIRECTION = Dimensions((0, 0, -1, 0, 0, 0, 0, 0, 0, -1, 1), ("direction", "pax"))

# --- Basic structure & base vectors -------------------------------------------------

def test_dimensional_basis():
    # Check each base dimension has a single 1 in the right place and 0 elsewhere
    bases = [MASS, LENGTH, TIME, TEMPERATURE, CURRENT, SUBSTANCE, LUMINOSITY, INFORMATION, ANGLE]
    for i, b in enumerate(bases):
        expected = [0] * 9
        expected[i] = 1
        assert b.base == tuple(expected)
        assert b.custom_names == ()
        assert b.dimensionality == 1
    assert DIMENSIONLESS.base == (0,) * 9
    assert DIMENSIONLESS.is_dimensionless


def test_dimensionality_is_sum_of_absolute_exponents():
    assert FORCE.dimensionality == 4
    assert PAX_PER_HOUR_PER_DIRECTION.dimensionality == 3


def test_repr_lists_nonzero_exponents():
    assert repr(FORCE) == "[M^1][L^1][T^-2]"
    assert repr(PAX_PER_HOUR_PER_DIRECTION) == "[T^-1]{direction^-1}{pax^1}"
    assert repr(DIMENSIONLESS) == "[1]"

# --- Constructor validation ---------------------------------------------------------

def test_too_few_exponents():
    with pytest.raises(DimensionError, match="not enough dimensions"):
        Dimensions((1, 0, 0))


def test_unnamed_custom_dimension():
    with pytest.raises(DimensionError, match="must be named"):
        Dimensions((0,) * 9 + (1,))


def test_extra_custom_name():
    with pytest.raises(DimensionError):
        Dimensions((0,) * 9 + (1,), ("a", "b"))


@pytest.mark.parametrize("names", [("b", "a"), ("a", "a")])
def test_custom_names_must_be_strictly_sorted(names):
    with pytest.raises(DimensionError, match="alphabetical order"):
        Dimensions((0,) * 9 + (1, 1), names)


def test_at_most_four_custom_dimensions():
    Dimensions((0,) * 9 + (1, 1, 1, 1), ("a", "b", "c", "d"))
    with pytest.raises(TooManyCustomDimensionsError):
        Dimensions((0,) * 9 + (1, 1, 1, 1, 1), ("a", "b", "c", "d", "e"))


@pytest.mark.parametrize("bad", [0.5, "1", None, True])
def test_non_integer_exponent(bad):
    with pytest.raises(InvalidExponentError):
        Dimensions((bad,) + (0,) * 8)


def test_integral_float_exponents_are_accepted():
    assert Dimensions((2.0,) + (0,) * 8) == MASS ** 2

# --- Equality & hashing -------------------------------------------------------------

def test_equality_ignores_zero_custom_entries():
    with_zero = Dimensions((0, 1, 0, 0, 0, 0, 0, 0, 0, 0), ("pax",))
    assert with_zero == LENGTH
    assert hash(with_zero) == hash(LENGTH)
    assert with_zero.equal_to(LENGTH)


def test_different_custom_values_are_not_equal():
    a = Dimensions((0,) * 12 + (-1,), ("a", "b", "c", "d"))
    b = Dimensions((0,) * 13, ("a", "b", "c", "d"))
    assert a != b


def test_different_custom_names_are_not_equal():
    a = Dimensions((0,) * 11 + (1, 2), ("a", "b", "c", "d"))
    b = Dimensions((0,) * 11 + (1, 2), ("a", "b", "c", "elf"))
    assert a != b


def test_comparison_with_other_types():
    assert (LENGTH == (0, 1, 0, 0, 0, 0, 0, 0, 0)) is False

# --- Algebra: multiplication, inversion, power --------------------------------------

@pytest.mark.parametrize("a,b", [
    (LENGTH, TIME ** -1),
    (MASS, FORCE),
    (DIMENSIONLESS, LENGTH),
    (PAX_PER_HOUR_PER_DIRECTION, TIME),
    (custom_dimension("foo"), custom_dimension("bar")),
])
def test_multiply_is_commutative(a, b):
    assert a * b == b * a
    assert a.multiply(b) == b.multiply(a)


@pytest.mark.parametrize("a", [LENGTH, FORCE, PAX_PER_HOUR_PER_DIRECTION, DIMENSIONLESS])
def test_times_inverse_is_dimensionless(a):
    assert (a * a.invert()).is_dimensionless
    assert (a * ~a).is_dimensionless


def test_multiply_merges_custom_names():
    product = custom_dimension("foo") * custom_dimension("bar")
    assert product.custom_names == ("bar", "foo")
    assert product.custom == {"bar": 1, "foo": 1}


def test_multiply_drops_cancelled_custom_names():
    product = custom_dimension("foo") * custom_dimension("bar") * custom_dimension("bar").invert()
    assert product == custom_dimension("foo")
    assert product.custom_names == ("foo",)


def test_multiply_more_than_four_custom_dimensions_fails():
    abcd = Dimensions((0,) * 9 + (1, 1, 1, 1), ("a", "b", "c", "d"))
    with pytest.raises(TooManyCustomDimensionsError):
        abcd * custom_dimension("e")


def test_limit_counts_names_that_would_cancel():
    # "a" cancels, but the union {a, b, c, d, e} still has five names
    abcd = Dimensions((0,) * 9 + (1, 1, 1, 1), ("a", "b", "c", "d"))
    per_a_e = Dimensions((0,) * 9 + (-1, 1), ("a", "e"))
    with pytest.raises(TooManyCustomDimensionsError):
        abcd.multiply(per_a_e)
    with pytest.raises(TooManyCustomDimensionsError):
        per_a_e * abcd


def test_zero_valued_names_do_not_count_towards_the_limit():
    abcd = Dimensions((0,) * 9 + (1, 1, 1, 1), ("a", "b", "c", "d"))
    zero_e = Dimensions((0,) * 9 + (0,), ("e",))
    assert abcd * zero_e == abcd


def test_invert_keeps_names():
    inv = PAX_PER_HOUR_PER_DIRECTION.invert()
    assert inv.custom_names == ("direction", "pax")
    assert inv.custom_values == (1, -1)
    assert inv.base[2] == 1


@pytest.mark.parametrize("a,n,expected", [
    (LENGTH, 1, LENGTH),
    (LENGTH, 2, Dimensions((0, 2, 0, 0, 0, 0, 0, 0, 0))),
    (TIME, -2, Dimensions((0, 0, -2, 0, 0, 0, 0, 0, 0))),
    (FORCE, 3, Dimensions((3, 3, -6, 0, 0, 0, 0, 0, 0))),
])
def test_pow(a, n, expected):
    assert a.pow(n) == expected
    assert a ** n == expected


def test_pow_zero_is_dimensionless_constant():
    assert LENGTH.pow(0) is DIMENSIONLESS
    assert PAX_PER_HOUR_PER_DIRECTION.pow(0) is DIMENSIONLESS


@pytest.mark.parametrize("bad", [0.5, 1.5, "2", None])
def test_pow_requires_integer(bad):
    with pytest.raises(InvalidExponentError, match="must be an integer"):
        LENGTH.pow(bad)


def test_pow_modulo_not_supported():
    with pytest.raises(TypeError):
        pow(LENGTH, 2, 3)

# --- Algebraic laws ----------------------------------------------------------------

@pytest.mark.parametrize("a,b,n", [
    (LENGTH, TIME, 3),
    (MASS, CURRENT, -2),
    (FORCE, PAX_PER_HOUR_PER_DIRECTION, 4),
])
def test_power_distributes_over_mul(a, b, n):
    assert (a * b) ** n == (a ** n) * (b ** n)


@pytest.mark.parametrize("a,m,n", [
    (LENGTH, 2, 3),
    (TIME, -1, 5),
    (FORCE, 4, -2),
])
def test_same_base_adds_exponents(a, m, n):
    assert a ** m * a ** n == a ** (m + n)


def test_immutable():
    with pytest.raises(AttributeError):
        LENGTH.base = (0,) * 9
