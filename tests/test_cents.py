from decimal import Decimal

import pytest

from stbvv_calc.rules import cents


@pytest.mark.parametrize(
    "value, expected",
    [
        (100, 10000),
        (1, 100),
        (0, 0),
        (1.23, 123),
        (99.99, 9999),
        (0.01, 1),
        (0.1 + 0.2, 30),
        (0.1, 10),
        (-10, -1000),
        ("12.345", 1235),
        (Decimal("1.005"), 101),
        (1.005, 101),
        (Decimal("-0.005"), -1),
    ],
)
def test_to_minor_units(value, expected: int) -> None:
    assert cents.to_minor_units(value) == expected


@pytest.mark.parametrize(
    "value",
    [None, float("nan"), float("inf"), float("-inf"), "abc", "", True, object()],
)
def test_to_minor_units_treats_garbage_as_zero(value) -> None:
    assert cents.to_minor_units(value) == 0


def test_from_minor_units_is_exact() -> None:
    assert cents.from_minor_units(10000) == Decimal("100.00")
    assert cents.from_minor_units(123) == Decimal("1.23")
    assert str(cents.from_minor_units(30)) == "0.30"
    assert str(cents.from_minor_units(0)) == "0.00"


@pytest.mark.parametrize("text", ["0.00", "0.01", "0.30", "1.23", "99.99", "12345.67"])
def test_round_trip_preserves_two_place_amounts(text: str) -> None:
    amount = Decimal(text)
    assert cents.from_minor_units(cents.to_minor_units(amount)) == amount


def test_round_trip_survives_float_drift() -> None:
    assert cents.from_minor_units(cents.to_minor_units(0.1 + 0.2)) == Decimal("0.30")


def test_basic_operations() -> None:
    assert cents.add(100, 200) == 300
    assert cents.add(-50, 100) == 50
    assert cents.subtract(50, 100) == -50
    assert cents.multiply_by_integer(100, 3) == 300
    assert cents.minimum(200, 100) == 100
    assert cents.minimum(100, 100) == 100
    assert cents.total([100, 200, 300]) == 600
    assert cents.total([]) == 0


@pytest.mark.parametrize(
    "amount, factor, expected",
    [
        (100, 1.5, 150),
        (100, 0.333, 33),
        (1, Decimal("0.5"), 1),
        (-1, Decimal("0.5"), -1),
        (11500, 2.5, 28750),
    ],
)
def test_multiply_rounds_half_away_from_zero(amount: int, factor, expected: int) -> None:
    assert cents.multiply(amount, factor) == expected


@pytest.mark.parametrize(
    "amount, percent, expected",
    [
        (10000, 19, 1900),
        (10000, 100, 10000),
        (10000, 0, 0),
        (1000, 33, 330),
        (100, 33, 33),
        (5, 50, 3),
        (9000, 19, 1710),
    ],
)
def test_percent_of(amount: int, percent, expected: int) -> None:
    assert cents.percent_of(amount, percent) == expected


@pytest.mark.parametrize(
    "amount, numerator, denominator, expected",
    [
        (10000, 6, 10, 6000),
        (10000, 10, 10, 10000),
        (10000, 6, 20, 3000),
        (10000, 6.5, 20, 3250),
        (10000, 17.5, 10, 17500),
        (100, 1, 3, 33),
        (10000, 6, 0, 0),
        (10000, 6, -10, 0),
    ],
)
def test_apply_rate(amount: int, numerator, denominator, expected: int) -> None:
    assert cents.apply_rate(amount, numerator, denominator) == expected


def test_sanitize() -> None:
    assert cents.sanitize(-50) == Decimal("0")
    assert cents.sanitize(None) == Decimal("0")
    assert cents.sanitize(float("nan")) == Decimal("0")
    assert cents.sanitize("7.5") == Decimal("7.5")
    assert cents.sanitize(100) == Decimal("100")


def test_is_valid_cents() -> None:
    assert cents.is_valid_cents(0)
    assert cents.is_valid_cents(999999)
    assert not cents.is_valid_cents(-1)
    assert not cents.is_valid_cents(1.5)
    assert not cents.is_valid_cents(True)


@pytest.mark.parametrize(
    "value, expected",
    [
        (10**26, 10**17),
        (1e30, 10**17),
        ("1e40", 10**17),
        (Decimal("1e400"), 10**17),
        (-1e30, -(10**17)),
    ],
)
def test_huge_amounts_saturate_instead_of_raising(value, expected: int) -> None:
    assert cents.to_decimal(value).copy_abs() == cents.MAX_AMOUNT
    assert cents.to_minor_units(value) == expected


def test_scaling_beyond_default_precision_is_exact() -> None:
    assert cents.multiply(10**17, Decimal("123456789012345.67")) == 12345678901234567 * 10**15
    assert cents.percent_of(10**32, 19) == 19 * 10**30
    assert cents.apply_rate(10**32, 65, 20) == 325 * 10**30
    assert str(cents.from_minor_units(10**32)) == "1" + "0" * 30 + ".00"
