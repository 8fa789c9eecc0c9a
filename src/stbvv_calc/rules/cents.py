"""Integer minor-unit (cent) arithmetic for fee calculations.

Every amount handled by the engine is an ``int`` count of cents. Human
amounts (euros as ``int``, ``float``, ``str`` or ``Decimal``) are converted
once at the boundary via :func:`to_minor_units`; after that only integers
flow through the calculators. Operations that scale an amount by a
non-integer factor compute in ``Decimal`` and round straight back to whole
cents with half-up (away from zero) rounding.

Floats are converted through ``str()`` so that ``0.1 + 0.2`` is read as
``0.30000000000000004`` and lands on 30 cents rather than drifting.
"""
from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Iterable, Union

logger = logging.getLogger(__name__)

Numeric = Union[int, float, str, Decimal]

ZERO = Decimal("0")
_ONE = Decimal("1")
_HUNDRED = Decimal("100")

# Largest magnitude accepted for any human amount (euros, hours, percent, rate).
# Larger inputs saturate here.
MAX_AMOUNT = Decimal("1e15")

# Working precision for scaling; wide enough that clamped amounts times
# clamped factors stay exact.
_PRECISION = 80


def _round_half_up(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_HALF_UP))


def _scaled(amount: Numeric, factor: Decimal, divisor: Decimal = _ONE) -> int:
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return _round_half_up(Decimal(amount) * factor / divisor)


def to_decimal(value: Numeric | None) -> Decimal:
    """Parse caller input into a finite ``Decimal``; anything else becomes zero.

    Magnitudes above :data:`MAX_AMOUNT` are clamped to it, keeping the sign.
    """

    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, int):
        parsed = Decimal(value)
    elif isinstance(value, (float, str)):
        try:
            parsed = Decimal(str(value).strip())
        except InvalidOperation:
            logger.debug("unparseable amount %r treated as zero", value)
            return ZERO
    else:
        logger.debug("unsupported amount type %s treated as zero", type(value).__name__)
        return ZERO

    if not parsed.is_finite():
        logger.debug("non-finite amount %r treated as zero", value)
        return ZERO
    if parsed.copy_abs() > MAX_AMOUNT:
        logger.debug("amount %r saturates at %s", value, MAX_AMOUNT)
        return MAX_AMOUNT.copy_sign(parsed)
    return parsed


def sanitize(value: Numeric | None) -> Decimal:
    """Like :func:`to_decimal`, but negative values also collapse to zero."""

    parsed = to_decimal(value)
    if parsed < 0:
        logger.debug("negative amount %s treated as zero", parsed)
        return ZERO
    return parsed


# ---------- conversion ----------

def to_minor_units(value: Numeric | None) -> int:
    """Convert a major-unit amount to cents, rounding half away from zero."""

    return _scaled(to_decimal(value), _HUNDRED)


def from_minor_units(cents: int) -> Decimal:
    """Convert cents back to an exact two-place ``Decimal``."""

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return Decimal(int(cents)).scaleb(-2)


# ---------- arithmetic ----------

def add(a: int, b: int) -> int:
    return a + b


def subtract(a: int, b: int) -> int:
    return a - b


def multiply_by_integer(amount: int, factor: int) -> int:
    return amount * int(factor)


def multiply(amount: int, factor: Numeric) -> int:
    """Scale ``amount`` by an arbitrary factor and round to whole cents."""

    return _scaled(amount, to_decimal(factor))


def percent_of(amount: int, percent: Numeric) -> int:
    """``amount * percent / 100`` rounded to whole cents."""

    return _scaled(amount, to_decimal(percent), _HUNDRED)


def apply_rate(amount: int, numerator: Numeric, denominator: Numeric) -> int:
    """Apply a tenth/twentieth rate: multiply by the numerator, then divide.

    A non-positive denominator has no meaningful rate and yields zero.
    """

    den = to_decimal(denominator)
    if den <= 0:
        logger.debug("rate denominator %s is not positive; fee treated as zero", den)
        return 0
    return _scaled(amount, to_decimal(numerator), den)


def minimum(a: int, b: int) -> int:
    return a if a <= b else b


def total(amounts: Iterable[int]) -> int:
    result = 0
    for amount in amounts:
        result += amount
    return result


def is_valid_cents(value: object) -> bool:
    """True for non-negative integers (booleans excluded)."""

    return isinstance(value, int) and not isinstance(value, bool) and value >= 0
