"""Billable line items and discounts fed to the fee engine.

A position is exactly one of three billing modes, each carrying only the
fields it needs:

  - ``TieredPosition``: base value looked up in a fee table, scaled by a rate
  - ``HourlyPosition``: hourly rate times hours
  - ``FlatPosition``: a fixed amount

Amounts are human (euro) values exactly as typed by the caller; the engine
sanitizes them at calculation time, so a half-filled form still produces a
(zero) result instead of an exception.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Union

from .cents import Numeric, to_decimal
from .fee_tables import FeeTable, TABLE_A

logger = logging.getLogger(__name__)


class BillingMode(str, Enum):
    TIERED = "tiered"
    HOURLY = "hourly"
    FLAT = "flat"


@dataclass(frozen=True)
class Rate:
    """Tenth (x/10) or twentieth (x/20) rate; the numerator may be fractional."""

    numerator: Numeric
    denominator: Numeric = 10


FULL_RATE = Rate(10, 10)


@dataclass(frozen=True)
class TieredPosition:
    base_value: Optional[Numeric]
    fee_table: FeeTable = TABLE_A
    rate: Rate = FULL_RATE
    quantity: Optional[Numeric] = 1
    apply_surcharge: bool = False
    activity: str = ""

    billing_mode: ClassVar[BillingMode] = BillingMode.TIERED


@dataclass(frozen=True)
class HourlyPosition:
    hourly_rate: Optional[Numeric]
    hours: Optional[Numeric]
    quantity: Optional[Numeric] = 1
    apply_surcharge: bool = False
    activity: str = ""

    billing_mode: ClassVar[BillingMode] = BillingMode.HOURLY


@dataclass(frozen=True)
class FlatPosition:
    flat_amount: Optional[Numeric]
    quantity: Optional[Numeric] = 1
    apply_surcharge: bool = False
    activity: str = ""

    billing_mode: ClassVar[BillingMode] = BillingMode.FLAT


Position = Union[TieredPosition, HourlyPosition, FlatPosition]


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


@dataclass(frozen=True)
class Discount:
    """Either a percentage of the pre-discount subtotal or a fixed euro amount."""

    type: DiscountType
    value: Optional[Numeric]

    @classmethod
    def percentage(cls, value: Numeric) -> "Discount":
        return cls(DiscountType.PERCENTAGE, value)

    @classmethod
    def fixed(cls, value: Numeric) -> "Discount":
        return cls(DiscountType.FIXED, value)


def effective_quantity(value: Optional[Numeric]) -> int:
    """Repeat count for a position: an integral value >= 1, otherwise 1."""

    qty = to_decimal(value)
    if qty < 1 or qty != qty.to_integral_value():
        if value is not None:
            logger.debug("invalid quantity %r treated as 1", value)
        return 1
    return int(qty)
