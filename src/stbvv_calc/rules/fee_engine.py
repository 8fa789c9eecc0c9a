# src/stbvv_calc/rules/fee_engine.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, Optional, Tuple

from . import cents
from .fee_tables import lookup
from .positions import (
    BillingMode,
    Discount,
    DiscountType,
    FlatPosition,
    HourlyPosition,
    Position,
    TieredPosition,
    effective_quantity,
)
from ..settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)


# -------------------------------
# Result models
# -------------------------------

@dataclass(frozen=True)
class PositionResult:
    """Per-unit fee breakdown of one position, in cents."""

    base_fee: int
    rate_adjusted_fee: int
    expense_surcharge: int
    total_net: int

    def as_decimal(self) -> Dict[str, Decimal]:
        return {
            "base_fee": cents.from_minor_units(self.base_fee),
            "rate_adjusted_fee": cents.from_minor_units(self.rate_adjusted_fee),
            "expense_surcharge": cents.from_minor_units(self.expense_surcharge),
            "total_net": cents.from_minor_units(self.total_net),
        }


ZERO_RESULT = PositionResult(0, 0, 0, 0)


@dataclass(frozen=True)
class LineResult:
    billing_mode: BillingMode
    result: PositionResult
    quantity: int
    line_total: int


@dataclass(frozen=True)
class AggregateResult:
    """Invoice-level totals, in cents. ``lines`` follows the input order."""

    positions_total: int
    document_fee: int
    discount_amount: int
    subtotal_net: int
    tax_amount: int
    total_gross: int
    lines: Tuple[LineResult, ...] = field(default=())

    def as_decimal(self) -> Dict[str, Decimal]:
        return {
            "positions_total": cents.from_minor_units(self.positions_total),
            "document_fee": cents.from_minor_units(self.document_fee),
            "discount_amount": cents.from_minor_units(self.discount_amount),
            "subtotal_net": cents.from_minor_units(self.subtotal_net),
            "tax_amount": cents.from_minor_units(self.tax_amount),
            "total_gross": cents.from_minor_units(self.total_gross),
        }


# -------------------------------
# Position calculator
# -------------------------------

def expense_surcharge(fee: int, *, config: Optional[Settings] = None) -> int:
    """Flat-rate expense allowance: a percentage of the fee, capped.

    The cap applies the same way whichever billing mode produced ``fee``.
    """

    cfg = config or default_settings
    if fee <= 0:
        return 0
    raw = cents.percent_of(fee, cfg.expense_rate_percent)
    cap = cents.to_minor_units(cfg.expense_cap)
    if raw > cap:
        logger.debug("expense surcharge %s capped at %s", raw, cap)
    return cents.minimum(raw, cap)


def _tiered_fee(position: TieredPosition) -> Tuple[int, int]:
    base_fee = lookup(position.fee_table, cents.to_minor_units(cents.sanitize(position.base_value)))
    rate = position.rate
    adjusted = cents.apply_rate(
        base_fee, cents.sanitize(rate.numerator), cents.sanitize(rate.denominator)
    )
    return base_fee, adjusted


def _hourly_fee(position: HourlyPosition) -> Tuple[int, int]:
    rate = cents.to_minor_units(cents.sanitize(position.hourly_rate))
    fee = cents.multiply(rate, cents.sanitize(position.hours))
    return fee, fee


def _flat_fee(position: FlatPosition) -> Tuple[int, int]:
    fee = cents.to_minor_units(cents.sanitize(position.flat_amount))
    return fee, fee


def calculate_position(position: Position, *, config: Optional[Settings] = None) -> PositionResult:
    """Fee breakdown for a single unit of ``position``.

    Malformed numeric fields never raise; they sanitize to zero and give a
    zero-valued result. A tiered position with a base value of zero or less
    short-circuits to all zeros.
    """

    if isinstance(position, TieredPosition):
        if cents.sanitize(position.base_value) <= 0:
            return ZERO_RESULT
        base_fee, adjusted = _tiered_fee(position)
    elif isinstance(position, HourlyPosition):
        base_fee, adjusted = _hourly_fee(position)
    elif isinstance(position, FlatPosition):
        base_fee, adjusted = _flat_fee(position)
    else:
        raise TypeError(f"not a billable position: {type(position).__name__}")

    surcharge = expense_surcharge(adjusted, config=config) if position.apply_surcharge else 0
    return PositionResult(
        base_fee=base_fee,
        rate_adjusted_fee=adjusted,
        expense_surcharge=surcharge,
        total_net=cents.add(adjusted, surcharge),
    )


# -------------------------------
# Aggregate calculator
# -------------------------------

def discount_amount(subtotal: int, discount: Optional[Discount]) -> int:
    """Discount in cents, clamped to ``[0, subtotal]``."""

    if discount is None or subtotal <= 0:
        return 0
    value = cents.sanitize(discount.value)
    if value <= 0:
        return 0
    if discount.type == DiscountType.PERCENTAGE:
        amount = cents.percent_of(subtotal, value)
    else:
        amount = cents.to_minor_units(value)
    if amount > subtotal:
        logger.debug("discount %s clamped to subtotal %s", amount, subtotal)
        return subtotal
    return amount


def aggregate(
    positions: Iterable[Position],
    document_fee: Optional[cents.Numeric],
    apply_tax: bool,
    discount: Optional[Discount] = None,
    *,
    config: Optional[Settings] = None,
) -> AggregateResult:
    """Invoice totals.

    Order of operations is fixed: positions x quantity, plus document fee,
    minus the clamped discount, then tax on the discounted subtotal.
    """

    cfg = config or default_settings

    lines = []
    for position in positions:
        result = calculate_position(position, config=cfg)
        qty = effective_quantity(position.quantity)
        lines.append(
            LineResult(
                billing_mode=position.billing_mode,
                result=result,
                quantity=qty,
                line_total=cents.multiply_by_integer(result.total_net, qty),
            )
        )

    positions_total = cents.total(line.line_total for line in lines)
    doc_fee = cents.to_minor_units(cents.sanitize(document_fee))
    before_discount = cents.add(positions_total, doc_fee)

    discount_cents = discount_amount(before_discount, discount)
    subtotal_net = cents.subtract(before_discount, discount_cents)

    tax = cents.percent_of(subtotal_net, cfg.vat_rate_percent) if apply_tax else 0

    return AggregateResult(
        positions_total=positions_total,
        document_fee=doc_fee,
        discount_amount=discount_cents,
        subtotal_net=subtotal_net,
        tax_amount=tax,
        total_gross=cents.add(subtotal_net, tax),
        lines=tuple(lines),
    )
