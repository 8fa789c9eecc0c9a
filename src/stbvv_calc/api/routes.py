# src/stbvv_calc/api/routes.py
"""
Calculation endpoints for the fee calculator front end.

Notes:
- Numeric request fields accept numbers or strings and are handed to the
  engine unvalidated; half-typed input resolves to zero rather than a 422.
- All amounts in responses are decimal strings with two places.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional, Union

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from ..rules import cents
from ..rules.fee_engine import AggregateResult, PositionResult, aggregate, calculate_position
from ..rules.fee_tables import FEE_TABLES, FeeTable, UnknownFeeTableError, get_fee_table, lookup
from ..rules.positions import (
    BillingMode,
    Discount,
    DiscountType,
    FlatPosition,
    HourlyPosition,
    Position,
    Rate,
    TieredPosition,
)
from ..rules.presets import ACTIVITY_PRESETS
from ..settings import settings

logger = logging.getLogger("stbvv-api")

router = APIRouter(prefix="/api/v1", tags=["Fee Calculation"])

Amount = Union[Decimal, str, None]


def _money(value: int) -> str:
    return str(cents.from_minor_units(value))


# ============ Pydantic Models ============

class RateIn(BaseModel):
    numerator: Amount = Field(10, examples=[6.5])
    denominator: Amount = Field(10, examples=[20])


class PositionIn(BaseModel):
    billing_mode: BillingMode = BillingMode.TIERED
    activity: str = ""
    fee_table: str = Field("A", examples=["B"])
    base_value: Amount = Field(None, examples=[35000])
    rate: RateIn = Field(default_factory=RateIn)
    hourly_rate: Amount = Field(None, examples=[115])
    hours: Amount = Field(None, examples=[2.5])
    flat_amount: Amount = Field(None, examples=[250])
    quantity: Amount = Field(1, examples=[1])
    apply_surcharge: bool = False

    def to_position(self) -> Position:
        if self.billing_mode is BillingMode.HOURLY:
            return HourlyPosition(
                hourly_rate=self.hourly_rate,
                hours=self.hours,
                quantity=self.quantity,
                apply_surcharge=self.apply_surcharge,
                activity=self.activity,
            )
        if self.billing_mode is BillingMode.FLAT:
            return FlatPosition(
                flat_amount=self.flat_amount,
                quantity=self.quantity,
                apply_surcharge=self.apply_surcharge,
                activity=self.activity,
            )
        return TieredPosition(
            base_value=self.base_value,
            fee_table=get_fee_table(self.fee_table),
            rate=Rate(self.rate.numerator, self.rate.denominator),
            quantity=self.quantity,
            apply_surcharge=self.apply_surcharge,
            activity=self.activity,
        )


class DiscountIn(BaseModel):
    type: Literal["percentage", "fixed"]
    value: Amount = Field(None, examples=[10])

    def to_discount(self) -> Discount:
        return Discount(DiscountType(self.type), self.value)


class CalculateRequest(BaseModel):
    positions: List[PositionIn] = Field(default_factory=list)
    document_fee: Amount = Field(None, description="Defaults to the configured document fee when omitted")
    apply_tax: bool = True
    discount: Optional[DiscountIn] = None


def _position_out(result: PositionResult) -> Dict[str, str]:
    return {key: str(value) for key, value in result.as_decimal().items()}


def _aggregate_out(result: AggregateResult) -> Dict[str, Any]:
    payload: Dict[str, Any] = {key: str(value) for key, value in result.as_decimal().items()}
    payload["lines"] = [
        {
            "billing_mode": line.billing_mode.value,
            **_position_out(line.result),
            "quantity": line.quantity,
            "line_total": _money(line.line_total),
        }
        for line in result.lines
    ]
    return payload


def _table_or_404(name: str) -> FeeTable:
    try:
        return get_fee_table(name)
    except UnknownFeeTableError:
        raise HTTPException(status_code=404, detail=f"Fee table {name} not found")


# ============ Fee tables ============

@router.get("/fee-tables")
def list_fee_tables() -> List[Dict[str, Any]]:
    return [
        {"name": t.name, "title": t.title, "brackets": len(t.brackets)}
        for t in FEE_TABLES.values()
    ]


@router.get("/fee-tables/{name}")
def fee_table_detail(name: str) -> Dict[str, Any]:
    table = _table_or_404(name)
    return {
        "name": table.name,
        "title": table.title,
        "brackets": [
            {
                "min_value": _money(b.min_value),
                "max_value": None if b.max_value is None else _money(b.max_value),
                "fee": _money(b.fee),
            }
            for b in table.brackets
        ],
    }


@router.get("/fee-tables/{name}/lookup")
def fee_table_lookup(
    name: str,
    base_value: str = Query(..., description="Base value (Gegenstandswert) in euros"),
) -> Dict[str, str]:
    table = _table_or_404(name)
    value = cents.to_minor_units(cents.sanitize(base_value))
    return {
        "table": table.name,
        "base_value": _money(value),
        "fee": _money(lookup(table, value)),
    }


# ============ Presets ============

@router.get("/presets")
def list_presets() -> List[Dict[str, Any]]:
    return [
        {
            "activity": p.activity,
            "fee_table": p.fee_table_name,
            "legal_basis": p.legal_basis,
            "rate_type": p.rate_type.value,
            "default_rate": {
                "numerator": str(p.default_numerator),
                "denominator": p.rate_type.denominator,
            },
            "min_rate": str(p.min_rate),
            "max_rate": str(p.max_rate),
        }
        for p in ACTIVITY_PRESETS
    ]


# ============ Calculation ============

@router.post("/positions/calculate")
def calculate_single_position(body: PositionIn) -> Dict[str, str]:
    try:
        position = body.to_position()
    except UnknownFeeTableError as e:
        raise HTTPException(status_code=422, detail=f"Unknown fee table {e.name}")
    result = calculate_position(position)
    return {"billing_mode": position.billing_mode.value, **_position_out(result)}


@router.post("/calculate")
def calculate_totals(body: CalculateRequest) -> Dict[str, Any]:
    try:
        positions = [p.to_position() for p in body.positions]
    except UnknownFeeTableError as e:
        raise HTTPException(status_code=422, detail=f"Unknown fee table {e.name}")

    if "document_fee" in body.model_fields_set:
        document_fee = body.document_fee
    else:
        document_fee = settings.default_document_fee

    discount = body.discount.to_discount() if body.discount else None
    result = aggregate(positions, document_fee, body.apply_tax, discount)
    logger.debug(
        "calculated %d positions: net=%s gross=%s",
        len(positions), result.subtotal_net, result.total_gross,
    )
    return _aggregate_out(result)
