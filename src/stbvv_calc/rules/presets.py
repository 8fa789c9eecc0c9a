"""Common tax-advisory activities with their suggested StBVV parameters.

Each preset proposes a fee table and a default rate (the midpoint of the
regulatory range) for a tiered position. Presets are suggestions only: the
engine neither clamps a chosen rate to ``min_rate``/``max_rate`` nor enforces
minimum base values.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional, Tuple

from .cents import Numeric
from .fee_tables import FeeTable, get_fee_table
from .positions import Rate, TieredPosition


class RateType(str, Enum):
    TENTH = "tenth"
    TWENTIETH = "twentieth"

    @property
    def denominator(self) -> int:
        return 10 if self is RateType.TENTH else 20


@dataclass(frozen=True)
class ActivityPreset:
    activity: str
    default_numerator: Decimal
    fee_table_name: str
    legal_basis: str
    rate_type: RateType
    min_rate: Decimal
    max_rate: Decimal

    @property
    def default_rate(self) -> Rate:
        return Rate(self.default_numerator, self.rate_type.denominator)

    @property
    def table(self) -> FeeTable:
        return get_fee_table(self.fee_table_name)


def _preset(activity, default, table, basis, rate_type, lo, hi) -> ActivityPreset:
    return ActivityPreset(
        activity=activity,
        default_numerator=Decimal(str(default)),
        fee_table_name=table,
        legal_basis=basis,
        rate_type=rate_type,
        min_rate=Decimal(str(lo)),
        max_rate=Decimal(str(hi)),
    )


_T, _TW = RateType.TENTH, RateType.TWENTIETH

ACTIVITY_PRESETS: Tuple[ActivityPreset, ...] = (
    _preset("Einkommensteuererklärung", 3.5, "A", "§ 24 Abs. 1 Nr. 1", _T, 1, 6),
    _preset("Einkommensteuer Mantelbogen", 3.5, "A", "§ 24 Abs. 1 Nr. 1", _T, 1, 6),
    _preset("Anlage N (Einkünfte aus nichtselbständiger Arbeit)", 6.5, "A", "§ 27", _TW, 1, 12),
    _preset("Anlage V (Vermietung und Verpachtung)", 6.5, "A", "§ 27", _TW, 1, 12),
    _preset("Anlage G (Gewerbebetrieb)", 6.5, "A", "§ 27", _TW, 1, 12),
    _preset("Anlage S (Einkünfte aus selbständiger Arbeit)", 6.5, "A", "§ 27", _TW, 1, 12),
    _preset("Anlage KAP (Kapitalerträge)", 3.5, "A", "§ 24 Abs. 1 Nr. 14", _TW, 1, 6),
    _preset("Anlage SO (Sonstige Einkünfte)", 6.5, "A", "§ 27", _TW, 1, 12),
    _preset("Anlage R (Renten)", 6.5, "A", "§ 27", _TW, 1, 12),
    _preset("Anlage L (Land- und Forstwirtschaft)", 6.5, "D", "§ 27", _TW, 1, 12),
    _preset("Anlage EÜR (Einnahmen-Überschuss-Rechnung)", 17.5, "B", "§ 25", _T, 5, 30),
    _preset("Jahresabschluss GmbH", 25, "B", "§ 35 Abs. 1 Nr. 1a", _T, 10, 40),
    _preset("Jahresabschluss Einzelunternehmen", 25, "B", "§ 35 Abs. 1 Nr. 1a", _T, 10, 40),
    _preset("Jahresabschluss Übermittlung an Bundesanzeiger", 25, "B", "§ 35 Abs. 1 Nr. 6", _T, 10, 40),
    _preset("Jahresabschluss Übermittlung an das Finanzamt", 25, "B", "§ 35 Abs. 1 Nr. 6", _T, 10, 40),
    _preset("Überleitung Handelsbilanz nach Steuerbilanz", 8.5, "B", "§ 35 Abs. 1 Nr. 4b", _T, 5, 12),
    _preset("Umsatzsteuer-Voranmeldung", 4.5, "A", "§ 24 Abs. 1 Nr. 8", _T, 1, 8),
    _preset("Umsatzsteuererklärung", 4.5, "A", "§ 24 Abs. 1 Nr. 8", _T, 1, 8),
    _preset("Gewerbesteuererklärung", 3.5, "A", "§ 24 Abs. 1 Nr. 5", _T, 1, 6),
    _preset("Körperschaftsteuererklärung", 5, "A", "§ 24 Abs. 1 Nr. 3", _T, 2, 8),
    _preset("Buchführung (monatlich)", 6.5, "C", "§ 33", _T, 1, 12),
    _preset("Lohnbuchhaltung", 6.5, "C", "§ 33", _T, 1, 12),
    _preset("Prüfung Steuerbescheid", 3.5, "A", "§ 24 Abs. 1 Nr. 1", _T, 1, 6),
    _preset("Auslagen für externe Kosten", 5.5, "A", "§ 24 Abs. 1 Nr. 1", _T, 1, 10),
)

_BY_ACTIVITY: Dict[str, ActivityPreset] = {p.activity: p for p in ACTIVITY_PRESETS}


def get_activity_preset(activity: str) -> Optional[ActivityPreset]:
    return _BY_ACTIVITY.get(activity)


def tiered_position_from_preset(
    activity: str,
    base_value: Optional[Numeric],
    *,
    quantity: Optional[Numeric] = 1,
    apply_surcharge: bool = True,
) -> TieredPosition:
    """Build a tiered position using the preset's table and default rate."""

    preset = _BY_ACTIVITY.get(activity)
    if preset is None:
        raise KeyError(f"no preset for activity {activity!r}")
    return TieredPosition(
        base_value=base_value,
        fee_table=preset.table,
        rate=preset.default_rate,
        quantity=quantity,
        apply_surcharge=apply_surcharge,
        activity=preset.activity,
    )
