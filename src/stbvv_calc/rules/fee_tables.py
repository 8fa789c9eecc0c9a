"""Statutory fee tables of the StBVV (Steuerberatervergütungsverordnung).

Four tables map a base value (Gegenstandswert) to a full base fee:

  - A: advice and tax returns (Beratungstabelle, Anlage 1)
  - B: financial statements (Abschlusstabelle, Anlage 2)
  - C: bookkeeping (Buchführungstabelle, Anlage 3)
  - D: agriculture and forestry (Landwirtschaftliche Tabelle, Anlage 4)

Each table is a gap-free run of ``[min, max)`` brackets whose last bracket is
open-ended. The data are immutable module constants built once at import;
callers get them by reference and never mutate them.
"""
from __future__ import annotations

import logging
from bisect import bisect_right
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

from .cents import Numeric, to_minor_units

__all__ = [
    "Bracket",
    "FeeTable",
    "ScheduleVersion",
    "SCHEDULE_VERSION",
    "TABLE_A",
    "TABLE_B",
    "TABLE_C",
    "TABLE_D",
    "FEE_TABLES",
    "UnknownFeeTableError",
    "get_fee_table",
    "lookup",
]

logger = logging.getLogger(__name__)


class UnknownFeeTableError(KeyError):
    """Raised when a fee table name is not one of A, B, C or D."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"unknown fee table: {self.name!r}"


@dataclass(frozen=True)
class ScheduleVersion:
    version: str
    effective: date
    source_document: str
    gazette_ref: str


SCHEDULE_VERSION = ScheduleVersion(
    version="2025",
    effective=date(2025, 7, 1),
    source_document="Fünfte Verordnung zur Änderung der Steuerberatervergütungsverordnung",
    gazette_ref="BGBl. 2025 I Nr. 98",
)


@dataclass(frozen=True)
class Bracket:
    """One tier, in cents. ``max_value`` of ``None`` means "and above"."""

    min_value: int
    max_value: Optional[int]
    fee: int


@dataclass(frozen=True)
class FeeTable:
    name: str
    title: str
    brackets: Tuple[Bracket, ...]
    _bounds: Tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.brackets:
            raise ValueError(f"fee table {self.name} has no brackets")
        for prev, cur in zip(self.brackets, self.brackets[1:]):
            if prev.max_value is None:
                raise ValueError(f"fee table {self.name}: only the last bracket may be open-ended")
            if prev.max_value != cur.min_value:
                raise ValueError(
                    f"fee table {self.name}: gap or overlap at {prev.max_value} / {cur.min_value}"
                )
            if prev.min_value >= prev.max_value:
                raise ValueError(f"fee table {self.name}: empty bracket at {prev.min_value}")
        if self.brackets[-1].max_value is not None:
            raise ValueError(f"fee table {self.name}: last bracket must be open-ended")
        object.__setattr__(self, "_bounds", tuple(b.min_value for b in self.brackets))

    @classmethod
    def from_major_units(
        cls,
        name: str,
        title: str,
        rows: Iterable[Tuple[Numeric, Optional[Numeric], Numeric]],
    ) -> "FeeTable":
        """Build a table from ``(min, max, fee)`` rows given in euros."""

        brackets = tuple(
            Bracket(
                min_value=to_minor_units(lo),
                max_value=None if hi is None else to_minor_units(hi),
                fee=to_minor_units(fee),
            )
            for lo, hi, fee in rows
        )
        return cls(name=name, title=title, brackets=brackets)

    @property
    def last(self) -> Bracket:
        return self.brackets[-1]


def lookup(table: FeeTable, base_value: int) -> int:
    """Return the fee (cents) of the bracket containing ``base_value`` (cents).

    Expects a sanitized, non-negative value. Anything at or beyond the last
    lower bound saturates to the last bracket's fee.
    """

    bounds = table._bounds
    idx = bisect_right(bounds, base_value) - 1
    if idx < 0:
        return table.brackets[0].fee
    if idx == len(bounds) - 1:
        logger.debug("base value %s saturates at last bracket of table %s", base_value, table.name)
    return table.brackets[idx].fee


# -------------------------------
# StBVV table data (euros)
# -------------------------------

TABLE_A = FeeTable.from_major_units(
    "A",
    "Beratungstabelle (Erklärungen, Beratung)",
    [
        (0, 300, 32),
        (300, 600, 65),
        (600, 1200, 130),
        (1200, 2400, 195),
        (2400, 4800, 260),
        (4800, 9600, 390),
        (9600, 19200, 560),
        (19200, 38400, 780),
        (38400, 76800, 1040),
        (76800, 153600, 1430),
        (153600, 307200, 1950),
        (307200, 614400, 2730),
        (614400, 1228800, 3900),
        (1228800, 2457600, 5850),
        (2457600, 4915200, 8190),
        (4915200, 9830400, 11700),
        (9830400, 19660800, 16900),
        (19660800, 39321600, 24700),
        (39321600, 78643200, 35100),
        (78643200, None, 50700),
    ],
)

TABLE_B = FeeTable.from_major_units(
    "B",
    "Abschlusstabelle (Jahresabschlüsse)",
    [
        (0, 3000, 130),
        (3000, 6000, 195),
        (6000, 12000, 260),
        (12000, 24000, 390),
        (24000, 48000, 560),
        (48000, 96000, 780),
        (96000, 192000, 1040),
        (192000, 384000, 1430),
        (384000, 768000, 1950),
        (768000, 1536000, 2730),
        (1536000, 3072000, 3900),
        (3072000, 6144000, 5850),
        (6144000, 12288000, 8190),
        (12288000, 24576000, 11700),
        (24576000, 49152000, 16900),
        (49152000, 98304000, 24700),
        (98304000, 196608000, 35100),
        (196608000, None, 50700),
    ],
)

TABLE_C = FeeTable.from_major_units(
    "C",
    "Buchführungstabelle",
    [
        (0, 2500, 32),
        (2500, 5000, 65),
        (5000, 10000, 130),
        (10000, 20000, 195),
        (20000, 40000, 260),
        (40000, 80000, 390),
        (80000, 160000, 560),
        (160000, 320000, 780),
        (320000, 640000, 1040),
        (640000, 1280000, 1430),
        (1280000, 2560000, 1950),
        (2560000, 5120000, 2730),
        (5120000, 10240000, 3900),
        (10240000, 20480000, 5850),
        (20480000, 40960000, 8190),
        (40960000, 81920000, 11700),
        (81920000, 163840000, 16900),
        (163840000, 327680000, 24700),
        (327680000, None, 35100),
    ],
)

TABLE_D = FeeTable.from_major_units(
    "D",
    "Landwirtschaftliche Tabelle",
    [
        (0, 1500, 32),
        (1500, 3000, 65),
        (3000, 6000, 130),
        (6000, 12000, 195),
        (12000, 24000, 260),
        (24000, 48000, 390),
        (48000, 96000, 560),
        (96000, 192000, 780),
        (192000, 384000, 1040),
        (384000, 768000, 1430),
        (768000, 1536000, 1950),
        (1536000, 3072000, 2730),
        (3072000, 6144000, 3900),
        (6144000, 12288000, 5850),
        (12288000, 24576000, 8190),
        (24576000, 49152000, 11700),
        (49152000, 98304000, 16900),
        (98304000, 196608000, 24700),
        (196608000, None, 35100),
    ],
)

FEE_TABLES: Mapping[str, FeeTable] = MappingProxyType(
    {t.name: t for t in (TABLE_A, TABLE_B, TABLE_C, TABLE_D)}
)


def get_fee_table(name: str) -> FeeTable:
    key = (name or "").strip().upper()
    try:
        return FEE_TABLES[key]
    except KeyError:
        raise UnknownFeeTableError(name) from None
