from decimal import Decimal

import pytest
from pydantic import ValidationError

from stbvv_calc.settings import Settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("STBVV_VAT_RATE", "STBVV_EXPENSE_RATE", "STBVV_EXPENSE_CAP", "STBVV_DOCUMENT_FEE"):
        monkeypatch.delenv(name, raising=False)

    cfg = Settings(_env_file=None)

    assert cfg.vat_rate_percent == Decimal("19")
    assert cfg.expense_rate_percent == Decimal("20")
    assert cfg.expense_cap == Decimal("20.00")
    assert cfg.default_document_fee == Decimal("12.00")


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STBVV_VAT_RATE", "7")
    monkeypatch.setenv("STBVV_EXPENSE_CAP", "25.50")

    cfg = Settings(_env_file=None)

    assert cfg.vat_rate_percent == Decimal("7")
    assert cfg.expense_cap == Decimal("25.50")


def test_field_names_are_accepted() -> None:
    cfg = Settings(vat_rate_percent="16", _env_file=None)

    assert cfg.vat_rate_percent == Decimal("16")


def test_settings_are_frozen() -> None:
    cfg = Settings(_env_file=None)

    with pytest.raises(ValidationError):
        cfg.vat_rate_percent = Decimal("7")


def test_describe_mentions_rates() -> None:
    cfg = Settings(STBVV_VAT_RATE="7", _env_file=None)

    assert "vat=7%" in cfg.describe()
