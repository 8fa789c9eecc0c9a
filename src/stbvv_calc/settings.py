from __future__ import annotations

from decimal import Decimal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Regulatory constants; overridable per deployment, read once at startup.
    vat_rate_percent: Decimal = Field(default=Decimal("19"), alias="STBVV_VAT_RATE")
    expense_rate_percent: Decimal = Field(default=Decimal("20"), alias="STBVV_EXPENSE_RATE")
    expense_cap: Decimal = Field(default=Decimal("20.00"), alias="STBVV_EXPENSE_CAP")
    default_document_fee: Decimal = Field(default=Decimal("12.00"), alias="STBVV_DOCUMENT_FEE")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = {
        "env_file": ".env",
        "extra": "ignore",
        "frozen": True,
        "populate_by_name": True,
    }

    def describe(self) -> str:
        return (
            f"vat={self.vat_rate_percent}% expense={self.expense_rate_percent}% "
            f"cap={self.expense_cap} document_fee={self.default_document_fee}"
        )


settings = Settings()
