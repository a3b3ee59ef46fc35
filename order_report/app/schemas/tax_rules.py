from decimal import Decimal

from pydantic import BaseModel, Field, field_validator


class TaxRules(BaseModel):
    # {"vat": {"STANDARD": 0.2, "REDUCED": 0.05, "ZERO": 0}}
    vat: dict[str, Decimal] = Field(min_length=1)

    @field_validator("vat")
    @classmethod
    def rates_nonneg(cls, v: dict[str, Decimal]) -> dict[str, Decimal]:
        for code, rate in v.items():
            if not code.strip():
                raise ValueError("VAT code must not be blank")
            if rate < 0:
                raise ValueError(f"VAT rate for {code} must be >= 0 (got {rate})")
        return {code.strip(): rate for code, rate in v.items()}
