"""Data contracts for the user profile."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Annotated, Any, Dict, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator, model_validator

from dofire.schemas.common import IsoDate, years_before

MAX_AGE_YEARS = 120


def _check_birth_date(value: Optional[date]) -> Optional[date]:
    if value is None:
        return value
    today = date.today()
    if not (years_before(today, MAX_AGE_YEARS) <= value < today):
        raise ValueError("must_be_in_past_and_within_last_120_years")
    return value


BirthDate = Annotated[IsoDate, AfterValidator(_check_birth_date)]


class CreateProfileCommand(BaseModel):
    """POST /me/profile payload; the client never sends ids or timestamps."""

    model_config = ConfigDict(extra="forbid")

    monthly_expense: float = Field(..., ge=0, allow_inf_nan=False)
    withdrawal_rate_pct: float = Field(..., ge=0, le=100, allow_inf_nan=False)
    expected_return_pct: float = Field(..., ge=-100, le=1000, allow_inf_nan=False)
    birth_date: Optional[BirthDate] = None


class UpdateProfileCommand(BaseModel):
    """PATCH /me/profile payload. Omitted fields stay untouched; birth_date may be nulled."""

    model_config = ConfigDict(extra="forbid")

    monthly_expense: float = Field(default=None, ge=0, le=9999999999999.99, allow_inf_nan=False)
    withdrawal_rate_pct: float = Field(default=None, ge=0, le=100, allow_inf_nan=False)
    expected_return_pct: float = Field(default=None, ge=-100, le=1000, allow_inf_nan=False)
    birth_date: Optional[BirthDate] = None

    @field_validator("withdrawal_rate_pct")
    @classmethod
    def at_most_two_decimals(cls, value: float) -> float:
        if Decimal(str(value)).as_tuple().exponent < -2:
            raise ValueError("must_have_at_most_2_decimal_places")
        return value

    @model_validator(mode="after")
    def ensure_not_empty(self) -> "UpdateProfileCommand":
        if not self.model_fields_set:
            raise ValueError("at_least_one_field_required")
        return self

    def changes(self) -> Dict[str, Any]:
        """Only the provided fields, money and rates rounded to 2 places."""
        payload = self.model_dump(exclude_unset=True)
        for key in ("monthly_expense", "withdrawal_rate_pct", "expected_return_pct"):
            if key in payload:
                payload[key] = round(payload[key], 2)
        return payload
