"""Data contracts for investments."""

from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Any, Dict, List, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    model_validator,
)

from dofire.core.cursor import SortOption
from dofire.models import AssetType, Investment
from dofire.schemas.common import IsoDate

MAX_AMOUNT = 999999999999.99
MAX_NOTES_LENGTH = 1000
DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 200


def _not_in_future(value: date) -> date:
    if value > date.today():
        raise ValueError("acquired_at_cannot_be_future")
    return value


AcquiredAt = Annotated[IsoDate, AfterValidator(_not_in_future)]


def _blank_notes_to_none(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


Notes = Annotated[
    Optional[Annotated[str, StringConstraints(max_length=MAX_NOTES_LENGTH)]],
    BeforeValidator(_blank_notes_to_none),
]


class CreateInvestmentCommand(BaseModel):
    """POST /investments payload."""

    model_config = ConfigDict(extra="forbid")

    type: AssetType
    amount: float = Field(..., gt=0, le=MAX_AMOUNT, allow_inf_nan=False)
    acquired_at: AcquiredAt
    notes: Notes = None


class UpdateInvestmentCommand(BaseModel):
    """PATCH /investments/<id> payload; partial, at least one field."""

    model_config = ConfigDict(extra="forbid")

    type: AssetType = None
    amount: float = Field(default=None, gt=0, le=MAX_AMOUNT, allow_inf_nan=False)
    acquired_at: AcquiredAt = None
    notes: Notes = None

    @model_validator(mode="after")
    def ensure_not_empty(self) -> "UpdateInvestmentCommand":
        if not self.model_fields_set:
            raise ValueError("at_least_one_field_required")
        return self

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class InvestmentListQuery(BaseModel):
    """Query string of GET /investments."""

    model_config = ConfigDict(extra="ignore")

    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    cursor: Optional[str] = None
    type: Optional[AssetType] = None
    acquired_at_from: Optional[IsoDate] = None
    acquired_at_to: Optional[IsoDate] = None
    sort: SortOption = SortOption.ACQUIRED_AT_DESC


class InvestmentOut(BaseModel):
    """Investment as returned by the API; user_id stays server-side."""

    id: str
    type: AssetType
    amount: float
    acquired_at: date
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, investment: Investment) -> "InvestmentOut":
        return cls.model_validate(investment.model_dump(exclude={"user_id"}))


class InvestmentPage(BaseModel):
    items: List[InvestmentOut]
    next_cursor: Optional[str] = None
