from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class AssetType(str, Enum):
    ETF = "etf"
    BOND = "bond"
    STOCK = "stock"
    CASH = "cash"


class Profile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    monthly_expense: float
    withdrawal_rate_pct: float
    expected_return_pct: float
    birth_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime


class Investment(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    type: AssetType
    amount: float
    acquired_at: date
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    def to_row(self) -> Dict[str, Any]:
        return self.model_dump()


class PortfolioAgg(BaseModel):
    """Row of the per-user aggregation view; nulls from the view become zero."""

    model_config = ConfigDict(extra="ignore")

    user_id: str
    total_amount: float = 0.0
    sum_stock: float = 0.0
    sum_etf: float = 0.0
    sum_bond: float = 0.0
    sum_cash: float = 0.0
    share_stock: float = 0.0
    share_etf: float = 0.0
    share_bond: float = 0.0
    share_cash: float = 0.0

    @field_validator(
        "total_amount",
        "sum_stock",
        "sum_etf",
        "sum_bond",
        "sum_cash",
        "share_stock",
        "share_etf",
        "share_bond",
        "share_cash",
        mode="before",
    )
    @classmethod
    def zero_nulls(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @classmethod
    def empty(cls, user_id: str) -> "PortfolioAgg":
        return cls(user_id=user_id)
