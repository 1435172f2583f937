"""Pydantic schema for the portfolio hint endpoint."""

from typing import List, Literal

from pydantic import BaseModel

RuleId = Literal[
    "stock_plus_etf_ge_80",
    "bond_ge_50",
    "cash_ge_30",
    "stock_plus_etf_lt_40",
]


class HintShares(BaseModel):
    stock: float
    etf: float
    bond: float
    cash: float


class AiHint(BaseModel):
    hint: str
    rules_matched: List[RuleId]
    shares: HintShares
