"""Data contracts for FIRE metrics."""

from __future__ import annotations

import math
from datetime import date
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class FireInputs(BaseModel):
    """Inputs merged from the profile, the portfolio and what-if overrides."""

    model_config = ConfigDict(frozen=True)

    monthly_expense: float
    withdrawal_rate_pct: float
    expected_return_pct: float
    invested_total: float
    birth_date: Optional[date] = None


class MetricsInputs(BaseModel):
    monthly_expense: float
    withdrawal_rate_pct: float
    expected_return_pct: float
    invested_total: float


class DerivedMetrics(BaseModel):
    annual_expense: float
    fire_target: float
    fire_progress: float

    @field_serializer("fire_target", "fire_progress", when_used="json")
    def _serialize_non_finite(self, value: float) -> Union[float, str, None]:
        return _json_float(value)


class TimeToFire(BaseModel):
    years_to_fire: Optional[float] = None
    birth_date: Optional[date] = None
    current_age: Optional[float] = None
    fire_age: Optional[float] = None

    @field_serializer("years_to_fire", "fire_age", when_used="json")
    def _serialize_non_finite(self, value: Optional[float]) -> Union[float, str, None]:
        return _json_float(value)


class FireMetrics(BaseModel):
    """Computed metrics for one request; built fresh and never stored."""

    model_config = ConfigDict(frozen=True)

    inputs: MetricsInputs
    derived: DerivedMetrics
    time_to_fire: TimeToFire
    note: Optional[str] = None


class MetricsQuery(BaseModel):
    """What-if overrides for GET /me/metrics; query strings are coerced."""

    model_config = ConfigDict(extra="ignore")

    monthly_expense: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    withdrawal_rate_pct: Optional[float] = Field(default=None, ge=0, le=100, allow_inf_nan=False)
    expected_return_pct: Optional[float] = Field(default=None, gt=-100, allow_inf_nan=False)
    invested_total: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)


def _json_float(value: Optional[float]) -> Union[float, str, None]:
    # JSON has no infinities; keep them distinguishable from null
    if value is None:
        return None
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return value
