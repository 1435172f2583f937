from __future__ import annotations

from datetime import date
from typing import Optional

from dofire.core.metrics import calculate_fire_metrics
from dofire.domain.result import Ok, Result, err
from dofire.schemas.metrics import FireInputs, FireMetrics, MetricsQuery
from dofire.storage import Repository


def _pick(override: Optional[float], fallback: float) -> float:
    return fallback if override is None else override


def compute_metrics(
    repo: Repository,
    user_id: str,
    overrides: MetricsQuery,
    today: Optional[date] = None,
) -> Result[FireMetrics]:
    """Profile + portfolio totals, overridden by what-if query values, run through the engine."""
    profile = repo.get_profile(user_id)
    if profile is None:
        return err("not_found", "profile_not_found")

    portfolio = repo.get_portfolio_agg(user_id)

    inputs = FireInputs(
        monthly_expense=_pick(overrides.monthly_expense, profile.monthly_expense),
        withdrawal_rate_pct=_pick(overrides.withdrawal_rate_pct, profile.withdrawal_rate_pct),
        expected_return_pct=_pick(overrides.expected_return_pct, profile.expected_return_pct),
        invested_total=_pick(overrides.invested_total, portfolio.total_amount),
        birth_date=profile.birth_date,
    )

    # a stored profile may still hold exactly -100
    if inputs.expected_return_pct <= -100:
        return err(
            "bad_request",
            "Invalid input parameters",
            {"expected_return_pct": "Expected return percentage must be greater than -100"},
        )

    return Ok(calculate_fire_metrics(inputs, today))
