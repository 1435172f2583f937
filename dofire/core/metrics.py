"""FIRE metrics engine."""

from __future__ import annotations

from datetime import date
from typing import Optional

from dofire.core.fire import calculate_age, calculate_years_to_fire
from dofire.schemas.metrics import (
    DerivedMetrics,
    FireInputs,
    FireMetrics,
    MetricsInputs,
    TimeToFire,
)

RETURN_RATE_TOO_LOW = "return_rate_too_low"
ZERO_INVESTMENTS = "Years to FIRE undefined for zero investments."


def _ratio(numerator: float, denominator: float) -> float:
    # IEEE semantics instead of ZeroDivisionError
    if denominator == 0:
        if numerator == 0:
            return float("nan")
        return float("inf") if numerator > 0 else float("-inf")
    return numerator / denominator


def _derive(inputs: FireInputs) -> DerivedMetrics:
    annual_expense = inputs.monthly_expense * 12
    fire_target = _ratio(annual_expense, inputs.withdrawal_rate_pct / 100)
    fire_progress = _ratio(inputs.invested_total, fire_target)
    return DerivedMetrics(
        annual_expense=annual_expense,
        fire_target=fire_target,
        fire_progress=fire_progress,
    )


def calculate_fire_metrics(inputs: FireInputs, today: Optional[date] = None) -> FireMetrics:
    """
    Compute derived values and time-to-FIRE for one set of inputs.

    Order of operations:
      1) Derived values (annual expense, target, progress) are always computed.
      2) If the expected return does not beat the withdrawal rate, the target
         is unreachable: years_to_fire and fire_age stay None and the note
         says so.
      3) Otherwise years_to_fire comes from the log formula; current_age and
         fire_age are filled in when a birth date is known.
      4) Zero investments get their own note unless one is already set.

    Edge cases never raise; they surface as None, +/-inf or a note.
    """
    echoed = MetricsInputs(
        monthly_expense=inputs.monthly_expense,
        withdrawal_rate_pct=inputs.withdrawal_rate_pct,
        expected_return_pct=inputs.expected_return_pct,
        invested_total=inputs.invested_total,
    )
    derived = _derive(inputs)
    current_age = calculate_age(inputs.birth_date, today) if inputs.birth_date else None

    if inputs.expected_return_pct <= inputs.withdrawal_rate_pct:
        return FireMetrics(
            inputs=echoed,
            derived=derived,
            time_to_fire=TimeToFire(
                years_to_fire=None,
                birth_date=inputs.birth_date,
                current_age=current_age,
                fire_age=None,
            ),
            note=RETURN_RATE_TOO_LOW,
        )

    years_to_fire = calculate_years_to_fire(
        derived.fire_target, inputs.invested_total, inputs.expected_return_pct
    )

    fire_age: Optional[float] = None
    if current_age is not None and years_to_fire is not None:
        fire_age = current_age + years_to_fire

    note = ZERO_INVESTMENTS if inputs.invested_total <= 0 else None

    return FireMetrics(
        inputs=echoed,
        derived=derived,
        time_to_fire=TimeToFire(
            years_to_fire=years_to_fire,
            birth_date=inputs.birth_date,
            current_age=current_age,
            fire_age=fire_age,
        ),
        note=note,
    )
