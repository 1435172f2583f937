"""Closed-form FIRE helpers: age from birth date and years until the target."""

from __future__ import annotations

import math
from datetime import date
from typing import Optional


def calculate_age(birth_date: date, today: Optional[date] = None) -> float:
    """
    Age in fractional years.

    Whole years are the calendar-year difference, minus one when today's
    month/day is still before the birthday. The fraction approximates months
    as 30 days and years as 365.25 days:

        age + (month_diff * 30 + day_diff) / 365.25

    month_diff and day_diff are raw differences and may be negative.
    """
    today = today or date.today()
    age = today.year - birth_date.year
    month_diff = today.month - birth_date.month
    if month_diff < 0 or (month_diff == 0 and today.day < birth_date.day):
        age -= 1
    return age + (month_diff * 30 + (today.day - birth_date.day)) / 365.25


def calculate_years_to_fire(
    fire_target: float, invested_total: float, expected_return_pct: float
) -> Optional[float]:
    """
    years = ln(fire_target / invested_total) / ln(1 + expected_return_pct / 100)

    Returns None when the formula is undefined (nothing invested, non-positive
    target, growth factor <= 0). A 0% return gives +inf ("never at a flat
    rate"); a target below the invested total or a negative return gives a
    negative number. Neither is clamped.
    """
    if invested_total <= 0:
        return None
    if fire_target <= 0 or expected_return_pct <= -100:
        return None

    ratio = fire_target / invested_total
    if ratio <= 0:
        return None

    growth_rate = 1 + expected_return_pct / 100
    if growth_rate <= 0:
        return None

    numerator = math.log(ratio)
    denominator = math.log(growth_rate)
    if denominator == 0:
        # flat growth: ln(1) == 0
        if numerator == 0:
            return 0.0
        return math.inf if numerator > 0 else -math.inf
    return numerator / denominator
