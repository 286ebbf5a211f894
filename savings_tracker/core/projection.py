"""
Projection Calculator

Suggests how much to put aside each period so a goal is reached by
a chosen date. Re-evaluated live while the user edits the plan, so
it is a pure function of its inputs and "today".

Period lengths:
- Weekly: 7 days
- BiWeekly: 14 days
- Monthly: 365.25 / 12 days (average month, not calendar-exact)
- Annual: 365.25 days
- OneTime: no periods, everything is due at once

The suggestion is always rounded UP to a whole currency unit so the
plan never falls short of the target.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from savings_tracker.core.dates import DateLike, day_difference, today as local_today
from savings_tracker.core.money import ZERO, ceil_amount, to_money, Numeric
from savings_tracker.models.entities import Frequency, Projection, SavingsGoal

DAYS_PER_YEAR = Decimal("365.25")

PERIOD_DAYS: dict[Frequency, Decimal] = {
    Frequency.WEEKLY: Decimal("7"),
    Frequency.BI_WEEKLY: Decimal("14"),
    Frequency.MONTHLY: DAYS_PER_YEAR / Decimal("12"),
    Frequency.ANNUAL: DAYS_PER_YEAR,
}


def count_periods(diff_days: int, frequency: Frequency) -> Decimal:
    """Number of (possibly fractional) periods in diff_days."""
    period_days = PERIOD_DAYS.get(frequency)
    if period_days is None:
        return ZERO
    return Decimal(diff_days) / period_days


def suggest_contribution(
    remaining_amount: Numeric,
    target_date: DateLike,
    frequency: Frequency,
    today: Optional[date] = None,
) -> Optional[Decimal]:
    """
    Per-period contribution needed to save remaining_amount by target_date.

    Returns:
        The suggested amount, or None when no plan can be suggested
        (nothing left to save, or the target date is not after today).
    """
    remaining = to_money(remaining_amount)
    if remaining <= 0:
        return None

    diff_days = day_difference(today or local_today(), target_date)
    if diff_days <= 0:
        return None

    periods = count_periods(diff_days, frequency)
    if periods <= 0:
        return remaining

    return ceil_amount(remaining / periods)


def plan_for_goal(
    goal: SavingsGoal,
    target_date: DateLike,
    frequency: Frequency,
    today: Optional[date] = None,
) -> Optional[Projection]:
    """
    Build the projection to store on a goal, or None if no valid plan exists.
    """
    amount = suggest_contribution(goal.remaining_amount, target_date, frequency, today=today)
    if amount is None or amount <= 0:
        return None
    return Projection(
        amount=amount,
        frequency=frequency,
        target_date=target_date,
    )


def periods_to_goal(remaining_amount: Numeric, contribution: Numeric) -> Optional[int]:
    """
    Whole periods needed to save remaining_amount at a fixed contribution.

    Used for plans stored without a target date.
    """
    remaining = to_money(remaining_amount)
    per_period = to_money(contribution)
    if per_period <= 0 or remaining <= 0:
        return None
    return int(ceil_amount(remaining / per_period))
