"""
Read-only views over the entity collections.

Sorting for the lists, goal progress for cards, the dashboard's
totals and urgent bucket, and the calendar month. Nothing here
changes an entity.
"""

import calendar
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from savings_tracker.core.money import ZERO
from savings_tracker.core.projection import periods_to_goal
from savings_tracker.core.urgency import LIST_DUE_SOON_DAYS, classify_payment
from savings_tracker.models.entities import Payment, SavingsGoal
from savings_tracker.models.results import (
    CalendarEvent,
    CalendarEventKind,
    CalendarMonth,
    DashboardSummary,
    GoalProgress,
    UrgentPayment,
)

HUNDRED = Decimal("100")


def sort_goals(goals: Sequence[SavingsGoal]) -> list[SavingsGoal]:
    """Newest first."""
    return sorted(goals, key=lambda goal: goal.created_at, reverse=True)


def sort_payments(payments: Sequence[Payment]) -> list[Payment]:
    """Unpaid before covered, then by due date."""
    return sorted(payments, key=lambda payment: (payment.is_covered, payment.due_date))


def goal_progress(goal: SavingsGoal) -> GoalProgress:
    if goal.target_amount > 0:
        percent = min(HUNDRED, goal.saved_amount / goal.target_amount * HUNDRED)
    else:
        percent = HUNDRED if goal.is_completed else ZERO

    progress = GoalProgress(
        goal_id=goal.id,
        percent=percent,
        remaining_amount=goal.remaining_amount,
        is_completed=goal.is_completed,
    )

    # Completed goals show no plan
    projection = goal.projection
    if projection is None or goal.is_completed:
        return progress

    if projection.target_date is None:
        return progress.model_copy(update={
            "plan_amount": projection.amount,
            "plan_frequency": projection.frequency,
            "periods_to_goal": periods_to_goal(goal.remaining_amount, projection.amount),
        })

    return progress.model_copy(update={
        "plan_amount": projection.amount,
        "plan_frequency": projection.frequency,
        "plan_target_date": projection.target_date,
    })


def build_dashboard(
    goals: Sequence[SavingsGoal],
    payments: Sequence[Payment],
    threshold_days: int = LIST_DUE_SOON_DAYS,
    today: Optional[date] = None,
) -> DashboardSummary:
    """
    Totals plus the unpaid payments that are overdue, due today or
    due within threshold_days, earliest first.
    """
    urgent = []
    for payment in sorted(payments, key=lambda p: p.due_date):
        urgency = classify_payment(payment, threshold_days=threshold_days, today=today)
        if urgency.needs_attention:
            urgent.append(UrgentPayment(payment=payment, urgency=urgency))

    return DashboardSummary(
        urgent_payments=urgent,
        total_due=sum((p.amount for p in payments if not p.is_covered), ZERO),
        total_paid=sum((p.paid_amount for p in payments), ZERO),
        total_saved=sum((g.saved_amount for g in goals), ZERO),
        total_goal_targets=sum((g.target_amount for g in goals), ZERO),
        completed_goals=sum(1 for g in goals if g.is_completed),
    )


def month_grid(year: int, month: int) -> list[Optional[date]]:
    """
    Days of a month, preceded by None blanks so the 1st sits in its
    weekday column of a Sunday-first week.
    """
    first_weekday, days_in_month = calendar.monthrange(year, month)
    # monthrange counts Monday as 0
    leading = (first_weekday + 1) % 7
    return [None] * leading + [date(year, month, day) for day in range(1, days_in_month + 1)]


def build_calendar_month(
    year: int,
    month: int,
    goals: Sequence[SavingsGoal],
    payments: Sequence[Payment],
) -> CalendarMonth:
    """
    Calendar events for one month: unpaid payments on their due date
    and goals on their plan's target date.
    """
    events = [
        CalendarEvent(
            id=f"p-{payment.id}",
            day=payment.due_date,
            title=payment.name,
            color=payment.color,
            kind=CalendarEventKind.PAYMENT,
        )
        for payment in payments
        if not payment.is_covered
        and (payment.due_date.year, payment.due_date.month) == (year, month)
    ]
    for goal in goals:
        target = goal.projection.target_date if goal.projection else None
        if target is None or (target.year, target.month) != (year, month):
            continue
        events.append(CalendarEvent(
            id=f"g-{goal.id}",
            day=target,
            title=goal.name,
            color=goal.color,
            kind=CalendarEventKind.GOAL,
        ))

    return CalendarMonth(
        year=year,
        month=month,
        days=month_grid(year, month),
        events=events,
    )
