"""
Recurrence Advancer

When a recurring payment is covered, or a recurring goal plan is
fully funded, the completed cycle is closed and a successor is
created for the next cycle.

- The original keeps its amounts as history and is frozen to
  ONE_TIME, so it can never be advanced again.
- The successor is a copy with a new id, the cycle date moved
  forward and the settlement amount reset to zero.

Next-date rules work on calendar dates:
- Weekly: +7 days
- BiWeekly: +14 days
- Monthly: +1 calendar month, clamped to the last day of the month
- Annual: +1 calendar year (Feb 29 -> Feb 28)
"""

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

from savings_tracker.core.dates import add_months, add_years
from savings_tracker.logs import get_logger
from savings_tracker.models.entities import (
    Frequency,
    Payment,
    SavingsGoal,
    generate_id,
    utc_now,
)

logger = get_logger(__name__)

IdFactory = Callable[[], str]


class RecurrencePreconditionError(AssertionError):
    """
    The advancer was called for something that does not recur.

    This is a programming error in the caller, not a user-facing
    condition: callers must check the frequency first.
    """
    pass


def next_cycle_date(current: date, frequency: Frequency) -> date:
    """
    Compute the next occurrence of a cycle date.

    Raises:
        RecurrencePreconditionError: If frequency is ONE_TIME
    """
    if frequency is Frequency.WEEKLY:
        return current + timedelta(days=7)
    if frequency is Frequency.BI_WEEKLY:
        return current + timedelta(days=14)
    if frequency is Frequency.MONTHLY:
        return add_months(current, 1)
    if frequency is Frequency.ANNUAL:
        return add_years(current, 1)
    raise RecurrencePreconditionError(f"{frequency.value!r} items do not recur")


def advance_payment(
    payment: Payment,
    id_factory: IdFactory = generate_id,
) -> tuple[Payment, Payment]:
    """
    Close out a covered recurring payment and create the next one.

    Returns:
        (closed_original, successor)
    """
    if not payment.frequency.is_recurring:
        raise RecurrencePreconditionError(f"Payment {payment.id} does not recur")

    successor = payment.model_copy(update={
        "id": id_factory(),
        "due_date": next_cycle_date(payment.due_date, payment.frequency),
        "paid_amount": Decimal("0"),
    })
    closed = payment.model_copy(update={"frequency": Frequency.ONE_TIME})

    logger.info(
        "recurrence_advanced",
        entity_type="payment",
        entity_id=payment.id,
        successor_id=successor.id,
        frequency=payment.frequency.value,
        next_date=successor.due_date.isoformat(),
    )
    return closed, successor


def advance_goal(
    goal: SavingsGoal,
    id_factory: IdFactory = generate_id,
    now: Optional[datetime] = None,
) -> tuple[SavingsGoal, SavingsGoal]:
    """
    Close out a funded recurring goal and create the next cycle.

    The successor keeps the plan's amount and frequency, with its
    target date moved to the next cycle.

    Returns:
        (closed_original, successor)
    """
    projection = goal.projection
    if projection is None or projection.target_date is None:
        raise RecurrencePreconditionError(f"Goal {goal.id} has no dated plan")
    if not projection.frequency.is_recurring:
        raise RecurrencePreconditionError(f"Goal {goal.id} does not recur")

    next_plan = projection.model_copy(update={
        "target_date": next_cycle_date(projection.target_date, projection.frequency),
    })
    successor = goal.model_copy(update={
        "id": id_factory(),
        "saved_amount": Decimal("0"),
        "projection": next_plan,
        "created_at": now or utc_now(),
    })
    closed = goal.model_copy(update={
        "projection": projection.model_copy(update={"frequency": Frequency.ONE_TIME}),
    })

    logger.info(
        "recurrence_advanced",
        entity_type="goal",
        entity_id=goal.id,
        successor_id=successor.id,
        frequency=projection.frequency.value,
        next_date=next_plan.target_date.isoformat(),
    )
    return closed, successor
