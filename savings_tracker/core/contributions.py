"""
Contribution Applier

Applies money put toward a goal or a payment.

1. Unknown id -> the collection comes back unchanged (stale UI
   references must never break the mutation pipeline)
2. An item already settled before this contribution -> unchanged
   too, so a cycle only advances on the unsettled -> settled step
3. The new amount is clamped to the cap (target or amount due)
4. Reaching the cap on a recurring item hands it to the
   recurrence advancer, which replaces it with (closed, successor)
5. Otherwise the entity is replaced in place

The collection is always rebuilt as a new list.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from savings_tracker.core.money import Numeric, to_money
from savings_tracker.core.recurrence import IdFactory, advance_goal, advance_payment
from savings_tracker.core.snapshots import find_by_id, replace_by_id
from savings_tracker.logs import get_logger
from savings_tracker.models.entities import Payment, SavingsGoal, generate_id

logger = get_logger(__name__)


def _positive(amount: Numeric) -> Decimal:
    value = to_money(amount)
    if value <= 0:
        raise ValueError(f"Contribution must be positive, got {value}")
    return value


def _goal_recurs(goal: SavingsGoal) -> bool:
    projection = goal.projection
    return (
        projection is not None
        and projection.target_date is not None
        and projection.frequency.is_recurring
    )


def apply_goal_contribution(
    goals: Sequence[SavingsGoal],
    goal_id: str,
    amount: Numeric,
    id_factory: IdFactory = generate_id,
    now: Optional[datetime] = None,
) -> list[SavingsGoal]:
    """
    Add a contribution to a goal's saved amount.

    Raises:
        ValueError: If amount is not positive
    """
    contribution = _positive(amount)

    goal = find_by_id(goals, goal_id)
    if goal is None:
        logger.warning("contribution_target_missing", entity_type="goal", entity_id=goal_id)
        return list(goals)

    if goal.is_completed:
        logger.info("contribution_ignored_settled", entity_type="goal", entity_id=goal_id)
        return list(goals)

    saved = min(goal.target_amount, goal.saved_amount + contribution)
    updated = goal.model_copy(update={"saved_amount": saved})

    logger.info(
        "contribution_applied",
        entity_type="goal",
        entity_id=goal_id,
        amount=str(contribution),
        saved_amount=str(saved),
        target_amount=str(goal.target_amount),
    )

    if saved >= goal.target_amount and _goal_recurs(updated):
        closed, successor = advance_goal(updated, id_factory=id_factory, now=now)
        return replace_by_id(goals, goal_id, closed, successor)

    return replace_by_id(goals, goal_id, updated)


def apply_payment_contribution(
    payments: Sequence[Payment],
    payment_id: str,
    amount: Numeric,
    id_factory: IdFactory = generate_id,
) -> list[Payment]:
    """
    Add a contribution to a payment's paid amount.

    Raises:
        ValueError: If amount is not positive
    """
    contribution = _positive(amount)

    payment = find_by_id(payments, payment_id)
    if payment is None:
        logger.warning("contribution_target_missing", entity_type="payment", entity_id=payment_id)
        return list(payments)

    if payment.is_covered:
        logger.info("contribution_ignored_settled", entity_type="payment", entity_id=payment_id)
        return list(payments)

    paid = min(payment.amount, payment.paid_amount + contribution)
    updated = payment.model_copy(update={"paid_amount": paid})

    logger.info(
        "contribution_applied",
        entity_type="payment",
        entity_id=payment_id,
        amount=str(contribution),
        paid_amount=str(paid),
        amount_due=str(payment.amount),
    )

    if paid >= payment.amount and updated.frequency.is_recurring:
        closed, successor = advance_payment(updated, id_factory=id_factory)
        return replace_by_id(payments, payment_id, closed, successor)

    return replace_by_id(payments, payment_id, updated)
