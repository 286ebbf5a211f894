"""
Recurrence and projection engine.

Pure functions over frozen entities: nothing in this package
touches storage or keeps state between calls.
"""

from savings_tracker.core.contributions import (
    apply_goal_contribution,
    apply_payment_contribution,
)
from savings_tracker.core.dates import day_difference, parse_local_date
from savings_tracker.core.money import format_currency
from savings_tracker.core.projection import (
    periods_to_goal,
    plan_for_goal,
    suggest_contribution,
)
from savings_tracker.core.recurrence import (
    RecurrencePreconditionError,
    advance_goal,
    advance_payment,
    next_cycle_date,
)
from savings_tracker.core.urgency import (
    CARD_DUE_SOON_DAYS,
    LIST_DUE_SOON_DAYS,
    classify_due_date,
    classify_payment,
)

__all__ = [
    "CARD_DUE_SOON_DAYS",
    "LIST_DUE_SOON_DAYS",
    "RecurrencePreconditionError",
    "advance_goal",
    "advance_payment",
    "apply_goal_contribution",
    "apply_payment_contribution",
    "classify_due_date",
    "classify_payment",
    "day_difference",
    "format_currency",
    "next_cycle_date",
    "parse_local_date",
    "periods_to_goal",
    "plan_for_goal",
    "suggest_contribution",
]
