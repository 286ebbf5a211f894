"""
Urgency Classifier

Maps a due date to an urgency bucket. Used for list styling, card
emphasis and the dashboard's urgent bucket.

Rules, first match wins:
1. Settled items are SETTLED whatever their date
2. Past due date -> OVERDUE (days past)
3. Due today -> DUE_TODAY
4. Within threshold_days -> DUE_SOON (days left)
5. Otherwise -> NORMAL (days left)

The "due soon" window depends on the consumer: lists and the
dashboard use 7 days, card emphasis uses 3. Both come from
ScheduleSettings and are passed in explicitly.
"""

from datetime import date
from typing import Optional

from savings_tracker.core.dates import DateLike, day_difference, today as local_today
from savings_tracker.models.entities import Payment
from savings_tracker.models.results import Urgency, UrgencyKind

LIST_DUE_SOON_DAYS = 7
CARD_DUE_SOON_DAYS = 3


def classify_due_date(
    due_date: DateLike,
    is_settled: bool,
    threshold_days: int = LIST_DUE_SOON_DAYS,
    today: Optional[date] = None,
) -> Urgency:
    """
    Classify a due date relative to today.

    Args:
        due_date: Local calendar date the item is due
        is_settled: Whether the item is already covered/completed
        threshold_days: Days ahead that still count as "due soon"
        today: Reference date (defaults to the local date)
    """
    if threshold_days < 0:
        raise ValueError("threshold_days cannot be negative")

    if is_settled:
        return Urgency(kind=UrgencyKind.SETTLED)

    diff_days = day_difference(today or local_today(), due_date)

    if diff_days < 0:
        return Urgency(kind=UrgencyKind.OVERDUE, days=abs(diff_days))
    if diff_days == 0:
        return Urgency(kind=UrgencyKind.DUE_TODAY, days=0)
    if diff_days <= threshold_days:
        return Urgency(kind=UrgencyKind.DUE_SOON, days=diff_days)
    return Urgency(kind=UrgencyKind.NORMAL, days=diff_days)


def classify_payment(
    payment: Payment,
    threshold_days: int = LIST_DUE_SOON_DAYS,
    today: Optional[date] = None,
) -> Urgency:
    return classify_due_date(
        payment.due_date,
        payment.is_covered,
        threshold_days=threshold_days,
        today=today,
    )
