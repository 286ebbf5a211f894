"""
Data Models Package

This package contains all Pydantic models used in the Savings Tracker.
Everything read from or written to the store conforms to these schemas.
"""

from savings_tracker.models.entities import (
    Entity,
    Frequency,
    Money,
    Payment,
    Priority,
    Projection,
    SavingsGoal,
    WishlistItem,
    generate_id,
    utc_now,
)
from savings_tracker.models.results import (
    CalendarEvent,
    CalendarEventKind,
    CalendarMonth,
    DashboardSummary,
    GoalProgress,
    Urgency,
    UrgencyKind,
    UrgentPayment,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    # Entities
    "Entity",
    "Frequency",
    "Money",
    "Payment",
    "Priority",
    "Projection",
    "SavingsGoal",
    "WishlistItem",
    "generate_id",
    "utc_now",
    # Computed values
    "CalendarEvent",
    "CalendarEventKind",
    "CalendarMonth",
    "DashboardSummary",
    "GoalProgress",
    "Urgency",
    "UrgencyKind",
    "UrgentPayment",
    "ValidationIssue",
    "ValidationResult",
]
