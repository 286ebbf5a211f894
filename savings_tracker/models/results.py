"""
Computed Value Models

Values the core derives from entities without storing them:
urgency buckets, goal progress, dashboard totals, calendar
events, and form validation results.

None of these are persisted. They are recomputed on every render.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from savings_tracker.models.entities import Frequency, Payment


# =============================================================================
# URGENCY
# =============================================================================

class UrgencyKind(str, Enum):
    """Urgency bucket of a due date."""
    SETTLED = "settled"
    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    DUE_SOON = "due_soon"
    NORMAL = "normal"


class Urgency(BaseModel):
    """
    Classification of a due date relative to today.

    days is the number of days past due for OVERDUE, the days left
    for DUE_SOON and NORMAL, 0 for DUE_TODAY and None for SETTLED.
    """
    model_config = ConfigDict(frozen=True)

    kind: UrgencyKind
    days: Optional[int] = Field(default=None, ge=0)

    @property
    def needs_attention(self) -> bool:
        """Overdue, due today or due soon."""
        return self.kind in (
            UrgencyKind.OVERDUE,
            UrgencyKind.DUE_TODAY,
            UrgencyKind.DUE_SOON,
        )


# =============================================================================
# READ VIEWS
# =============================================================================

class GoalProgress(BaseModel):
    """Progress of a goal as shown on its card."""
    model_config = ConfigDict(frozen=True)

    goal_id: str
    percent: Decimal = Field(ge=0, le=100)
    remaining_amount: Decimal = Field(ge=0)
    is_completed: bool
    # Plans with a target date
    plan_amount: Optional[Decimal] = None
    plan_frequency: Optional[Frequency] = None
    plan_target_date: Optional[date] = None
    # Legacy plans without a target date
    periods_to_goal: Optional[int] = None


class UrgentPayment(BaseModel):
    """A payment in the dashboard's urgent bucket."""
    model_config = ConfigDict(frozen=True)

    payment: Payment
    urgency: Urgency


class DashboardSummary(BaseModel):
    """Totals and the urgent bucket for the dashboard."""
    model_config = ConfigDict(frozen=True)

    urgent_payments: list[UrgentPayment] = Field(default_factory=list)
    total_due: Decimal = Decimal("0")
    total_paid: Decimal = Decimal("0")
    total_saved: Decimal = Decimal("0")
    total_goal_targets: Decimal = Decimal("0")
    completed_goals: int = Field(default=0, ge=0)

    @property
    def urgent_count(self) -> int:
        return len(self.urgent_payments)


class CalendarEventKind(str, Enum):
    PAYMENT = "payment"
    GOAL = "goal"


class CalendarEvent(BaseModel):
    """A payment due date or goal target date placed on the calendar."""
    model_config = ConfigDict(frozen=True)

    id: str
    day: date
    title: str
    color: str
    kind: CalendarEventKind


class CalendarMonth(BaseModel):
    """
    One month of the calendar.

    days starts with None blanks so the first day lands on its
    weekday column (Sunday first).
    """
    model_config = ConfigDict(frozen=True)

    year: int
    month: int = Field(ge=1, le=12)
    days: list[Optional[date]]
    events: list[CalendarEvent] = Field(default_factory=list)

    def events_on(self, day: date) -> list[CalendarEvent]:
        return [event for event in self.events if event.day == day]


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'past_date')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """Result of validating one form submission."""

    form: str = Field(
        ...,
        description="Which form was validated"
    )
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]
