"""
Form Validation

Checks user input before it reaches the core. The core assumes a
positive contribution and a sensible entity; this is where anything
else is turned away with a readable message.

IMPORTANT: Validation NEVER silently fixes input.
It reports issues and the form decides what to do.
Warnings don't block a submission; errors do.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from savings_tracker.core.dates import DateLike, day_difference, parse_local_date, today as local_today
from savings_tracker.core.money import Numeric, format_currency, to_money
from savings_tracker.core.projection import suggest_contribution
from savings_tracker.models.entities import Frequency, Payment, SavingsGoal
from savings_tracker.models.results import ValidationIssue, ValidationResult


class FormValidator:
    """
    Validates goal, payment, wishlist, contribution and planning forms.
    """

    def __init__(self, currency_symbol: str = "$"):
        self._currency_symbol = currency_symbol

    # ------------------------------------------------------------------
    # Field checks shared by the forms
    # ------------------------------------------------------------------

    def _check_name(self, name: Optional[str], issues: list[ValidationIssue]) -> None:
        if name is None or not name.strip():
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="A name is required",
                severity="error",
            ))

    def _parse_amount(
        self,
        field: str,
        value: Optional[Numeric],
        issues: list[ValidationIssue],
        allow_zero: bool = False,
    ) -> Optional[Decimal]:
        if value is None or (isinstance(value, str) and not value.strip()):
            issues.append(ValidationIssue(
                field=field,
                issue_type="missing",
                message="An amount is required",
                severity="error",
            ))
            return None
        try:
            amount = to_money(value)
        except ValueError:
            issues.append(ValidationIssue(
                field=field,
                issue_type="invalid_format",
                message=f"'{value}' is not a valid amount",
                severity="error",
            ))
            return None
        if amount < 0 or (amount == 0 and not allow_zero):
            issues.append(ValidationIssue(
                field=field,
                issue_type="invalid_value",
                message="The amount must be greater than zero" if not allow_zero
                else "The amount cannot be negative",
                severity="error",
            ))
            return None
        return amount

    def _parse_date(
        self,
        field: str,
        value: Optional[DateLike],
        issues: list[ValidationIssue],
    ) -> Optional[date]:
        if value is None or (isinstance(value, str) and not value.strip()):
            issues.append(ValidationIssue(
                field=field,
                issue_type="missing",
                message="A date is required",
                severity="error",
            ))
            return None
        try:
            return parse_local_date(value)
        except ValueError:
            issues.append(ValidationIssue(
                field=field,
                issue_type="invalid_format",
                message=f"'{value}' is not a valid date (expected YYYY-MM-DD)",
                severity="error",
            ))
            return None

    # ------------------------------------------------------------------
    # Forms
    # ------------------------------------------------------------------

    def validate_goal_form(self, name: Optional[str], target_amount: Optional[Numeric]) -> ValidationResult:
        issues: list[ValidationIssue] = []
        self._check_name(name, issues)
        self._parse_amount("target_amount", target_amount, issues)
        return ValidationResult(form="goal", issues=issues)

    def validate_payment_form(
        self,
        name: Optional[str],
        amount: Optional[Numeric],
        due_date: Optional[DateLike],
        today: Optional[date] = None,
    ) -> ValidationResult:
        issues: list[ValidationIssue] = []
        self._check_name(name, issues)
        self._parse_amount("amount", amount, issues)
        due = self._parse_date("due_date", due_date, issues)

        # Past due dates are allowed (recording a late bill) but flagged
        if due is not None and day_difference(today or local_today(), due) < 0:
            issues.append(ValidationIssue(
                field="due_date",
                issue_type="past_date",
                message=f"The due date {due.isoformat()} is already past",
                severity="warning",
            ))
        return ValidationResult(form="payment", issues=issues)

    def validate_wishlist_form(
        self,
        name: Optional[str],
        estimated_amount: Optional[Numeric] = None,
    ) -> ValidationResult:
        issues: list[ValidationIssue] = []
        self._check_name(name, issues)
        if estimated_amount is not None and not (isinstance(estimated_amount, str) and not estimated_amount.strip()):
            self._parse_amount("estimated_amount", estimated_amount, issues, allow_zero=True)
        return ValidationResult(form="wishlist", issues=issues)

    def validate_contribution(
        self,
        amount: Optional[Numeric],
        remaining_amount: Optional[Decimal] = None,
    ) -> ValidationResult:
        """
        A contribution must be positive. Going over the remaining amount
        is allowed (the core clamps it) but flagged.
        """
        issues: list[ValidationIssue] = []
        value = self._parse_amount("amount", amount, issues)
        if value is not None and remaining_amount is not None and value > remaining_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="exceeds_remaining",
                message=(
                    f"Only {format_currency(remaining_amount, self._currency_symbol)} is left; "
                    "the extra will not be recorded"
                ),
                severity="warning",
            ))
        return ValidationResult(form="contribution", issues=issues)

    def validate_goal_contribution(self, goal: SavingsGoal, amount: Optional[Numeric]) -> ValidationResult:
        return self.validate_contribution(amount, goal.remaining_amount)

    def validate_payment_contribution(self, payment: Payment, amount: Optional[Numeric]) -> ValidationResult:
        return self.validate_contribution(amount, payment.remaining_amount)

    def validate_projection_form(
        self,
        goal: SavingsGoal,
        target_date: Optional[DateLike],
        frequency: Frequency,
        today: Optional[date] = None,
    ) -> ValidationResult:
        """
        A plan needs a target date after today, a goal that still has
        something left to save, and a suggestion greater than zero.
        """
        issues: list[ValidationIssue] = []
        reference = today or local_today()

        if goal.is_completed:
            issues.append(ValidationIssue(
                field="goal",
                issue_type="already_completed",
                message="This goal is already reached",
                severity="error",
            ))

        target = self._parse_date("target_date", target_date, issues)
        if target is not None and day_difference(reference, target) <= 0:
            issues.append(ValidationIssue(
                field="target_date",
                issue_type="past_date",
                message="The target date must be after today",
                severity="error",
            ))
            target = None

        if target is not None and not goal.is_completed:
            if suggest_contribution(goal.remaining_amount, target, frequency, today=reference) is None:
                issues.append(ValidationIssue(
                    field="target_date",
                    issue_type="no_plan",
                    message="No contribution plan can be suggested for this date",
                    severity="error",
                ))

        return ValidationResult(form="projection", issues=issues)
