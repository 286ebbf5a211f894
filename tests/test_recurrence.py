"""
Tests for contributions and recurrence.

The key property: a recurring item that reaches its cap is replaced
by a frozen copy plus a successor, and the frozen copy never
advances again.
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from savings_tracker.core.contributions import apply_goal_contribution, apply_payment_contribution
from savings_tracker.core.recurrence import (
    RecurrencePreconditionError,
    advance_goal,
    advance_payment,
    next_cycle_date,
)
from savings_tracker.models import Frequency, Payment, Projection, SavingsGoal

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
CREATED = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_ids(*ids):
    remaining = iter(ids)
    return lambda: next(remaining)


def weekly_gym(**overrides):
    data = dict(
        id="gym",
        name="Gym",
        amount=Decimal("50"),
        due_date=date(2024, 3, 1),
        frequency=Frequency.WEEKLY,
        color="teal",
    )
    data.update(overrides)
    return Payment(**data)


def monthly_fund(**overrides):
    data = dict(
        id="fund",
        name="Emergency fund",
        target_amount=Decimal("300"),
        saved_amount=Decimal("0"),
        projection=Projection(
            amount=Decimal("300"),
            frequency=Frequency.MONTHLY,
            target_date=date(2024, 1, 31),
        ),
        created_at=CREATED,
    )
    data.update(overrides)
    return SavingsGoal(**data)


class TestNextCycleDate:
    """Tests for next-date rules."""

    def test_weekly_and_bi_weekly(self):
        assert next_cycle_date(date(2024, 3, 1), Frequency.WEEKLY) == date(2024, 3, 8)
        assert next_cycle_date(date(2024, 3, 1), Frequency.BI_WEEKLY) == date(2024, 3, 15)
        assert next_cycle_date(date(2024, 12, 28), Frequency.WEEKLY) == date(2025, 1, 4)

    def test_monthly_clamps(self):
        assert next_cycle_date(date(2024, 1, 31), Frequency.MONTHLY) == date(2024, 2, 29)
        assert next_cycle_date(date(2023, 1, 31), Frequency.MONTHLY) == date(2023, 2, 28)
        assert next_cycle_date(date(2024, 3, 31), Frequency.MONTHLY) == date(2024, 4, 30)

    def test_annual_leap_day(self):
        assert next_cycle_date(date(2024, 2, 29), Frequency.ANNUAL) == date(2025, 2, 28)
        assert next_cycle_date(date(2024, 6, 15), Frequency.ANNUAL) == date(2025, 6, 15)

    def test_one_time_is_a_caller_error(self):
        with pytest.raises(RecurrencePreconditionError):
            next_cycle_date(date(2024, 3, 1), Frequency.ONE_TIME)


class TestAdvance:
    """Tests for closing a cycle and creating its successor."""

    def test_advance_payment(self):
        covered = weekly_gym(paid_amount=Decimal("50"))
        closed, successor = advance_payment(covered, id_factory=make_ids("gym-2"))

        assert closed.id == "gym"
        assert closed.frequency == Frequency.ONE_TIME
        assert closed.paid_amount == Decimal("50")

        assert successor.id == "gym-2"
        assert successor.due_date == date(2024, 3, 8)
        assert successor.paid_amount == Decimal("0")
        assert successor.frequency == Frequency.WEEKLY
        assert successor.name == "Gym"
        assert successor.color == "teal"

    def test_advance_one_time_payment_raises(self):
        with pytest.raises(RecurrencePreconditionError):
            advance_payment(weekly_gym(frequency=Frequency.ONE_TIME))

    def test_advance_goal(self):
        funded = monthly_fund(saved_amount=Decimal("300"))
        closed, successor = advance_goal(funded, id_factory=make_ids("fund-2"), now=NOW)

        assert closed.projection.frequency == Frequency.ONE_TIME
        assert closed.saved_amount == Decimal("300")
        assert closed.created_at == CREATED

        assert successor.id == "fund-2"
        assert successor.saved_amount == Decimal("0")
        assert successor.projection.target_date == date(2024, 2, 29)
        assert successor.projection.frequency == Frequency.MONTHLY
        assert successor.projection.amount == Decimal("300")
        assert successor.created_at == NOW

    def test_advance_goal_requires_dated_plan(self):
        with pytest.raises(RecurrencePreconditionError):
            advance_goal(monthly_fund(projection=None))
        legacy = Projection(amount=Decimal("100"), frequency=Frequency.WEEKLY)
        with pytest.raises(RecurrencePreconditionError):
            advance_goal(monthly_fund(projection=legacy))


class TestPaymentContributions:
    """Tests for applying payments."""

    def test_partial_payment(self):
        payments = [weekly_gym()]
        result = apply_payment_contribution(payments, "gym", Decimal("20"))
        assert len(result) == 1
        assert result[0].paid_amount == Decimal("20")
        assert result[0].frequency == Frequency.WEEKLY

    def test_clamps_to_amount(self):
        payment = weekly_gym(frequency=Frequency.ONE_TIME)
        result = apply_payment_contribution([payment], "gym", Decimal("80"))
        assert result[0].paid_amount == Decimal("50")

    def test_full_weekly_cycle(self):
        """Test covering a weekly payment closes it and schedules next week."""
        gym = weekly_gym(amount=Decimal("100"), category="Health")
        other = weekly_gym(id="rent", name="Rent", frequency=Frequency.MONTHLY)
        payments = [gym, other]

        result = apply_payment_contribution(payments, "gym", Decimal("100"), id_factory=make_ids("gym-2"))

        assert [p.id for p in result] == ["gym", "gym-2", "rent"]
        closed, successor = result[0], result[1]
        assert closed.paid_amount == Decimal("100")
        assert closed.frequency == Frequency.ONE_TIME
        assert closed.due_date == date(2024, 3, 1)

        assert successor.id == "gym-2"
        assert successor.id != closed.id
        assert successor.paid_amount == Decimal("0")
        assert successor.due_date == date(2024, 3, 8)
        assert successor.frequency == Frequency.WEEKLY
        assert successor.amount == Decimal("100")
        assert successor.name == "Gym"
        assert successor.category == "Health"
        assert successor.color == "teal"

    def test_covered_recurring_payment_is_left_alone(self):
        """Test paying into an already covered recurring payment adds no successor."""
        covered = weekly_gym(
            id="rent",
            name="Rent",
            amount=Decimal("100"),
            paid_amount=Decimal("100"),
            frequency=Frequency.MONTHLY,
        )
        result = apply_payment_contribution([covered], "rent", Decimal("1"), id_factory=make_ids("never"))
        assert [p.id for p in result] == ["rent"]
        assert result[0].frequency == Frequency.MONTHLY
        assert result[0].paid_amount == Decimal("100")

    def test_lowered_amount_does_not_advance(self):
        """Test a payment whose amount was cut below what was paid stays as is."""
        over_paid = weekly_gym(amount=Decimal("30"), paid_amount=Decimal("50"))
        result = apply_payment_contribution([over_paid], "gym", Decimal("5"), id_factory=make_ids("never"))
        assert len(result) == 1
        assert result[0].paid_amount == Decimal("50")

    def test_closed_cycle_never_advances_again(self):
        """Test paying into a frozen original creates no further successor."""
        first = apply_payment_contribution([weekly_gym()], "gym", Decimal("50"), id_factory=make_ids("gym-2"))
        again = apply_payment_contribution(first, "gym", Decimal("10"), id_factory=make_ids("never"))
        assert [p.id for p in again] == ["gym", "gym-2"]
        assert again[0].paid_amount == Decimal("50")

    def test_input_list_not_mutated(self):
        payments = [weekly_gym()]
        result = apply_payment_contribution(payments, "gym", Decimal("50"), id_factory=make_ids("gym-2"))
        assert result is not payments
        assert len(payments) == 1
        assert payments[0].paid_amount == Decimal("0")
        assert payments[0].frequency == Frequency.WEEKLY

    def test_stale_id_leaves_list_unchanged(self):
        payments = [weekly_gym()]
        result = apply_payment_contribution(payments, "gone", Decimal("50"))
        assert result == payments
        assert result is not payments

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5")])
    def test_non_positive_rejected(self, amount):
        with pytest.raises(ValueError):
            apply_payment_contribution([weekly_gym()], "gym", amount)


class TestGoalContributions:
    """Tests for contributions to goals."""

    def test_partial_contribution(self):
        result = apply_goal_contribution([monthly_fund()], "fund", Decimal("100"))
        assert result[0].saved_amount == Decimal("100")
        assert result[0].projection.frequency == Frequency.MONTHLY

    def test_funding_recurring_goal_starts_next_cycle(self):
        result = apply_goal_contribution(
            [monthly_fund()], "fund", Decimal("500"), id_factory=make_ids("fund-2"), now=NOW,
        )
        assert [g.id for g in result] == ["fund", "fund-2"]
        assert result[0].saved_amount == Decimal("300")
        assert result[0].projection.frequency == Frequency.ONE_TIME
        assert result[1].saved_amount == Decimal("0")
        assert result[1].projection.target_date == date(2024, 2, 29)
        assert result[1].created_at == NOW

    def test_goal_without_plan_just_completes(self):
        goal = monthly_fund(projection=None)
        result = apply_goal_contribution([goal], "fund", Decimal("300"), id_factory=make_ids("never"))
        assert len(result) == 1
        assert result[0].is_completed

    def test_legacy_plan_does_not_recur(self):
        goal = monthly_fund(projection=Projection(amount=Decimal("100"), frequency=Frequency.WEEKLY))
        result = apply_goal_contribution([goal], "fund", Decimal("300"), id_factory=make_ids("never"))
        assert len(result) == 1
        assert result[0].projection.frequency == Frequency.WEEKLY

    def test_one_time_plan_does_not_recur(self):
        plan = Projection(amount=Decimal("300"), frequency=Frequency.ONE_TIME, target_date=date(2024, 4, 1))
        result = apply_goal_contribution([monthly_fund(projection=plan)], "fund", Decimal("300"))
        assert len(result) == 1
        assert result[0].is_completed

    def test_completed_goal_with_lowered_target_is_left_alone(self):
        """Test a goal saved past its target neither advances nor loses savings."""
        goal = monthly_fund(target_amount=Decimal("200"), saved_amount=Decimal("300"))
        result = apply_goal_contribution([goal], "fund", Decimal("10"), id_factory=make_ids("never"))
        assert [g.id for g in result] == ["fund"]
        assert result[0].saved_amount == Decimal("300")
        assert result[0].projection.frequency == Frequency.MONTHLY

    def test_stale_id(self):
        goals = [monthly_fund()]
        assert apply_goal_contribution(goals, "gone", Decimal("10")) == goals

    def test_non_positive_rejected(self):
        with pytest.raises(ValueError):
            apply_goal_contribution([monthly_fund()], "fund", 0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
