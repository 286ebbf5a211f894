"""
Tests for FinanceTracker.

Uses the in-memory store with fixed ids, clock and today (see
conftest.py), so every collection write can be checked in the store.
"""

import json
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from savings_tracker.models import Frequency, Priority, UrgencyKind
from savings_tracker.orchestrator import FinanceTracker, create_tracker
from savings_tracker.storage import InMemoryStore, StorageWriteError, TrackerRepository

TODAY = date(2024, 3, 1)
NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def stored(store, key):
    return json.loads(store.get(key))


class FailingStore(InMemoryStore):
    def set(self, key, value):
        if key == "goals_data":
            raise StorageWriteError("disk full")
        super().set(key, value)


class TestGoals:
    """Tests for goal operations."""

    def test_add_goal(self, tracker, store):
        goal = tracker.add_goal("Laptop", "1500", "Tech", Priority.HIGH)

        assert goal.id == "new-1"
        assert goal.color == "rose"
        assert goal.created_at == NOW
        assert tracker.goals == [goal]
        assert stored(store, "goals_data")[0]["targetAmount"] == 1500

    def test_new_goals_go_first_with_rotating_colors(self, tracker):
        tracker.add_goal("A", 100)
        tracker.add_goal("B", 100)
        assert [(g.name, g.color) for g in tracker.goals] == [("B", "sky"), ("A", "rose")]

    def test_edit_goal_keeps_progress(self, tracker):
        goal = tracker.add_goal("Laptop", 1500)
        tracker.contribute_to_goal(goal.id, 200)

        edited = tracker.edit_goal(goal.id, name="Gaming laptop", target_amount="2000")

        assert edited.name == "Gaming laptop"
        assert edited.target_amount == Decimal("2000")
        assert edited.saved_amount == Decimal("200")
        assert edited.color == goal.color
        assert edited.created_at == goal.created_at

    def test_edit_unknown_goal(self, tracker):
        assert tracker.edit_goal("missing", name="X") is None

    def test_delete_goal(self, tracker, store):
        goal = tracker.add_goal("Laptop", 1500)
        assert tracker.delete_goal(goal.id) is True
        assert tracker.delete_goal(goal.id) is False
        assert stored(store, "goals_data") == []

    def test_plan_and_contribute_through_a_cycle(self, tracker, store):
        goal = tracker.add_goal("Emergency fund", 300)

        assert tracker.suggest_plan(goal.id, date(2024, 3, 22), Frequency.WEEKLY) == Decimal("100")
        projection = tracker.save_projection(goal.id, "2024-03-22", Frequency.WEEKLY)
        assert projection.amount == Decimal("100")
        assert tracker.get_goal(goal.id).projection == projection

        goals = tracker.contribute_to_goal(goal.id, 300)

        assert [g.id for g in goals] == ["new-1", "new-2"]
        assert goals[0].projection.frequency == Frequency.ONE_TIME
        assert goals[1].saved_amount == Decimal("0")
        assert goals[1].projection.target_date == date(2024, 3, 29)
        assert len(stored(store, "goals_data")) == 2

    def test_save_projection_rejects_past_date(self, tracker):
        goal = tracker.add_goal("Trip", 300)
        assert tracker.save_projection(goal.id, date(2024, 2, 1), Frequency.WEEKLY) is None
        assert tracker.get_goal(goal.id).projection is None

    def test_default_plan(self, tracker):
        goal = tracker.add_goal("Trip", 300)
        assert tracker.default_plan(goal.id) == (date(2024, 4, 1), Frequency.BI_WEEKLY)
        tracker.save_projection(goal.id, "2024-05-01", Frequency.MONTHLY)
        assert tracker.default_plan(goal.id) == (date(2024, 5, 1), Frequency.MONTHLY)

    def test_contribution_to_unknown_goal(self, tracker):
        tracker.add_goal("Trip", 300)
        goals = tracker.contribute_to_goal("missing", 10)
        assert goals == tracker.goals


class TestPayments:
    """Tests for payment operations."""

    def test_add_payment(self, tracker, store):
        payment = tracker.add_payment("Rent", "900", "2024-03-05")
        assert payment.color == "teal"
        assert payment.frequency == Frequency.MONTHLY
        assert payment.due_date == date(2024, 3, 5)
        assert stored(store, "payments_data")[0]["dueDate"] == "2024-03-05"

    def test_edit_payment_keeps_paid_amount_and_color(self, tracker):
        payment = tracker.add_payment("Rent", 900, "2024-03-05", frequency=Frequency.ONE_TIME)
        tracker.contribute_to_payment(payment.id, 100)

        edited = tracker.edit_payment(payment.id, amount=950, due_date="2024-03-06")

        assert edited.amount == Decimal("950")
        assert edited.due_date == date(2024, 3, 6)
        assert edited.paid_amount == Decimal("100")
        assert edited.color == "teal"

    def test_mark_paid_advances_weekly_payment(self, tracker):
        payment = tracker.add_payment("Gym", 50, "2024-03-01", frequency=Frequency.WEEKLY)
        tracker.contribute_to_payment(payment.id, 20)

        payments = tracker.mark_payment_paid(payment.id)

        assert len(payments) == 2
        closed, successor = payments
        assert closed.paid_amount == Decimal("50")
        assert closed.frequency == Frequency.ONE_TIME
        assert successor.due_date == date(2024, 3, 8)
        assert successor.paid_amount == Decimal("0")

    def test_mark_paid_on_covered_payment_is_a_no_op(self, tracker):
        payment = tracker.add_payment("Fee", 10, "2024-03-01", frequency=Frequency.ONE_TIME)
        tracker.mark_payment_paid(payment.id)
        assert tracker.mark_payment_paid(payment.id) == tracker.payments
        assert len(tracker.payments) == 1

    def test_contribution_after_lowering_amount_adds_no_cycle(self, tracker, store):
        payment = tracker.add_payment("Rent", 900, "2024-03-05")
        tracker.contribute_to_payment(payment.id, 500)
        tracker.edit_payment(payment.id, amount=400)

        payments = tracker.contribute_to_payment(payment.id, 10)

        assert [p.id for p in payments] == [payment.id]
        assert payments[0].frequency == Frequency.MONTHLY
        assert len(stored(store, "payments_data")) == 1

    def test_urgency_windows(self, tracker):
        payment = tracker.add_payment("Rent", 900, "2024-03-06")
        assert tracker.payment_urgency(payment).kind == UrgencyKind.DUE_SOON
        assert tracker.payment_urgency(payment, for_card=True).kind == UrgencyKind.NORMAL

    def test_sorted_payments(self, tracker):
        tracker.add_payment("Later", 10, "2024-03-20")
        tracker.add_payment("Sooner", 10, "2024-03-02")
        assert [p.name for p in tracker.sorted_payments()] == ["Sooner", "Later"]

    def test_delete_payment(self, tracker):
        payment = tracker.add_payment("Rent", 900, "2024-03-05")
        assert tracker.delete_payment(payment.id) is True
        assert tracker.payments == []


class TestWishlist:
    """Tests for wishlist operations."""

    def test_add_and_edit(self, tracker):
        item = tracker.add_wishlist_item("Camera", "Photo", Priority.LOW, "450", "")
        assert item.url is None
        edited = tracker.edit_wishlist_item(item.id, estimated_amount=Decimal("500"), url="https://example.com")
        assert edited.estimated_amount == Decimal("500")
        assert edited.url == "https://example.com"
        assert edited.priority == Priority.LOW

    def test_edit_rejects_unknown_fields(self, tracker):
        item = tracker.add_wishlist_item("Camera")
        with pytest.raises(TypeError):
            tracker.edit_wishlist_item(item.id, saved_amount=5)

    def test_convert_to_goal(self, tracker, store):
        item = tracker.add_wishlist_item("Camera", "Photo", Priority.HIGH, "450")

        goal = tracker.convert_wishlist_item(item.id)

        assert goal.name == "Camera"
        assert goal.target_amount == Decimal("450")
        assert goal.category == "Photo"
        assert goal.priority == Priority.HIGH
        assert tracker.wishlist == []
        assert stored(store, "wishlist_data") == []
        assert stored(store, "goals_data")[0]["name"] == "Camera"

    def test_convert_without_estimate(self, tracker):
        item = tracker.add_wishlist_item("Surprise")
        goal = tracker.convert_wishlist_item(item.id)
        assert goal.target_amount == Decimal("0")
        assert tracker.convert_wishlist_item(item.id) is None


class TestViewsAndPersistence:
    """Tests for read views and reloading."""

    def test_dashboard(self, tracker):
        tracker.add_payment("Rent", 900, "2024-02-28")
        tracker.add_payment("Gym", 50, "2024-03-20")
        goal = tracker.add_goal("Trip", 300)
        tracker.contribute_to_goal(goal.id, 300)

        summary = tracker.dashboard()

        assert [u.payment.name for u in summary.urgent_payments] == ["Rent"]
        assert summary.total_due == Decimal("950")
        assert summary.completed_goals == 1

    def test_calendar_month(self, tracker):
        tracker.add_payment("Rent", 900, "2024-03-05")
        month = tracker.calendar_month(2024, 3)
        assert len(month.events_on(date(2024, 3, 5))) == 1

    def test_state_survives_reload(self, tracker, store, id_factory):
        goal = tracker.add_goal("Trip", 300)
        tracker.contribute_to_goal(goal.id, 120)
        tracker.add_payment("Rent", 900, "2024-03-05")
        tracker.add_wishlist_item("Camera")

        reloaded = FinanceTracker(TrackerRepository(store), today_provider=lambda: TODAY)

        assert reloaded.get_goal(goal.id).saved_amount == Decimal("120")
        assert [p.name for p in reloaded.payments] == ["Rent"]
        assert [w.name for w in reloaded.wishlist] == ["Camera"]

    def test_write_failure_keeps_memory_state(self, id_factory):
        tracker = FinanceTracker(TrackerRepository(FailingStore()), id_factory=id_factory)
        with pytest.raises(StorageWriteError):
            tracker.add_goal("Trip", 300)
        assert [g.name for g in tracker.goals] == ["Trip"]

    def test_create_tracker_in_memory(self):
        tracker = create_tracker(use_storage=False)
        assert tracker.goals == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
