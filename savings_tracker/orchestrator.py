"""
Main Orchestrator for Savings Tracker

This module ties together the core, the repository and the
validator. FinanceTracker is the single owner of the goals,
payments and wishlist collections.

DESIGN DECISION: Every mutation follows the same path:
1. Take the current snapshot
2. Compute a new snapshot with a pure core function
3. Swap it in
4. Persist the full list (never a partial update)

Read views never change state.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Optional

from savings_tracker.config import get_settings
from savings_tracker.core import views
from savings_tracker.core.contributions import apply_goal_contribution, apply_payment_contribution
from savings_tracker.core.dates import DateLike, default_plan_target, today as local_today
from savings_tracker.core.money import Numeric, to_money
from savings_tracker.core.projection import plan_for_goal, suggest_contribution
from savings_tracker.core.snapshots import find_by_id, prepend, remove_by_id, replace_by_id
from savings_tracker.core.urgency import classify_payment
from savings_tracker.logs import correlated, get_logger
from savings_tracker.models.entities import (
    EntityModel,
    Frequency,
    Payment,
    Priority,
    Projection,
    SavingsGoal,
    WishlistItem,
    generate_id,
    utc_now,
)
from savings_tracker.models.results import (
    CalendarMonth,
    DashboardSummary,
    GoalProgress,
    Urgency,
)
from savings_tracker.storage import (
    InMemoryStore,
    JsonFileStore,
    KeyValueStoreInterface,
    StorageWriteError,
    TrackerRepository,
)
from savings_tracker.validation import FormValidator

logger = get_logger(__name__)


def _revalidate(entity: EntityModel, **updates: Any) -> Any:
    """Copy an entity with updates, validating the result."""
    return type(entity).model_validate({**entity.model_dump(), **updates})


class FinanceTracker:
    """
    Application state container.

    Holds the current snapshot of every collection and persists a
    collection in full whenever it changes.
    """

    def __init__(
        self,
        repository: TrackerRepository,
        validator: Optional[FormValidator] = None,
        id_factory: Callable[[], str] = generate_id,
        clock: Callable[[], datetime] = utc_now,
        today_provider: Callable[[], date] = local_today,
    ):
        settings = get_settings()
        self._repository = repository
        self._schedule = settings.schedule
        self._display = settings.display
        self._validator = validator or FormValidator(self._display.currency_symbol)
        self._id_factory = id_factory
        self._clock = clock
        self._today = today_provider

        snapshot = repository.load()
        self._goals: list[SavingsGoal] = snapshot.goals
        self._payments: list[Payment] = snapshot.payments
        self._wishlist: list[WishlistItem] = snapshot.wishlist

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    @property
    def goals(self) -> list[SavingsGoal]:
        return list(self._goals)

    @property
    def payments(self) -> list[Payment]:
        return list(self._payments)

    @property
    def wishlist(self) -> list[WishlistItem]:
        return list(self._wishlist)

    @property
    def validator(self) -> FormValidator:
        return self._validator

    def get_goal(self, goal_id: str) -> Optional[SavingsGoal]:
        return find_by_id(self._goals, goal_id)

    def get_payment(self, payment_id: str) -> Optional[Payment]:
        return find_by_id(self._payments, payment_id)

    def get_wishlist_item(self, item_id: str) -> Optional[WishlistItem]:
        return find_by_id(self._wishlist, item_id)

    def _commit_goals(self, goals: list[SavingsGoal]) -> None:
        self._goals = goals
        self._persist(self._repository.save_goals, goals, "goals")

    def _commit_payments(self, payments: list[Payment]) -> None:
        self._payments = payments
        self._persist(self._repository.save_payments, payments, "payments")

    def _commit_wishlist(self, wishlist: list[WishlistItem]) -> None:
        self._wishlist = wishlist
        self._persist(self._repository.save_wishlist, wishlist, "wishlist")

    def _persist(self, save: Callable[[Any], None], items: list[Any], collection: str) -> None:
        try:
            save(items)
        except StorageWriteError as e:
            # The in-memory snapshot stays current; the caller decides how to surface it
            logger.error("collection_persist_failed", collection=collection, error=str(e))
            raise

    # ------------------------------------------------------------------
    # Goals
    # ------------------------------------------------------------------

    def add_goal(
        self,
        name: str,
        target_amount: Numeric,
        category: str = "",
        priority: Priority = Priority.MEDIUM,
    ) -> SavingsGoal:
        """Create a goal at the top of the list with the next palette color."""
        with correlated("add_goal"):
            palette = self._display.goal_colors
            goal = SavingsGoal(
                id=self._id_factory(),
                name=name,
                target_amount=to_money(target_amount),
                category=category,
                priority=priority,
                color=palette[len(self._goals) % len(palette)],
                created_at=self._clock(),
            )
            self._commit_goals(prepend(self._goals, goal))
            logger.info("goal_added", entity_id=goal.id, color=goal.color)
            return goal

    def edit_goal(
        self,
        goal_id: str,
        name: Optional[str] = None,
        target_amount: Optional[Numeric] = None,
        category: Optional[str] = None,
        priority: Optional[Priority] = None,
    ) -> Optional[SavingsGoal]:
        """
        Update a goal's descriptive fields. Saved amount, color, plan
        and creation time are kept. Unknown ids are ignored.
        """
        with correlated("edit_goal"):
            goal = self.get_goal(goal_id)
            if goal is None:
                logger.warning("edit_target_missing", entity_type="goal", entity_id=goal_id)
                return None
            updates: dict[str, Any] = {}
            if name is not None:
                updates["name"] = name
            if target_amount is not None:
                updates["target_amount"] = to_money(target_amount)
            if category is not None:
                updates["category"] = category
            if priority is not None:
                updates["priority"] = priority
            updated = _revalidate(goal, **updates)
            self._commit_goals(replace_by_id(self._goals, goal_id, updated))
            return updated

    def delete_goal(self, goal_id: str) -> bool:
        with correlated("delete_goal"):
            remaining = remove_by_id(self._goals, goal_id)
            if len(remaining) == len(self._goals):
                return False
            self._commit_goals(remaining)
            logger.info("goal_deleted", entity_id=goal_id)
            return True

    def suggest_plan(
        self,
        goal_id: str,
        target_date: DateLike,
        frequency: Frequency,
    ) -> Optional[Decimal]:
        """Live suggestion for the planning form (None when no plan is possible)."""
        goal = self.get_goal(goal_id)
        if goal is None:
            return None
        return suggest_contribution(goal.remaining_amount, target_date, frequency, today=self._today())

    def default_plan(self, goal_id: str) -> tuple[date, Frequency]:
        """
        Values that pre-fill the planning form: the goal's current plan
        if it has a dated one, otherwise the configured defaults.
        """
        goal = self.get_goal(goal_id)
        if goal is not None and goal.projection is not None and goal.projection.target_date is not None:
            return goal.projection.target_date, goal.projection.frequency
        frequency = goal.projection.frequency if goal is not None and goal.projection else None
        return (
            default_plan_target(self._schedule.default_projection_horizon_months, self._today()),
            frequency or self._schedule.default_projection_frequency,
        )

    def save_projection(
        self,
        goal_id: str,
        target_date: DateLike,
        frequency: Frequency,
    ) -> Optional[Projection]:
        """
        Store a contribution plan on a goal.

        Nothing is saved when no valid plan exists for the inputs.
        """
        with correlated("save_projection"):
            goal = self.get_goal(goal_id)
            if goal is None:
                logger.warning("projection_target_missing", entity_id=goal_id)
                return None
            projection = plan_for_goal(goal, target_date, frequency, today=self._today())
            if projection is None:
                logger.info("projection_not_saved", entity_id=goal_id, reason="no_valid_plan")
                return None
            updated = goal.model_copy(update={"projection": projection})
            self._commit_goals(replace_by_id(self._goals, goal_id, updated))
            logger.info(
                "projection_saved",
                entity_id=goal_id,
                amount=str(projection.amount),
                frequency=projection.frequency.value,
                target_date=projection.target_date.isoformat(),
            )
            return projection

    def contribute_to_goal(self, goal_id: str, amount: Numeric) -> list[SavingsGoal]:
        with correlated("contribute_to_goal"):
            goals = apply_goal_contribution(
                self._goals,
                goal_id,
                amount,
                id_factory=self._id_factory,
                now=self._clock(),
            )
            if goals != self._goals:
                self._commit_goals(goals)
            return list(goals)

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------

    def add_payment(
        self,
        name: str,
        amount: Numeric,
        due_date: DateLike,
        category: str = "",
        frequency: Frequency = Frequency.MONTHLY,
    ) -> Payment:
        with correlated("add_payment"):
            palette = self._display.payment_colors
            payment = Payment(
                id=self._id_factory(),
                name=name,
                amount=to_money(amount),
                due_date=due_date,
                category=category,
                frequency=frequency,
                color=palette[len(self._payments) % len(palette)],
            )
            self._commit_payments(prepend(self._payments, payment))
            logger.info("payment_added", entity_id=payment.id, color=payment.color)
            return payment

    def edit_payment(
        self,
        payment_id: str,
        name: Optional[str] = None,
        amount: Optional[Numeric] = None,
        due_date: Optional[DateLike] = None,
        category: Optional[str] = None,
        frequency: Optional[Frequency] = None,
    ) -> Optional[Payment]:
        """Update a payment. Paid amount and color are always kept."""
        with correlated("edit_payment"):
            payment = self.get_payment(payment_id)
            if payment is None:
                logger.warning("edit_target_missing", entity_type="payment", entity_id=payment_id)
                return None
            updates: dict[str, Any] = {}
            if name is not None:
                updates["name"] = name
            if amount is not None:
                updates["amount"] = to_money(amount)
            if due_date is not None:
                updates["due_date"] = due_date
            if category is not None:
                updates["category"] = category
            if frequency is not None:
                updates["frequency"] = frequency
            updated = _revalidate(payment, **updates)
            self._commit_payments(replace_by_id(self._payments, payment_id, updated))
            return updated

    def delete_payment(self, payment_id: str) -> bool:
        with correlated("delete_payment"):
            remaining = remove_by_id(self._payments, payment_id)
            if len(remaining) == len(self._payments):
                return False
            self._commit_payments(remaining)
            logger.info("payment_deleted", entity_id=payment_id)
            return True

    def contribute_to_payment(self, payment_id: str, amount: Numeric) -> list[Payment]:
        with correlated("contribute_to_payment"):
            payments = apply_payment_contribution(
                self._payments,
                payment_id,
                amount,
                id_factory=self._id_factory,
            )
            if payments != self._payments:
                self._commit_payments(payments)
            return list(payments)

    def mark_payment_paid(self, payment_id: str) -> list[Payment]:
        """Pay whatever is left on a payment in one contribution."""
        payment = self.get_payment(payment_id)
        if payment is None or payment.remaining_amount <= 0:
            return self.payments
        return self.contribute_to_payment(payment_id, payment.remaining_amount)

    # ------------------------------------------------------------------
    # Wishlist
    # ------------------------------------------------------------------

    def add_wishlist_item(
        self,
        name: str,
        category: str = "",
        priority: Priority = Priority.MEDIUM,
        estimated_amount: Optional[Numeric] = None,
        url: Optional[str] = None,
    ) -> WishlistItem:
        with correlated("add_wishlist_item"):
            item = WishlistItem(
                id=self._id_factory(),
                name=name,
                category=category,
                priority=priority,
                estimated_amount=to_money(estimated_amount) if estimated_amount is not None else None,
                url=url or None,
            )
            self._commit_wishlist(prepend(self._wishlist, item))
            return item

    def edit_wishlist_item(self, item_id: str, **fields: Any) -> Optional[WishlistItem]:
        """Update any of name, category, priority, estimated_amount, url."""
        with correlated("edit_wishlist_item"):
            item = self.get_wishlist_item(item_id)
            if item is None:
                logger.warning("edit_target_missing", entity_type="wishlist", entity_id=item_id)
                return None
            allowed = {"name", "category", "priority", "estimated_amount", "url"}
            unknown = set(fields) - allowed
            if unknown:
                raise TypeError(f"Unknown wishlist fields: {sorted(unknown)}")
            updated = _revalidate(item, **fields)
            self._commit_wishlist(replace_by_id(self._wishlist, item_id, updated))
            return updated

    def delete_wishlist_item(self, item_id: str) -> bool:
        with correlated("delete_wishlist_item"):
            remaining = remove_by_id(self._wishlist, item_id)
            if len(remaining) == len(self._wishlist):
                return False
            self._commit_wishlist(remaining)
            return True

    def convert_wishlist_item(self, item_id: str) -> Optional[SavingsGoal]:
        """
        Turn a wishlist item into a new goal (target = estimated amount
        or 0) and remove it from the wishlist.
        """
        with correlated("convert_wishlist_item"):
            item = self.get_wishlist_item(item_id)
            if item is None:
                logger.warning("convert_target_missing", entity_id=item_id)
                return None
            goal = self.add_goal(
                name=item.name,
                target_amount=item.estimated_amount or 0,
                category=item.category,
                priority=item.priority,
            )
            self._commit_wishlist(remove_by_id(self._wishlist, item_id))
            logger.info("wishlist_item_converted", entity_id=item_id, goal_id=goal.id)
            return goal

    # ------------------------------------------------------------------
    # Read views
    # ------------------------------------------------------------------

    def sorted_goals(self) -> list[SavingsGoal]:
        return views.sort_goals(self._goals)

    def sorted_payments(self) -> list[Payment]:
        return views.sort_payments(self._payments)

    def goal_progress(self, goal: SavingsGoal) -> GoalProgress:
        return views.goal_progress(goal)

    def payment_urgency(self, payment: Payment, for_card: bool = False) -> Urgency:
        """Urgency with the card window (3 days) or the list window (7 days)."""
        threshold = self._schedule.card_due_soon_days if for_card else self._schedule.list_due_soon_days
        return classify_payment(payment, threshold_days=threshold, today=self._today())

    def dashboard(self) -> DashboardSummary:
        return views.build_dashboard(
            self._goals,
            self._payments,
            threshold_days=self._schedule.list_due_soon_days,
            today=self._today(),
        )

    def calendar_month(self, year: int, month: int) -> CalendarMonth:
        return views.build_calendar_month(year, month, self._goals, self._payments)


def create_tracker(use_storage: bool = True) -> FinanceTracker:
    """
    Factory function to create the tracker with its dependencies.

    Args:
        use_storage: Whether to use the JSON file store.
                    If False, state lives in memory only.
    """
    store: KeyValueStoreInterface = JsonFileStore() if use_storage else InMemoryStore()
    return FinanceTracker(repository=TrackerRepository(store))
