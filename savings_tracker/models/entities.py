"""
Core Data Models for Savings Tracker

These models define the schemas for everything kept in the store:
savings goals, scheduled payments and wishlist items.
They are designed to:
1. Load the camelCase JSON lists already sitting in the store
2. Be immutable, so every change produces a new value
3. Keep money as Decimal currency units end to end

DESIGN DECISION: Models are frozen. Mutations go through
model_copy(update=...) and the caller rebuilds the collection,
so a reader never sees an entity change underneath it.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional, Union
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
)
from pydantic.alias_generators import to_camel


def generate_id() -> str:
    """Create a fresh, globally unique entity id."""
    return str(uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _money_to_json(value: Decimal) -> Union[int, float]:
    # Stored lists hold plain JSON numbers
    if value == value.to_integral_value():
        return int(value)
    return float(value)


Money = Annotated[
    Decimal,
    PlainSerializer(_money_to_json, return_type=Union[int, float], when_used="json"),
]


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Priority(str, Enum):
    """
    Priority of a goal or wishlist item.

    Values match what is already persisted in the store.
    """
    HIGH = "Alta"
    MEDIUM = "Media"
    LOW = "Baja"


class Frequency(str, Enum):
    """
    How often a payment falls due or a goal contribution is planned.

    ONE_TIME items never recur. Recurring items are frozen to ONE_TIME
    once a cycle completes and a successor has been created.
    """
    ONE_TIME = "Una vez"
    WEEKLY = "Semanal"
    BI_WEEKLY = "Quincenal"
    MONTHLY = "Mensual"
    ANNUAL = "Anual"

    @property
    def is_recurring(self) -> bool:
        return self is not Frequency.ONE_TIME


class EntityModel(BaseModel):
    """Shared configuration for every stored entity."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# =============================================================================
# SAVINGS GOALS
# =============================================================================

class Projection(EntityModel):
    """
    A saved contribution plan for a goal.

    Legacy plans may lack target_date; those never recur.
    """

    amount: Money = Field(
        ...,
        ge=0,
        description="Suggested contribution per period"
    )
    frequency: Frequency = Field(
        ...,
        description="How often the contribution is made"
    )
    target_date: Optional[date] = Field(
        default=None,
        description="Date by which the goal should be reached"
    )


class SavingsGoal(EntityModel):
    """
    Something the user is saving toward.

    A goal is completed once saved_amount reaches target_amount.
    """

    # Blank ids from old data are repaired at load time
    id: str = Field(
        default_factory=generate_id,
        description="Unique goal ID"
    )
    name: str = Field(
        ...,
        max_length=200,
        description="Goal name"
    )
    category: str = Field(
        default="",
        max_length=100,
    )
    target_amount: Money = Field(
        ...,
        ge=0,
        description="Amount to reach"
    )
    saved_amount: Money = Field(
        default=Decimal("0"),
        ge=0,
        description="Amount saved so far"
    )
    priority: Priority = Priority.MEDIUM
    color: str = Field(
        default="",
        description="Palette tag, presentation only"
    )
    projection: Optional[Projection] = None
    created_at: datetime = Field(
        default_factory=utc_now,
        description="Creation time, drives the default sort"
    )

    @field_validator('created_at')
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Naive timestamps from old data are treated as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def is_completed(self) -> bool:
        return self.saved_amount >= self.target_amount

    @property
    def remaining_amount(self) -> Decimal:
        return max(Decimal("0"), self.target_amount - self.saved_amount)

    @property
    def cycle_frequency(self) -> Frequency:
        """Frequency that governs recurrence (ONE_TIME without a plan)."""
        if self.projection is None:
            return Frequency.ONE_TIME
        return self.projection.frequency


# =============================================================================
# SCHEDULED PAYMENTS
# =============================================================================

class Payment(EntityModel):
    """
    A payment due on a date, paid off by one or more contributions.

    A payment is covered once paid_amount reaches amount.
    """

    id: str = Field(
        default_factory=generate_id,
        description="Unique payment ID"
    )
    name: str = Field(
        ...,
        max_length=200,
        description="Payment name"
    )
    amount: Money = Field(
        ...,
        ge=0,
        description="Total due for the current cycle"
    )
    paid_amount: Money = Field(
        default=Decimal("0"),
        ge=0,
        description="Amount paid during the current cycle"
    )
    due_date: date = Field(
        ...,
        description="Local calendar date the payment is due"
    )
    category: str = Field(
        default="",
        max_length=100,
    )
    frequency: Frequency = Frequency.ONE_TIME
    color: str = ""

    @property
    def is_covered(self) -> bool:
        return self.paid_amount >= self.amount

    @property
    def remaining_amount(self) -> Decimal:
        return max(Decimal("0"), self.amount - self.paid_amount)


# =============================================================================
# WISHLIST
# =============================================================================

class WishlistItem(EntityModel):
    """Something the user might save for later."""

    id: str = Field(default_factory=generate_id)
    name: str = Field(
        ...,
        max_length=200,
    )
    category: str = Field(
        default="",
        max_length=100,
    )
    priority: Priority = Priority.MEDIUM
    estimated_amount: Optional[Money] = Field(
        default=None,
        ge=0,
        description="Rough price, becomes the goal target on conversion"
    )
    url: Optional[str] = Field(
        default=None,
        max_length=2000,
    )


Entity = Union[SavingsGoal, Payment, WishlistItem]
