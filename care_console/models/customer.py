"""Customer-related models."""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Literal

from pydantic import ConfigDict, Field

from care_console.models.base import Money, WireModel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OrderStatus(str, Enum):
    """Order lifecycle tag carried by each history entry."""

    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    RETURNED = "Returned"


class CustomerClassification(str, Enum):
    """Spend tier. Assigned by an external policy, read-only here."""

    BRONZE = "Bronze"
    SILVER = "Silver"
    GOLD = "Gold"
    PLATINUM = "Platinum"


class CustomerType(str, Enum):
    CORPORATE = "Corporate"
    NORMAL = "Normal"


class DiscoveryChannel(str, Enum):
    """How the customer heard about the store."""

    FACEBOOK = "Facebook"
    INSTAGRAM = "Instagram"
    GOOGLE = "Google"
    FRIENDS = "Friends"
    STREET = "Street"
    OTHER = "Other"


class CustomerLogEntry(WireModel):
    """Immutable history entry: a purchase, a point adjustment or a voucher."""

    model_config = ConfigDict(frozen=True)

    invoice_id: str
    date: datetime = Field(default_factory=utc_now)
    details: str = ""
    status: OrderStatus = OrderStatus.DELIVERED
    feedback: int | None = Field(default=None, ge=1, le=5)
    points_change: int = 0
    amount: Money = Decimal("0")


class CustomerImpression(WireModel):
    """Visit feedback recorded by staff on behalf of a customer."""

    model_config = ConfigDict(frozen=True)

    id: str
    date: datetime = Field(default_factory=utc_now)
    recorded_by_user_id: str
    recorded_by_user_name: str
    product_quality_rating: int = Field(ge=1, le=5)
    product_quality_notes: str | None = None
    branch_experience_rating: int = Field(ge=1, le=5)
    branch_experience_notes: str | None = None
    discovery_channel: DiscoveryChannel | None = None
    is_first_visit: bool = False
    related_invoice_ids: list[str] = Field(default_factory=list)
    branch_id: str
    visit_time: str | None = None


class Customer(WireModel):
    """Customer profile with its loyalty ledger and history."""

    id: str
    name: str
    phone: str
    governorate: str = ""
    email: str | None = None
    street_address: str | None = None
    gender: Literal["male", "female"] | None = None
    join_date: datetime | None = None
    customer_type: CustomerType = Field(default=CustomerType.NORMAL, alias="type")
    classification: CustomerClassification = CustomerClassification.BRONZE
    source: str | None = None
    primary_branch_id: str | None = None
    has_bad_reputation: bool = False

    # Loyalty ledger
    points: int = Field(default=0, ge=0)
    total_points_earned: int = Field(default=0, ge=0)
    total_points_used: int = Field(default=0, ge=0)

    # Purchases
    total_purchases: Money = Decimal("0")
    purchase_count: int = Field(default=0, ge=0)
    last_purchase_date: datetime | None = None

    # Stored most-recent-first
    log: list[CustomerLogEntry] = Field(default_factory=list)
    impressions: list[CustomerImpression] = Field(default_factory=list)

    # Optimistic concurrency
    version: int = 1
    last_modified: datetime | None = None

    @property
    def is_balanced(self) -> bool:
        """Check the balance against the earned and used counters."""
        return self.points == self.total_points_earned - self.total_points_used
