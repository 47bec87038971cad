"""Domain records shared by the rating and notification routines."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class VerificationStatus(str, Enum):
    """Supplier verification state set by an admin review."""

    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class NotificationType(str, Enum):
    NEW_LISTING = "new_listing"
    LISTING_CLAIMED = "listing_claimed"
    REMINDER = "reminder"


class ListingStatus(str, Enum):
    AVAILABLE = "available"
    CLAIMED = "claimed"
    COMPLETED = "completed"
    EXPIRED = "expired"


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass
class Supplier:
    """A food business posting surplus listings."""

    id: str
    business_name: str
    business_type: str = "restaurant"
    address: str = ""
    latitude: float | None = None
    longitude: float | None = None
    license_number: str | None = None
    license_expiry_date: datetime | None = None
    google_rating: float | None = None  # 0-5, external reputation
    google_place_id: str | None = None
    total_listings: int = 0
    successful_deliveries: int = 0
    verification_status: VerificationStatus = VerificationStatus.PENDING
    created_at: datetime = field(default_factory=utcnow)
    # Derived by the safety scorer; never authoritative input
    safety_rating: float = 0.0


@dataclass
class OrganizationPreferences:
    """Matching preferences an organization registers with."""

    food_types: set[str] = field(default_factory=set)
    max_radius_km: float | None = 10.0
    preferred_pickup_times: set[str] = field(default_factory=set)


@dataclass
class Organization:
    """An NGO, care home or food bank receiving surplus food."""

    id: str
    name: str
    type: str = "ngo"
    address: str = ""
    latitude: float | None = None
    longitude: float | None = None
    preferences: OrganizationPreferences | None = None


@dataclass
class FoodListing:
    """Surplus food posted by a supplier."""

    id: str
    title: str
    quantity: str
    category: str
    location: str
    latitude: float | None
    longitude: float | None
    pickup_time_start: datetime
    pickup_time_end: datetime
    donor_id: str = ""
    description: str = ""
    status: ListingStatus = ListingStatus.AVAILABLE
    created_at: datetime = field(default_factory=utcnow)


@dataclass
class Notification:
    """A message sent to an organization about a listing."""

    id: str
    organization_id: str
    listing_id: str
    type: NotificationType
    title: str
    message: str
    is_read: bool = False
    sent_at: datetime = field(default_factory=utcnow)

    def mark_read(self) -> None:
        """Flag the notification as read. Repeated calls leave it read."""
        self.is_read = True
