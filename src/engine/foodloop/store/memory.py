"""In-memory repository for FoodLoop records."""

import dataclasses
import threading
from datetime import datetime
from typing import Any
from uuid import uuid4

import structlog

from foodloop.models import (
    FoodListing,
    ListingStatus,
    Notification,
    NotificationType,
    Organization,
    Supplier,
    utcnow,
)
from foodloop.notify.proximity import notify_nearby_organizations
from foodloop.rating.safety import SafetyScorer

logger = structlog.get_logger()


def _new_id() -> str:
    return str(uuid4())


class InMemoryRepository:
    """Process-local store for organizations, suppliers, listings and notifications.

    Nothing is persisted. Create one per application (or per test) and pass
    it to the code that needs it.
    """

    def __init__(self, scorer: SafetyScorer | None = None, default_radius_km: float | None = None):
        """Initialize an empty repository.

        Args:
            scorer: Scorer used when recomputing supplier ratings.
            default_radius_km: Notification radius for organizations without one.
        """
        self.scorer = scorer or SafetyScorer()
        self.default_radius_km = default_radius_km

        self._organizations: dict[str, Organization] = {}
        self._suppliers: dict[str, Supplier] = {}
        self._listings: dict[str, FoodListing] = {}
        self._notifications: dict[str, Notification] = {}
        self._lock = threading.RLock()

    # Organizations

    def create_organization(self, **fields: Any) -> Organization:
        fields.setdefault("id", _new_id())
        org = Organization(**fields)
        self._organizations[org.id] = org
        return org

    def get_organization(self, org_id: str) -> Organization | None:
        return self._organizations.get(org_id)

    def list_all_organizations(self) -> list[Organization]:
        return list(self._organizations.values())

    def list_organizations_by_type(self, org_type: str) -> list[Organization]:
        return [org for org in self._organizations.values() if org.type == org_type]

    # Suppliers

    def create_supplier(self, **fields: Any) -> Supplier:
        """Register a supplier. The safety rating starts at 0 until refreshed."""
        fields.setdefault("id", _new_id())
        fields["safety_rating"] = 0.0
        supplier = Supplier(**fields)
        self._suppliers[supplier.id] = supplier
        return supplier

    def get_supplier(self, supplier_id: str) -> Supplier | None:
        return self._suppliers.get(supplier_id)

    def list_all_suppliers(self) -> list[Supplier]:
        return list(self._suppliers.values())

    def update_supplier(self, supplier_id: str, **changes: Any) -> Supplier | None:
        """Apply field changes and recompute the safety rating.

        A safety_rating passed in changes is ignored; the rating is always
        derived from the other fields.

        Returns:
            The updated supplier, or None if the id is unknown.
        """
        existing = self._suppliers.get(supplier_id)
        if existing is None:
            return None

        changes.pop("safety_rating", None)
        changes.pop("id", None)
        updated = dataclasses.replace(existing, **changes)
        updated.safety_rating = self.scorer.calculate_safety_rating(updated)
        self._suppliers[supplier_id] = updated
        return updated

    def refresh_safety_rating(self, supplier_id: str, now: datetime | None = None) -> float | None:
        """Recompute and store a supplier's rating. Returns None for unknown ids."""
        supplier = self._suppliers.get(supplier_id)
        if supplier is None:
            return None
        supplier.safety_rating = self.scorer.calculate_safety_rating(supplier, now)
        return supplier.safety_rating

    # Food listings

    def create_food_listing(self, notify: bool = True, **fields: Any) -> FoodListing:
        """Store a listing as available and fan out proximity notifications once."""
        fields.setdefault("id", _new_id())
        fields["status"] = ListingStatus.AVAILABLE
        fields["created_at"] = utcnow()
        listing = FoodListing(**fields)

        # One listing's fan-out completes before another listing can start
        with self._lock:
            self._listings[listing.id] = listing
            if notify:
                notify_nearby_organizations(listing, self, self.default_radius_km)
        return listing

    def get_food_listing(self, listing_id: str) -> FoodListing | None:
        return self._listings.get(listing_id)

    def update_food_listing(self, listing_id: str, **changes: Any) -> FoodListing | None:
        """Apply field changes to a listing, such as a claim moving it out of available.

        Returns:
            The updated listing, or None if the id is unknown.
        """
        with self._lock:
            existing = self._listings.get(listing_id)
            if existing is None:
                return None

            changes.pop("id", None)
            changes.pop("created_at", None)
            if "status" in changes:
                changes["status"] = ListingStatus(changes["status"])
            updated = dataclasses.replace(existing, **changes)
            self._listings[listing_id] = updated

        logger.debug("Listing updated", listing_id=listing_id, status=updated.status.value)
        return updated

    def list_available_food_listings(self) -> list[FoodListing]:
        with self._lock:
            snapshot = list(self._listings.values())
        return [listing for listing in snapshot if listing.status == ListingStatus.AVAILABLE]

    # Notifications

    def create_notification(self, **fields: Any) -> Notification:
        """Store a notification, assigning its id and sent_at."""
        with self._lock:
            fields["id"] = _new_id()
            fields["sent_at"] = utcnow()
            fields["type"] = NotificationType(fields.get("type", NotificationType.NEW_LISTING))
            fields["is_read"] = bool(fields.get("is_read", False))
            notification = Notification(**fields)
            self._notifications[notification.id] = notification
        return notification

    def get_notification(self, notification_id: str) -> Notification | None:
        return self._notifications.get(notification_id)

    def notifications_for_organization(self, org_id: str) -> list[Notification]:
        """Notifications for an organization, newest first."""
        with self._lock:
            snapshot = list(self._notifications.values())
        found = [n for n in snapshot if n.organization_id == org_id]
        found.sort(key=lambda n: n.sent_at, reverse=True)
        return found

    def unread_count(self, org_id: str) -> int:
        return sum(1 for n in self.notifications_for_organization(org_id) if not n.is_read)

    def mark_notification_as_read(self, notification_id: str) -> bool:
        """Mark a notification read. Returns False when the id is unknown."""
        notification = self._notifications.get(notification_id)
        if notification is None:
            logger.warning("Notification not found", notification_id=notification_id)
            return False
        notification.mark_read()
        return True
