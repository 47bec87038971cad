"""Organization proximity matching and new-listing notifications."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Protocol

import structlog

from foodloop.config import get_config
from foodloop.geo_utils import haversine_km, is_valid_coordinate
from foodloop.models import FoodListing, Notification, NotificationType, Organization

logger = structlog.get_logger()


class NotificationRepository(Protocol):
    """Storage the notifier reads organizations from and writes notifications to."""

    def list_all_organizations(self) -> list[Organization]:
        ...

    def create_notification(self, **fields: Any) -> Notification:
        ...


@dataclass
class ProximityMatch:
    """An organization whose radius contains a listing."""

    organization: Organization
    distance_km: float
    radius_km: float


def resolve_radius_km(organization: Organization, default_radius_km: float) -> float:
    """Organization's preferred radius, or the default when unset or zero."""
    prefs = organization.preferences
    if prefs is None or not prefs.max_radius_km:
        return default_radius_km
    return float(prefs.max_radius_km)


def find_nearby_organizations(
    listing: FoodListing,
    organizations: Iterable[Organization],
    default_radius_km: float | None = None,
    earth_radius_km: float | None = None,
) -> list[ProximityMatch]:
    """Find organizations whose notification radius contains a listing.

    Only the radius is checked; food type and pickup time preferences are
    not applied.

    Args:
        listing: The newly created listing.
        organizations: Candidate organizations.
        default_radius_km: Radius for organizations without one. Defaults to config.
        earth_radius_km: Sphere radius for the haversine distance. Defaults to config.

    Returns:
        One ProximityMatch per organization within radius (inclusive), nearest first.
    """
    config = get_config().notifications
    if default_radius_km is None:
        default_radius_km = config.default_radius_km
    if earth_radius_km is None:
        earth_radius_km = config.earth_radius_km

    if not is_valid_coordinate(listing.latitude, listing.longitude):
        logger.warning(
            "Listing has invalid coordinates, no organizations matched",
            listing_id=listing.id,
            latitude=listing.latitude,
            longitude=listing.longitude,
        )
        return []

    matches = []
    for org in organizations:
        if not is_valid_coordinate(org.latitude, org.longitude):
            logger.warning(
                "Skipping organization with invalid coordinates",
                organization_id=org.id,
                latitude=org.latitude,
                longitude=org.longitude,
            )
            continue

        distance_km = haversine_km(
            listing.latitude, listing.longitude,
            org.latitude, org.longitude,
            radius_km=earth_radius_km,
        )
        radius_km = resolve_radius_km(org, default_radius_km)

        if distance_km <= radius_km:
            matches.append(ProximityMatch(organization=org, distance_km=distance_km, radius_km=radius_km))

    matches.sort(key=lambda m: m.distance_km)
    return matches


def format_pickup_time(value: datetime) -> str:
    """Clock time shown in notification messages, e.g. "02:30 PM"."""
    return value.strftime("%I:%M %p")


def build_listing_message(listing: FoodListing) -> tuple[str, str]:
    """Title and message text for a new-listing notification."""
    title = f"New Food Available: {listing.title}"
    message = (
        f"{listing.quantity} of {listing.category} available at {listing.location}. "
        f"Pickup time: {format_pickup_time(listing.pickup_time_start)} - "
        f"{format_pickup_time(listing.pickup_time_end)}"
    )
    return title, message


def notify_nearby_organizations(
    listing: FoodListing,
    repository: NotificationRepository,
    default_radius_km: float | None = None,
) -> list[Notification]:
    """Create a new_listing notification for every organization in range.

    Called once per listing at creation time, so each organization receives
    at most one notification for it.

    Args:
        listing: The newly created listing.
        repository: Source of organizations and sink for notifications.
        default_radius_km: Radius for organizations without one. Defaults to config.

    Returns:
        The notifications created, nearest organization first.
    """
    organizations = repository.list_all_organizations()
    matches = find_nearby_organizations(listing, organizations, default_radius_km)
    title, message = build_listing_message(listing)

    created = []
    for match in matches:
        notification = repository.create_notification(
            organization_id=match.organization.id,
            listing_id=listing.id,
            type=NotificationType.NEW_LISTING,
            title=title,
            message=message,
            is_read=False,
        )
        created.append(notification)
        logger.debug(
            "Notified organization",
            organization_id=match.organization.id,
            listing_id=listing.id,
            distance_km=round(match.distance_km, 3),
        )

    logger.info(
        "Proximity notification complete",
        listing_id=listing.id,
        num_organizations=len(organizations),
        num_notified=len(created),
    )

    return created
