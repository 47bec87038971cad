"""Proximity matching and notification fan-out."""

from foodloop.notify.proximity import (
    NotificationRepository,
    ProximityMatch,
    find_nearby_organizations,
    notify_nearby_organizations,
)

__all__ = [
    "find_nearby_organizations",
    "notify_nearby_organizations",
    "NotificationRepository",
    "ProximityMatch",
]
