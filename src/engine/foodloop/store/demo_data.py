"""Sample organizations and suppliers for demos and manual testing."""

import dataclasses
from datetime import datetime, timezone
from typing import Any

from foodloop.models import Organization, OrganizationPreferences, Supplier, VerificationStatus
from foodloop.store.memory import InMemoryRepository


def _fields(record: Any) -> dict[str, Any]:
    return {f.name: getattr(record, f.name) for f in dataclasses.fields(record)}


def _utc(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


def build_demo_organizations() -> list[Organization]:
    """Three receiving organizations in Delhi, Mumbai and Bangalore."""
    return [
        Organization(
            id="org1",
            name="Food for All NGO",
            type="ngo",
            address="123 Charity St, Delhi, India",
            latitude=28.6139,
            longitude=77.2090,
            preferences=OrganizationPreferences(
                food_types={"cooked", "packaged", "fresh"},
                max_radius_km=10,
                preferred_pickup_times={"morning", "evening"},
            ),
        ),
        Organization(
            id="org2",
            name="Elder Care Home",
            type="home_care",
            address="456 Senior Blvd, Mumbai, India",
            latitude=19.0760,
            longitude=72.8777,
            preferences=OrganizationPreferences(
                food_types={"cooked", "soft"},
                max_radius_km=5,
                preferred_pickup_times={"morning"},
            ),
        ),
        Organization(
            id="org3",
            name="Community Food Bank",
            type="food_bank",
            address="789 Distribution Ave, Bangalore, India",
            latitude=12.9716,
            longitude=77.5946,
            preferences=OrganizationPreferences(
                food_types={"packaged", "canned", "dry"},
                max_radius_km=15,
                preferred_pickup_times={"morning", "afternoon"},
            ),
        ),
    ]


def build_demo_suppliers() -> list[Supplier]:
    """Three verified suppliers near the demo organizations."""
    return [
        Supplier(
            id="sup1",
            business_name="Golden Palace Restaurant",
            business_type="restaurant",
            address="321 Food Court, Delhi, India",
            latitude=28.6129,
            longitude=77.2295,
            license_number="FSSAI-12345678901",
            license_expiry_date=_utc(2025, 6, 30),
            google_rating=4.5,
            google_place_id="ChIJd8BlQ2BZwokRAFUEcm_qrcQ",
            total_listings=45,
            successful_deliveries=42,
            verification_status=VerificationStatus.VERIFIED,
            created_at=_utc(2023, 2, 15),
        ),
        Supplier(
            id="sup2",
            business_name="Fresh Mart Grocery",
            business_type="grocery",
            address="654 Market St, Mumbai, India",
            latitude=19.0785,
            longitude=72.8785,
            license_number="FSSAI-98765432109",
            license_expiry_date=_utc(2024, 12, 31),
            google_rating=4.2,
            google_place_id="ChIJwe1EZjDG5zsRaYxkjY_tpF0",
            total_listings=23,
            successful_deliveries=20,
            verification_status=VerificationStatus.VERIFIED,
            created_at=_utc(2023, 5, 20),
        ),
        Supplier(
            id="sup3",
            business_name="Sweet Treats Bakery",
            business_type="bakery",
            address="987 Baker Lane, Bangalore, India",
            latitude=12.9762,
            longitude=77.6033,
            license_number="FSSAI-56789012345",
            license_expiry_date=_utc(2025, 3, 15),
            google_rating=4.7,
            google_place_id="ChIJbU60yXAWrjsR4E9-4NKBSQI",
            total_listings=12,
            successful_deliveries=11,
            verification_status=VerificationStatus.VERIFIED,
            created_at=_utc(2023, 8, 10),
        ),
    ]


def seed_demo_data(repository: InMemoryRepository, now: datetime | None = None) -> InMemoryRepository:
    """Load the demo records into a repository and compute supplier ratings."""
    for org in build_demo_organizations():
        repository.create_organization(**_fields(org))

    for supplier in build_demo_suppliers():
        fields = _fields(supplier)
        fields.pop("safety_rating")
        repository.create_supplier(**fields)
        repository.refresh_safety_rating(supplier.id, now)

    return repository
