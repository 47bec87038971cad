"""Shared test fixtures for foodloop engine tests."""

from datetime import datetime, timedelta, timezone

import pytest

import foodloop.config
from foodloop.models import (
    FoodListing,
    Organization,
    OrganizationPreferences,
    Supplier,
    VerificationStatus,
)
from foodloop.store.memory import InMemoryRepository

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)

# Connaught Place area, Delhi
DELHI = (28.6139, 77.2090)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Drop FOODLOOP_* overrides and the cached config around every test."""
    for var in (
        "FOODLOOP_DEFAULT_RADIUS_KM",
        "FOODLOOP_EARTH_RADIUS_KM",
        "FOODLOOP_SCORING_FILE",
        "FOODLOOP_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    foodloop.config._config = None
    yield
    foodloop.config._config = None


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def new_supplier():
    """A supplier that just registered with nothing on file."""
    return Supplier(
        id="sup-new",
        business_name="Corner Cafe",
        created_at=NOW,
    )


@pytest.fixture
def established_supplier():
    """A supplier that maxes out every safety signal."""
    return Supplier(
        id="sup-best",
        business_name="Golden Palace Restaurant",
        license_number="FSSAI-12345678901",
        license_expiry_date=NOW + timedelta(days=365),
        google_rating=5.0,
        total_listings=10,
        successful_deliveries=10,
        verification_status=VerificationStatus.VERIFIED,
        created_at=NOW - timedelta(days=400),
    )


@pytest.fixture
def delhi_listing():
    """A listing posted at the Delhi city centre."""
    return FoodListing(
        id="listing-001",
        title="Vegetable Biryani",
        quantity="5 kg",
        category="cooked",
        location="Connaught Place, Delhi",
        latitude=DELHI[0],
        longitude=DELHI[1],
        pickup_time_start=datetime(2024, 6, 1, 14, 30, tzinfo=timezone.utc),
        pickup_time_end=datetime(2024, 6, 1, 16, 0, tzinfo=timezone.utc),
        donor_id="sup1",
    )


@pytest.fixture
def delhi_organization():
    return Organization(
        id="org-delhi",
        name="Food for All NGO",
        type="ngo",
        latitude=DELHI[0],
        longitude=DELHI[1],
        preferences=OrganizationPreferences(max_radius_km=10),
    )


@pytest.fixture
def repository():
    return InMemoryRepository()
