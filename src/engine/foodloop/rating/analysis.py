"""Supplier analysis report built on the safety rating breakdown."""

import math
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

from foodloop.models import Supplier, VerificationStatus, as_utc, utcnow
from foodloop.rating.safety import SafetyScorer

# (rating floor, badge text), highest first
SAFETY_BADGES = [
    (4.0, "Highly Recommended"),
    (3.0, "Proceed with Caution"),
    (0.0, "Extra Verification Required"),
]

MIN_GOOD_EXTERNAL_RATING = 3.5
MIN_GOOD_SUCCESS_RATE = 0.8
NEW_ACCOUNT_DAYS = 90


@dataclass
class VerificationSummary:
    license_valid: bool
    license_number: str | None
    license_expiry_date: datetime | None
    verification_status: str


@dataclass
class PerformanceSummary:
    total_listings: int
    successful_deliveries: int
    success_rate: float  # 0-1


@dataclass
class ReputationSummary:
    google_rating: float | None
    google_place_id: str | None
    account_age_days: int


@dataclass
class SupplierAnalysis:
    """Human-readable safety analysis of a supplier."""

    supplier_id: str
    business_name: str
    safety_rating: float
    badge: str
    verification: VerificationSummary
    performance: PerformanceSummary
    reputation: ReputationSummary
    risk_factors: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        expiry = data["verification"]["license_expiry_date"]
        if expiry is not None:
            data["verification"]["license_expiry_date"] = expiry.isoformat()
        return data


def safety_badge(rating: float) -> str:
    """Badge text shown next to a supplier's rating."""
    for floor, text in SAFETY_BADGES:
        if rating >= floor:
            return text
    return SAFETY_BADGES[-1][1]


def analyze_supplier(
    supplier: Supplier,
    scorer: SafetyScorer | None = None,
    now: datetime | None = None,
) -> SupplierAnalysis:
    """Build the safety analysis for a supplier.

    Args:
        supplier: Supplier snapshot to analyze.
        scorer: Scorer to use, defaults to the standard weights.
        now: Reference time, defaults to the current UTC time.

    Returns:
        SupplierAnalysis with a freshly computed rating, risk factors and
        recommendations.
    """
    scorer = scorer or SafetyScorer()
    now = as_utc(now) if now is not None else utcnow()
    result = scorer.score_supplier(supplier, now)

    license_factor = result.factor("License")
    license_valid = license_factor is not None and license_factor.reason_code == "LICENSE_VALID"

    if supplier.total_listings > 0:
        success_rate = min(supplier.successful_deliveries / supplier.total_listings, 1.0)
    else:
        success_rate = 0.0

    age_days = max(math.floor((now - as_utc(supplier.created_at)).total_seconds() / 86400), 0)

    status = supplier.verification_status
    status_key = status.value if isinstance(status, VerificationStatus) else str(status)

    risk_factors: list[str] = []
    recommendations: list[str] = []

    if license_factor is not None and license_factor.reason_code == "LICENSE_EXPIRED":
        risk_factors.append("Food safety license expired")
        recommendations.append("Request a renewed food safety license before accepting pickups")
    elif not license_valid:
        risk_factors.append("No food safety license on file")
        recommendations.append("Ask the supplier to submit a license number and expiry date")

    if not supplier.google_rating:
        risk_factors.append("No external reputation data")
        recommendations.append("Inspect the first pickups in person")
    elif supplier.google_rating < MIN_GOOD_EXTERNAL_RATING:
        risk_factors.append(f"Low external rating ({supplier.google_rating:.1f})")
        recommendations.append("Review recent customer feedback before claiming listings")

    if supplier.total_listings == 0:
        risk_factors.append("No delivery history yet")
    elif success_rate < MIN_GOOD_SUCCESS_RATE:
        risk_factors.append(f"Low delivery success rate ({success_rate:.0%})")
        recommendations.append("Confirm pickup details with the supplier ahead of time")

    if age_days < NEW_ACCOUNT_DAYS:
        risk_factors.append("Recently registered account")

    if status_key == VerificationStatus.PENDING.value:
        risk_factors.append("Verification pending")
        recommendations.append("Wait for admin verification to complete")
    elif status_key == VerificationStatus.REJECTED.value:
        risk_factors.append("Verification rejected")
        recommendations.append("Avoid claiming listings from this supplier")

    if not risk_factors:
        recommendations.append("Supplier meets all safety criteria")

    return SupplierAnalysis(
        supplier_id=supplier.id,
        business_name=supplier.business_name,
        safety_rating=result.rating,
        badge=safety_badge(result.rating),
        verification=VerificationSummary(
            license_valid=license_valid,
            license_number=supplier.license_number,
            license_expiry_date=supplier.license_expiry_date,
            verification_status=status_key,
        ),
        performance=PerformanceSummary(
            total_listings=supplier.total_listings,
            successful_deliveries=supplier.successful_deliveries,
            success_rate=success_rate,
        ),
        reputation=ReputationSummary(
            google_rating=supplier.google_rating,
            google_place_id=supplier.google_place_id,
            account_age_days=age_days,
        ),
        risk_factors=risk_factors,
        recommendations=recommendations,
    )
