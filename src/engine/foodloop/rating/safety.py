"""Supplier safety rating model."""

import copy
import math
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable

import structlog
import yaml

from foodloop.models import Supplier, VerificationStatus, as_utc, utcnow

logger = structlog.get_logger()


@dataclass
class ScoringFactor:
    """A single scoring factor contribution."""

    name: str
    points: float
    max_points: float
    reason_code: str
    details: str


@dataclass
class SafetyRating:
    """Calculated safety rating for a supplier."""

    rating: float
    band: str
    points: float
    max_points: float
    factors: list[ScoringFactor] = field(default_factory=list)

    def factor(self, name: str) -> ScoringFactor | None:
        """Look up a factor by name."""
        for f in self.factors:
            if f.name == name:
                return f
        return None

    @property
    def factors_dict(self) -> dict[str, Any]:
        """Convert the breakdown to a plain dictionary."""
        return {
            "safety_rating": self.rating,
            "band": self.band,
            "points": round(self.points, 2),
            "max_points": self.max_points,
            "factors": [
                {
                    "name": f.name,
                    "points": round(f.points, 2),
                    "max_points": f.max_points,
                    "reason_code": f.reason_code,
                    "details": f.details,
                }
                for f in self.factors
            ],
        }


# Default scoring configuration. Factor max_points sum to 100.
DEFAULT_SCORING = {
    "license": {
        "max_points": 30,
        "valid_points": 30,
        "expired_points": 10,
        "missing_points": 5,
    },
    "external_rating": {
        "max_points": 25,
        "scale_max": 5.0,
        "missing_points": 10,
    },
    "delivery_success": {
        "max_points": 20,
        "neutral_rate": 0.5,  # Assumed rate before any listing history exists
    },
    "account_age": {
        "max_points": 15,
        "full_credit_months": 12,
        "days_per_month": 30,
    },
    "verification": {
        "max_points": 10,
        "points": {
            "verified": 10,
            "pending": 5,
            "rejected": 0,
        },
    },
    "safety_bands": [
        {"name": "High", "min_rating": 4.0},
        {"name": "Medium", "min_rating": 3.0},
        {"name": "Low", "min_rating": 0.0},
    ],
}

FACTOR_KEYS = ["license", "external_rating", "delivery_success", "account_age", "verification"]


def round_half_up(value: float, ndigits: int = 1) -> float:
    """Round halves away from zero for non-negative values (5.25 -> 5.3)."""
    scale = 10 ** ndigits
    return math.floor(value * scale + 0.5) / scale


class SafetyScorer:
    """Safety rating engine with configurable weights."""

    def __init__(self, config: dict[str, Any] | None = None, config_path: Path | None = None):
        """Initialize the scorer with optional configuration.

        Args:
            config: Scoring configuration dictionary.
            config_path: Path to YAML configuration file.
        """
        self.config = copy.deepcopy(DEFAULT_SCORING)

        if config_path and config_path.exists():
            with open(config_path) as f:
                yaml_config = yaml.safe_load(f)
                if yaml_config:
                    self._merge_config(yaml_config)

        if config:
            self._merge_config(config)

    def _merge_config(self, config: dict[str, Any]) -> None:
        """Merge configuration into current config."""
        for factor, settings in config.get("scoring_factors", {}).items():
            if factor in FACTOR_KEYS:
                self.config[factor].update(settings)
        if "safety_bands" in config:
            self.config["safety_bands"] = sorted(
                config["safety_bands"], key=lambda b: b["min_rating"], reverse=True
            )

    @property
    def max_points(self) -> float:
        return sum(self.config[key]["max_points"] for key in FACTOR_KEYS)

    def score_supplier(self, supplier: Supplier, now: datetime | None = None) -> SafetyRating:
        """Calculate the safety rating with its factor breakdown.

        Args:
            supplier: Supplier snapshot. Its stored safety_rating is ignored.
            now: Reference time for license expiry and account age.

        Returns:
            SafetyRating with the 0-5 rating, band and factor breakdown.
        """
        now = as_utc(now) if now is not None else utcnow()

        factors = [
            self._score_license(supplier, now),
            self._score_external_rating(supplier.google_rating),
            self._score_delivery_success(supplier.total_listings, supplier.successful_deliveries),
            self._score_account_age(supplier.created_at, now),
            self._score_verification(supplier.verification_status),
        ]

        total_points = sum(f.points for f in factors)
        max_points = self.max_points

        # Order is fixed: ratio first, then * 5 * 10, then half-up (59 points rates 2.9)
        rating = math.floor((total_points / max_points) * 5 * 10 + 0.5) / 10 if max_points else 0.0
        rating = min(5.0, max(0.0, rating))

        logger.debug(
            "Safety rating computed",
            supplier_id=supplier.id,
            rating=rating,
            points=round(total_points, 2),
        )

        return SafetyRating(
            rating=rating,
            band=self.get_band(rating),
            points=total_points,
            max_points=max_points,
            factors=factors,
        )

    def calculate_safety_rating(self, supplier: Supplier, now: datetime | None = None) -> float:
        """Calculate the 0-5 safety rating, rounded to one decimal."""
        return self.score_supplier(supplier, now).rating

    def _score_license(self, supplier: Supplier, now: datetime) -> ScoringFactor:
        """Score license presence and validity."""
        config = self.config["license"]
        max_pts = config["max_points"]

        if supplier.license_number and supplier.license_expiry_date:
            expiry = as_utc(supplier.license_expiry_date)
            if expiry > now:
                return ScoringFactor(
                    name="License",
                    points=config["valid_points"],
                    max_points=max_pts,
                    reason_code="LICENSE_VALID",
                    details=f"License {supplier.license_number} valid until {expiry:%Y-%m-%d}",
                )
            return ScoringFactor(
                name="License",
                points=config["expired_points"],
                max_points=max_pts,
                reason_code="LICENSE_EXPIRED",
                details=f"License {supplier.license_number} expired on {expiry:%Y-%m-%d}",
            )

        return ScoringFactor(
            name="License",
            points=config["missing_points"],
            max_points=max_pts,
            reason_code="LICENSE_MISSING",
            details="No license number or expiry date on file",
        )

    def _score_external_rating(self, google_rating: float | None) -> ScoringFactor:
        """Score the external (Google) rating.

        A rating of 0 is treated the same as no rating: new listings on
        review sites report 0 until they receive reviews.
        """
        config = self.config["external_rating"]
        max_pts = config["max_points"]
        scale_max = config["scale_max"]

        if not google_rating:
            return ScoringFactor(
                name="External Rating",
                points=config["missing_points"],
                max_points=max_pts,
                reason_code="RATING_MISSING",
                details="No external rating available",
            )

        clamped = min(max(float(google_rating), 0.0), scale_max)
        return ScoringFactor(
            name="External Rating",
            points=(clamped / scale_max) * max_pts,
            max_points=max_pts,
            reason_code="RATING_EXTERNAL",
            details=f"External rating: {clamped:.1f}/{scale_max:.0f}",
        )

    def _score_delivery_success(self, total_listings: int, successful_deliveries: int) -> ScoringFactor:
        """Score the share of listings that ended in a delivery."""
        config = self.config["delivery_success"]
        max_pts = config["max_points"]

        if total_listings > 0:
            rate = min(max(successful_deliveries / total_listings, 0.0), 1.0)
            return ScoringFactor(
                name="Delivery Success",
                points=rate * max_pts,
                max_points=max_pts,
                reason_code="DELIVERY_HISTORY",
                details=f"{successful_deliveries}/{total_listings} deliveries ({rate:.0%})",
            )

        rate = config["neutral_rate"]
        return ScoringFactor(
            name="Delivery Success",
            points=rate * max_pts,
            max_points=max_pts,
            reason_code="DELIVERY_NO_HISTORY",
            details=f"No listings yet, assuming {rate:.0%} success rate",
        )

    def _score_account_age(self, created_at: datetime, now: datetime) -> ScoringFactor:
        """Score account age in whole 30-day months, capped at full credit."""
        config = self.config["account_age"]
        max_pts = config["max_points"]
        full_months = config["full_credit_months"]

        elapsed = now - as_utc(created_at)
        months = math.floor(elapsed.total_seconds() / (86400 * config["days_per_month"]))
        months = max(months, 0)  # created_at in the future counts as brand new

        fraction = min(months / full_months, 1.0)
        return ScoringFactor(
            name="Account Age",
            points=fraction * max_pts,
            max_points=max_pts,
            reason_code="ACCOUNT_AGE_ESTABLISHED" if months >= full_months else "ACCOUNT_AGE_NEW",
            details=f"Account age: {months} month(s)",
        )

    def _score_verification(self, status: VerificationStatus | str) -> ScoringFactor:
        """Score the admin verification status."""
        config = self.config["verification"]
        max_pts = config["max_points"]

        key = status.value if isinstance(status, VerificationStatus) else str(status)
        return ScoringFactor(
            name="Verification",
            points=config["points"].get(key, 0),
            max_points=max_pts,
            reason_code=f"VERIFICATION_{key.upper()}",
            details=f"Verification status: {key}",
        )

    def get_band(self, rating: float) -> str:
        """Get safety band name from a rating."""
        for band in self.config["safety_bands"]:
            if rating >= band["min_rating"]:
                return band["name"]
        return "Low"


def calculate_safety_rating(supplier: Supplier, now: datetime | None = None) -> float:
    """Calculate a supplier's safety rating using the default scorer."""
    scorer = SafetyScorer()
    return scorer.calculate_safety_rating(supplier, now)


def average_safety_rating(suppliers: Iterable[Supplier]) -> float:
    """Mean of stored supplier ratings to one decimal, 0.0 when there are none."""
    ratings = [s.safety_rating for s in suppliers]
    if not ratings:
        return 0.0
    return round_half_up(sum(ratings) / len(ratings), 1)
