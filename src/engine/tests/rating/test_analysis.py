"""Tests for the supplier analysis report."""

import json
from datetime import timedelta

import pytest

from foodloop.models import VerificationStatus
from foodloop.rating.analysis import analyze_supplier, safety_badge


class TestSafetyBadge:

    @pytest.mark.parametrize(
        "rating, expected",
        [
            (5.0, "Highly Recommended"),
            (4.0, "Highly Recommended"),
            (3.9, "Proceed with Caution"),
            (3.0, "Proceed with Caution"),
            (2.9, "Extra Verification Required"),
            (0.0, "Extra Verification Required"),
        ],
    )
    def test_badge_thresholds(self, rating, expected):
        assert safety_badge(rating) == expected


class TestAnalyzeSupplier:

    def test_established_supplier_has_no_risks(self, established_supplier, now):
        analysis = analyze_supplier(established_supplier, now=now)

        assert analysis.safety_rating == 5.0
        assert analysis.badge == "Highly Recommended"
        assert analysis.risk_factors == []
        assert analysis.recommendations == ["Supplier meets all safety criteria"]
        assert analysis.verification.license_valid is True
        assert analysis.verification.verification_status == "verified"
        assert analysis.performance.success_rate == 1.0
        assert analysis.reputation.account_age_days == 400

    def test_new_supplier_risks(self, new_supplier, now):
        analysis = analyze_supplier(new_supplier, now=now)

        assert analysis.safety_rating == 1.5
        assert analysis.badge == "Extra Verification Required"
        assert analysis.risk_factors == [
            "No food safety license on file",
            "No external reputation data",
            "No delivery history yet",
            "Recently registered account",
            "Verification pending",
        ]
        assert analysis.performance.success_rate == 0.0
        assert analysis.reputation.account_age_days == 0

    def test_expired_license(self, established_supplier, now):
        established_supplier.license_expiry_date = now - timedelta(days=10)

        analysis = analyze_supplier(established_supplier, now=now)

        assert analysis.verification.license_valid is False
        assert "Food safety license expired" in analysis.risk_factors
        # 10 + 25 + 20 + 15 + 10 = 80 -> 4.0
        assert analysis.safety_rating == 4.0

    def test_low_external_rating(self, established_supplier, now):
        established_supplier.google_rating = 3.0
        analysis = analyze_supplier(established_supplier, now=now)
        assert "Low external rating (3.0)" in analysis.risk_factors

    def test_low_delivery_success(self, established_supplier, now):
        established_supplier.successful_deliveries = 5
        analysis = analyze_supplier(established_supplier, now=now)
        assert analysis.performance.success_rate == 0.5
        assert "Low delivery success rate (50%)" in analysis.risk_factors

    def test_rejected_supplier(self, established_supplier, now):
        established_supplier.verification_status = VerificationStatus.REJECTED
        analysis = analyze_supplier(established_supplier, now=now)
        assert "Verification rejected" in analysis.risk_factors
        assert "Avoid claiming listings from this supplier" in analysis.recommendations

    def test_to_dict_is_json_serializable(self, established_supplier, now):
        data = analyze_supplier(established_supplier, now=now).to_dict()

        encoded = json.loads(json.dumps(data))
        assert encoded["supplier_id"] == "sup-best"
        assert encoded["verification"]["license_expiry_date"].startswith("2025-06-01")
        assert encoded["performance"]["total_listings"] == 10

    def test_reputation_carries_place_id(self, established_supplier, now):
        established_supplier.google_place_id = "ChIJd8BlQ2BZwokRAFUEcm_qrcQ"

        data = analyze_supplier(established_supplier, now=now).to_dict()

        assert data["reputation"] == {
            "google_rating": 5.0,
            "google_place_id": "ChIJd8BlQ2BZwokRAFUEcm_qrcQ",
            "account_age_days": 400,
        }

    def test_place_id_defaults_to_none(self, new_supplier, now):
        analysis = analyze_supplier(new_supplier, now=now)
        assert analysis.reputation.google_place_id is None
