"""Supplier safety rating and analysis."""

from foodloop.rating.analysis import SupplierAnalysis, analyze_supplier, safety_badge
from foodloop.rating.safety import (
    SafetyRating,
    SafetyScorer,
    average_safety_rating,
    calculate_safety_rating,
)

__all__ = [
    "SafetyScorer",
    "SafetyRating",
    "calculate_safety_rating",
    "average_safety_rating",
    "analyze_supplier",
    "SupplierAnalysis",
    "safety_badge",
]
