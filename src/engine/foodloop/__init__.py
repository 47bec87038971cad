"""FoodLoop supplier safety rating and proximity notification engine."""

__version__ = "0.1.0"
