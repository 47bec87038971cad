"""Record storage and demo fixtures."""

from foodloop.store.demo_data import build_demo_organizations, build_demo_suppliers, seed_demo_data
from foodloop.store.memory import InMemoryRepository

__all__ = [
    "InMemoryRepository",
    "build_demo_organizations",
    "build_demo_suppliers",
    "seed_demo_data",
]
