from . import (
    advertisement_service,
    catalog_aggregation,
    catalog_service,
    slot_manager,
    upcoming_service,
    view_service,
)

__all__ = [
    "advertisement_service",
    "catalog_aggregation",
    "catalog_service",
    "slot_manager",
    "upcoming_service",
    "view_service",
]
"""Service-layer helpers for API operations."""
