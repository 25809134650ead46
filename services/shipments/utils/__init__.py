"""
Utilities for the shipments service
"""

from services.shipments.utils.tracking_utils import (
    REQUIRED_TRACKING_FIELDS,
    find_missing_fields,
    new_tracking_id,
)

__all__ = [
    "REQUIRED_TRACKING_FIELDS",
    "find_missing_fields",
    "new_tracking_id",
]
