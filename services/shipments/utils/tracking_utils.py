"""
Utilities for tracking identifiers and required-field checks
"""

import uuid
from typing import Any, List, Mapping, Tuple

# Order in which missing fields are reported to callers
REQUIRED_TRACKING_FIELDS: Tuple[str, ...] = (
    "carrier_id",
    "location",
    "shipment_id",
    "status",
    "timestamp",
)


def new_tracking_id() -> str:
    """
    Generate a tracking identifier.

    Random UUID4 values make same-key collisions practically impossible,
    so the store never needs to check for an existing key before insert.
    """
    return str(uuid.uuid4())


def find_missing_fields(
    payload: Mapping[str, Any], required: Tuple[str, ...] = REQUIRED_TRACKING_FIELDS
) -> List[str]:
    """
    Return the required fields that are absent, null or empty in ``payload``.

    Only presence is checked, so whitespace-only strings are kept as given.

    Args:
        payload: Mapping of field name to submitted value
        required: Field names to check, in reporting order

    Returns:
        Missing field names in the order of ``required``
    """
    missing = []
    for field_name in required:
        value = payload.get(field_name)
        if value is None or value == "":
            missing.append(field_name)
    return missing
