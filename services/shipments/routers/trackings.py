"""
Tracking record endpoints for the shipments service
"""

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, status

from services.common.http_errors import InternalError, ValidationError
from services.common.logging_config import get_logger
from services.shipments.dependencies import get_tracking_store
from services.shipments.schemas import TrackingCreate, TrackingRecord
from services.shipments.store import TrackingStore
from services.shipments.utils.tracking_utils import new_tracking_id

logger = get_logger(__name__)

router = APIRouter()


@router.post("", response_model=TrackingRecord, status_code=status.HTTP_201_CREATED)
async def create_tracking(
    payload: Optional[TrackingCreate] = Body(default=None),
    store: TrackingStore = Depends(get_tracking_store),
) -> TrackingRecord:
    """
    Record a new tracking event.

    Fails with 400 naming every missing field before anything is stored.
    """
    payload = payload or TrackingCreate()
    missing = payload.missing_fields()
    if missing:
        raise ValidationError(f"Missing fields: {', '.join(missing)}", fields=missing)

    record = payload.to_record(new_tracking_id())
    store.put(record)

    logger.info(
        "Tracking record created",
        tracking_id=record.tracking_id,
        shipment_id=record.shipment_id,
        status=record.status,
    )
    return record


@router.get("", include_in_schema=False)
@router.get("/", include_in_schema=False)
async def list_trackings_without_shipment() -> None:
    raise ValidationError("Shipment ID is required", field="shipment_id")


@router.get("/{shipment_id}", response_model=List[TrackingRecord])
async def list_trackings_by_shipment(
    shipment_id: str,
    store: TrackingStore = Depends(get_tracking_store),
) -> List[TrackingRecord]:
    """Return every live tracking record for a shipment, possibly none."""
    if not shipment_id:
        raise ValidationError("Shipment ID is required", field="shipment_id")

    try:
        return store.find_by_shipment(shipment_id)
    except Exception as e:
        logger.error(
            "Error getting trackings for shipment",
            shipment_id=shipment_id,
            error=str(e),
            exc_info=True,
        )
        raise InternalError() from e
