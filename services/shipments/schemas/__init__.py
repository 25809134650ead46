"""
Pydantic schemas for the shipments service
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from services.shipments.utils.tracking_utils import find_missing_fields


class TrackingRecord(BaseModel):
    """A single shipment status event as stored and returned by the service."""

    model_config = ConfigDict(frozen=True)

    tracking_id: str
    carrier_id: str
    location: str
    shipment_id: str
    status: str
    timestamp: str


class TrackingCreate(BaseModel):
    """
    Request body for creating a tracking record.

    Every field is optional at parse time so that the handler can report
    all missing fields in a single error instead of failing on the first.
    """

    model_config = ConfigDict(extra="ignore")

    carrier_id: Optional[str] = None
    location: Optional[str] = None
    shipment_id: Optional[str] = None
    status: Optional[str] = None
    timestamp: Optional[str] = None

    def missing_fields(self) -> List[str]:
        return find_missing_fields(self.model_dump())

    def to_record(self, tracking_id: str) -> TrackingRecord:
        return TrackingRecord(
            tracking_id=tracking_id,
            carrier_id=self.carrier_id,
            location=self.location,
            shipment_id=self.shipment_id,
            status=self.status,
            timestamp=self.timestamp,
        )


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
