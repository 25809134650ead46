"""
FastAPI dependencies for the shipments service
"""

from fastapi import Request

from services.shipments.store import TrackingStore


def get_tracking_store(request: Request) -> TrackingStore:
    """Return the store created for this application in ``create_app``."""
    return request.app.state.tracking_store
