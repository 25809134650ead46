"""
API routers for the shipments service
"""

from fastapi import APIRouter

from services.shipments.routers import trackings

# Create the main API router
api_router = APIRouter()

# Tracking records live under /service/trackings
api_router.include_router(
    trackings.router, prefix="/service/trackings", tags=["Trackings"]
)
