"""API V1 Router"""

from fastapi import APIRouter

# Import endpoint routers
from app.api.v1.endpoints import admissions, bills, payments, rooms

# Create API v1 router
api_router = APIRouter()

# Include endpoint routers with prefixes and tags
api_router.include_router(admissions.router, prefix="/admission", tags=["Admissions"])
api_router.include_router(bills.router, prefix="/bill", tags=["Billing"])
api_router.include_router(payments.router, prefix="/payments", tags=["Payments"])
api_router.include_router(rooms.router, prefix="/rooms", tags=["Rooms"])
