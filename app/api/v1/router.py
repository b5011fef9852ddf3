"""API V1 Router"""

from fastapi import APIRouter

# Import endpoint routers
from app.api.v1.endpoints import invoices, rates, customers

# Create API v1 router
api_router = APIRouter()

# Include endpoint routers with prefixes and tags
api_router.include_router(invoices.router, prefix="/invoices", tags=["Invoices"])
api_router.include_router(rates.router, prefix="/rates", tags=["Rates"])
api_router.include_router(customers.router, prefix="/customers", tags=["Customers"])
