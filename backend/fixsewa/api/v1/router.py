"""Main router for API v1."""

from fastapi import APIRouter

from fixsewa.api.v1 import auth, catalog, notifications
from fixsewa.api.v1.customer.router import router as customer_router
from fixsewa.api.v1.worker.router import router as worker_router

api_router = APIRouter()

# =============================================================================
# Authentication (shared)
# =============================================================================
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Authentication"]
)

# =============================================================================
# Public catalog
# =============================================================================
api_router.include_router(
    catalog.router,
    tags=["Catalog"]
)

# =============================================================================
# Role-Based Routes
# =============================================================================

# Customer dashboard
api_router.include_router(
    customer_router,
    prefix="/customer",
    tags=["Customer"]
)

# Worker dashboard
api_router.include_router(
    worker_router,
    prefix="/worker",
    tags=["Worker"]
)

api_router.include_router(
    notifications.router,
    prefix="/notifications",
    tags=["Notifications"]
)
