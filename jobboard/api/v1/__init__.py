"""API v1 routes."""

from fastapi import APIRouter

from jobboard.api.v1 import auth, companies, orders, payment, vip_packages

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(companies.router, prefix="/company", tags=["Companies"])
api_router.include_router(vip_packages.router, prefix="/company", tags=["VIP Packages"])
api_router.include_router(orders.router, prefix="/company", tags=["Orders"])
api_router.include_router(payment.router, prefix="/payment", tags=["Payment"])

# Admin
api_router.include_router(companies.admin_router, prefix="/admin", tags=["Admin - Companies"])
api_router.include_router(vip_packages.admin_router, prefix="/admin", tags=["Admin - VIP Packages"])
