"""
API router setup
Organized into: public (no auth) and admin (session cookie) routes
"""
from fastapi import APIRouter

from app.api.v1.public import auth, bookings, staff
from app.api.v1.admin import bookings as admin_bookings, staff as admin_staff

api_router = APIRouter()

# ============================================================================
# PUBLIC ROUTES (No authentication required)
# ============================================================================
api_router.include_router(bookings.router)
api_router.include_router(staff.router)

# Login / logout / check under /admin, open to everyone
api_router.include_router(auth.router)

# ============================================================================
# ADMIN ROUTES (admin session cookie required)
# ============================================================================
api_router.include_router(admin_bookings.router)
api_router.include_router(admin_staff.router)
