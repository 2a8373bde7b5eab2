"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from alumni_connect.api.routes.auth_routes import router as auth_router
from alumni_connect.api.routes.message_routes import router as message_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(message_router)
