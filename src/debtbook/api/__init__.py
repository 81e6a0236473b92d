"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Auth is applied at the include_router level using FastAPI's
dependencies parameter. This protects all routes in the records router
without relying on each handler to remember it. Handlers still declare
get_current_user to receive the user — FastAPI caches the dependency,
so the token is verified once per request. Health and auth routers are
open (no auth required); /auth/me guards itself.
"""

from fastapi import APIRouter, Depends

from debtbook.api.auth import router as auth_router
from debtbook.api.health import router as health_router
from debtbook.api.records import router as records_router
from debtbook.auth.dependencies import get_current_user

# All protected routers require authentication
_auth = [Depends(get_current_user)]

api_router = APIRouter(prefix="/api/v1")

# Open routes — no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes — require a valid bearer token
api_router.include_router(records_router, tags=["records"], dependencies=_auth)
