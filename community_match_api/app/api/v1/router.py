"""
Top‑level router for version 1 of the API.

Registration, login, search and password reset sit at the root of the
version prefix (``/api/v1/register``, ``/api/v1/search``...); profile,
services and messages get their own prefixes.
"""

from fastapi import APIRouter

from .endpoints import auth, health, messages, password_reset, profile, search, services

router = APIRouter()

router.include_router(health.router, tags=["health"])
router.include_router(auth.router, tags=["auth"])
router.include_router(services.router, prefix="/services", tags=["services"])
router.include_router(profile.router, prefix="/profile", tags=["profile"])
router.include_router(search.router, tags=["search"])
router.include_router(messages.router, prefix="/messages", tags=["messages"])
router.include_router(password_reset.router, prefix="/password-reset", tags=["password-reset"])
