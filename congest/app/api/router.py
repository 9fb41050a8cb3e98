"""
Top‑level router.

The webhook routes are served from the root path (``/register``,
``/status``, ...) so existing clients keep working.
"""

from fastapi import APIRouter

from .endpoints import health, services

router = APIRouter()

router.include_router(health.router, tags=["health"])
router.include_router(services.router, tags=["services"])
