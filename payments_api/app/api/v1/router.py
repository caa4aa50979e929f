"""
Top-level router for version 1 of the API.

Aggregates the domain routers.  The account router defines its own
``/accounts`` and ``/login`` paths, so it is included without a prefix.
"""

from fastapi import APIRouter

from .endpoints import accounts, health, payments

router = APIRouter()

router.include_router(accounts.router, tags=["accounts"])
router.include_router(payments.router, prefix="/payments", tags=["payments"])
router.include_router(health.router, tags=["health"])
