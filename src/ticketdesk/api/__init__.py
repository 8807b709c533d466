"""
TicketDesk API Routes

Aggregates the ticket and label routers under the API prefix.
The auth router is mounted at the root by main.py.
"""

from fastapi import APIRouter

from .auth import router as auth_router
from .labels import router as labels_router
from .tickets import router as tickets_router


def build_api_router(prefix: str = "/api") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(tickets_router)
    router.include_router(labels_router)
    return router


__all__ = ["auth_router", "build_api_router"]
