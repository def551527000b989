from __future__ import annotations

from fastapi import APIRouter

from .endpoints import auth, health, quotes

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(quotes.router, prefix="/quotes", tags=["quotes"])
