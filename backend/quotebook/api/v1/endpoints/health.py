from __future__ import annotations

import asyncio

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from quotebook import __version__
from quotebook.config import settings
from quotebook.db.base import create_request_supabase_client

router = APIRouter()


@router.get("/")
async def health_check():
    """Health check endpoint."""
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "status": "healthy",
            "service": "quotebook-api",
            "version": __version__,
        }
    )


@router.get("/ready")
async def readiness_check():
    """Readiness check endpoint."""
    db_status = "not configured"
    client = create_request_supabase_client()
    if client is not None:
        try:
            await asyncio.to_thread(
                lambda: client.table(settings.quotes_table).select("id").limit(1).execute()
            )
            db_status = "connected"
        except Exception as e:
            db_status = f"error: {str(e)}"

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "status": "ready",
            "database": db_status,
            "local_storage_dir": settings.local_storage_dir,
            "api_prefix": settings.api_prefix
        }
    )
