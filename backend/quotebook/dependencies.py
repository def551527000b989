from __future__ import annotations

import asyncio

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from supabase import Client

from quotebook.config import settings
from quotebook.core.repositories.implementations.supabase.quote_repository import (
    SupabaseQuoteRepository,
)
from quotebook.core.repositories.local_quote_repository import LocalQuoteRepository
from quotebook.core.repositories.quote_repository import RemoteQuoteRepository
from quotebook.core.schemas.auth import AuthUser
from quotebook.core.services.auth_service import AuthService
from quotebook.core.services.storage_router import StorageRouter
from quotebook.db.base import create_request_supabase_client
from quotebook.db.device_storage import FileDeviceStorage, open_device_storage
from quotebook.utils.logging import get_logger

logger = get_logger(__name__)

# Use auto_error=False so anonymous requests reach the local storage path
http_bearer = HTTPBearer(auto_error=False)


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("authorization") or request.headers.get("Authorization")
    if auth_header and auth_header.lower().startswith("bearer "):
        return auth_header.split(" ", 1)[1].strip()
    return None


def get_request_supabase_client(request: Request) -> Client | None:
    """Create a request-scoped Supabase client, or None when not configured.

    Extracts the Authorization: Bearer <jwt> header if present and configures
    PostgREST to enforce RLS for the user.
    """
    return create_request_supabase_client(_bearer_token(request))


def get_device_storage(request: Request) -> FileDeviceStorage | None:
    """Resolve this client's device storage from the device id header."""
    device_id = request.headers.get(settings.device_id_header)
    return open_device_storage(settings.local_storage_dir, device_id)


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Security(http_bearer),
    client: Client | None = Depends(get_request_supabase_client),
) -> AuthUser | None:
    """Validate the bearer JWT via Supabase; anonymous callers get None."""
    if not credentials:
        return None
    if client is None:
        logger.warning("Bearer token ignored: Supabase not configured")
        return None
    jwt = credentials.credentials
    if not jwt or len(jwt.split(".")) != 3:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token format",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        resp = await asyncio.to_thread(lambda: client.auth.get_user(jwt))
    except Exception as err:
        logger.warning(
            "JWT validation failed",
            extra={"error_type": type(err).__name__, "jwt_length": len(jwt)},
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token is invalid or expired",
            headers={"WWW-Authenticate": "Bearer"},
        ) from err
    user = getattr(resp, "user", None)
    if not user or not getattr(user, "id", None):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user data",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return AuthUser(
        id=user.id,
        email=getattr(user, "email", None) or "",
        role=getattr(user, "role", None),
    )


async def get_current_user(user: AuthUser | None = Depends(get_optional_user)) -> AuthUser:
    """Require an authenticated user."""
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_local_repository(
    storage: FileDeviceStorage | None = Depends(get_device_storage),
) -> LocalQuoteRepository:
    """Get a request-scoped device quote repository."""
    return LocalQuoteRepository(storage)


def get_remote_repository(
    client: Client | None = Depends(get_request_supabase_client),
    user: AuthUser | None = Depends(get_optional_user),
) -> RemoteQuoteRepository:
    """Get a request-scoped cloud quote repository for the current user."""
    return SupabaseQuoteRepository(
        client,
        str(user.id) if user else None,
        table_name=settings.quotes_table,
    )


def get_storage_router(
    user: AuthUser | None = Depends(get_optional_user),
    local: LocalQuoteRepository = Depends(get_local_repository),
    remote: RemoteQuoteRepository = Depends(get_remote_repository),
) -> StorageRouter:
    """Get a request-scoped storage router bound to the caller's auth state."""
    return StorageRouter(current_user=user, local=local, remote=remote)


def get_auth_service(
    client: Client | None = Depends(get_request_supabase_client),
    local: LocalQuoteRepository = Depends(get_local_repository),
) -> AuthService:
    """Get a request-scoped auth service instance."""
    return AuthService(client, local)
