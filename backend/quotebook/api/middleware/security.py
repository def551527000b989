from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware

from quotebook.utils.logging import get_logger

if TYPE_CHECKING:
    from fastapi import Request
    from starlette.types import ASGIApp

logger = get_logger(__name__)


class SecurityMiddleware(BaseHTTPMiddleware):
    """Add security headers and log access to the auth endpoints."""

    def __init__(self, app: ASGIApp, auth_path_prefix: str = "/api/v1/auth"):
        super().__init__(app)
        self.auth_path_prefix = auth_path_prefix

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "connect-src 'self' https://*.supabase.co; "
            "frame-ancestors 'none';"
        )

        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = "max-age=15552000; includeSubDomains"

        # Quote stores are per user and per device
        response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"

        if request.url.path.startswith(self.auth_path_prefix):
            client_ip = request.client.host if request.client else "unknown"
            logger.info(
                "Auth endpoint accessed",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "ip": client_ip,
                },
            )

        return response
