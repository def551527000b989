from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from . import __version__
from .api.middleware.security import SecurityMiddleware
from .api.v1.router import api_router
from .config import settings
from .utils.logging import setup_logging


def create_app() -> FastAPI:
    setup_logging()

    app = FastAPI(
        title="Quotebook API",
        debug=settings.debug,
        version=__version__,
        root_path=settings.root_path or "",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_origin_regex=settings.cors_origin_regex,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=[
            "Accept",
            "Accept-Language",
            "Content-Language",
            "Content-Type",
            "Authorization",
            "X-Requested-With",
            settings.device_id_header,
        ],
        max_age=600,  # Cache preflight requests for 10 minutes
    )

    # Proxy headers (X-Forwarded-*) when behind a load balancer
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])

    app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)

    app.add_middleware(GZipMiddleware, minimum_size=1000)

    app.add_middleware(SecurityMiddleware, auth_path_prefix=f"{settings.api_prefix}/auth")

    app.include_router(api_router, prefix=settings.api_prefix)
    return app


app = create_app()
