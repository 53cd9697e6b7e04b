"""Main FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware
from api.routes.health import router as health_router
from api.v1 import router as v1_router
from core.config import settings
from core.logging import setup_logging
from core.rate_limit import limiter, rate_limit_exceeded_handler
from infrastructure.database.session import engine

logger = structlog.get_logger()

# Initialize structured logging
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager for startup/shutdown tasks."""
    logger.info("app_started", environment=settings.app_env, version=settings.app_version)
    yield
    await engine.dispose()
    logger.info("app_stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        title=settings.app_name,
        description=(
            "## Link-in-bio Profile Builder\n\n"
            "Biolink serves one public page per claimed handle: links, a small "
            "shop, social links and tagged outfit photos, with per-item click "
            "counters.\n\n"
            "### Features\n"
            "- **Handles**: claim a unique, permanent page address\n"
            "- **Profiles**: owners save the whole page in one request\n"
            "- **Analytics**: anonymous click counting on links and store items\n"
            "- **Import**: seed a page from an existing Linktree\n\n"
            "### Authentication\n"
            "Public pages, handle checks and click events are anonymous. "
            "Everything else requires a session token from `/api/v1/auth/*`:\n"
            "```\nAuthorization: Bearer <your_token>\n```\n\n"
            "### Rate Limits\n"
            f"- Reads: {settings.rate_limit_read}\n"
            f"- Writes: {settings.rate_limit_write}\n"
            f"- Click events: {settings.rate_limit_click}"
        ),
        version=settings.app_version,
        debug=settings.debug,
        contact={
            "name": "Biolink Support",
        },
        license_info={
            "name": "MIT",
        },
        openapi_tags=[
            {
                "name": "health",
                "description": "Health check endpoints",
            },
            {
                "name": "auth",
                "description": "Sign-in and session operations",
            },
            {
                "name": "handles",
                "description": "Handle availability and claiming",
            },
            {
                "name": "profiles",
                "description": "Public pages and owner saves",
            },
            {
                "name": "analytics",
                "description": "Click counting",
            },
            {
                "name": "imports",
                "description": "Import enrichment from other link-in-bio pages",
            },
        ],
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # Security & tracking middleware (LIFO order - last added = outermost)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # GZip compression for responses > 1KB
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Setup exception handlers
    setup_exception_handlers(app)

    # Include routers
    app.include_router(health_router)
    app.include_router(v1_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )
