"""Main FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse

from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware
from api.routes.health import router as health_router
from api.v1 import router as v1_router
from api.v1.dependencies import get_session_registry
from core.config import settings
from core.logging import setup_logging
from infrastructure.database.session import engine

logger = structlog.get_logger()

# Initialize structured logging
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: drop in-memory sessions and the pool on shutdown."""
    logger.info("startup", environment=settings.app_env)
    yield
    get_session_registry().clear()
    await engine.dispose()
    logger.info("shutdown")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        title=settings.app_name,
        description=(
            "## Feelability\n\n"
            "Keep profiles of the people in your life, punch, hug or kiss them, "
            "and leave emotion-tagged notes.\n\n"
            "### Features\n"
            "- **Profiles**: owned, shared through links, public or private\n"
            "- **Notes**: anger, feelings or appreciation, newest first\n"
            "- **Interactions**: animated punch / hug / kiss counters\n"
            "- **Guest mode**: try everything without an account, nothing stored\n\n"
            "### Authentication\n"
            "Send a Supabase access token:\n"
            "```\nAuthorization: Bearer <your_token>\n```\n"
            "or, for a guest session started with `POST /api/v1/guest-sessions`:\n"
            "```\nX-Guest-Session: <session_id>\n```"
        ),
        version="1.0.0",
        debug=settings.debug,
        contact={
            "name": "Feelability Support",
        },
        license_info={
            "name": "MIT",
        },
        openapi_tags=[
            {"name": "health", "description": "Health check endpoints"},
            {"name": "guest", "description": "Guest session lifecycle"},
            {"name": "view", "description": "Profile list and active profile"},
            {"name": "profiles", "description": "Profile management"},
            {"name": "notes", "description": "Notes of the active profile"},
            {"name": "interactions", "description": "Punch, hug and kiss"},
            {"name": "sharing", "description": "Share links and collaborators"},
        ],
    )

    # Security & tracking middleware (LIFO order - last added = outermost)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # GZip compression for responses > 1KB (profile images are large)
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    setup_exception_handlers(app)

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
