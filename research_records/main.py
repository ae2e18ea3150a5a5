"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError
from starlette.middleware.sessions import SessionMiddleware

from research_records.api.v1.router import router as v1_router
from research_records.core.config import get_settings
from research_records.core.database import close_db, init_db
from research_records.core.middleware import SecurityHeadersMiddleware
from research_records.core.observability import (
    RequestIDMiddleware,
    RequestLoggingMiddleware,
    setup_observability,
)
from research_records.core.rate_limit import limiter

settings = get_settings()

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info(
        "Starting Research Records API",
        version=settings.app_version,
        environment=settings.environment,
        stats_timezone=settings.stats_timezone,
    )
    if settings.create_tables_on_startup:
        await init_db()
        logger.info("Database tables created")
    yield
    logger.info("Shutting down Research Records API")
    await close_db()
    logger.info("Database connections closed")


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """A unique or foreign key constraint lost a race with another request."""
    logger.warning("Integrity error", error=str(exc.orig))
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": "The request conflicts with existing data"},
    )


def install_middleware(app: FastAPI) -> None:
    """Add the middleware stack; the last one added runs first on a request."""
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(SecurityHeadersMiddleware, enable_hsts=settings.cookie_secure)
    # Holds OAuth state between the redirect and the callback
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.secret_key,
        session_cookie="rr_oauth_session",
        max_age=600,
        same_site="lax",
        https_only=settings.cookie_secure,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-Request-ID"],
    )


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Faculty research records: book chapters, copyrights and journals",
    lifespan=lifespan,
)

setup_observability(app)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(IntegrityError, integrity_error_handler)

install_middleware(app)

app.include_router(v1_router)


@app.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    return {"message": "Research Records API", "version": settings.app_version}
