"""Main application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from sqlalchemy import select

from .api.pages import router as pages_router
from .api.v1.api import api_v1_router
from .api.v1.middleware import base_error_handler, exception_handler, validation_exception_handler
from .core import BaseError, get_settings
from .deps import SessionDep
from .infrastructure.database import engine
from .models import Base

# Rate limiting
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

logger = logging.getLogger(__name__)

settings = get_settings()
limiter = Limiter(key_func=get_remote_address, default_limits=[settings.RATE_LIMIT_DEFAULT])


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    if not settings.API_BASE_URL:
        logger.warning("API_BASE_URL is not set; payment pages cannot verify transactions")
    yield
    await engine.dispose()


# Create FastAPI app
app = FastAPI(
    title="Wanderly API",
    description="Travel agency catalog, booking and payment API",
    version="1.0.0",
    lifespan=lifespan
)

# Attach rate-limiter
app.state.limiter = limiter

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"]
)


# Rate limiting
@app.exception_handler(RateLimitExceeded)
async def ratelimit_handler(request: Request, exc: RateLimitExceeded):
    return PlainTextResponse("Too many requests", status_code=429)

app.add_middleware(SlowAPIMiddleware)

# Exception handling
app.add_exception_handler(BaseError, base_error_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, exception_handler)

# Include v1 API with all endpoints
app.include_router(api_v1_router, prefix="/api/v1")

# Payment redirect pages
app.include_router(pages_router)


# Health check
@app.get("/healthz")
async def healthz(sess: SessionDep):
    """Health check endpoint."""
    status = {"db": "ok"}
    try:
        await sess.scalar(select(1))
    except Exception:
        logger.exception("Health check database query failed")
        status["db"] = "error"
    return status


# Root endpoint
@app.get("/")
async def root():
    """API root."""
    return {
        "message": "Welcome to Wanderly API v1.0",
        "docs": "/docs",
        "health": "/healthz"
    }
