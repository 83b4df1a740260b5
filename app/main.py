"""FastAPI main application module."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware

from app.config.database import dispose_engine, get_async_session_local, init_models
from app.config.settings import settings
from app.middleware.exception_handler import register_exception_handlers
from app.middleware.logging_middleware import PerformanceMiddleware, RequestLoggingMiddleware
from app.routers import account, admin
from app.services.feature_flag_service import FeatureFlagService

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.SITE_TITLE,
    version=settings.SITE_VERSION,
    description=settings.SITE_DESCRIPTION,
    debug=settings.DEBUG,
)

# Register exception handlers
register_exception_handlers(app)

# Security middleware
if settings.ENVIRONMENT == "production":
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=["*"],  # Configure with actual domains in production
    )

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=settings.ALLOWED_METHODS,
    allow_headers=settings.ALLOWED_HEADERS,
)

# Request/Response logging middleware
app.add_middleware(
    RequestLoggingMiddleware,
    log_headers=settings.ENVIRONMENT == "development",
)

# Performance monitoring middleware
app.add_middleware(
    PerformanceMiddleware,
    slow_request_threshold=settings.SLOW_REQUEST_THRESHOLD_SECONDS,
)


# Event handlers
@app.on_event("startup")
async def startup_event():
    """Create tables and any missing feature flags (switched off)."""
    await init_models()

    session_local = get_async_session_local()
    async with session_local() as session:
        await FeatureFlagService(session).seed(enabled=False)

    logger.info(f"{settings.SITE_TITLE} started", extra={"environment": settings.ENVIRONMENT})


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    await dispose_engine()


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.SITE_VERSION,
        "environment": settings.ENVIRONMENT,
    }


# Include routers
app.include_router(account.router, tags=["Account"])

app.include_router(
    admin.router,
    prefix=settings.ADMIN_PREFIX,
    tags=["Admin"],
)


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint."""
    return {
        "message": settings.SITE_TITLE,
        "version": settings.SITE_VERSION,
        "docs_url": "/docs",
    }
