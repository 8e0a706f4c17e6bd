"""
Booth Request API - Main Application Entry Point

Applicants request booths offered within events; event creators accept or
decline them. Accepting a request declines every other request for the same
booth in the same transaction.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from booth_api.core.config import get_settings
from booth_api.core.exceptions import (
    ForbiddenError,
    NotFoundError,
    PersistenceError,
    forbidden_handler,
    not_found_handler,
    persistence_error_handler,
)
from booth_api.core.logging import setup_logging, get_logger
from booth_api.core.metrics import metrics_endpoint
from booth_api.api.router import api_router
from booth_api.api.middleware import RequestLoggingMiddleware
from booth_api.db.session import engine

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    yield

    await engine.dispose()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Booth application requests for event creators and applicants",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(NotFoundError, not_found_handler)
app.add_exception_handler(PersistenceError, persistence_error_handler)
app.add_exception_handler(ForbiddenError, forbidden_handler)

app.include_router(api_router)


@app.get("/health", tags=["Health"])
async def health_check():
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
    }


@app.get("/metrics", tags=["Health"], include_in_schema=False)
async def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
