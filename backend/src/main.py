# pyright: reportMissingTypeStubs=false
"""
Well Guide Backend API

A FastAPI application that tracks patients' recurring-care appointments
("well guides") and keeps their status and reminder schedule up to date.

Features:
- Well guide catalog and per-patient records
- Status computation with one-shot reminder bookkeeping
- Daily status refresh via APScheduler
- PostgreSQL database with SQLAlchemy ORM
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import well_guide
from core.config import WELL_GUIDE_REFRESH_ENABLED
from core.constants import CORS_ORIGINS
from services.well_guide_status_refresher import (
    start_well_guide_status_refresher,
    stop_well_guide_status_refresher,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    logger.info("Starting Well Guide Backend API")

    if WELL_GUIDE_REFRESH_ENABLED:
        try:
            await start_well_guide_status_refresher()
        except Exception as e:
            logger.exception(f"Failed to start well guide status refresher: {e}")
    else:
        logger.info("Well guide status refresher disabled by configuration")

    yield

    try:
        await stop_well_guide_status_refresher()
    except Exception as e:
        logger.exception(f"Error stopping well guide status refresher: {e}")

    logger.info("Shutting down Well Guide Backend API")


app = FastAPI(
    title="Well Guide Backend",
    description="Recurring-care reminder tracking for patients",
    version="1.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "PUT", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(
    well_guide.router,
    prefix="/api",
    tags=["well-guide"],
    responses={
        400: {"description": "Bad request"},
        404: {"description": "Resource not found"},
        500: {"description": "Internal server error"},
    },
)


@app.get(
    "/",
    summary="Root endpoint",
    description="Returns basic API information",
)
async def root() -> dict[str, str]:
    """Get API information."""
    return {
        "message": "Well Guide Backend API",
        "version": "1.1.0",
        "status": "running"
    }


@app.get(
    "/health",
    summary="Health check",
    description="Returns the health status of the API",
)
async def health_check() -> dict[str, str]:
    """Check if the API is healthy and responding."""
    return {"status": "healthy"}


# Global exception handlers
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions globally."""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "type": "internal_error"},
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Handle ValueError exceptions."""
    logger.warning(f"ValueError: {exc}")
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc), "type": "validation_error"},
    )
