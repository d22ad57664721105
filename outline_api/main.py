"""Passage Outline FastAPI Application."""
from datetime import datetime
import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from outline_api.config import get_settings
from outline_api.database import initialize_connection_pool, close_connection_pool
from outline_api.models.schemas import HealthCheck
from outline_api.routers import passages, studies
from outline_api.services.bible_metadata import get_bible_metadata
from outline_api.utils.exceptions import DatabaseError, InvalidInsertionPointError

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Get settings
settings = get_settings()

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Structural outlines for Bible passages",
    version="1.0.0"
)


@app.on_event("startup")
async def startup_event():
    """Initialize resources on application startup."""
    logger.info("Initializing application resources...")
    try:
        initialize_connection_pool(minconn=settings.db_pool_min, maxconn=settings.db_pool_max)
        get_bible_metadata()
        logger.info("Application startup complete")
    except Exception as e:
        logger.error(f"Failed to initialize application: {e}")
        raise


@app.on_event("shutdown")
async def shutdown_event():
    """Clean up resources on application shutdown."""
    logger.info("Shutting down application...")
    try:
        close_connection_pool()
        logger.info("Application shutdown complete")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}")


# Include routers
app.include_router(passages.router)
app.include_router(studies.router)


@app.get("/", response_model=HealthCheck)
async def health_check():
    """Health check endpoint."""
    return HealthCheck(
        status="healthy",
        timestamp=datetime.utcnow()
    )


# Error handlers
@app.exception_handler(DatabaseError)
async def database_error_handler(request, exc):
    logger.error(f"Database error: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail}
    )


@app.exception_handler(InvalidInsertionPointError)
async def invalid_insertion_point_handler(request, exc):
    logger.error(f"Invalid insertion point on {request.url.path}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail}
    )
