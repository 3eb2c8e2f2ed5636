"""
TIMEBOX API - Main Application

Task board service: owner-scoped task CRUD with today / overdue / upcoming
classification.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from timebox.config import settings
from timebox.database import Database
from timebox.auth import auth_router
from timebox.tasks import tasks_router
from timebox.tasks.repository import TaskRepository
from timebox.security import validate_display_timezone, validate_security_config

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup: Validate configuration
    validate_security_config()
    validate_display_timezone()

    # Startup: Connect to MongoDB
    database = Database()
    await database.connect()
    app.state.database = database
    await TaskRepository(database.get_database()).ensure_indexes()
    logger.info("Connected to MongoDB database %s", database.name)

    yield

    # Shutdown: Disconnect from MongoDB
    await database.disconnect()
    app.state.database = None


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Time-boxed personal tasks grouped into today, overdue and upcoming",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

# CORS configuration - allow client origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)


@app.get("/health", tags=["Health"])
async def health_check() -> dict:
    """
    Health check endpoint.

    Returns the service status and version information.
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


@app.get("/", tags=["Root"])
async def root() -> dict:
    """Root endpoint with service information."""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs" if settings.DEBUG else "disabled",
    }


app.include_router(auth_router)
app.include_router(tasks_router)
