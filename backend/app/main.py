"""
OwnPath Activity Backend - FastAPI

Main application entry point and configuration.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from app.api.activities import router as activities_router
from app.api.schemas import HealthResponse
from app.services.repository import ActivityRepository, SQLiteActivityRepository


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


APP_NAME = "OwnPath"
APP_VERSION = "0.1.0"

# Database location (can be overridden via environment)
DEFAULT_DB_PATH = "./ownpath.db"
DB_PATH_ENV = "OWNPATH_DB_PATH"


def create_app(repository: Optional[ActivityRepository] = None) -> FastAPI:
    """
    Create the FastAPI app.

    Args:
        repository: Activity store to use. If None, a SQLite store is opened
            at startup from OWNPATH_DB_PATH.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        logger.info("Starting OwnPath backend")

        owned = None
        if getattr(app.state, "repository", None) is None:
            db_path = os.getenv(DB_PATH_ENV, DEFAULT_DB_PATH)
            owned = SQLiteActivityRepository(db_path)
            app.state.repository = owned

        yield

        logger.info("Shutting down OwnPath backend")
        if owned is not None:
            owned.close()
            app.state.repository = None

    app = FastAPI(
        title="OwnPath",
        description="""
        Self-hosted activity tracker backend.

        ## Features
        - Ingest FIT recordings from GPS sport devices
        - Reconstruct the GPS track as GPX for map rendering
        - Store activity stats (distance, elevation gain, sample count, sport)

        ## Data Flow
        1. Upload a .fit file via POST /api/upload (field `fit_file`)
        2. List activities via GET /api/activities
        3. Get an activity via GET /api/activities/{id}
        4. Download its track via GET /api/activities/{id}/gpx
        """,
        version=APP_VERSION,
        lifespan=lifespan,
    )
    app.state.repository = repository

    # CORS middleware (allow all origins for development)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, restrict this
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every request and turn unhandled errors into a plain 500."""
        logger.info(f"Received request: {request.method} {request.url.path}")
        try:
            return await call_next(request)
        except Exception:
            logger.exception(f"Unhandled error for {request.method} {request.url.path}")
            return PlainTextResponse("Internal Server Error", status_code=500)

    app.include_router(activities_router)

    @app.get("/")
    async def root():
        """Root endpoint - basic health check."""
        return {
            "name": APP_NAME,
            "version": APP_VERSION,
            "status": "running",
        }

    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request):
        """Health check endpoint."""
        repo = request.app.state.repository
        return HealthResponse(
            status="healthy",
            database=getattr(repo, "db_path", type(repo).__name__),
            activity_count=repo.count(),
        )

    return app


app = create_app()
