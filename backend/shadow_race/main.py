"""Shadow Race - FastAPI Application Entry Point."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError

from shadow_race.config import get_settings
from shadow_race.database import engine, Base
from shadow_race.errors import AuthenticationError, PersistenceError
from shadow_race.logging_config import setup_logging
from shadow_race.routers import (
    auth_router,
    cron_router,
    events_router,
    history_router,
    notifications_router,
    pace_router,
    progress_router,
    setup_router,
    taunts_router,
    weekly_router,
)
import shadow_race.models  # noqa: F401  registers tables on Base


settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    setup_logging()
    Base.metadata.create_all(bind=engine)
    logger.info("%s started", settings.app_name)
    yield


app = FastAPI(
    title="Shadow Race API",
    description="Pace engine for racing your own shadow through daily tasks",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        settings.frontend_url,
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============== Error handlers ==============

@app.exception_handler(AuthenticationError)
async def authentication_error_handler(request: Request, exc: AuthenticationError):
    return JSONResponse(status_code=401, content={"error": "Unauthorized"})


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.error("Persistence error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": "Server error"})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    # get_db closes the session, which rolls back the open transaction
    logger.error("Database error on %s", request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Server error"})


# Include routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(progress_router, prefix="/api/v1")
app.include_router(setup_router, prefix="/api/v1")
app.include_router(pace_router, prefix="/api/v1")
app.include_router(events_router, prefix="/api/v1")
app.include_router(taunts_router, prefix="/api/v1")
app.include_router(weekly_router, prefix="/api/v1")
app.include_router(history_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")
app.include_router(cron_router, prefix="/api/v1")


@app.get("/")
def root():
    """Root endpoint with API info."""
    return {
        "name": settings.app_name,
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}
