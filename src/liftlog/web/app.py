"""FastAPI application for the liftlog JSON API."""

import logging
import sqlite3
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .. import __version__
from ..db import NotFoundError, WorkoutStore, get_store
from .routers import exercises, templates, workouts

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store on startup and close it on shutdown."""
    async with app.state.store:
        yield


def create_app(store: WorkoutStore | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Uses the process-wide store unless one is passed in.
    """
    app = FastAPI(
        title="liftlog",
        description="Personal workout tracker API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.store = store or get_store()

    app.include_router(exercises.router)
    app.include_router(workouts.router)
    app.include_router(templates.router)

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(sqlite3.IntegrityError)
    async def integrity_error(request: Request, exc: sqlite3.IntegrityError):
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=409,
            content={"detail": "Referenced exercise, workout or template does not exist"},
        )

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app
