"""API routers."""

from fastapi import Request

from ...db import WorkoutStore


def get_store(request: Request) -> WorkoutStore:
    """Get the store from app state."""
    return request.app.state.store
