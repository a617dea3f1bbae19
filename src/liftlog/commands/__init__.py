"""CLI commands for liftlog."""

from .exercises import exercises
from .init import init
from .serve import serve
from .templates import templates
from .workouts import workouts

__all__ = [
    "exercises",
    "init",
    "serve",
    "templates",
    "workouts",
]
