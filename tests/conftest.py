"""Pytest configuration and fixtures."""

import tempfile
from pathlib import Path

import pytest
import pytest_asyncio

from liftlog.db import WorkoutStore
from liftlog.models import TemplateExercise, WorkoutTemplate


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest_asyncio.fixture
async def store(temp_db_path):
    """A store backed by a fresh database file."""
    workout_store = WorkoutStore(temp_db_path)
    yield workout_store
    await workout_store.close()


@pytest_asyncio.fixture
async def push_day(store):
    """A "Push Day" template with bench press and overhead press.

    Returns (template_id, bench_press_id, overhead_press_id).
    """
    bench_id = await store.add_exercise("Bench Press", "Chest")
    ohp_id = await store.add_exercise("Overhead Press", "Shoulders")
    template_id = await store.create_template_with_exercises(
        WorkoutTemplate(name="Push Day"),
        [
            TemplateExercise(template_id=0, exercise_id=bench_id, set_count=3, target_reps=10, target_weight=135),
            TemplateExercise(template_id=0, exercise_id=ohp_id, set_count=4, target_reps=8),
        ],
    )
    return template_id, bench_id, ohp_id
