"""Exercise library routes."""

from fastapi import APIRouter, Depends

from ...db import ExerciseNotFoundError, WorkoutStore
from ...models.exercises import ExercisePatch
from ..schemas import ExerciseIn, ExerciseUpdate
from . import get_store

router = APIRouter(prefix="/exercises", tags=["exercises"])


@router.get("")
async def list_exercises(store: WorkoutStore = Depends(get_store)):
    """List all exercises."""
    return [e.to_dict() for e in await store.get_exercises()]


@router.post("", status_code=201)
async def add_exercise(body: ExerciseIn, store: WorkoutStore = Depends(get_store)):
    """Add an exercise."""
    exercise_id = await store.add_exercise(body.name, body.muscle_group)
    return {"id": exercise_id}


@router.get("/{exercise_id}")
async def get_exercise(exercise_id: int, store: WorkoutStore = Depends(get_store)):
    """Get a single exercise."""
    exercise = await store.get_exercise(exercise_id)
    if exercise is None:
        raise ExerciseNotFoundError(exercise_id)
    return exercise.to_dict()


@router.patch("/{exercise_id}")
async def update_exercise(
    exercise_id: int, body: ExerciseUpdate, store: WorkoutStore = Depends(get_store)
):
    """Update an exercise's name and/or muscle group."""
    patch = ExercisePatch(name=body.name, muscle_group=body.muscle_group)
    updated = await store.update_exercise(exercise_id, patch)
    return updated.to_dict()


@router.delete("/{exercise_id}")
async def delete_exercise(exercise_id: int, store: WorkoutStore = Depends(get_store)):
    """Delete an exercise and every workout/template entry that uses it."""
    await store.delete_exercise(exercise_id)
    return {"status": "deleted"}
