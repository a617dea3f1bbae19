"""Workout logging and history routes."""

from fastapi import APIRouter, Depends

from ...db import WorkoutNotFoundError, WorkoutStore
from ...models.workouts import Workout, WorkoutExercise, utc_timestamp
from ..schemas import WorkoutExerciseIn, WorkoutIn
from . import get_store

router = APIRouter(prefix="/workouts", tags=["workouts"])


@router.get("")
async def list_workouts(store: WorkoutStore = Depends(get_store)):
    """Workout history, most recent first."""
    return [w.to_dict() for w in await store.get_workouts()]


@router.post("", status_code=201)
async def log_workout(body: WorkoutIn, store: WorkoutStore = Depends(get_store)):
    """Log a workout, optionally with the exercises performed."""
    workout = Workout(name=body.name, date=utc_timestamp(body.date), duration=body.duration)
    if not body.exercises:
        return {"id": await store.add_workout(workout)}

    entries = [
        WorkoutExercise(
            workout_id=0,
            exercise_id=e.exercise_id,
            sets=e.sets,
            reps=e.reps,
            weight=e.weight,
        )
        for e in body.exercises
    ]
    return {"id": await store.log_workout(workout, entries)}


@router.get("/{workout_id}")
async def get_workout(workout_id: int, store: WorkoutStore = Depends(get_store)):
    """Get a workout with its logged exercises."""
    workout = await store.get_workout(workout_id)
    if workout is None:
        raise WorkoutNotFoundError(workout_id)

    entries = await store.get_workout_exercises(workout_id)
    return {**workout.to_dict(), "exercises": [e.to_dict() for e in entries]}


@router.delete("/{workout_id}")
async def delete_workout(workout_id: int, store: WorkoutStore = Depends(get_store)):
    """Delete a workout and its logged exercises."""
    await store.delete_workout(workout_id)
    return {"status": "deleted"}


@router.get("/{workout_id}/exercises")
async def list_workout_exercises(workout_id: int, store: WorkoutStore = Depends(get_store)):
    """List the exercises logged in a workout."""
    if await store.get_workout(workout_id) is None:
        raise WorkoutNotFoundError(workout_id)
    return [e.to_dict() for e in await store.get_workout_exercises(workout_id)]


@router.post("/{workout_id}/exercises", status_code=201)
async def add_workout_exercise(
    workout_id: int, body: WorkoutExerciseIn, store: WorkoutStore = Depends(get_store)
):
    """Log one more exercise against an existing workout."""
    if await store.get_workout(workout_id) is None:
        raise WorkoutNotFoundError(workout_id)

    entry_id = await store.add_exercise_to_workout(
        WorkoutExercise(
            workout_id=workout_id,
            exercise_id=body.exercise_id,
            sets=body.sets,
            reps=body.reps,
            weight=body.weight,
        )
    )
    return {"id": entry_id}
