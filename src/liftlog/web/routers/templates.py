"""Workout template routes."""

from fastapi import APIRouter, Depends, HTTPException

from ...db import TemplateNotFoundError, WorkoutStore
from ...models.templates import TemplateExercise, WorkoutTemplate
from ..schemas import TemplateExerciseIn, TemplateIn
from . import get_store

router = APIRouter(prefix="/templates", tags=["templates"])


def _to_slot(template_id: int, body: TemplateExerciseIn, order: int) -> TemplateExercise:
    return TemplateExercise(
        template_id=template_id,
        exercise_id=body.exercise_id,
        set_count=body.set_count,
        target_reps=body.target_reps,
        target_weight=body.target_weight,
        order=order,
    )


@router.get("")
async def list_templates(store: WorkoutStore = Depends(get_store)):
    """List all templates."""
    return [t.to_dict() for t in await store.get_templates()]


@router.post("", status_code=201)
async def create_template(body: TemplateIn, store: WorkoutStore = Depends(get_store)):
    """Create a template, optionally with its exercises in order."""
    template = WorkoutTemplate(name=body.name)
    if not body.exercises:
        return {"id": await store.create_template(template)}

    # Order is assigned by position in the request
    slots = [_to_slot(0, e, 0) for e in body.exercises]
    return {"id": await store.create_template_with_exercises(template, slots)}


@router.get("/{template_id}")
async def get_template(template_id: int, store: WorkoutStore = Depends(get_store)):
    """Get a template with its exercises in order."""
    template = await store.get_template(template_id)
    if template is None:
        raise TemplateNotFoundError(template_id)

    slots = await store.get_template_exercises(template_id)
    return {**template.to_dict(), "exercises": [s.to_dict() for s in slots]}


@router.delete("/{template_id}")
async def delete_template(template_id: int, store: WorkoutStore = Depends(get_store)):
    """Delete a template. Workouts started from it are kept."""
    await store.delete_template(template_id)
    return {"status": "deleted"}


@router.get("/{template_id}/exercises")
async def list_template_exercises(template_id: int, store: WorkoutStore = Depends(get_store)):
    """List a template's exercises in order."""
    if await store.get_template(template_id) is None:
        raise TemplateNotFoundError(template_id)
    return [s.to_dict() for s in await store.get_template_exercises(template_id)]


@router.post("/{template_id}/exercises", status_code=201)
async def add_template_exercise(
    template_id: int, body: TemplateExerciseIn, store: WorkoutStore = Depends(get_store)
):
    """Add an exercise to a template.

    Without an explicit `order` the exercise goes after the current last one.
    An `order` already used in the template is rejected with 409.
    """
    if await store.get_template(template_id) is None:
        raise TemplateNotFoundError(template_id)

    slots = await store.get_template_exercises(template_id)
    order = body.order
    if order is None:
        order = slots[-1].order + 1 if slots else 0
    elif any(slot.order == order for slot in slots):
        raise HTTPException(
            status_code=409, detail=f"Position {order} is already taken in template {template_id}"
        )

    slot_id = await store.add_exercise_to_template(_to_slot(template_id, body, order))
    return {"id": slot_id}


@router.post("/{template_id}/start", status_code=201)
async def start_workout(template_id: int, store: WorkoutStore = Depends(get_store)):
    """Start a new workout from a template."""
    workout_id = await store.start_workout_from_template(template_id)
    return {"workout_id": workout_id}
