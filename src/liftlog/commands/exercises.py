"""Exercise library commands."""

import click
import questionary

from ..db import ExerciseNotFoundError, get_store
from ..models.exercises import ExercisePatch
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
)


@click.group()
@click.pass_context
def exercises(ctx):
    """Manage the exercise library."""
    ensure_initialized(ctx)


@exercises.command(name="list")
@async_command
async def list_exercises():
    """List all exercises."""
    all_exercises = await get_store().get_exercises()

    if not all_exercises:
        echo_info("No exercises yet. Add one with 'liftlog exercises add'")
        return

    rows = [[str(e.id), e.name, e.muscle_group] for e in all_exercises]
    click.echo()
    click.echo(format_table(["ID", "Name", "Muscle Group"], rows))
    click.echo()
    click.echo(f"Total: {len(all_exercises)} exercise(s)")


@exercises.command()
@click.argument("name", required=False)
@click.argument("muscle_group", required=False)
@click.pass_context
@async_command
async def add(ctx, name: str | None, muscle_group: str | None):
    """Add an exercise.

    Prompts for anything not given on the command line.
    """
    if name is None:
        name = await questionary.text("Exercise name:").ask_async()
    if muscle_group is None:
        muscle_group = await questionary.text("Muscle group:").ask_async()

    name = (name or "").strip()
    muscle_group = (muscle_group or "").strip()
    if not name:
        echo_error("Exercise name is required")
        ctx.exit(1)
    if not muscle_group:
        echo_error("Muscle group is required")
        ctx.exit(1)

    exercise_id = await get_store().add_exercise(name, muscle_group)
    echo_success(f"Added exercise '{name}' (ID: {exercise_id})")


@exercises.command()
@click.argument("exercise_id", type=int)
@click.option("--name", "-n", help="New name")
@click.option("--muscle-group", "-m", help="New muscle group")
@click.pass_context
@async_command
async def update(ctx, exercise_id: int, name: str | None, muscle_group: str | None):
    """Rename an exercise or change its muscle group."""
    patch = ExercisePatch(
        name=name.strip() if name is not None else None,
        muscle_group=muscle_group.strip() if muscle_group is not None else None,
    )
    if patch.is_empty():
        echo_error("Nothing to update. Pass --name and/or --muscle-group")
        ctx.exit(1)
    if patch.name == "" or patch.muscle_group == "":
        echo_error("Name and muscle group cannot be empty")
        ctx.exit(1)

    try:
        updated = await get_store().update_exercise(exercise_id, patch)
    except ExerciseNotFoundError as e:
        echo_error(str(e))
        ctx.exit(1)

    echo_success(f"Updated exercise {exercise_id}: {updated.name} ({updated.muscle_group})")


@exercises.command()
@click.argument("exercise_id", type=int)
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
async def delete(ctx, exercise_id: int, force: bool):
    """Delete an exercise.

    This also removes the exercise from every logged workout and template.
    """
    store = get_store()
    exercise = await store.get_exercise(exercise_id)
    if not exercise:
        echo_error(f"Exercise ID {exercise_id} not found")
        ctx.exit(1)

    if not force:
        click.echo(f"Exercise: {exercise.name}")
        if not click.confirm(
            "Delete this exercise? It will also be removed from workouts and templates"
        ):
            echo_info("Cancelled")
            return

    await store.delete_exercise(exercise_id)
    echo_success(f"Exercise {exercise_id} deleted")
