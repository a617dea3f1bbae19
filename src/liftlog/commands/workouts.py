"""Workout logging and history commands."""

import sqlite3

import click

from ..db import get_store
from ..models.workouts import Workout, WorkoutExercise, utc_timestamp
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
    format_weight,
    parse_exercise_spec,
)


@click.group()
@click.pass_context
def workouts(ctx):
    """Log workouts and browse workout history."""
    ensure_initialized(ctx)


@workouts.command(name="list")
@click.option("--limit", "-n", type=int, default=None, help="Only show the N most recent workouts")
@async_command
async def list_workouts(limit: int | None):
    """Show workout history, most recent first."""
    store = get_store()
    history = await store.get_workouts()
    if limit is not None:
        history = history[:limit]

    if not history:
        echo_info("No workouts logged yet")
        return

    for workout in history:
        entries = await store.get_workout_exercises(workout.id)
        started = workout.started_at().strftime("%Y-%m-%d %H:%M")
        click.echo()
        click.echo(
            click.style(f"{workout.name}", bold=True)
            + f"  (ID: {workout.id}, {started}, {workout.duration} min)"
        )
        for entry in entries:
            click.echo(
                f"  - {entry.name}: {entry.sets} x {entry.reps} @ {format_weight(entry.weight)}"
            )


@workouts.command()
@click.argument("workout_id", type=int)
@click.pass_context
@async_command
async def show(ctx, workout_id: int):
    """Show the exercises logged in a workout."""
    store = get_store()
    workout = await store.get_workout(workout_id)
    if not workout:
        echo_error(f"Workout ID {workout_id} not found")
        ctx.exit(1)

    entries = await store.get_workout_exercises(workout_id)

    click.echo()
    click.echo(f"Workout: {workout.name} (ID: {workout.id})")
    click.echo(f"Date: {workout.started_at().strftime('%Y-%m-%d %H:%M')}")
    click.echo(f"Duration: {workout.duration} min")
    click.echo()
    if not entries:
        echo_info("No exercises logged")
        return

    rows = [
        [entry.name, entry.muscle_group, str(entry.sets), str(entry.reps), format_weight(entry.weight)]
        for entry in entries
    ]
    click.echo(format_table(["Exercise", "Muscle Group", "Sets", "Reps", "Weight"], rows))


@workouts.command()
@click.argument("name")
@click.option(
    "--exercise",
    "-e",
    "exercise_specs",
    multiple=True,
    required=True,
    help="EXERCISE_ID:SETS:REPS:WEIGHT, repeat for each exercise performed",
)
@click.option("--duration", "-d", type=click.IntRange(min=0), default=0, help="Duration in minutes")
@click.pass_context
@async_command
async def log(ctx, name: str, exercise_specs: tuple[str, ...], duration: int):
    """Log a completed workout."""
    name = name.strip()
    if not name:
        echo_error("Workout name is required")
        ctx.exit(1)

    entries = []
    for spec in exercise_specs:
        exercise_id, sets, reps, weight = parse_exercise_spec(spec, require_weight=True)
        entries.append(
            WorkoutExercise(workout_id=0, exercise_id=exercise_id, sets=sets, reps=reps, weight=weight)
        )

    workout = Workout(name=name, date=utc_timestamp(), duration=duration)
    try:
        workout_id = await get_store().log_workout(workout, entries)
    except sqlite3.IntegrityError:
        echo_error("One or more exercise IDs do not exist")
        ctx.exit(1)

    echo_success(f"Logged workout '{name}' (ID: {workout_id})")


@workouts.command()
@click.argument("workout_id", type=int)
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
async def delete(ctx, workout_id: int, force: bool):
    """Delete a workout from history."""
    store = get_store()
    workout = await store.get_workout(workout_id)
    if not workout:
        echo_error(f"Workout ID {workout_id} not found")
        ctx.exit(1)

    if not force:
        click.echo(f"Workout: {workout.name}")
        if not click.confirm("Are you sure you want to delete this workout?"):
            echo_info("Cancelled")
            return

    await store.delete_workout(workout_id)
    echo_success(f"Workout {workout_id} deleted")
