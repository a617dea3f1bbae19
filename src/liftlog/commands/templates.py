"""Workout template commands."""

import sqlite3

import click

from ..db import TemplateNotFoundError, get_store
from ..models.templates import TemplateExercise, WorkoutTemplate
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
def templates(ctx):
    """Manage workout templates.

    Templates are reusable lists of exercises with target sets, reps and
    weight. Start a workout from one with 'liftlog templates start'.
    """
    ensure_initialized(ctx)


@templates.command(name="list")
@async_command
async def list_templates():
    """List all templates."""
    store = get_store()
    all_templates = await store.get_templates()

    if not all_templates:
        echo_info("No templates yet. Create one with 'liftlog templates create'")
        return

    rows = []
    for template in all_templates:
        slots = await store.get_template_exercises(template.id)
        rows.append([str(template.id), template.name, str(len(slots))])

    click.echo()
    click.echo(format_table(["ID", "Name", "Exercises"], rows))


@templates.command()
@click.argument("template_id", type=int)
@click.pass_context
@async_command
async def show(ctx, template_id: int):
    """Show a template's exercises in order."""
    store = get_store()
    template = await store.get_template(template_id)
    if not template:
        echo_error(f"Template ID {template_id} not found")
        ctx.exit(1)

    slots = await store.get_template_exercises(template_id)

    click.echo()
    click.echo(f"Template: {template.name} (ID: {template.id})")
    click.echo()
    if not slots:
        echo_info("This template has no exercises")
        return

    rows = [
        [
            str(slot.order + 1),
            slot.name,
            slot.muscle_group,
            str(slot.set_count),
            str(slot.target_reps),
            format_weight(slot.target_weight),
        ]
        for slot in slots
    ]
    click.echo(format_table(["#", "Exercise", "Muscle Group", "Sets", "Reps", "Weight"], rows))


@templates.command()
@click.argument("name")
@click.option(
    "--exercise",
    "-e",
    "exercise_specs",
    multiple=True,
    required=True,
    help="EXERCISE_ID:SETS:REPS[:WEIGHT], repeat in the order the exercises should run",
)
@click.pass_context
@async_command
async def create(ctx, name: str, exercise_specs: tuple[str, ...]):
    """Create a template from a list of exercises."""
    name = name.strip()
    if not name:
        echo_error("Template name is required")
        ctx.exit(1)

    slots = []
    for spec in exercise_specs:
        exercise_id, sets, reps, weight = parse_exercise_spec(spec)
        slots.append(
            TemplateExercise(
                template_id=0,
                exercise_id=exercise_id,
                set_count=sets,
                target_reps=reps,
                target_weight=weight,
            )
        )

    try:
        template_id = await get_store().create_template_with_exercises(
            WorkoutTemplate(name=name), slots
        )
    except sqlite3.IntegrityError:
        echo_error("One or more exercise IDs do not exist")
        ctx.exit(1)

    echo_success(f"Created template '{name}' (ID: {template_id}) with {len(slots)} exercise(s)")


@templates.command()
@click.argument("template_id", type=int)
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
async def delete(ctx, template_id: int, force: bool):
    """Delete a template. Workouts started from it are kept."""
    store = get_store()
    template = await store.get_template(template_id)
    if not template:
        echo_error(f"Template ID {template_id} not found")
        ctx.exit(1)

    if not force:
        click.echo(f"Template: {template.name}")
        if not click.confirm("Are you sure you want to delete this template?"):
            echo_info("Cancelled")
            return

    await store.delete_template(template_id)
    echo_success(f"Template {template_id} deleted")


@templates.command()
@click.argument("template_id", type=int)
@click.pass_context
@async_command
async def start(ctx, template_id: int):
    """Start a new workout from a template."""
    try:
        workout_id = await get_store().start_workout_from_template(template_id)
    except TemplateNotFoundError as e:
        echo_error(str(e))
        ctx.exit(1)

    echo_success(f"Started workout {workout_id}")
    click.echo(f"View it with: liftlog workouts show {workout_id}")
