"""Shared CLI utilities."""

import asyncio
from functools import wraps

import click

from ..config import get_settings
from ..db import close_store
from ..db.engine import DB_FILENAME


def async_command(f):
    """Decorator to run async Click commands.

    The process-wide store is closed when the command finishes, since its
    connection belongs to the event loop that `asyncio.run` tears down.
    """

    @wraps(f)
    def wrapper(*args, **kwargs):
        async def run():
            try:
                return await f(*args, **kwargs)
            finally:
                await close_store()

        return asyncio.run(run())

    return wrapper


def ensure_initialized(ctx: click.Context) -> None:
    """Ensure the database is initialized."""
    db_path = get_settings().data_dir / DB_FILENAME
    if not db_path.exists():
        click.echo(
            click.style("Error: ", fg="red")
            + "Database not initialized. Run 'liftlog init' first."
        )
        ctx.exit(1)


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def format_weight(weight: float | None) -> str:
    """Format a weight for display ("-" when unspecified)."""
    if weight is None:
        return "-"
    return f"{weight:g} lbs"


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple table."""
    if not rows:
        return ""

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = ["".join(h.ljust(widths[i] + padding) for i, h in enumerate(headers)).rstrip()]
    lines.append("".join("-" * w + " " * padding for w in widths).rstrip())
    for row in rows:
        lines.append(
            "".join(str(cell).ljust(widths[i] + padding) for i, cell in enumerate(row)).rstrip()
        )

    return "\n".join(lines)


def parse_exercise_spec(value: str, require_weight: bool = False) -> tuple[int, int, int, float | None]:
    """Parse an "EXERCISE_ID:SETS:REPS[:WEIGHT]" option value.

    Raises:
        click.BadParameter: If the value is malformed.
    """
    parts = value.split(":")
    if len(parts) not in (3, 4) or (require_weight and len(parts) != 4):
        expected = "EXERCISE_ID:SETS:REPS:WEIGHT" if require_weight else "EXERCISE_ID:SETS:REPS[:WEIGHT]"
        raise click.BadParameter(f"'{value}' should look like {expected}")

    try:
        exercise_id, sets, reps = (int(p) for p in parts[:3])
        weight = float(parts[3]) if len(parts) == 4 and parts[3] != "" else None
    except ValueError:
        raise click.BadParameter(f"'{value}' contains a non-numeric field")

    if sets < 0 or reps < 0 or (weight is not None and weight < 0):
        raise click.BadParameter(f"'{value}' contains a negative number")

    return exercise_id, sets, reps, weight
