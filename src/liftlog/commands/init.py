"""Initialize database command."""

import click

from ..config import get_settings
from ..db import get_db_path, init_db
from .base import async_command, echo_info, echo_success


@click.command()
@async_command
async def init():
    """Initialize the liftlog database.

    This creates the data directory and the SQLite database with the
    required schema. Running it again on an existing database is safe.
    """
    data_dir = get_settings().data_dir
    echo_info(f"Initializing liftlog in {data_dir}")

    db_path = get_db_path(data_dir)
    await init_db(db_path)
    echo_success(f"Database ready at {db_path}")

    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Add some exercises:")
    click.echo('     liftlog exercises add "Bench Press" Chest')
    click.echo()
    click.echo("  2. Build a template and start a workout from it:")
    click.echo('     liftlog templates create "Push Day" -e 1:3:10:135')
    click.echo("     liftlog templates start 1")
