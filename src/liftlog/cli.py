"""CLI entry point for liftlog."""

import click

from . import __version__
from .commands import exercises, init, serve, templates, workouts
from .config import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="liftlog")
def main():
    """liftlog: a personal workout tracker.

    Define exercises, group them into reusable templates, and log
    workouts with sets, reps and weight.

    Example usage:

        # Initialize the database
        liftlog init

        # Build your exercise library
        liftlog exercises add "Bench Press" Chest

        # Create a template and start a workout from it
        liftlog templates create "Push Day" -e 1:3:10:135
        liftlog templates start 1

        # Review your history
        liftlog workouts list
    """
    configure_logging()


# Register commands
main.add_command(init)
main.add_command(exercises)
main.add_command(templates)
main.add_command(workouts)
main.add_command(serve)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()
