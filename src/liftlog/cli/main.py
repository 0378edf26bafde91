"""
CLI entry point using Typer.

Provides commands for lift tracking and progression:
- init: Create (or recover) the state file
- log / remove: Write a session's sets for an exercise and day
- history / pr: Show logged sessions and personal records
- volume / stats: Weekly sets per muscle group and whole-body totals
- suggest: Next-session weight and reps
- deload / recovery / status: Fatigue management
- swap / alternatives: Day-scoped exercise substitutions
"""

import logging
from typing import Annotated

import typer

from . import views
from .app import app

# Importing the command modules registers their commands on the app.
from .commands import analysis, lifts  # noqa: F401


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show engine log messages"),
    ] = False,
) -> None:
    """
    Strength-training log with adaptive progression.
    """
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    """Console script entry point."""
    try:
        app()
    except KeyboardInterrupt:
        views.print_info("Interrupted.")
        raise SystemExit(130)


if __name__ == "__main__":
    main()
