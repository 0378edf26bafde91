"""Shared Typer app object, shared option types, and store/engine utilities."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.engine import ProgressionEngine
from ..core.models import TrainingState
from ..io.serializers import ValidationError
from ..io.state_store import StateStore, get_default_state_path
from . import views

# Shared --state-path option type used across all commands
StatePathOption = Annotated[
    Optional[Path],
    typer.Option("--state-path", "-p", help="Path to the JSON state file"),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="liftlog",
    help="Strength-training log with double progression, volume landmarks and deload timing.",
    no_args_is_help=True,
)


def get_store(state_path: Path | None) -> StateStore:
    """Get state store from path or default location."""
    if state_path is None:
        state_path = get_default_state_path()
    return StateStore(state_path)


def load_state_or_exit(store: StateStore) -> TrainingState:
    """Load the state file, printing the problem and exiting 1 on failure."""
    if not store.exists():
        views.print_error(f"State file not found: {store.state_path}")
        views.print_info("Run 'init' first to create it.")
        raise typer.Exit(1)
    try:
        return store.load()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        views.print_info("Run 'init --recover' to restore the last good snapshot.")
        raise typer.Exit(1)


def get_engine(store: StateStore) -> ProgressionEngine:
    """Engine over the store's state with the default reference tables."""
    return ProgressionEngine(load_state_or_exit(store))
