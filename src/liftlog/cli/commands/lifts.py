"""Lift commands: init, log, remove, history, pr, swap, alternatives."""

import json
from typing import Annotated, Optional

import typer

from ...core.config_loader import get_reference_tables
from ...core.models import TrainingState
from ...io.serializers import (
    ValidationError,
    lift_entry_to_dict,
    parse_sets_string,
    personal_record_to_dict,
    validate_date,
)
from .. import views
from ..app import JsonOption, StatePathOption, app, get_engine, get_store

ExerciseArgument = Annotated[str, typer.Argument(help="Exercise name, e.g. 'Barbell Bench Press'")]

DateOption = Annotated[
    Optional[str],
    typer.Option("--date", "-d", help="Session day YYYY-MM-DD (default: today)"),
]


@app.command()
def init(
    state_path: StatePathOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing state file with an empty one"),
    ] = False,
    recover: Annotated[
        bool,
        typer.Option("--recover", help="Restore the best readable snapshot (main file or backup)"),
    ] = False,
) -> None:
    """
    Create the state file (or recover it from its backup).
    """
    store = get_store(state_path)

    if recover:
        state = store.recover()
        views.print_success(
            f"Recovered {state.entry_count()} entries into {store.state_path}"
        )
        return

    if store.exists() and not force:
        views.print_info(f"State file already exists: {store.state_path}")
        return

    if force and store.exists():
        store.save(TrainingState())
    else:
        store.init()
    views.print_success(f"Initialized {store.state_path}")


@app.command()
def log(
    exercise: ExerciseArgument,
    sets: Annotated[
        str,
        typer.Option(
            "--sets", "-s",
            help="Sets as '185x5, 185x5, 175x8', '135x8x3', '5@185' or bare reps for bodyweight",
        ),
    ],
    date: DateOption = None,
    state_path: StatePathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Log a session's sets for an exercise (replaces that day's entry).
    """
    store = get_store(state_path)
    engine = get_engine(store)

    try:
        parsed = parse_sets_string(sets)
        day = validate_date(date) if date is not None else None
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    resolved = engine.get_exercise_swap(exercise, day) or exercise
    result = engine.log_lift(resolved, parsed, day)
    store.save(engine.state)

    if json_out:
        entry = engine.get_last_lift(resolved)
        print(json.dumps({
            "exercise": resolved,
            "is_pr": result.is_pr,
            "estimated_1rm": result.estimated_1rm,
            "volume": result.volume,
            "previous_best": (
                personal_record_to_dict(result.previous_best)
                if result.previous_best is not None
                else None
            ),
            "entry": lift_entry_to_dict(entry) if entry is not None else None,
        }, indent=2))
        return

    views.print_success(
        f"Logged {len(parsed)} sets of {resolved} "
        f"(e1RM {result.estimated_1rm:g}, volume {result.volume:g})"
    )
    if result.is_pr:
        prev = result.previous_best
        if prev is None:
            views.print_success("First record set for this lift.")
        else:
            views.print_success(
                f"New PR! e1RM {result.estimated_1rm:g} (previous {prev.estimated_1rm:g})"
            )
    for alert in engine.volume_alerts():
        if alert.muscle in engine.muscle_groups_for(resolved, day):
            views.print_alerts([alert])


@app.command()
def remove(
    exercise: ExerciseArgument,
    date: Annotated[str, typer.Option("--date", "-d", help="Session day YYYY-MM-DD")],
    state_path: StatePathOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
) -> None:
    """
    Remove the entry for an exercise on a day. Personal records are kept.
    """
    store = get_store(state_path)
    engine = get_engine(store)

    try:
        day = validate_date(date)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if not engine.get_session_sets(exercise, day):
        views.print_error(f"No {exercise} entry on {day}")
        raise typer.Exit(1)

    if not force and not views.confirm_action(f"Delete {exercise} on {day}?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    engine.remove_lift_entry(exercise, day)
    store.save(engine.state)
    views.print_success(f"Deleted {exercise} on {day}")


@app.command()
def history(
    exercise: ExerciseArgument,
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", help="Number of most recent sessions to show"),
    ] = 10,
    state_path: StatePathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the most recent sessions of an exercise.
    """
    engine = get_engine(get_store(state_path))
    entries = engine.get_lift_history(exercise, limit)

    if json_out:
        print(json.dumps([lift_entry_to_dict(e) for e in entries], indent=2))
        return

    views.print_history(exercise, entries)


@app.command()
def pr(
    exercise: Annotated[
        Optional[str],
        typer.Argument(help="Exercise name (default: all exercises)"),
    ] = None,
    state_path: StatePathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show personal records (estimated 1RM).
    """
    engine = get_engine(get_store(state_path))

    if exercise is not None:
        record = engine.get_pr(exercise)
        prs = {exercise: record} if record is not None else {}
    else:
        prs = engine.get_all_prs()

    if json_out:
        print(json.dumps({name: personal_record_to_dict(r) for name, r in prs.items()}, indent=2))
        return

    views.print_prs(prs)


@app.command()
def swap(
    original: Annotated[str, typer.Argument(help="Exercise in the day's program")],
    substitute: Annotated[str, typer.Argument(help="Exercise performed instead")],
    date: DateOption = None,
    state_path: StatePathOption = None,
) -> None:
    """
    Substitute one exercise for another for a single day.
    """
    store = get_store(state_path)
    engine = get_engine(store)

    try:
        day = validate_date(date) if date is not None else None
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    known = engine.alternatives_for(original)
    if known and substitute.casefold() not in {a.casefold() for a in known}:
        views.print_warning(f"{substitute} is not a listed alternative for {original}")

    engine.save_exercise_swap(original, substitute, day)
    store.save(engine.state)
    views.print_success(f"{original} → {substitute} for {day or engine.today_key()}")


@app.command()
def alternatives(
    exercise: ExerciseArgument,
    json_out: JsonOption = False,
) -> None:
    """
    List equipment alternatives for an exercise.
    """
    options = get_reference_tables().alternatives_for(exercise)

    if json_out:
        print(json.dumps({"exercise": exercise, "alternatives": options}, indent=2))
        return

    if not options:
        views.print_info(f"No alternatives listed for {exercise}")
        return
    views.console.print(f"[bold]{exercise}[/bold] alternatives:")
    for option in options:
        views.console.print(f"  - {option}")
