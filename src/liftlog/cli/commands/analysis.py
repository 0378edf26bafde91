"""Analysis commands: volume, stats, suggest, deload, recovery, status."""

import json
from dataclasses import asdict
from typing import Annotated, Optional

import typer

from ...core.config import DEFAULT_WINDOW_DAYS
from .. import views
from ..app import JsonOption, StatePathOption, app, get_engine, get_store

WindowOption = Annotated[
    int,
    typer.Option("--window", "-w", min=0, help="Trailing window in days (both ends included)"),
]


@app.command()
def volume(
    muscle: Annotated[
        Optional[str],
        typer.Option("--muscle", "-m", help="Single muscle group (default: all)"),
    ] = None,
    window: WindowOption = DEFAULT_WINDOW_DAYS,
    state_path: StatePathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show weekly sets per muscle group against MEV/MAV/MRV.
    """
    engine = get_engine(get_store(state_path))

    if muscle is not None:
        volumes = {muscle: engine.weekly_volume(muscle, window)}
    else:
        volumes = engine.all_weekly_volumes(window)

    if json_out:
        out = {}
        for group, vol in volumes.items():
            lm = engine.tables.landmarks_for(group)
            out[group] = {
                "sets": vol.sets,
                "volume": vol.volume,
                "landmarks": {"MEV": lm.mev, "MAV": lm.mav, "MRV": lm.mrv},
            }
        print(json.dumps(out, indent=2))
        return

    views.print_volume(volumes, engine.tables, window)
    if muscle is None and window == DEFAULT_WINDOW_DAYS:
        views.print_alerts(engine.volume_alerts())


@app.command()
def stats(
    window: WindowOption = DEFAULT_WINDOW_DAYS,
    state_path: StatePathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show whole-body training totals for the trailing window.
    """
    engine = get_engine(get_store(state_path))
    result = engine.weekly_training_stats(window)

    if json_out:
        print(json.dumps(asdict(result), indent=2))
        return

    views.print_stats(result, window)


@app.command()
def suggest(
    exercise: Annotated[str, typer.Argument(help="Exercise name as in the day's program")],
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Session day YYYY-MM-DD (default: today)"),
    ] = None,
    state_path: StatePathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Suggest weight and reps for the next session (double progression).
    """
    engine = get_engine(get_store(state_path))

    try:
        suggestion = engine.suggest_next(exercise, date)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps(
            {"exercise": exercise, "suggestion": asdict(suggestion) if suggestion else None},
            indent=2,
        ))
        return

    views.print_suggestion(exercise, suggestion)


@app.command()
def deload(
    complete: Annotated[
        bool,
        typer.Option("--complete", "-c", help="Mark a deload week as completed today"),
    ] = False,
    state_path: StatePathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Check whether a deload week is due, or acknowledge one.
    """
    store = get_store(state_path)
    engine = get_engine(store)

    if complete:
        stamp = engine.mark_deload_complete()
        store.save(engine.state)
        if json_out:
            print(json.dumps({"last_deload_date": stamp}, indent=2))
            return
        views.print_success(f"Deload recorded ({stamp}). Deload clock restarted.")
        return

    status_info = engine.should_deload()
    if json_out:
        print(json.dumps(asdict(status_info), indent=2))
        return

    views.print_deload(status_info)


@app.command()
def recovery(
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-n", min=1, help="Show only the top N areas"),
    ] = None,
    state_path: StatePathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Rank body areas for foam rolling/stretching by accumulated fatigue.
    """
    engine = get_engine(get_store(state_path))
    priorities = engine.prioritized_areas()
    if limit is not None:
        priorities = priorities[:limit]

    if json_out:
        print(json.dumps([asdict(p) for p in priorities], indent=2))
        return

    views.print_recovery(priorities)


@app.command()
def status(
    state_path: StatePathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show current training status: weekly totals, deload, alerts and plateaus.
    """
    engine = get_engine(get_store(state_path))

    week = engine.weekly_training_stats()
    deload_status = engine.should_deload()
    alerts = engine.volume_alerts()
    plateaus = engine.detect_lift_plateaus()

    if json_out:
        print(json.dumps({
            "stats": asdict(week),
            "deload": asdict(deload_status),
            "alerts": [asdict(a) for a in alerts],
            "plateaus": [
                {"exercise": p.exercise_name, "days_since_pr": p.days_since_pr}
                for p in plateaus
            ],
        }, indent=2))
        return

    views.console.print(views.format_status_display(week, deload_status, alerts, plateaus))
    if alerts:
        views.console.print()
        views.print_alerts(alerts)
    if plateaus:
        views.console.print()
        views.print_plateaus(plateaus)
