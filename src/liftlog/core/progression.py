"""
Double-progression advisor.

Stay at a weight and add reps until the session averages 12, then add
load and drop back to 6-8 reps.  Sessions averaging under 6 reps bring
the load down.  A muscle group already close to its MRV holds steady
regardless of reps.

The rep bands are evaluated top to bottom and never overlap, so exactly
one rule fires:

    near MRV        → maintain weight, repeat average reps
    avg ≥ 12        → +5, reps 6-8
    avg ≥ 10        → same weight, avg + 1
    avg ≥ 8         → same weight, avg + 1
    avg ≥ 6         → same weight, 8
    avg < 6         → −5 (floor 5), 8
"""

import math
from datetime import date, datetime

from .config import (
    MIN_WEIGHT,
    NEAR_MRV_MARGIN,
    REBUILD_TARGET_REPS,
    REPS_BUILD_THRESHOLD,
    REPS_PROGRESS_THRESHOLD,
    REPS_PUSH_THRESHOLD,
    REPS_REBUILD_THRESHOLD,
    RESET_REPS_HIGH,
    RESET_REPS_LOW,
    WEIGHT_DECREMENT,
    WEIGHT_INCREMENT,
    WEIGHT_UNIT,
)
from .config_loader import ReferenceTables
from .dates import parse_date_key, to_date_key
from .ledger import get_last_lift, resolve_exercise
from .models import LiftEntry, ProgressionSuggestion, TrainingState
from .volume import entry_groups, weekly_volume


def _fmt_weight(weight: float) -> str:
    return f"{weight:g}"


def average_reps(entry: LiftEntry) -> int:
    """Mean reps of a session rounded half up (0 for an empty session)."""
    if not entry.sets:
        return 0
    return int(math.floor(entry.average_reps + 0.5))


def is_near_mrv(
    state: TrainingState,
    tables: ReferenceTables,
    exercise_name: str,
    today: date | None = None,
) -> bool:
    """
    True if the exercise's primary muscle group is within 3 weekly sets of its MRV.

    The group is looked up the way volume is counted, so a substitute with
    no mapping of its own uses the group of the exercise it replaced that day.
    """
    day = today or datetime.now().date()
    groups = entry_groups(state, tables, exercise_name, to_date_key(day))
    if not groups:
        return False
    group = groups[0]
    sets = weekly_volume(state, tables, group, today=day).sets
    return sets >= tables.landmarks_for(group).mrv - NEAR_MRV_MARGIN


def progress_from_reps(last_weight: float, avg_reps: int) -> ProgressionSuggestion:
    """Apply the rep bands to the last session (no volume override)."""
    w = _fmt_weight(last_weight)

    if avg_reps >= REPS_PROGRESS_THRESHOLD:
        new_weight = last_weight + WEIGHT_INCREMENT
        return ProgressionSuggestion(
            weight=new_weight,
            reps=RESET_REPS_LOW,
            reps_max=RESET_REPS_HIGH,
            message=f"{avg_reps} reps = time to progress. Add {_fmt_weight(WEIGHT_INCREMENT)} {WEIGHT_UNIT}.",
            action="increase_weight",
        )
    if avg_reps >= REPS_PUSH_THRESHOLD:
        return ProgressionSuggestion(
            weight=last_weight,
            reps=avg_reps + 1,
            message=f"{avg_reps} reps last time. Push for {avg_reps + 1} today.",
            action="add_rep",
        )
    if avg_reps >= REPS_BUILD_THRESHOLD:
        return ProgressionSuggestion(
            weight=last_weight,
            reps=avg_reps + 1,
            message=f"{avg_reps} reps - keep building at {w} {WEIGHT_UNIT}",
            action="build",
        )
    if avg_reps >= REPS_REBUILD_THRESHOLD:
        return ProgressionSuggestion(
            weight=last_weight,
            reps=REBUILD_TARGET_REPS,
            message=f"Build to {REBUILD_TARGET_REPS}+ reps at {w} {WEIGHT_UNIT} before adding weight",
            action="build",
        )
    new_weight = max(last_weight - WEIGHT_DECREMENT, MIN_WEIGHT)
    return ProgressionSuggestion(
        weight=new_weight,
        reps=REBUILD_TARGET_REPS,
        message=(
            f"Only {avg_reps} reps - drop to {_fmt_weight(new_weight)} {WEIGHT_UNIT}, "
            f"aim for {REBUILD_TARGET_REPS}"
        ),
        action="decrease_weight",
    )


def suggest_next(
    state: TrainingState,
    tables: ReferenceTables,
    exercise_name: str,
    date_key: str | None = None,
    today: date | None = None,
) -> ProgressionSuggestion | None:
    """
    Suggest weight and reps for the next session of an exercise.

    Args:
        state: Shared training state
        tables: Reference tables (muscle groups and landmarks)
        exercise_name: Exercise as it appears in the day's program
        date_key: Logical day of the session (resolves that day's swap
            and anchors the volume window); defaults to ``today``
        today: Current day (default: wall clock)

    Returns:
        ProgressionSuggestion, or None if the exercise was never logged
    """
    if date_key is not None:
        session_day = parse_date_key(date_key)
    else:
        session_day = today or datetime.now().date()

    resolved = resolve_exercise(state, exercise_name, to_date_key(session_day))
    last = get_last_lift(state, resolved)
    if last is None or not last.sets or last.best_set is None:
        return None

    last_weight = last.best_set.weight
    avg = average_reps(last)

    if is_near_mrv(state, tables, resolved, today=session_day):
        return ProgressionSuggestion(
            weight=last_weight,
            reps=avg,
            message=f"High volume week - maintain {_fmt_weight(last_weight)} {WEIGHT_UNIT}, focus on form",
            action="maintain",
        )

    return progress_from_reps(last_weight, avg)
