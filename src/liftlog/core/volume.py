"""
Per-muscle-group volume tracking against MEV/MAV/MRV landmarks.

Volume is derived on demand from the lift ledger, never stored.  An entry
counts toward every muscle group its exercise maps to in the reference
tables; exercises without a mapping count toward nothing.
"""

from datetime import date, datetime

from .config import ALERT_APPROACHING_MRV_MARGIN, DEFAULT_WINDOW_DAYS
from .config_loader import ReferenceTables
from .dates import in_window
from .models import (
    LiftEntry,
    MuscleGroupVolume,
    TrainingState,
    VolumeAlert,
    WeeklyTrainingStats,
)


def _today(today: date | None) -> date:
    return today or datetime.now().date()


def entry_groups(
    state: TrainingState,
    tables: ReferenceTables,
    exercise_name: str,
    date_key: str,
) -> list[str]:
    """
    Muscle groups an entry counts toward.

    A substitute exercise with no mapping of its own inherits the groups of
    the exercise it replaced on that day.
    """
    groups = tables.groups_for(exercise_name)
    if groups:
        return groups
    for original, substitute in state.exercise_swaps.get(date_key, {}).items():
        if substitute == exercise_name:
            return tables.groups_for(original)
    return []


def _entry_totals(entry: LiftEntry) -> tuple[int, float]:
    """(sets, volume) of an entry; corrupt entries contribute nothing."""
    sets = entry.sets if isinstance(entry.sets, list) else []
    if not sets:
        return 0, 0.0
    return len(sets), float(entry.volume or 0.0)


def all_weekly_volumes(
    state: TrainingState,
    tables: ReferenceTables,
    window_days: int = DEFAULT_WINDOW_DAYS,
    today: date | None = None,
) -> dict[str, MuscleGroupVolume]:
    """
    Volume for every configured muscle group in a single pass over the ledger.

    Args:
        state: Shared training state
        tables: Reference tables with the exercise→group mapping
        window_days: Trailing window length; both boundary days included
        today: Last day of the window (default: today)

    Returns:
        {muscle_group: MuscleGroupVolume} for every group in the tables
    """
    day = _today(today)
    volumes = {group: MuscleGroupVolume() for group in tables.muscle_groups}

    for exercise_name, entries in state.lift_history.items():
        for entry in entries:
            if not in_window(entry.date_key, day, window_days):
                continue
            n_sets, load = _entry_totals(entry)
            if n_sets == 0:
                continue
            for group in entry_groups(state, tables, exercise_name, entry.date_key):
                bucket = volumes.setdefault(group, MuscleGroupVolume())
                bucket.sets += n_sets
                bucket.volume += load

    return volumes


def weekly_volume(
    state: TrainingState,
    tables: ReferenceTables,
    muscle_group: str,
    window_days: int = DEFAULT_WINDOW_DAYS,
    today: date | None = None,
) -> MuscleGroupVolume:
    """
    Sets and load for one muscle group within ``[today - window_days, today]``.

    Returns a zero volume for an unknown group.
    """
    day = _today(today)
    result = MuscleGroupVolume()
    for exercise_name, entries in state.lift_history.items():
        for entry in entries:
            if not in_window(entry.date_key, day, window_days):
                continue
            if muscle_group not in entry_groups(state, tables, exercise_name, entry.date_key):
                continue
            n_sets, load = _entry_totals(entry)
            result.sets += n_sets
            result.volume += load
    return result


def weekly_training_stats(
    state: TrainingState,
    window_days: int = DEFAULT_WINDOW_DAYS,
    today: date | None = None,
) -> WeeklyTrainingStats:
    """Whole-body totals across every logged exercise, mapped or not."""
    day = _today(today)
    total_sets = 0
    total_volume = 0.0
    session_days: set[str] = set()

    for entries in state.lift_history.values():
        for entry in entries:
            if not in_window(entry.date_key, day, window_days):
                continue
            n_sets, load = _entry_totals(entry)
            total_sets += n_sets
            total_volume += load
            session_days.add(entry.date_key)

    sessions = len(session_days)
    avg = int(total_sets / sessions + 0.5) if sessions else 0
    return WeeklyTrainingStats(
        total_sets=total_sets,
        total_volume=total_volume,
        sessions=sessions,
        avg_sets_per_session=avg,
    )


def volume_alerts(
    state: TrainingState,
    tables: ReferenceTables,
    window_days: int = DEFAULT_WINDOW_DAYS,
    today: date | None = None,
) -> list[VolumeAlert]:
    """
    Flag muscle groups outside their productive band.

    - sets ≥ MRV             → "high"    (recovery risk)
    - MRV − 2 ≤ sets < MRV   → "warning" (approaching MRV)
    - 0 < sets < MEV         → "low"     (under minimum effective volume)

    Untrained groups (0 sets) are not flagged.
    """
    alerts: list[VolumeAlert] = []
    volumes = all_weekly_volumes(state, tables, window_days, today)

    for group, vol in volumes.items():
        sets = vol.sets
        if sets == 0:
            continue
        lm = tables.landmarks_for(group)
        label = group.upper()
        if sets >= lm.mrv:
            alerts.append(VolumeAlert(
                muscle=group,
                level="high",
                sets=sets,
                message=f"{label} at MRV ({sets}/{lm.mrv} sets). Consider reducing volume to recover.",
            ))
        elif sets >= lm.mrv - ALERT_APPROACHING_MRV_MARGIN:
            alerts.append(VolumeAlert(
                muscle=group,
                level="warning",
                sets=sets,
                message=f"{label} approaching MRV ({sets}/{lm.mrv} sets). Monitor recovery.",
            ))
        elif sets < lm.mev:
            needed = lm.mev - sets
            alerts.append(VolumeAlert(
                muscle=group,
                level="low",
                sets=sets,
                message=f"{label} under MEV ({sets}/{lm.mev} sets). Add {needed} more sets this week.",
            ))

    return alerts
