"""
Lift ledger: the single write path for logged sets.

Every downstream computation (PRs, volume, progression, deload, recovery)
reads what this module writes.  Entries are kept per exercise in
chronological order with at most one entry per calendar day.
"""

import logging
from datetime import datetime
from typing import Sequence

from .config import LEDGER_MAX_ENTRIES
from .dates import today_key, validate_date_key
from .models import LiftEntry, LiftSet, LogResult, PersonalRecord, TrainingState
from .one_rep_max import best_set, session_volume

logger = logging.getLogger(__name__)


def _upsert_entry(entries: list[LiftEntry], entry: LiftEntry) -> None:
    """Replace the same-day entry, or insert in chronological position."""
    insert_idx = len(entries)
    for i, existing in enumerate(entries):
        if existing.date_key == entry.date_key:
            entries[i] = entry
            return
        if entry.date_key < existing.date_key:
            insert_idx = i
            break
    entries.insert(insert_idx, entry)


def log_lift(
    state: TrainingState,
    exercise_name: str,
    sets: Sequence[LiftSet],
    date_key: str | None = None,
    now: datetime | None = None,
) -> LogResult:
    """
    Record a session's sets for an exercise and update its personal record.

    Saving again for the same (exercise, day) replaces the entry.  Pass the
    logical day explicitly when the session started before midnight and is
    being saved after it; otherwise the local day of ``now`` is used.

    Each exercise keeps its most recent 100 entries.  A backdated entry older
    than all of them is dropped straight away and never becomes a record.

    Args:
        state: Shared training state (mutated in place)
        exercise_name: Exercise as named in the reference tables
        sets: Completed sets, in order; must be non-empty
        date_key: Logical session day (YYYY-MM-DD)
        now: Current time (default: wall clock)

    Returns:
        LogResult with PR flag, session estimate, volume and previous record

    Raises:
        ValueError: If ``sets`` is empty or ``date_key`` is malformed
    """
    if not sets:
        raise ValueError(
            "log_lift requires at least one set; use remove_lift_entry to clear a day"
        )
    now = now or datetime.now()
    target_day = validate_date_key(date_key) if date_key is not None else today_key(now)

    recorded_sets = [LiftSet(weight=s.weight, reps=s.reps) for s in sets]
    top = best_set(recorded_sets)
    estimated = top.e1rm if top is not None else 0
    volume = session_volume(recorded_sets)

    entry = LiftEntry(
        exercise_name=exercise_name,
        date_key=target_day,
        sets=recorded_sets,
        volume=volume,
        estimated_1rm=estimated,
        best_set=top,
        logged_at=now.isoformat(timespec="seconds"),
    )

    entries = state.lift_history.setdefault(exercise_name, [])
    _upsert_entry(entries, entry)
    if len(entries) > LEDGER_MAX_ENTRIES:
        dropped = len(entries) - LEDGER_MAX_ENTRIES
        del entries[:dropped]
        logger.debug("trimmed %d old entries for %s", dropped, exercise_name)

    previous = state.personal_records.get(exercise_name)
    if not any(e is entry for e in entries):
        # backdated past the cap: the entry was trimmed on arrival
        logger.warning(
            "%s %s is older than the last %d entries; not recorded",
            exercise_name, target_day, LEDGER_MAX_ENTRIES,
        )
        return LogResult(is_pr=False, estimated_1rm=estimated, volume=volume, previous_best=previous)

    is_pr = previous is None or estimated > previous.estimated_1rm
    if is_pr and top is not None:
        state.personal_records[exercise_name] = PersonalRecord(
            weight=top.weight,
            reps=top.reps,
            estimated_1rm=estimated,
            date_key=target_day,
        )
        logger.info(
            "new PR for %s: %s x %d (e1RM %s)", exercise_name, top.weight, top.reps, estimated
        )

    return LogResult(is_pr=is_pr, estimated_1rm=estimated, volume=volume, previous_best=previous)


def remove_lift_entry(state: TrainingState, exercise_name: str, date_key: str) -> bool:
    """
    Delete the entry for (exercise, day) if present.

    Personal records are left untouched.

    Returns:
        True if an entry was removed, False if there was nothing to remove

    Raises:
        ValueError: If ``date_key`` is malformed
    """
    validate_date_key(date_key)
    entries = state.lift_history.get(exercise_name)
    if not entries:
        return False
    for i, entry in enumerate(entries):
        if entry.date_key == date_key:
            del entries[i]
            return True
    return False


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def get_last_lift(state: TrainingState, exercise_name: str) -> LiftEntry | None:
    """Most recent entry for an exercise, or None if never logged."""
    entries = state.lift_history.get(exercise_name)
    if not entries:
        return None
    return entries[-1]


def get_lift_history(state: TrainingState, exercise_name: str, limit: int = 10) -> list[LiftEntry]:
    """Up to ``limit`` most recent entries, oldest first."""
    entries = state.lift_history.get(exercise_name)
    if not entries or limit <= 0:
        return []
    return list(entries[-limit:])


def get_session_sets(state: TrainingState, exercise_name: str, date_key: str) -> list[LiftSet]:
    """Copy of the sets logged for an exercise on a given day ([] if none)."""
    for entry in state.lift_history.get(exercise_name, []):
        if entry.date_key == date_key:
            return [LiftSet(weight=s.weight, reps=s.reps) for s in entry.sets]
    return []


def get_pr(state: TrainingState, exercise_name: str) -> PersonalRecord | None:
    return state.personal_records.get(exercise_name)


def get_all_prs(state: TrainingState) -> dict[str, PersonalRecord]:
    return dict(state.personal_records)


# ---------------------------------------------------------------------------
# Day-scoped exercise swaps
# ---------------------------------------------------------------------------


def save_exercise_swap(
    state: TrainingState,
    original_exercise: str,
    substitute_exercise: str,
    date_key: str | None = None,
    now: datetime | None = None,
) -> None:
    """Record that ``original_exercise`` is replaced by a substitute for one day."""
    day = validate_date_key(date_key) if date_key is not None else today_key(now)
    state.exercise_swaps.setdefault(day, {})[original_exercise] = substitute_exercise


def get_exercise_swap(
    state: TrainingState,
    original_exercise: str,
    date_key: str | None = None,
    now: datetime | None = None,
) -> str | None:
    """Substitute for ``original_exercise`` on the given day, or None."""
    day = date_key if date_key is not None else today_key(now)
    return state.exercise_swaps.get(day, {}).get(original_exercise)


def get_day_swaps(
    state: TrainingState, date_key: str | None = None, now: datetime | None = None
) -> dict[str, str]:
    """All swaps for a day as {original: substitute}."""
    day = date_key if date_key is not None else today_key(now)
    return dict(state.exercise_swaps.get(day, {}))


def resolve_exercise(
    state: TrainingState,
    exercise_name: str,
    date_key: str | None = None,
    now: datetime | None = None,
) -> str:
    """The exercise actually trained on a day: the swap target if one exists."""
    return get_exercise_swap(state, exercise_name, date_key, now) or exercise_name
