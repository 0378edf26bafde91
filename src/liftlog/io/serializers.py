"""
JSON serialization for the training state.

Handles conversion between the core dataclasses and the persisted state
shape shared with other clients:

    liftHistory:     {exercise: [{date, timestamp, sets, volume, estimated1RM, bestSet}]}
    personalRecords: {exercise: {weight, reps, estimated1RM, date}}
    lastDeloadDate:  ISO timestamp (absent if never deloaded)
    exerciseSwaps:   {dateKey: {original: substitute}}

Reading is lenient: a corrupt entry or set is dropped (with a logged
warning) rather than failing the whole file.
"""

import json
import logging
import re
from typing import Any

from ..core.dates import validate_date_key
from ..core.models import BestSet, LiftEntry, LiftSet, PersonalRecord, TrainingState
from ..core.one_rep_max import best_set

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_date(date_str: str) -> str:
    """
    Validate a YYYY-MM-DD date key.

    Raises:
        ValidationError: If date format is invalid
    """
    try:
        return validate_date_key(date_str)
    except ValueError as e:
        raise ValidationError(str(e)) from e


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def validate_positive(value: int | float, name: str) -> int | float:
    """
    Validate that a value is positive.

    Raises:
        ValidationError: If value is not positive
    """
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


# ---------------------------------------------------------------------------
# Sets
# ---------------------------------------------------------------------------


def lift_set_to_dict(s: LiftSet) -> dict[str, Any]:
    return {"weight": s.weight, "reps": s.reps}


def dict_to_lift_set(data: dict[str, Any]) -> LiftSet:
    """
    Convert dict to LiftSet.

    Raises:
        ValidationError: If weight/reps are missing or out of range
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Set must be an object, got {type(data).__name__}")
    try:
        weight = float(data.get("weight", 0) or 0)
        reps = int(data["reps"])
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid set {data!r}: {e}") from e
    validate_non_negative(weight, "weight")
    validate_positive(reps, "reps")
    return LiftSet(weight=weight, reps=reps)


# ---------------------------------------------------------------------------
# Entries and records
# ---------------------------------------------------------------------------


def lift_entry_to_dict(entry: LiftEntry) -> dict[str, Any]:
    """Convert LiftEntry to the persisted dict shape."""
    best = entry.best_set
    return {
        "date": entry.date_key,
        "timestamp": entry.logged_at,
        "sets": [lift_set_to_dict(s) for s in entry.sets],
        "volume": entry.volume,
        "estimated1RM": entry.estimated_1rm,
        "bestSet": (
            {"weight": best.weight, "reps": best.reps, "e1rm": best.e1rm}
            if best is not None
            else None
        ),
    }


def dict_to_lift_entry(exercise_name: str, data: dict[str, Any]) -> LiftEntry:
    """
    Convert a persisted dict to LiftEntry.

    ``dateKey`` is accepted as an alias of ``date``.  A missing or
    malformed ``sets`` list loads as an empty entry (zero sets, zero
    volume); individual bad sets are dropped.  Missing derived fields are
    recomputed from the surviving sets.

    Raises:
        ValidationError: If the entry has no valid date
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Entry must be an object, got {type(data).__name__}")
    date_key = validate_date(str(data.get("date") or data.get("dateKey") or ""))

    raw_sets = data.get("sets")
    sets: list[LiftSet] = []
    if isinstance(raw_sets, list):
        for raw in raw_sets:
            try:
                sets.append(dict_to_lift_set(raw))
            except ValidationError as e:
                logger.warning("dropping set in %s %s: %s", exercise_name, date_key, e)
    else:
        logger.warning("entry %s %s has no sets; treating as empty", exercise_name, date_key)

    if not sets:
        return LiftEntry(exercise_name=exercise_name, date_key=date_key,
                         logged_at=data.get("timestamp"))

    computed_best = best_set(sets)
    volume = data.get("volume")
    estimated = data.get("estimated1RM")
    raw_best = data.get("bestSet")
    if isinstance(raw_best, dict) and "reps" in raw_best:
        best = BestSet(
            weight=float(raw_best.get("weight", 0) or 0),
            reps=int(raw_best["reps"]),
            e1rm=raw_best.get("e1rm", estimated if estimated is not None else 0),
        )
    else:
        best = computed_best

    return LiftEntry(
        exercise_name=exercise_name,
        date_key=date_key,
        sets=sets,
        volume=float(volume) if isinstance(volume, (int, float)) else sum(s.load for s in sets),
        estimated_1rm=estimated if isinstance(estimated, (int, float)) else (best.e1rm if best else 0),
        best_set=best,
        logged_at=data.get("timestamp"),
    )


def personal_record_to_dict(pr: PersonalRecord) -> dict[str, Any]:
    return {
        "weight": pr.weight,
        "reps": pr.reps,
        "estimated1RM": pr.estimated_1rm,
        "date": pr.date_key,
    }


def dict_to_personal_record(data: dict[str, Any]) -> PersonalRecord:
    """
    Convert dict to PersonalRecord.

    Raises:
        ValidationError: If required fields are missing or invalid
    """
    try:
        return PersonalRecord(
            weight=float(data.get("weight", 0) or 0),
            reps=int(data["reps"]),
            estimated_1rm=data["estimated1RM"],
            date_key=validate_date(str(data.get("date") or data.get("dateKey") or "")),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid personal record {data!r}: {e}") from e


# ---------------------------------------------------------------------------
# Whole state
# ---------------------------------------------------------------------------


def training_state_to_dict(state: TrainingState) -> dict[str, Any]:
    """Convert TrainingState to the persisted JSON shape."""
    data: dict[str, Any] = {
        "liftHistory": {
            name: [lift_entry_to_dict(e) for e in entries]
            for name, entries in state.lift_history.items()
        },
        "personalRecords": {
            name: personal_record_to_dict(pr) for name, pr in state.personal_records.items()
        },
        "exerciseSwaps": {day: dict(swaps) for day, swaps in state.exercise_swaps.items()},
    }
    if state.last_deload_date is not None:
        data["lastDeloadDate"] = state.last_deload_date
    return data


def dict_to_training_state(data: dict[str, Any]) -> TrainingState:
    """
    Convert a persisted dict to TrainingState.

    Entries are re-sorted chronologically and deduplicated by day (the
    later record for a day wins).  Unreadable entries and records are
    dropped with a warning.

    Raises:
        ValidationError: If the top level is not an object
    """
    if not isinstance(data, dict):
        raise ValidationError("Training state must be a JSON object")

    state = TrainingState()

    for name, raw_entries in (data.get("liftHistory") or {}).items():
        if not isinstance(raw_entries, list):
            logger.warning("liftHistory[%r] is not a list; skipping", name)
            continue
        by_day: dict[str, LiftEntry] = {}
        for raw in raw_entries:
            try:
                entry = dict_to_lift_entry(name, raw)
            except ValidationError as e:
                logger.warning("dropping entry for %s: %s", name, e)
                continue
            by_day[entry.date_key] = entry
        state.lift_history[name] = [by_day[d] for d in sorted(by_day)]

    for name, raw_pr in (data.get("personalRecords") or {}).items():
        try:
            state.personal_records[name] = dict_to_personal_record(raw_pr)
        except ValidationError as e:
            logger.warning("dropping personal record for %s: %s", name, e)

    last_deload = data.get("lastDeloadDate")
    state.last_deload_date = str(last_deload) if last_deload else None

    for day, swaps in (data.get("exerciseSwaps") or {}).items():
        if isinstance(swaps, dict):
            state.exercise_swaps[str(day)] = {str(k): str(v) for k, v in swaps.items()}

    return state


def training_state_to_json(state: TrainingState) -> str:
    return json.dumps(training_state_to_dict(state), indent=2)


def json_to_training_state(text: str) -> TrainingState:
    """
    Deserialize a JSON document to TrainingState.

    Raises:
        ValidationError: If JSON is invalid
    """
    try:
        data = json.loads(text) if text.strip() else {}
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e
    return dict_to_training_state(data)


# ---------------------------------------------------------------------------
# Sets string parsing (CLI input)
# ---------------------------------------------------------------------------


def parse_sets_string(sets_str: str) -> list[LiftSet]:
    """
    Parse a sets string into LiftSets.

    Comma-separated groups, each one of:
        WxR      e.g. "185x5"     weight × reps
        WxRxN    e.g. "135x8x3"   N sets of R reps at W
        R@W      e.g. "5@185"     reps at weight
        R        e.g. "12"        bodyweight set (weight 0)

    'x', 'X' and '×' are all accepted.

    Raises:
        ValidationError: If format is invalid or a value is out of range
    """
    if not sets_str or not sets_str.strip():
        raise ValidationError("Sets string cannot be empty")

    sets: list[LiftSet] = []
    parts = [p.strip() for p in sets_str.split(",") if p.strip()]

    for part in parts:
        match_wrn = re.fullmatch(r"(\d+(?:\.\d+)?)\s*[xX×]\s*(-?\d+)\s*[xX×]\s*(\d+)", part)
        match_wr = re.fullmatch(r"(\d+(?:\.\d+)?)\s*[xX×]\s*(-?\d+)", part)
        match_at = re.fullmatch(r"(-?\d+)\s*@\s*(\d+(?:\.\d+)?)", part)
        match_bare = re.fullmatch(r"(-?\d+)", part)

        if match_wrn:
            weight = float(match_wrn.group(1))
            reps = int(match_wrn.group(2))
            count = int(match_wrn.group(3))
        elif match_wr:
            weight = float(match_wr.group(1))
            reps = int(match_wr.group(2))
            count = 1
        elif match_at:
            reps = int(match_at.group(1))
            weight = float(match_at.group(2))
            count = 1
        elif match_bare:
            reps = int(match_bare.group(1))
            weight = 0.0
            count = 1
        else:
            raise ValidationError(
                f"Invalid set format: '{part}'.\n"
                f"Use: weightxreps (e.g. 185x5), weightxrepsxsets (e.g. 135x8x3),\n"
                f"     reps@weight (e.g. 5@185), or bare reps for bodyweight (e.g. 12)."
            )

        if reps < 1:
            raise ValidationError(f"Reps must be at least 1: {reps}")
        if count < 1:
            raise ValidationError(f"Set count must be at least 1: {count}")

        sets.extend(LiftSet(weight=weight, reps=reps) for _ in range(count))

    if not sets:
        raise ValidationError("No valid sets found in sets string")

    return sets
