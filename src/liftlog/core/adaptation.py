"""
Adaptation rules: deload timing and lift plateau detection.

Deloads are time-based: accumulated fatigue needs periodic dissipation,
so a lighter week is recommended every 4-6 weeks of training (reduce
volume 40-50%, maintain intensity).
"""

import logging
from datetime import date, datetime

from .config import (
    DELOAD_REASON,
    DELOAD_URGENT_REASON,
    DELOAD_URGENT_WEEKS,
    DELOAD_WEEKS,
    PLATEAU_DAYS_SINCE_PR,
    PLATEAU_MIN_SESSIONS,
)
from .dates import days_between, parse_date_key, parse_timestamp
from .models import DeloadStatus, LiftPlateau, TrainingState

logger = logging.getLogger(__name__)


def logged_day_span(state: TrainingState) -> tuple[date, date] | None:
    """First and last calendar days with any logged set, across all exercises."""
    days: list[date] = []
    for entries in state.lift_history.values():
        for entry in entries:
            if not entry.sets:
                continue
            try:
                days.append(parse_date_key(entry.date_key))
            except ValueError:
                continue
    if not days:
        return None
    return min(days), max(days)


def last_deload_day(state: TrainingState) -> date | None:
    """Calendar day of the last acknowledged deload, or None."""
    if not state.last_deload_date:
        return None
    try:
        return parse_timestamp(state.last_deload_date).date()
    except ValueError:
        logger.warning("ignoring unreadable lastDeloadDate %r", state.last_deload_date)
        return None


def should_deload(state: TrainingState, now: datetime | None = None) -> DeloadStatus:
    """
    Decide whether a deload week is due.

    Before any acknowledged deload, whole weeks are counted between the
    first and the last logged day; training gaps inside that span count as
    training time, and a break after the last session stops the clock.
    Once a deload has been acknowledged, whole weeks are counted from that
    deload to today.

    Returns:
        DeloadStatus; ``recommended`` from 4 weeks, with an escalated
        reason from 6 weeks.  Never recommended without any history.
    """
    span = logged_day_span(state)
    if span is None:
        return DeloadStatus(recommended=False)

    deload_day = last_deload_day(state)
    if deload_day is not None:
        today = (now or datetime.now()).date()
        weeks = max(0, days_between(deload_day, today) // 7)
    else:
        first, last = span
        weeks = days_between(first, last) // 7

    reason: str | None = None
    if weeks >= DELOAD_URGENT_WEEKS:
        reason = DELOAD_URGENT_REASON
    elif weeks >= DELOAD_WEEKS:
        reason = DELOAD_REASON

    return DeloadStatus(
        recommended=weeks >= DELOAD_WEEKS,
        weeks_since_deload=weeks,
        reason=reason,
    )


def mark_deload_complete(state: TrainingState, now: datetime | None = None) -> str:
    """
    Acknowledge a completed deload; the deload clock restarts from now.

    Logged history is not modified.

    Returns:
        The ISO timestamp stored as ``last_deload_date``
    """
    stamp = (now or datetime.now()).isoformat(timespec="seconds")
    state.last_deload_date = stamp
    return stamp


def detect_lift_plateaus(state: TrainingState, today: date | None = None) -> list[LiftPlateau]:
    """
    Lifts with no new PR for 3+ weeks that are still being trained.

    A lift qualifies when its record is at least 21 days old and it has at
    least 3 logged sessions.  Sorted by days since PR, longest first.
    """
    day = today or datetime.now().date()
    plateaus: list[LiftPlateau] = []

    for exercise_name, pr in state.personal_records.items():
        days_since = days_between(parse_date_key(pr.date_key), day)
        if days_since < PLATEAU_DAYS_SINCE_PR:
            continue
        if len(state.lift_history.get(exercise_name, [])) < PLATEAU_MIN_SESSIONS:
            continue
        plateaus.append(LiftPlateau(exercise_name=exercise_name, days_since_pr=days_since, last_pr=pr))

    plateaus.sort(key=lambda p: p.days_since_pr, reverse=True)
    return plateaus
