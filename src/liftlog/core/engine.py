"""
ProgressionEngine: one object exposing every engine operation.

Composes the ledger, estimator, volume, progression, adaptation and
recovery modules over a single TrainingState and a set of reference
tables.  The engine keeps no state of its own besides those references,
so any number of engines may wrap the same state.

Usage:
    engine = ProgressionEngine(state)
    result = engine.log_lift("Barbell Bench Press", [LiftSet(185, 5)])
    engine.suggest_next("Barbell Bench Press")
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Sequence

from . import adaptation, ledger, progression, recovery, volume
from .config import DEFAULT_WINDOW_DAYS
from .config_loader import ReferenceTables, get_reference_tables
from .dates import parse_date_key, today_key
from .models import (
    DeloadStatus,
    LiftEntry,
    LiftPlateau,
    LiftSet,
    LogResult,
    MuscleGroupVolume,
    PersonalRecord,
    ProgressionSuggestion,
    RecoveryPriority,
    TrainingState,
    VolumeAlert,
    WeeklyTrainingStats,
)
from .one_rep_max import estimate_1rm

Clock = Callable[[], datetime]


class ProgressionEngine:
    """
    Adaptive progression and volume-tracking operations over a TrainingState.

    Args:
        state: Shared training state, mutated in place by write operations
        tables: Reference tables (default: bundled + user YAML)
        clock: Zero-arg callable returning "now" (default: datetime.now)
    """

    def __init__(
        self,
        state: TrainingState,
        tables: ReferenceTables | None = None,
        clock: Clock | None = None,
    ):
        self.state = state
        self.tables = tables if tables is not None else get_reference_tables()
        self._clock: Clock = clock or datetime.now

    def now(self) -> datetime:
        return self._clock()

    def today(self) -> date:
        return self._clock().date()

    def today_key(self) -> str:
        return today_key(self._clock())

    # ── Lift ledger ─────────────────────────────────────────────────────────

    def log_lift(
        self,
        exercise_name: str,
        sets: Sequence[LiftSet],
        date_key: str | None = None,
    ) -> LogResult:
        return ledger.log_lift(self.state, exercise_name, sets, date_key, now=self.now())

    def remove_lift_entry(self, exercise_name: str, date_key: str) -> bool:
        return ledger.remove_lift_entry(self.state, exercise_name, date_key)

    def get_last_lift(self, exercise_name: str) -> LiftEntry | None:
        return ledger.get_last_lift(self.state, exercise_name)

    def get_lift_history(self, exercise_name: str, limit: int = 10) -> list[LiftEntry]:
        return ledger.get_lift_history(self.state, exercise_name, limit)

    def get_session_sets(self, exercise_name: str, date_key: str | None = None) -> list[LiftSet]:
        return ledger.get_session_sets(self.state, exercise_name, date_key or self.today_key())

    # ── Estimation and records ──────────────────────────────────────────────

    @staticmethod
    def estimate_1rm(weight: float, reps: int) -> float:
        return estimate_1rm(weight, reps)

    def get_pr(self, exercise_name: str) -> PersonalRecord | None:
        return ledger.get_pr(self.state, exercise_name)

    def get_all_prs(self) -> dict[str, PersonalRecord]:
        return ledger.get_all_prs(self.state)

    # ── Volume ──────────────────────────────────────────────────────────────

    def weekly_volume(
        self, muscle_group: str, window_days: int = DEFAULT_WINDOW_DAYS
    ) -> MuscleGroupVolume:
        return volume.weekly_volume(self.state, self.tables, muscle_group, window_days, self.today())

    def all_weekly_volumes(
        self, window_days: int = DEFAULT_WINDOW_DAYS
    ) -> dict[str, MuscleGroupVolume]:
        return volume.all_weekly_volumes(self.state, self.tables, window_days, self.today())

    def weekly_training_stats(self, window_days: int = DEFAULT_WINDOW_DAYS) -> WeeklyTrainingStats:
        return volume.weekly_training_stats(self.state, window_days, self.today())

    def volume_alerts(self) -> list[VolumeAlert]:
        return volume.volume_alerts(self.state, self.tables, today=self.today())

    # ── Progression ─────────────────────────────────────────────────────────

    def suggest_next(
        self, exercise_name: str, date_key: str | None = None
    ) -> ProgressionSuggestion | None:
        return progression.suggest_next(
            self.state, self.tables, exercise_name, date_key, today=self.today()
        )

    # ── Deload and plateaus ─────────────────────────────────────────────────

    def should_deload(self) -> DeloadStatus:
        return adaptation.should_deload(self.state, now=self.now())

    def mark_deload_complete(self) -> str:
        return adaptation.mark_deload_complete(self.state, now=self.now())

    def detect_lift_plateaus(self) -> list[LiftPlateau]:
        return adaptation.detect_lift_plateaus(self.state, today=self.today())

    # ── Recovery ────────────────────────────────────────────────────────────

    def prioritized_areas(self) -> list[RecoveryPriority]:
        return recovery.prioritized_areas(self.state, self.tables, today=self.today())

    # ── Exercise swaps ──────────────────────────────────────────────────────

    def save_exercise_swap(
        self, original_exercise: str, substitute_exercise: str, date_key: str | None = None
    ) -> None:
        ledger.save_exercise_swap(
            self.state, original_exercise, substitute_exercise, date_key, now=self.now()
        )

    def get_exercise_swap(self, original_exercise: str, date_key: str | None = None) -> str | None:
        return ledger.get_exercise_swap(self.state, original_exercise, date_key, now=self.now())

    def get_day_swaps(self, date_key: str | None = None) -> dict[str, str]:
        return ledger.get_day_swaps(self.state, date_key, now=self.now())

    def alternatives_for(self, exercise_name: str) -> list[str]:
        return self.tables.alternatives_for(exercise_name)

    def muscle_groups_for(self, exercise_name: str, date_key: str | None = None) -> list[str]:
        """Groups an exercise counts toward on a day (swap-aware)."""
        day = date_key or self.today_key()
        parse_date_key(day)
        return volume.entry_groups(self.state, self.tables, exercise_name, day)
