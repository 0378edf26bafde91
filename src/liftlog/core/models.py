"""
Data models for liftlog.

All core dataclasses representing logged lifts, records, derived volume
and the engine's recommendations.  Model constructors validate their own
invariants; the engine functions assume instances are already valid.
"""

from dataclasses import dataclass, field
from typing import Literal

from .dates import validate_date_key

ProgressionAction = Literal["maintain", "increase_weight", "add_rep", "build", "decrease_weight"]
AlertLevel = Literal["high", "warning", "low"]


@dataclass
class LiftSet:
    """
    A single completed set.

    weight == 0 is a valid bodyweight set and is distinct from a missing
    weight.
    """

    weight: float
    reps: int

    def __post_init__(self) -> None:
        """Validate set data."""
        if self.weight < 0:
            raise ValueError("weight must be non-negative")
        if self.reps < 1:
            raise ValueError("reps must be at least 1")

    @property
    def load(self) -> float:
        """weight × reps for this set."""
        return self.weight * self.reps


@dataclass
class BestSet:
    """The set of a session that produced the highest 1RM estimate."""

    weight: float
    reps: int
    e1rm: float


@dataclass
class LiftEntry:
    """
    All sets performed for one exercise on one calendar day.

    Saving the same (exercise, day) again replaces the entry rather than
    appending a second one.
    """

    exercise_name: str
    date_key: str  # YYYY-MM-DD
    sets: list[LiftSet] = field(default_factory=list)
    volume: float = 0.0
    estimated_1rm: float = 0
    best_set: BestSet | None = None
    logged_at: str | None = None  # ISO timestamp of the write

    def __post_init__(self) -> None:
        validate_date_key(self.date_key)

    @property
    def set_count(self) -> int:
        return len(self.sets)

    @property
    def average_reps(self) -> float:
        """Mean reps across the session's sets (0.0 for an empty entry)."""
        if not self.sets:
            return 0.0
        return sum(s.reps for s in self.sets) / len(self.sets)


@dataclass
class PersonalRecord:
    """Best-ever estimated 1RM for one exercise and the set that produced it."""

    weight: float
    reps: int
    estimated_1rm: float
    date_key: str

    def __post_init__(self) -> None:
        validate_date_key(self.date_key)


@dataclass
class VolumeLandmarks:
    """
    Weekly set-count landmarks for a muscle group.

    MEV = Minimum Effective Volume, MAV = Maximum Adaptive Volume,
    MRV = Maximum Recoverable Volume.
    """

    mev: int
    mav: int
    mrv: int

    def __post_init__(self) -> None:
        if min(self.mev, self.mav, self.mrv) < 0:
            raise ValueError("volume landmarks must be non-negative")
        if not self.mev <= self.mav <= self.mrv:
            raise ValueError(
                f"volume landmarks must satisfy MEV <= MAV <= MRV, "
                f"got {self.mev}/{self.mav}/{self.mrv}"
            )


@dataclass
class MuscleGroupVolume:
    """Sets and load accumulated by a muscle group within a trailing window."""

    sets: int = 0
    volume: float = 0.0


@dataclass
class TrainingState:
    """
    The shared training-state object every engine operation reads and writes.

    Owned by the caller (a session, a CLI invocation); the persistence layer
    loads and flushes it, the engine only mutates it in memory.

    ``exercise_swaps`` maps a date key to {original exercise: substitute}.
    """

    lift_history: dict[str, list[LiftEntry]] = field(default_factory=dict)
    personal_records: dict[str, PersonalRecord] = field(default_factory=dict)
    last_deload_date: str | None = None  # ISO timestamp
    exercise_swaps: dict[str, dict[str, str]] = field(default_factory=dict)

    def entry_count(self) -> int:
        """Total number of logged entries across all exercises."""
        return sum(len(entries) for entries in self.lift_history.values())


@dataclass
class LogResult:
    """Outcome of a ledger write, used by callers to celebrate a PR."""

    is_pr: bool
    estimated_1rm: float
    volume: float
    previous_best: PersonalRecord | None


@dataclass
class ProgressionSuggestion:
    """
    Target for the next session of an exercise.

    ``reps_max`` is set only when the target is a range (after a load
    increase reps drop back to e.g. 6-8).
    """

    weight: float
    reps: int
    message: str
    action: ProgressionAction
    reps_max: int | None = None

    @property
    def reps_label(self) -> str:
        if self.reps_max is not None and self.reps_max != self.reps:
            return f"{self.reps}-{self.reps_max}"
        return str(self.reps)


@dataclass
class DeloadStatus:
    """Deload recommendation and the elapsed time it was based on."""

    recommended: bool
    weeks_since_deload: int = 0
    reason: str | None = None


@dataclass
class RecoveryPriority:
    """One body area ranked by how close its muscles are to their MRV."""

    area: str
    score: float  # sets / MRV of the most fatigued muscle
    muscle: str | None
    reason: str
    sets: int


@dataclass
class WeeklyTrainingStats:
    """Whole-body training totals within a trailing window."""

    total_sets: int
    total_volume: float
    sessions: int
    avg_sets_per_session: int


@dataclass
class VolumeAlert:
    """A muscle group outside its productive volume band this week."""

    muscle: str
    level: AlertLevel
    sets: int
    message: str


@dataclass
class LiftPlateau:
    """An exercise whose personal record has not moved for a while."""

    exercise_name: str
    days_since_pr: int
    last_pr: PersonalRecord
