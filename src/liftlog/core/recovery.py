"""
Fatigue-based recovery prioritization.

Ranks mobility/recovery body areas (foam rolling, stretching) by how much
of their muscles' weekly recoverable volume has been used:

    score(area) = max over muscles m of  sets_this_week(m) / MRV(m)

Recomputed from the ledger on every call so a just-logged set shows up
immediately.
"""

from datetime import date

from .config import (
    DEFAULT_WINDOW_DAYS,
    RECOVERY_MODERATE_FATIGUE,
    RECOVERY_NEEDS_RECOVERY,
    RECOVERY_TRAINED,
)
from .config_loader import ReferenceTables
from .models import MuscleGroupVolume, RecoveryPriority, TrainingState
from .volume import all_weekly_volumes


def mrv_fraction(sets: int, mrv: int) -> float:
    """Share of MRV used; 0.0 when MRV is not positive."""
    if mrv <= 0:
        return 0.0
    return sets / mrv


def recovery_reason(muscle: str, score: float) -> str:
    """Human-readable band for a fatigue score."""
    label = muscle.upper()
    pct = int(score * 100 + 0.5)
    if score >= RECOVERY_NEEDS_RECOVERY:
        return f"{label} at {pct}% MRV - needs recovery"
    if score >= RECOVERY_MODERATE_FATIGUE:
        return f"{label} at {pct}% MRV - moderate fatigue"
    if score >= RECOVERY_TRAINED:
        return f"{label} trained this week"
    return f"{label} - light recovery"


def prioritized_areas(
    state: TrainingState,
    tables: ReferenceTables,
    window_days: int = DEFAULT_WINDOW_DAYS,
    today: date | None = None,
) -> list[RecoveryPriority]:
    """
    Body areas ordered from most to least fatigued.

    Each area takes the score of its most fatigued muscle (first listed
    muscle on ties).  Areas with equal scores keep their configuration
    order, so untrained areas (score 0) sink to the bottom deterministically.
    """
    volumes = all_weekly_volumes(state, tables, window_days, today)
    priorities: list[RecoveryPriority] = []

    for area, muscles in tables.body_areas.items():
        best_muscle: str | None = None
        best_score = 0.0
        for muscle in muscles:
            vol = volumes.get(muscle, MuscleGroupVolume())
            score = mrv_fraction(vol.sets, tables.landmarks_for(muscle).mrv)
            if best_muscle is None or score > best_score:
                best_muscle = muscle
                best_score = score

        sets = volumes.get(best_muscle, MuscleGroupVolume()).sets if best_muscle else 0
        priorities.append(
            RecoveryPriority(
                area=area,
                score=best_score,
                muscle=best_muscle,
                reason=recovery_reason(best_muscle, best_score) if best_muscle else "light recovery",
                sets=sets,
            )
        )

    priorities.sort(key=lambda p: p.score, reverse=True)
    return priorities
