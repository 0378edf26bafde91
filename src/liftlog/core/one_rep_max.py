"""
One-rep-max estimation.

Brzycki 1993:
    1RM = weight × 36 / (37 − reps)

The relation is only trusted up to a 12-rep set, so higher rep counts are
clamped to 12 before it is applied.  A single is its own 1RM.
"""

import math
from typing import Sequence

from .config import BRZYCKI_DENOMINATOR, BRZYCKI_NUMERATOR, BRZYCKI_REP_CAP
from .models import BestSet, LiftSet


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def estimate_1rm(weight: float, reps: int) -> float:
    """
    Estimate the one-rep max for a set.

    Args:
        weight: Load lifted (≥ 0)
        reps: Reps completed (≥ 1)

    Returns:
        Estimated 1RM rounded to the nearest whole unit (a single returns
        the weight unchanged)

    Examples:
        estimate_1rm(200, 1)  → 200
        estimate_1rm(100, 12) → 144 (same as estimate_1rm(100, 20))
    """
    if reps == 1:
        return weight
    reps = min(reps, BRZYCKI_REP_CAP)
    return _round_half_up(weight * (BRZYCKI_NUMERATOR / (BRZYCKI_DENOMINATOR - reps)))


def best_set(sets: Sequence[LiftSet]) -> BestSet | None:
    """
    Pick the set with the highest estimated 1RM.

    Not necessarily the heaviest or the highest-rep set.  Ties go to the
    first occurrence.  Returns None for an empty sequence.
    """
    best: BestSet | None = None
    for s in sets:
        e1rm = estimate_1rm(s.weight, s.reps)
        if best is None or e1rm > best.e1rm:
            best = BestSet(weight=s.weight, reps=s.reps, e1rm=e1rm)
    return best


def session_volume(sets: Sequence[LiftSet]) -> float:
    """Total load of a session: Σ weight × reps."""
    return sum(s.load for s in sets)
