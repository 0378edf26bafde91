"""
Configuration constants for the progression and volume-tracking engine.

All adjustable thresholds are centralized here for easy tuning.
Reference tables (muscle groups, volume landmarks, body areas) live in
the bundled training_tables.yaml and are loaded by config_loader.py.
"""

from typing import Final

# =============================================================================
# LIFT LEDGER
# =============================================================================

LEDGER_MAX_ENTRIES: Final[int] = 100  # Most recent entries kept per exercise
DATE_KEY_FORMAT: Final[str] = "%Y-%m-%d"

# =============================================================================
# ONE-REP-MAX ESTIMATION (Brzycki)
# =============================================================================

BRZYCKI_NUMERATOR: Final[float] = 36.0
BRZYCKI_DENOMINATOR: Final[float] = 37.0
BRZYCKI_REP_CAP: Final[int] = 12  # Formula not trusted past a 12-rep set

# =============================================================================
# VOLUME TRACKING
# =============================================================================

DEFAULT_WINDOW_DAYS: Final[int] = 7

# Fallback landmarks when the YAML carries no "default" entry
DEFAULT_MEV: Final[int] = 6
DEFAULT_MAV: Final[int] = 14
DEFAULT_MRV: Final[int] = 20

# Volume alerts
ALERT_APPROACHING_MRV_MARGIN: Final[int] = 2  # sets below MRV that raise a warning

# =============================================================================
# DOUBLE PROGRESSION
# =============================================================================

NEAR_MRV_MARGIN: Final[int] = 3  # within this many sets of MRV → maintain
WEIGHT_INCREMENT: Final[float] = 5.0
WEIGHT_DECREMENT: Final[float] = 5.0
MIN_WEIGHT: Final[float] = 5.0
WEIGHT_UNIT: Final[str] = "lbs"

REPS_PROGRESS_THRESHOLD: Final[int] = 12  # avg reps at which load goes up
REPS_PUSH_THRESHOLD: Final[int] = 10
REPS_BUILD_THRESHOLD: Final[int] = 8
REPS_REBUILD_THRESHOLD: Final[int] = 6  # below this the load comes down

RESET_REPS_LOW: Final[int] = 6  # rep range after a load increase
RESET_REPS_HIGH: Final[int] = 8
REBUILD_TARGET_REPS: Final[int] = 8

# =============================================================================
# DELOAD
# =============================================================================

DELOAD_WEEKS: Final[int] = 4
DELOAD_URGENT_WEEKS: Final[int] = 6

DELOAD_REASON: Final[str] = "Consider a deload week to optimize recovery"
DELOAD_URGENT_REASON: Final[str] = (
    "Over 6 weeks without deload - fatigue likely accumulated"
)

# =============================================================================
# RECOVERY PRIORITIZATION (fraction of MRV used this week)
# =============================================================================

RECOVERY_NEEDS_RECOVERY: Final[float] = 0.9
RECOVERY_MODERATE_FATIGUE: Final[float] = 0.7
RECOVERY_TRAINED: Final[float] = 0.5

# =============================================================================
# PLATEAU DETECTION
# =============================================================================

PLATEAU_DAYS_SINCE_PR: Final[int] = 21
PLATEAU_MIN_SESSIONS: Final[int] = 3
