"""
Training engine for liftlog.

The modules here are pure functions over a TrainingState plus the
reference tables; ProgressionEngine bundles them behind one object.
"""

from .config_loader import ReferenceTables, get_reference_tables, load_reference_tables
from .engine import ProgressionEngine
from .models import LiftSet, TrainingState
from .one_rep_max import estimate_1rm

__all__ = [
    "ProgressionEngine",
    "ReferenceTables",
    "LiftSet",
    "TrainingState",
    "estimate_1rm",
    "get_reference_tables",
    "load_reference_tables",
]
