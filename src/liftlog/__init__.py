"""
liftlog: adaptive progression and volume tracking for strength training.

Logs sets per exercise and day, tracks estimated-1RM personal records,
aggregates weekly sets per muscle group against MEV/MAV/MRV landmarks and
turns that history into next-session targets, deload timing and recovery
priorities.
"""

__version__ = "0.1.0"
