"""
Integration tests for ProgressionEngine.

Drive the engine through realistic multi-session sequences with a fixed
clock and check that ledger writes flow through to records, volume,
suggestions, alerts and plateaus.
"""

from datetime import date, datetime, timedelta

import pytest

from liftlog.core.engine import ProgressionEngine
from liftlog.core.config_loader import ReferenceTables
from liftlog.core.models import LiftSet, TrainingState, VolumeLandmarks
from liftlog.io.serializers import dict_to_training_state


def _tables() -> ReferenceTables:
    return ReferenceTables(
        muscle_groups={
            "chest": ["Barbell Bench Press", "Dumbbell Bench Press"],
            "back": ["Dumbbell Rows", "Seated Cable Row"],
            "quads": ["Barbell Back Squat", "Leg Press"],
            "hamstrings": ["Romanian Deadlift"],
        },
        volume_landmarks={
            "chest": VolumeLandmarks(8, 14, 20),
            "back": VolumeLandmarks(8, 16, 25),
            "quads": VolumeLandmarks(6, 14, 20),
            "hamstrings": VolumeLandmarks(4, 10, 16),
        },
        body_areas={"Chest": ["chest"], "Upper Back": ["back"]},
        exercise_alternatives={"Dumbbell Rows": ["Seated Cable Row", "Machine Row", "T-Bar Row"]},
    )


class Clock:
    """Settable clock for the engine."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def _sets(weight: float, reps: int, n: int = 1) -> list[LiftSet]:
    return [LiftSet(weight=weight, reps=reps) for _ in range(n)]


@pytest.fixture
def clock() -> Clock:
    return Clock(datetime(2026, 3, 15, 18, 30))


@pytest.fixture
def engine(clock: Clock) -> ProgressionEngine:
    return ProgressionEngine(TrainingState(), tables=_tables(), clock=clock)


BENCH = "Barbell Bench Press"


class TestLedger:
    def test_same_day_save_replaces_entry(self, engine):
        engine.log_lift(BENCH, _sets(185, 5, 3))
        engine.log_lift(BENCH, _sets(185, 6, 3))

        history = engine.get_lift_history(BENCH)
        assert len(history) == 1
        assert [s.reps for s in history[0].sets] == [6, 6, 6]
        assert history[0].date_key == "2026-03-15"

    def test_save_is_idempotent(self, engine):
        engine.log_lift(BENCH, _sets(185, 5, 3))
        first = engine.weekly_volume("chest")
        engine.log_lift(BENCH, _sets(185, 5, 3))
        assert engine.weekly_volume("chest") == first
        assert engine.state.entry_count() == 1

    def test_backdated_entry_inserted_in_order(self, engine):
        engine.log_lift(BENCH, _sets(185, 5), "2026-03-10")
        engine.log_lift(BENCH, _sets(185, 5), "2026-03-14")
        engine.log_lift(BENCH, _sets(185, 5), "2026-03-12")

        days = [e.date_key for e in engine.get_lift_history(BENCH)]
        assert days == ["2026-03-10", "2026-03-12", "2026-03-14"]
        assert engine.get_last_lift(BENCH).date_key == "2026-03-14"

    def test_session_started_before_midnight_keeps_its_day(self, engine, clock):
        clock.now = datetime(2026, 3, 16, 0, 20)
        engine.log_lift(BENCH, _sets(185, 5), "2026-03-15")
        assert engine.get_last_lift(BENCH).date_key == "2026-03-15"

    def test_history_limit_returns_most_recent(self, engine):
        for day in range(1, 6):
            engine.log_lift(BENCH, _sets(185, 5), f"2026-03-0{day}")
        days = [e.date_key for e in engine.get_lift_history(BENCH, limit=2)]
        assert days == ["2026-03-04", "2026-03-05"]

    def test_cap_drops_oldest(self, engine):
        start = date(2025, 1, 1)
        for i in range(101):
            engine.log_lift(BENCH, _sets(100, 5), (start + timedelta(days=i)).isoformat())

        history = engine.state.lift_history[BENCH]
        assert len(history) == 100
        assert history[0].date_key == "2025-01-02"

    def test_entry_older_than_cap_is_not_a_pr(self, engine):
        start = date(2025, 1, 2)
        for i in range(100):
            engine.log_lift(BENCH, _sets(100, 5), (start + timedelta(days=i)).isoformat())

        # 300×5 would be a record, but 2024-12-01 is older than all 100 entries
        result = engine.log_lift(BENCH, _sets(300, 5), "2024-12-01")
        assert not result.is_pr
        # 100 × 36/32 = 112.5 → 113
        pr = engine.get_pr(BENCH)
        assert (pr.estimated_1rm, pr.date_key) == (113, "2025-01-02")
        history = engine.state.lift_history[BENCH]
        assert len(history) == 100
        assert history[0].date_key == "2025-01-02"
        assert engine.get_session_sets(BENCH, "2024-12-01") == []

    def test_empty_sets_rejected(self, engine):
        with pytest.raises(ValueError):
            engine.log_lift(BENCH, [])

    def test_bad_date_rejected(self, engine):
        with pytest.raises(ValueError):
            engine.log_lift(BENCH, _sets(185, 5), "2026-02-30")

    def test_remove_entry(self, engine):
        engine.log_lift(BENCH, _sets(185, 5), "2026-03-14")
        assert engine.remove_lift_entry(BENCH, "2026-03-14")
        assert not engine.remove_lift_entry(BENCH, "2026-03-14")
        assert engine.get_last_lift(BENCH) is None
        # Records survive removal
        assert engine.get_pr(BENCH) is not None

    def test_session_sets_are_copies(self, engine):
        engine.log_lift(BENCH, _sets(185, 5, 2))
        sets = engine.get_session_sets(BENCH)
        sets.clear()
        assert len(engine.get_session_sets(BENCH)) == 2


class TestPersonalRecords:
    def test_first_log_is_a_pr(self, engine):
        result = engine.log_lift(BENCH, _sets(185, 5, 2) + _sets(175, 8))
        assert result.is_pr
        assert result.previous_best is None
        # best set is 175×8 (217), not the heavier 185×5 (208)
        assert result.estimated_1rm == 217
        assert result.volume == 3250
        pr = engine.get_pr(BENCH)
        assert (pr.weight, pr.reps, pr.estimated_1rm, pr.date_key) == (175, 8, 217, "2026-03-15")

    def test_lower_estimate_is_not_a_pr(self, engine):
        engine.log_lift(BENCH, _sets(185, 5, 2) + _sets(175, 8), "2026-03-14")
        # 190×5 → 213.75 → 214, below 217
        result = engine.log_lift(BENCH, _sets(190, 5), "2026-03-15")
        assert not result.is_pr
        assert result.previous_best.estimated_1rm == 217
        assert engine.get_pr(BENCH).date_key == "2026-03-14"

    def test_mixed_session_record_survives_heavier_five(self, engine):
        # 185×5 → 208, 185×6 → 215, 175×8 → 217
        first = engine.log_lift(BENCH, [LiftSet(185, 5), LiftSet(185, 6), LiftSet(175, 8)], "2026-03-14")
        assert first.estimated_1rm == 217
        assert engine.get_last_lift(BENCH).best_set.reps == 8
        # 190×5 → 214 < 217
        assert not engine.log_lift(BENCH, _sets(190, 5), "2026-03-15").is_pr

    def test_equal_estimate_is_not_a_pr(self, engine):
        engine.log_lift(BENCH, _sets(175, 8), "2026-03-14")
        assert not engine.log_lift(BENCH, _sets(175, 8), "2026-03-15").is_pr

    def test_higher_estimate_replaces_record(self, engine):
        engine.log_lift(BENCH, _sets(175, 8), "2026-03-14")
        # 185×8 → 229.66 → 230
        result = engine.log_lift(BENCH, _sets(185, 8), "2026-03-15")
        assert result.is_pr
        assert engine.get_pr(BENCH).estimated_1rm == 230

    def test_record_never_decreases(self, engine):
        seen = []
        for day, weight in zip(range(1, 8), [135, 155, 145, 165, 150, 160, 170]):
            engine.log_lift(BENCH, _sets(weight, 5), f"2026-03-0{day}")
            seen.append(engine.get_pr(BENCH).estimated_1rm)
        assert seen == sorted(seen)

    def test_bodyweight_sets(self, engine):
        first = engine.log_lift("Pull-ups", _sets(0, 12, 3), "2026-03-14")
        assert first.is_pr
        assert first.estimated_1rm == 0
        assert first.volume == 0
        again = engine.log_lift("Pull-ups", _sets(0, 15, 3), "2026-03-15")
        assert not again.is_pr

    def test_all_prs(self, engine):
        engine.log_lift(BENCH, _sets(185, 5))
        engine.log_lift("Leg Press", _sets(300, 10))
        assert set(engine.get_all_prs()) == {BENCH, "Leg Press"}


class TestSuggestions:
    def test_next_session_from_last_best_set(self, engine):
        engine.log_lift(BENCH, _sets(185, 10, 3), "2026-03-12")
        s = engine.suggest_next(BENCH)
        assert (s.weight, s.reps, s.action) == (185, 11, "add_rep")

    def test_reaching_twelve_adds_weight(self, engine):
        engine.log_lift(BENCH, _sets(185, 12, 3), "2026-03-12")
        s = engine.suggest_next(BENCH)
        assert (s.weight, s.reps_label) == (190, "6-8")

    def test_unknown_exercise(self, engine):
        assert engine.suggest_next("Cable Flyes") is None

    def test_swap_is_resolved_for_the_day(self, engine):
        engine.log_lift("Seated Cable Row", _sets(140, 8, 3), "2026-03-10")
        engine.save_exercise_swap("Dumbbell Rows", "Seated Cable Row")

        s = engine.suggest_next("Dumbbell Rows")
        assert s.weight == 140
        assert s.reps == 9
        # Swap does not apply on another day
        assert engine.suggest_next("Dumbbell Rows", "2026-03-16") is None

    def test_high_volume_week_on_unmapped_substitute_maintains(self, engine):
        engine.save_exercise_swap(BENCH, "Floor Press")
        engine.log_lift("Floor Press", _sets(100, 12, 18))
        # 18 chest sets ≥ MRV(20) − 3
        assert engine.weekly_volume("chest").sets == 18

        s = engine.suggest_next(BENCH)
        assert s.action == "maintain"
        assert (s.weight, s.reps) == (100, 12)


class TestSwaps:
    def test_swap_is_day_scoped(self, engine):
        engine.save_exercise_swap("Dumbbell Rows", "Machine Row")
        assert engine.get_exercise_swap("Dumbbell Rows") == "Machine Row"
        assert engine.get_exercise_swap("Dumbbell Rows", "2026-03-16") is None
        assert engine.get_day_swaps() == {"Dumbbell Rows": "Machine Row"}

    def test_unmapped_substitute_counts_toward_original_groups(self, engine):
        engine.save_exercise_swap("Dumbbell Rows", "Machine Row")
        engine.log_lift("Machine Row", _sets(120, 10, 3))

        assert engine.muscle_groups_for("Machine Row") == ["back"]
        assert engine.weekly_volume("back").sets == 3

    def test_alternatives(self, engine):
        assert engine.alternatives_for("dumbbell rows") == ["Seated Cable Row", "Machine Row", "T-Bar Row"]
        assert engine.alternatives_for("Leg Press") == []


class TestVolumeAndAlerts:
    def test_alert_levels(self, engine):
        # chest 20 ≥ MRV 20 → high; back 23 ≥ 25 − 2 → warning; quads 3 < MEV 6 → low
        engine.log_lift(BENCH, _sets(135, 10, 20))
        engine.log_lift("Seated Cable Row", _sets(120, 10, 23))
        engine.log_lift("Leg Press", _sets(300, 10, 3))

        alerts = {a.muscle: a for a in engine.volume_alerts()}
        assert alerts["chest"].level == "high"
        assert alerts["back"].level == "warning"
        assert alerts["quads"].level == "low"
        assert alerts["quads"].message == "QUADS under MEV (3/6 sets). Add 3 more sets this week."
        # Untrained group is not flagged
        assert "hamstrings" not in alerts

    def test_productive_band_has_no_alert(self, engine):
        engine.log_lift(BENCH, _sets(135, 10, 12))
        assert engine.volume_alerts() == []

    def test_weekly_stats(self, engine):
        engine.log_lift(BENCH, _sets(100, 10, 3), "2026-03-12")
        engine.log_lift("Barbell Back Squat", _sets(200, 5, 4), "2026-03-14")
        engine.log_lift("Zercher Carry", _sets(100, 1, 1), "2026-03-14")
        engine.log_lift(BENCH, _sets(100, 10, 3), "2026-03-01")  # outside window

        stats = engine.weekly_training_stats()
        # 3 + 4 + 1 sets; 3000 + 4000 + 100 load; 2 distinct days; 8/2 = 4
        assert stats.total_sets == 8
        assert stats.total_volume == 7100
        assert stats.sessions == 2
        assert stats.avg_sets_per_session == 4

    def test_just_logged_set_moves_recovery(self, engine):
        before = engine.prioritized_areas()
        assert before[0].score == 0
        engine.log_lift("Seated Cable Row", _sets(120, 10, 20))
        after = engine.prioritized_areas()
        assert after[0].area == "Upper Back"
        # 20 / 25
        assert after[0].score == pytest.approx(0.8)


class TestPlateausAndDeload:
    def test_stale_record_with_sessions_is_a_plateau(self, engine):
        engine.log_lift(BENCH, _sets(200, 5), "2026-02-01")  # 225, PR
        engine.log_lift(BENCH, _sets(190, 5), "2026-02-15")
        engine.log_lift(BENCH, _sets(190, 5), "2026-03-01")

        plateaus = engine.detect_lift_plateaus()
        assert [p.exercise_name for p in plateaus] == [BENCH]
        # 2026-02-01 → 2026-03-15
        assert plateaus[0].days_since_pr == 42

    def test_too_few_sessions_is_not_a_plateau(self, engine):
        engine.log_lift(BENCH, _sets(200, 5), "2026-02-01")
        engine.log_lift(BENCH, _sets(190, 5), "2026-02-15")
        assert engine.detect_lift_plateaus() == []

    def test_deload_via_engine_clock(self, engine, clock):
        engine.log_lift(BENCH, _sets(185, 5), "2026-02-15")
        engine.log_lift(BENCH, _sets(185, 5), "2026-03-15")
        # 28 days from first to last session
        assert engine.should_deload().recommended
        engine.mark_deload_complete()
        assert not engine.should_deload().recommended
        clock.now = clock.now + timedelta(days=27)
        assert engine.should_deload().weeks_since_deload == 3


class TestCorruptState:
    def test_corrupt_entry_contributes_nothing(self, engine):
        engine.state = dict_to_training_state({
            "liftHistory": {
                BENCH: [
                    {"date": "2026-03-13"},  # no sets
                    {"date": "2026-03-14", "sets": [{"weight": 185, "reps": 5}, {"weight": "x"}]},
                    {"date": "not-a-date", "sets": [{"weight": 185, "reps": 5}]},
                ]
            }
        })

        history = engine.get_lift_history(BENCH)
        assert [e.date_key for e in history] == ["2026-03-13", "2026-03-14"]
        assert history[0].sets == []
        # Only the valid set of the second entry counts
        assert engine.weekly_volume("chest").sets == 1
        assert engine.weekly_volume("chest").volume == 925

    def test_corrupt_last_entry_gives_no_suggestion(self, engine):
        engine.state = dict_to_training_state({"liftHistory": {BENCH: [{"dateKey": "2026-03-14"}]}})
        assert engine.suggest_next(BENCH) is None
        assert not engine.should_deload().recommended
