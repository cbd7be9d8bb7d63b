"""
Tests for ScoringTracker.

Tests:
- Counter bookkeeping
- Threshold checks (>=, None never triggers)
- Win precedence
"""

import pytest

from ..engine_core.scoring import Counts, ScoringTracker, Verdict


class TestCounters:
    """Tests for record_outcome."""

    @pytest.mark.parametrize("outcomes", [
        [],
        [True],
        [False, False],
        [True, False, True, True, False],
    ])
    def test_attempts_equal_successes_plus_failures(self, outcomes):
        """attempts == successes + failures after every record."""
        tracker = ScoringTracker()
        for outcome in outcomes:
            counts = tracker.record_outcome(outcome)
            assert counts.attempts == counts.successes + counts.failures
        assert tracker.attempts == len(outcomes)
        assert tracker.successes == sum(outcomes)

    def test_record_returns_snapshot(self):
        """record_outcome returns the counts after recording."""
        tracker = ScoringTracker()
        tracker.record_outcome(True)
        assert tracker.record_outcome(False) == Counts(attempts=2, successes=1, failures=1)

    def test_reset(self):
        tracker = ScoringTracker()
        tracker.record_outcome(True)
        tracker.record_outcome(False)
        tracker.reset()
        assert tracker.counts == Counts(0, 0, 0)


class TestThresholds:
    """Tests for check_win / check_lose / verdict."""

    def test_win_at_threshold(self):
        tracker = ScoringTracker()
        tracker.record_outcome(True)
        assert not tracker.check_win(2)
        tracker.record_outcome(True)
        assert tracker.check_win(2)

    def test_none_thresholds_never_trigger(self):
        tracker = ScoringTracker()
        for _ in range(10):
            tracker.record_outcome(False)
        assert not tracker.check_win(None)
        assert not tracker.check_lose(None, None)
        assert tracker.verdict(None, None, None) == Verdict.CONTINUE

    def test_attempt_limit_counts_every_resolution(self):
        """Attempt limits count successes too."""
        tracker = ScoringTracker()
        for outcome in (True, True, False, True, True):
            tracker.record_outcome(outcome)
        assert tracker.check_lose(None, attempt_limit=5)
        assert not tracker.check_lose(3)

    def test_win_takes_precedence(self):
        """When both thresholds are met at once, the verdict is a win."""
        tracker = ScoringTracker()
        for outcome in (True, False, True, False, True):
            tracker.record_outcome(outcome)
        assert tracker.check_lose(None, attempt_limit=5)
        assert tracker.verdict(3, attempt_limit=5) == Verdict.WIN

    def test_lose_when_only_lose_threshold_met(self):
        tracker = ScoringTracker()
        for outcome in (True, False, False, False):
            tracker.record_outcome(outcome)
        assert tracker.verdict(3, 3) == Verdict.LOSE

    def test_overshoot_still_resolves(self):
        """Thresholds compare with >=."""
        tracker = ScoringTracker(attempts=4, successes=4, failures=0)
        assert tracker.verdict(3) == Verdict.WIN
