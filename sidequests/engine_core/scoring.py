"""
Scoring - Attempt/success/failure counters and threshold checks.

Pure counters: no I/O, no timers. Every resolved action increments
attempts and exactly one of successes/failures, so
attempts == successes + failures always holds.

Thresholds compare with >=, so a counter that overshoots by one still
resolves. A threshold of None never triggers.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class Verdict(Enum):
    """Result of a threshold evaluation."""
    CONTINUE = "continue"
    WIN = "win"
    LOSE = "lose"


@dataclass(frozen=True)
class Counts:
    """Snapshot of the counters after a recorded outcome."""
    attempts: int
    successes: int
    failures: int


@dataclass
class ScoringTracker:
    """
    Counters plus threshold evaluation for one session.

    Usage:
        tracker = ScoringTracker()
        tracker.record_outcome(True)
        if tracker.check_win(3):
            ...
    """
    attempts: int = 0
    successes: int = 0
    failures: int = 0

    def record_outcome(self, is_success: bool) -> Counts:
        """Record one resolved action."""
        self.attempts += 1
        if is_success:
            self.successes += 1
        else:
            self.failures += 1
        return self.counts

    @property
    def counts(self) -> Counts:
        return Counts(self.attempts, self.successes, self.failures)

    def check_win(self, success_threshold: int | None) -> bool:
        if success_threshold is None:
            return False
        return self.successes >= success_threshold

    def check_lose(self, fail_threshold: int | None, attempt_limit: int | None = None) -> bool:
        """
        Check the lose condition.

        fail_threshold counts failures; attempt_limit counts every
        resolved action (for "3 correct before 5 attempts" games).
        """
        if fail_threshold is not None and self.failures >= fail_threshold:
            return True
        if attempt_limit is not None and self.attempts >= attempt_limit:
            return True
        return False

    def verdict(
        self,
        success_threshold: int | None,
        fail_threshold: int | None = None,
        attempt_limit: int | None = None,
    ) -> Verdict:
        """
        Evaluate both thresholds for one resolution step.

        Win is checked first; the lose check only runs when the win
        check is false.
        """
        if self.check_win(success_threshold):
            return Verdict.WIN
        if self.check_lose(fail_threshold, attempt_limit):
            return Verdict.LOSE
        return Verdict.CONTINUE

    def reset(self):
        self.attempts = 0
        self.successes = 0
        self.failures = 0
