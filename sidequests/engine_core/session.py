"""
Session - One play-through of a single mini-game.

The session is owned exclusively by its game instance. It is created on
start, mutated only by input handlers and timer callbacks (both go
through the game), and discarded on restart or teardown. Nothing about
an in-progress session is persisted.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import uuid

from .phase import Phase
from .scoring import ScoringTracker


class Outcome(Enum):
    """Terminal outcome of a session."""
    WON = "won"
    LOST = "lost"


@dataclass
class Session:
    """
    Live state of one play-through.

    Counters live on the ScoringTracker; attempts/successes/failures are
    exposed here for convenience.
    """
    game_id: str
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    phase: Phase = Phase.IDLE

    scoring: ScoringTracker = field(default_factory=ScoringTracker)
    score: int = 0

    # Timestamps (scheduler milliseconds)
    started_at: float | None = None
    finished_at: float | None = None

    # Challenge currently presented; None outside content phases
    active_content: Any | None = None
    used_content_ids: set[str] = field(default_factory=set)

    # Round/level counter for games that progress
    round: int = 0

    outcome: Outcome | None = None

    # Player-facing line (taunt, hint, reaction)
    message: str = ""

    # Game-specific payload (combo, lives, chaos level...)
    extras: dict[str, Any] = field(default_factory=dict)

    @property
    def attempts(self) -> int:
        return self.scoring.attempts

    @property
    def successes(self) -> int:
        return self.scoring.successes

    @property
    def failures(self) -> int:
        return self.scoring.failures

    @property
    def is_active(self) -> bool:
        return self.phase not in {Phase.IDLE, Phase.WON, Phase.LOST}

    def elapsed_ms(self, now_ms: float) -> float:
        """Milliseconds since the session went active (frozen once finished)."""
        if self.started_at is None:
            return 0.0
        end = self.finished_at if self.finished_at is not None else now_ms
        return max(0.0, end - self.started_at)
