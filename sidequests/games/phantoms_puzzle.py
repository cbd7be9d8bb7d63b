"""
Phantom's Puzzle - Memorize the phantom's glyph pattern, then repeat it.

Level N shows a pattern of min(3 + N, 8) glyphs for max(8 - N, 4)
seconds; the player then has max(12 - N, 6) seconds to enter it.
A wrong pattern or an expired input window is a mistake and the same
level is replayed with a fresh pattern. Clear level 7 to win; three
mistakes and the phantom keeps your mind.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from ..engine_core.action import Action, ActionResult, ActionType, Resolution
from ..engine_core.game import SidequestGame
from ..engine_core.phase import Phase
from ..engine_core.session import Outcome
from ..engine_core.timers import TimerKind

GLYPHS = ("👻", "🌙", "⭐", "🔮", "💀", "🕯️")

MAX_LEVEL = 7
MAX_PATTERN_LENGTH = 8


def pattern_length(level: int) -> int:
    return min(3 + level, MAX_PATTERN_LENGTH)


def study_seconds(level: int) -> int:
    return max(8 - level, 4)


def input_seconds(level: int) -> int:
    return max(12 - level, 6)


@dataclass
class Pattern:
    level: int
    sequence: list[str]
    entered: list[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return len(self.entered) == len(self.sequence)

    @property
    def correct(self) -> bool:
        return self.entered == self.sequence


class PhantomsPuzzle(SidequestGame):
    """Pattern memory with a study window and an input window per level."""

    game_id = "phantoms-puzzle"
    title = "Phantom's Puzzle"
    description = "Memorize and recreate the phantom's ethereal patterns"

    reveal_ms = study_seconds(1) * 1000
    resolve_ms = 2000

    success_threshold = MAX_LEVEL
    failure_threshold = 3

    accepted_actions = frozenset({ActionType.INPUT_SYMBOL, ActionType.CLEAR_INPUT})

    def on_session_start(self):
        self.session.round = 1
        self.session.extras["advance"] = False

    def next_content(self) -> Pattern:
        length = pattern_length(self.session.round)
        return Pattern(self.session.round, self.random.random_sequence(GLYPHS, length, length))

    def reveal_duration(self) -> int:
        return study_seconds(self.session.round) * 1000

    def on_present(self, content: Pattern):
        self.session.message = f"Study the phantom's pattern... Level {content.level}"

    def on_awaiting_input(self):
        self.session.message = "Now recreate the pattern from memory!"
        self.timers.start(TimerKind.INPUT, input_seconds(self.session.round) * 1000, self._on_input_expired)

    def handle_action(self, action: Action) -> ActionResult:
        pattern: Pattern = self.session.active_content

        if action.action_type == ActionType.CLEAR_INPUT:
            pattern.entered.clear()
            return self._accepted()

        symbol = action.get("symbol")
        if symbol not in GLYPHS:
            return ActionResult.ignored(self.phase)

        pattern.entered.append(symbol)
        if not pattern.complete:
            return self._accepted()

        if pattern.correct:
            bonus = max(5 - self.session.failures, 1) * pattern.level
            self.session.score += bonus
            self.session.extras["advance"] = True
            return self._resolve(Resolution.SUCCESS, message=f"Excellent! +{bonus} points")

        return self._resolve(
            Resolution.FAILURE,
            message="Incorrect pattern! The phantom's power weakens you...",
        )

    def _on_input_expired(self):
        if self.phase != Phase.AWAITING_INPUT:
            return
        self._resolve(Resolution.FAILURE, message="Time's up! The phantom grows impatient...")

    def on_next_challenge(self):
        if self.session.extras["advance"]:
            self.session.round += 1
            self.session.extras["advance"] = False

    def on_finish(self, outcome: Outcome):
        if outcome == Outcome.WON:
            self.session.message = "The phantom bows to your flawless memory!"
        else:
            self.session.message = "Your mind fails you... the phantom claims victory!"

    def content_view(self) -> dict[str, Any]:
        pattern: Pattern = self.session.active_content
        return {
            "level": pattern.level,
            "length": len(pattern.sequence),
            "sequence": pattern.sequence if self.phase == Phase.PRESENTING else None,
            "entered": list(pattern.entered),
            "glyphs": list(GLYPHS),
            "input_seconds_left": self.timers.remaining_seconds(TimerKind.INPUT),
            "study_seconds_left": self.timers.remaining_seconds(TimerKind.REVEAL),
        }
