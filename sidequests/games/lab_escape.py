"""
Lab Escape - Riddles behind Dr. Heinous' laboratory doors.

Solve 3 riddles before 5 answers have been given. A wrong answer keeps
the same riddle on screen; a correct one draws the next riddle from the
pool (no repeats until the pool is exhausted).
"""

from __future__ import annotations
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..engine_core.action import Action, ActionResult, ActionType, Resolution
from ..engine_core.game import SidequestGame
from ..engine_core.session import Outcome


class Riddle(BaseModel):
    """One riddle unit. Units without a question or answer are rejected."""
    model_config = ConfigDict(frozen=True)

    id: str
    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)
    hint: str = ""


RIDDLES = (
    Riddle(id="1", question="I have no body, yet I scream. I have no lungs, yet I breathe. What am I?",
           answer="wind", hint="Listen to the air..."),
    Riddle(id="2", question="The more you take, the more you leave behind. What am I?",
           answer="footsteps", hint="Every step creates evidence..."),
    Riddle(id="3", question="I consume all things, great and small. Given time, I'll take them all. What am I?",
           answer="time", hint="The eternal destroyer..."),
    Riddle(id="4", question="Born in darkness, I feed on light. The brighter the day, the shorter my life. What am I?",
           answer="shadow", hint="Companion of all things..."),
    Riddle(id="5", question="I have a face but no eyes, hands but no arms. I move but have no legs. What am I?",
           answer="clock", hint="Time's faithful servant..."),
    Riddle(id="6", question="The more holes you make in me, the stronger I become. What am I?",
           answer="net", hint="Fishermen know my purpose..."),
    Riddle(id="7", question="I am not alive, yet I grow. I have no lungs, yet I need air. What am I?",
           answer="fire", hint="The hungry destroyer..."),
    Riddle(id="8", question="I can be cracked, I can be made. I can be told, I can be played. What am I?",
           answer="joke", hint="Laughter's companion..."),
)

TAUNTS = (
    "Wrong again, human fool!",
    "Your mind grows weaker!",
    "The laboratory claims another victim!",
    "Failure feeds my power!",
    "Think harder, if you can!",
    "Your escape grows more distant!",
    "Another wrong turn in the darkness!",
    "The riddles mock your intelligence!",
)

VICTORY_MESSAGES = (
    "Impossible! You've escaped my trap!",
    "The laboratory doors swing open...",
    "Your wit has bested the darkness!",
    "Freedom tastes sweet, doesn't it?",
)


class LabEscape(SidequestGame):
    """Riddle game: 3 correct before 5 attempts."""

    game_id = "lab-escape"
    title = "Lab Escape"
    description = "Escape from Dr. Heinous laboratory"
    difficulty = "Hard"

    intro_ms = 1500
    resolve_ms = 1200

    success_threshold = 3
    attempt_limit = 5

    accepted_actions = frozenset({ActionType.ANSWER, ActionType.HINT})

    content_model = Riddle
    default_content = RIDDLES

    def on_session_start(self):
        self.session.extras.update(hint_shown=False, retry=None)
        self.session.message = "Choose a door to face your first riddle..."

    def next_content(self) -> Riddle:
        retry = self.session.extras.get("retry")
        if retry is not None:
            self.session.extras["retry"] = None
            return retry
        return super().next_content()

    def on_present(self, content: Riddle):
        self.session.extras["hint_shown"] = False
        self.session.round += 1

    def handle_action(self, action: Action) -> ActionResult:
        if action.action_type == ActionType.HINT:
            self.session.extras["hint_shown"] = True
            return self._accepted(message="A whisper from the darkness reveals a clue...")

        guess = str(action.get("text") or "").strip().lower()
        if not guess:
            return ActionResult.ignored(self.phase)

        riddle: Riddle = self.session.active_content
        if guess == riddle.answer.lower():
            self.session.score += 1
            return self._resolve(
                Resolution.SUCCESS,
                message="Correct! The laboratory trembles... Choose another door.",
            )

        self.session.extras["retry"] = riddle
        return self._resolve(Resolution.FAILURE, message=self.random.choice(TAUNTS))

    def on_finish(self, outcome: Outcome):
        if outcome == Outcome.WON:
            self.session.message = self.random.choice(VICTORY_MESSAGES)
        else:
            self.session.message = "The laboratory has claimed another victim..."

    def content_view(self) -> dict[str, Any]:
        riddle: Riddle = self.session.active_content
        return {
            "riddle_id": riddle.id,
            "question": riddle.question,
            "hint": riddle.hint if self.session.extras.get("hint_shown") else None,
            "attempts_left": max(0, self.attempt_limit - self.session.attempts),
        }
