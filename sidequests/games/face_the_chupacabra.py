"""
Face the Chupacabra - Rock, paper, scissors for the keys to your cell.

The chupacabra's throw is drawn when a round is presented and stays
hidden until the player throws. Win a round to earn a key; 3 keys
escape, 3 lost rounds trap you forever. Ties count for nobody.
"""

from __future__ import annotations
from typing import Any

from ..engine_core.action import Action, ActionResult, ActionType, Resolution
from ..engine_core.game import SidequestGame
from ..engine_core.phase import Phase
from ..engine_core.session import Outcome

ROCK = "rock"
PAPER = "paper"
SCISSORS = "scissors"
CHOICES = (ROCK, PAPER, SCISSORS)

# Each throw beats the one it maps to
BEATS = {ROCK: SCISSORS, PAPER: ROCK, SCISSORS: PAPER}

# Throw reveal, then the round result stays up
REVEAL_MS = 1000
RESULT_MS = 2000


def judge(player: str, opponent: str) -> Resolution:
    """Resolution of one round from the player's side."""
    if player == opponent:
        return Resolution.NEUTRAL
    if BEATS[player] == opponent:
        return Resolution.SUCCESS
    return Resolution.FAILURE


class FaceTheChupacabra(SidequestGame):
    """Rock-paper-scissors duel: first to 3."""

    game_id = "face-the-chupacabra"
    title = "Face the Chupacabra"
    description = "Win three keys in a duel of rock, paper, scissors"

    resolve_ms = REVEAL_MS + RESULT_MS

    success_threshold = 3
    failure_threshold = 3

    accepted_actions = frozenset({ActionType.CHOOSE})

    def on_session_start(self):
        self.session.extras.update(player_choice=None, last_result=None)

    def next_content(self) -> str:
        return self.random.choice(CHOICES)

    def on_present(self, content: str):
        self.session.round += 1
        self.session.extras["player_choice"] = None

    def handle_action(self, action: Action) -> ActionResult:
        choice = action.get("value")
        if choice not in CHOICES:
            return ActionResult.ignored(self.phase)

        chupacabra = self.session.active_content
        resolution = judge(choice, chupacabra)
        self.session.extras.update(player_choice=choice, last_result=resolution.value)

        if resolution == Resolution.SUCCESS:
            self.session.score += 1
            message = f"Your {choice} beats {chupacabra}! A key is yours."
        elif resolution == Resolution.FAILURE:
            message = f"The chupacabra's {chupacabra} crushes your {choice}!"
        else:
            message = f"Both throw {choice}. The chupacabra snarls..."
        return self._resolve(resolution, message=message)

    def on_finish(self, outcome: Outcome):
        if outcome == Outcome.WON:
            self.session.message = "You collected all 3 keys and escaped! The Chupacabra is defeated!"
        else:
            self.session.message = "Trapped forever in the chupacabra's lair..."

    def content_view(self) -> dict[str, Any]:
        resolving = self.phase == Phase.RESOLVING
        return {
            "round": self.session.round,
            "keys": self.session.successes,
            "losses": self.session.failures,
            "player_choice": self.session.extras.get("player_choice"),
            "chupacabra_choice": self.session.active_content if resolving else None,
            "last_result": self.session.extras.get("last_result") if resolving else None,
            "choices": list(CHOICES),
        }
