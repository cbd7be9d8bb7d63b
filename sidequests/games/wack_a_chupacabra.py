"""
Wack-a-Chupacabra - Whack the chupacabra, spare the decoys, never touch the vial.

One sprite at a time pops out of one of 5 holes for 1.2 seconds:
- chupacabra (70%): whack it for a point
- decoy (20%): whacking it costs a point and counts as a miss
- vial (10%): whacking it ends the game at once

A sprite that ducks back unhit counts for nothing. 15 whacks win,
5 decoy hits or the 45 second clock lose.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any

from ..engine_core.action import Action, ActionResult, ActionType, Resolution
from ..engine_core.game import SidequestGame
from ..engine_core.phase import Phase
from ..engine_core.session import Outcome
from ..engine_core.timers import TimerKind

HOLES = 5
SPRITE_DURATION_MS = 1200
SPAWN_DELAY_MS = 800

CHUPACABRA = "chupacabra"
DECOY = "decoy"
VIAL = "vial"

# Cumulative spawn odds
SPRITE_ODDS = ((0.7, CHUPACABRA), (0.9, DECOY), (1.0, VIAL))


def roll_sprite(roll: float) -> str:
    """Sprite kind for a uniform roll in [0, 1)."""
    for limit, kind in SPRITE_ODDS:
        if roll < limit:
            return kind
    return VIAL


@dataclass(frozen=True)
class Sprite:
    hole: int
    kind: str


class WackAChupacabra(SidequestGame):
    """Whack-a-mole with decoys and an instant-loss vial."""

    game_id = "wack-a-chupacabra"
    title = "Wack-a-Chupacabra"
    description = "Whack the chupacabra, but never the vial"

    intro_ms = 1000
    resolve_ms = SPAWN_DELAY_MS
    session_clock_ms = 45_000

    success_threshold = 15
    failure_threshold = 5

    accepted_actions = frozenset({ActionType.WHACK})

    def next_content(self) -> Sprite:
        kind = roll_sprite(self.random.uniform(0, 1))
        return Sprite(hole=self.random.randint(0, HOLES - 1), kind=kind)

    def on_present(self, content: Sprite):
        self.session.round += 1

    def on_awaiting_input(self):
        self.timers.start(TimerKind.ITEM_LIFETIME, SPRITE_DURATION_MS, self._on_sprite_hidden)

    def _on_sprite_hidden(self):
        if self.phase != Phase.AWAITING_INPUT:
            return
        self._resolve(Resolution.NEUTRAL)

    def handle_action(self, action: Action) -> ActionResult:
        sprite: Sprite = self.session.active_content
        if action.get("hole") != sprite.hole:
            return ActionResult.ignored(self.phase)

        if sprite.kind == VIAL:
            self.session.scoring.record_outcome(False)
            self.session.extras["vial_hit"] = True
            self.session.message = "You shattered the vial! The lab goes up in smoke!"
            self._finish(Outcome.LOST)
            return ActionResult.accepted_with(self.phase, Resolution.FAILURE, self.session.message)

        if sprite.kind == CHUPACABRA:
            self.session.score += 1
            return self._resolve(Resolution.SUCCESS, message="Whack! Got him!")

        self.session.score = max(0, self.session.score - 1)
        return self._resolve(Resolution.FAILURE, message="That was a decoy!")

    def on_finish(self, outcome: Outcome):
        if outcome == Outcome.WON:
            self.session.message = "The chupacabra retreats, battered and bruised!"
        elif not self.session.extras.get("vial_hit"):
            self.session.message = "The chupacabra outlasted you..."

    def content_view(self) -> dict[str, Any]:
        sprite: Sprite = self.session.active_content
        visible = self.phase == Phase.AWAITING_INPUT
        return {
            "holes": HOLES,
            "hole": sprite.hole if visible else None,
            "sprite": sprite.kind if visible else None,
            "whacks": self.session.successes,
            "decoys_hit": self.session.failures,
        }
