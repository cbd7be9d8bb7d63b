"""
Chupacabra Challenge - Pick a hiding spot and stay hidden for 30 seconds.

Choosing a spot starts the hunt. Every 500 ms the chupacabra prowls to
a new position; detection risk combines its proximity with how poorly
the spot conceals you. Above 85% risk there is a 30% chance per tick
of being discovered.
"""

from __future__ import annotations
from dataclasses import dataclass
import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..engine_core.action import Action, ActionResult, ActionType, Resolution
from ..engine_core.game import SidequestGame
from ..engine_core.phase import Phase
from ..engine_core.session import Outcome
from ..engine_core.timers import TimerKind

HUNT_MS = 30_000
HUNT_TICK_MS = 500
DISCOVERY_RISK = 85.0
DISCOVERY_CHANCE = 0.3
HEARTBEAT_RISK = 60.0
PROXIMITY_RANGE = 30.0


class HidingSpot(BaseModel):
    """A place in the cemetery. Position and size are percentages of the map."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = Field(min_length=1)
    x: float
    y: float
    width: float = 15
    height: float = 15
    safety_rating: int = Field(ge=1, le=5)


HIDING_SPOTS = (
    HidingSpot(id="1", name="Behind the Tombstone", x=15, y=60, width=12, height=15, safety_rating=4),
    HidingSpot(id="2", name="Under the Gnarled Tree", x=45, y=25, width=15, height=20, safety_rating=3),
    HidingSpot(id="3", name="In the Fog Bank", x=70, y=45, width=20, height=25, safety_rating=5),
    HidingSpot(id="4", name="Behind the Crypt", x=25, y=20, width=18, height=25, safety_rating=4),
    HidingSpot(id="5", name="Among the Weeds", x=60, y=75, width=25, height=15, safety_rating=2),
    HidingSpot(id="6", name="Near the Gate", x=5, y=35, width=15, height=20, safety_rating=1),
)


def detection_risk(spot: HidingSpot, x: float, y: float) -> float:
    """Risk in percent (0-100) for the chupacabra standing at (x, y)."""
    distance = math.hypot(x - spot.x, y - spot.y)
    proximity = max(0.0, (PROXIMITY_RANGE - distance) / PROXIMITY_RANGE)
    spot_risk = (6 - spot.safety_rating) * 0.2
    return min(100.0, (proximity + spot_risk) * 100)


@dataclass
class Hunt:
    spots: tuple[HidingSpot, ...]
    spot: HidingSpot | None = None
    chupacabra_x: float = 0.0
    chupacabra_y: float = 50.0
    risk: float = 0.0
    ticks: int = 0


class ChupacabraChallenge(SidequestGame):
    """Hide-and-survive: one choice, then a survival clock."""

    game_id = "chupacabra-challenge"
    title = "Chupacabra Challenge"
    description = "Face the legendary cryptid"
    difficulty = "Hard"

    success_threshold = 1
    failure_threshold = 1

    accepted_actions = frozenset({ActionType.CHOOSE})

    content_model = HidingSpot
    default_content = HIDING_SPOTS

    def next_content(self) -> Hunt:
        return Hunt(spots=tuple(unit.value for unit in self.pool))

    def on_present(self, content: Hunt):
        self.session.message = "Choose your hiding spot..."

    def handle_action(self, action: Action) -> ActionResult:
        hunt: Hunt = self.session.active_content
        if hunt.spot is not None:
            return ActionResult.ignored(self.phase)
        spot = next((s for s in hunt.spots if s.id == str(action.get("value"))), None)
        if spot is None:
            return ActionResult.ignored(self.phase)

        hunt.spot = spot
        self.timers.start(TimerKind.SESSION_CLOCK, HUNT_MS, self._on_clock_fired)
        self.timers.start_interval(TimerKind.TICK, HUNT_TICK_MS, self._on_hunt_tick)
        return self._accepted(message=f"You hide {spot.name.lower()}. Stay perfectly still...")

    def _on_hunt_tick(self):
        if self.phase != Phase.AWAITING_INPUT:
            return
        hunt: Hunt = self.session.active_content
        hunt.ticks += 1
        self.session.score = hunt.ticks
        hunt.chupacabra_x = self.random.uniform(10, 90)
        hunt.chupacabra_y = self.random.uniform(20, 80)
        hunt.risk = detection_risk(hunt.spot, hunt.chupacabra_x, hunt.chupacabra_y)
        self.session.message = self._reaction(hunt.risk)

        if hunt.risk > DISCOVERY_RISK and self.random.chance(DISCOVERY_CHANCE):
            self.timers.cancel(TimerKind.TICK)
            self._resolve(Resolution.FAILURE, message="¡ENCONTRADO! The Chupacabra's eyes gleam with satisfaction!")

    def on_clock_expired(self):
        if self.phase != Phase.AWAITING_INPUT:
            return
        self.timers.cancel(TimerKind.TICK)
        self._resolve(Resolution.SUCCESS, message="The Chupacabra retreats, frustrated by your cunning...")

    @staticmethod
    def _reaction(risk: float) -> str:
        if risk > 70:
            return "The Chupacabra sniffs the air... it senses something nearby..."
        if risk > 40:
            return "Prowling closer... stay perfectly still..."
        return "The Chupacabra searches in the distance..."

    def on_finish(self, outcome: Outcome):
        if outcome == Outcome.WON:
            self.session.message = "SURVIVAL SUCCESS! You evaded the Chupacabra for the full 30 seconds!"
        else:
            self.session.message = "DISCOVERED! Sometimes the hunter becomes the hunted..."

    def content_view(self) -> dict[str, Any]:
        hunt: Hunt = self.session.active_content
        return {
            "spots": [s.model_dump() for s in hunt.spots],
            "hiding_in": hunt.spot.id if hunt.spot else None,
            "chupacabra": {"x": round(hunt.chupacabra_x, 1), "y": round(hunt.chupacabra_y, 1)},
            "risk": round(hunt.risk, 1),
            "heartbeat": hunt.risk > HEARTBEAT_RISK,
        }
