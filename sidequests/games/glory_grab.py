"""
Glory Grab - Save Dr. Heinous' vials before they explode.

Vials spawn on a shared lab bench, each with its own 2-4 second fuse.
Grabbing a real vial is worth 10 points; 20% of vials are empty decoys
worth nothing. A fuse that runs out is an explosion; 5 explosions lose.
Survive the 20 second clock to win.

Chaos escalates with every replay on the same game instance: more
vials on the bench at once and a faster spawn cadence.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from functools import partial
from typing import Any

from ..engine_core.action import Action, ActionResult, ActionType, Resolution
from ..engine_core.game import SidequestGame
from ..engine_core.phase import Phase
from ..engine_core.session import Outcome
from ..engine_core.timers import TimerKind, TimerScope

VIAL_POINTS = 10
DECOY_CHANCE = 0.2
FUSE_MIN_MS = 2000
FUSE_MAX_MS = 4000
GLOW_FRACTION = 0.3

BASE_SPAWN_MS = 1000
BASE_MAX_VIALS = 8
MAX_VIALS_CAP = 20

REACTIONS = {
    "good": ("Impressive reflexes, worm!", "My precious vials! Nooo!",
             "Stop stealing my glory!", "Curse your nimble fingers!"),
    "bad": ("MELTDOWN! My laboratory!", "You incompetent fool!",
            "My experiments are ruined!", "Pathetic! Simply pathetic!"),
    "decoy": ("You fool! That was empty!", "Wasted effort, imbecile!",
              "Distracted by nothing!", "My decoys work perfectly!"),
    "start": ("Protect my precious experiments!", "Don't let them explode!", "Quick! Save my glory!"),
    "end": ("The carnage... it's beautiful!", "My lab will never recover!", "You've doomed us all!"),
    "chaos": ("MORE CHAOS! I LOVE IT!", "Yes! Let the mayhem multiply!",
              "The laboratory trembles with power!", "ASCENDING TO NEW LEVELS OF MADNESS!"),
}


def max_vials(chaos: int) -> int:
    return min(BASE_MAX_VIALS + (chaos - 1) * 3, MAX_VIALS_CAP)


def spawn_rate_ms(chaos: int) -> float:
    return BASE_SPAWN_MS * max(0.3, 1 - (chaos - 1) * 0.15)


@dataclass
class Vial:
    id: int
    fuse_ms: float
    empty: bool
    vial_type: int  # 1-4, 0 for empty decoys


@dataclass
class LabBench:
    """All vials currently on the lab bench."""
    vials: dict[int, Vial] = field(default_factory=dict)
    next_id: int = 0
    exploded: int = 0


class GloryGrab(SidequestGame):
    """Concurrent-spawn reflex game with per-vial fuses."""

    game_id = "glory-grab"
    title = "Glory Grab"
    description = "Quick reflexes mini-game"

    session_clock_ms = 20_000

    failure_threshold = 5

    accepted_actions = frozenset({ActionType.COLLECT})

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.chaos_level = 0

    def on_session_start(self):
        self.chaos_level += 1
        self.session.extras["bench"] = LabBench()
        self.session.extras["chaos_level"] = self.chaos_level
        self._react("chaos" if self.chaos_level > 1 else "start")

    @property
    def bench(self) -> LabBench:
        return self.session.extras["bench"]

    def next_content(self) -> LabBench:
        return self.bench

    def on_active(self):
        self._schedule_spawn()

    def on_clock_expired(self):
        self._finish(Outcome.WON)

    # -------------------------------------------------------------------------
    # Spawning and fuses
    # -------------------------------------------------------------------------

    def _schedule_spawn(self):
        rate = spawn_rate_ms(self.chaos_level)
        self.timers.start(TimerKind.SPAWN, rate + self.random.uniform(0, rate * 0.5), self._on_spawn)

    def _on_spawn(self):
        room = max_vials(self.chaos_level) - len(self.bench.vials)
        if room > 0:
            count = min(2, room) if self.chaos_level >= 3 else 1
            for _ in range(count):
                self._spawn_vial()
        self._schedule_spawn()

    def _spawn_vial(self):
        bench = self.bench
        empty = self.random.chance(DECOY_CHANCE)
        vial = Vial(
            id=bench.next_id,
            fuse_ms=self.random.uniform(FUSE_MIN_MS, FUSE_MAX_MS),
            empty=empty,
            vial_type=0 if empty else self.random.randint(1, 4),
        )
        bench.next_id += 1
        bench.vials[vial.id] = vial
        self.timers.start(
            (TimerKind.ITEM_LIFETIME, vial.id),
            vial.fuse_ms,
            partial(self._explode, vial.id),
            scope=TimerScope.SESSION,
        )

    def _explode(self, vial_id: int):
        vial = self.bench.vials.pop(vial_id, None)
        if vial is None or self.phase != Phase.AWAITING_INPUT:
            return
        self.bench.exploded += 1
        self._react("bad")
        self._resolve(Resolution.FAILURE, message=self.session.message)

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    def handle_action(self, action: Action) -> ActionResult:
        item_id = action.get("item_id")
        if not isinstance(item_id, int) or isinstance(item_id, bool):
            return ActionResult.ignored(self.phase)
        vial = self.bench.vials.pop(item_id, None)
        if vial is None:
            return ActionResult.ignored(self.phase)
        self.timers.cancel((TimerKind.ITEM_LIFETIME, vial.id))

        if vial.empty:
            self._react("decoy")
            return self._resolve(Resolution.NEUTRAL, message=self.session.message)

        self.session.score += VIAL_POINTS
        self._react("good")
        return self._resolve(Resolution.SUCCESS, message=self.session.message)

    def on_finish(self, outcome: Outcome):
        self.bench.vials.clear()
        self._react("end")

    def _react(self, kind: str):
        self.session.message = self.random.choice(REACTIONS[kind])

    def content_view(self) -> dict[str, Any]:
        vials = []
        for vial in self.bench.vials.values():
            left = self.timers.remaining_ms((TimerKind.ITEM_LIFETIME, vial.id))
            vials.append({
                "id": vial.id,
                "empty": vial.empty,
                "vial_type": vial.vial_type,
                "fuse_ms_left": int(left),
                "glowing": not vial.empty and left / vial.fuse_ms < GLOW_FRACTION,
            })
        return {
            "vials": vials,
            "exploded": self.bench.exploded,
            "chaos_level": self.chaos_level,
            "max_vials": max_vials(self.chaos_level),
        }
