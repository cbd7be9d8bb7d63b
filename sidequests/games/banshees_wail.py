"""
Banshee's Wail - Hit the beats as they cross the hit zone.

Beats spawn at the left of the lane and travel right. A beat's
position is derived from scheduler time, so it never needs a per-frame
update: every 50 ms tick it advances 2 + intensity * 0.5 percent of the
lane (speed fixed when it spawns).

Hitting while a beat sits in the 75-90% zone scores 10 + combo * 2 and
extends the combo. A hit with nothing in the zone breaks the combo. A
beat that reaches the end of the lane is a miss; 3 misses lose.
Surviving the 60 second wail wins. Intensity rises by 0.5 every
15 seconds (cap 3), which speeds up both spawning and travel.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from functools import partial
import math
from typing import Any

from ..engine_core.action import Action, ActionResult, ActionType, Resolution
from ..engine_core.game import SidequestGame
from ..engine_core.phase import Phase
from ..engine_core.session import Outcome
from ..engine_core.timers import TimerKind, TimerScope

LANE_END = 100.0
HIT_ZONE = (75.0, 90.0)
MOVE_TICK_MS = 50

BASE_INTENSITY = 1.0
INTENSITY_STEP = 0.5
MAX_INTENSITY = 3.0
INTENSITY_INTERVAL_MS = 15_000


def beat_speed(intensity: float) -> float:
    """Lane percent per move tick."""
    return 2 + intensity * 0.5


def spawn_interval_ms(intensity: float) -> float:
    return max(800 - intensity * 200, 400)


@dataclass
class Beat:
    id: int
    spawned_at: float
    speed: float

    def position(self, now_ms: float) -> float:
        return self.speed * (now_ms - self.spawned_at) / MOVE_TICK_MS

    @property
    def travel_ms(self) -> float:
        """Time until the beat reaches the end of the lane."""
        return math.ceil(LANE_END / self.speed) * MOVE_TICK_MS


@dataclass
class Lane:
    beats: dict[int, Beat] = field(default_factory=dict)
    next_id: int = 1
    combo: int = 0
    max_combo: int = 0
    intensity: float = BASE_INTENSITY


class BansheesWail(SidequestGame):
    """Rhythm game: survive the wail."""

    game_id = "banshees-wail"
    title = "Banshee's Wail"
    description = "Hit the beats to silence the banshee's cry"

    session_clock_ms = 60_000

    failure_threshold = 3

    accepted_actions = frozenset({ActionType.HIT})

    def on_session_start(self):
        self.session.extras["lane"] = Lane()

    @property
    def lane(self) -> Lane:
        return self.session.extras["lane"]

    def next_content(self) -> Lane:
        return self.lane

    def on_active(self):
        self._schedule_spawn()
        self.timers.start_interval(TimerKind.EVENT, INTENSITY_INTERVAL_MS, self._raise_intensity)

    def on_clock_expired(self):
        self._finish(Outcome.WON)

    def _raise_intensity(self):
        self.lane.intensity = min(self.lane.intensity + INTENSITY_STEP, MAX_INTENSITY)

    def _schedule_spawn(self):
        delay = spawn_interval_ms(self.lane.intensity) + self.random.uniform(0, 400)
        self.timers.start(TimerKind.SPAWN, delay, self._on_spawn)

    def _on_spawn(self):
        lane = self.lane
        beat = Beat(lane.next_id, self.scheduler.now_ms(), beat_speed(lane.intensity))
        lane.next_id += 1
        lane.beats[beat.id] = beat
        self.timers.start(
            (TimerKind.ITEM_LIFETIME, beat.id),
            beat.travel_ms,
            partial(self._on_missed, beat.id),
            scope=TimerScope.SESSION,
        )
        self._schedule_spawn()

    def _on_missed(self, beat_id: int):
        beat = self.lane.beats.pop(beat_id, None)
        if beat is None or self.phase != Phase.AWAITING_INPUT:
            return
        self.lane.combo = 0
        self._resolve(Resolution.FAILURE, message="The wail grows louder!")

    def handle_action(self, action: Action) -> ActionResult:
        lane = self.lane
        now = self.scheduler.now_ms()
        start, end = HIT_ZONE
        target = next(
            (b for b in sorted(lane.beats.values(), key=lambda b: b.id)
             if start <= b.position(now) <= end),
            None,
        )
        if target is None:
            lane.combo = 0
            return self._accepted(message="Off beat!")

        del lane.beats[target.id]
        self.timers.cancel((TimerKind.ITEM_LIFETIME, target.id))
        self.session.score += 10 + lane.combo * 2
        lane.combo += 1
        lane.max_combo = max(lane.max_combo, lane.combo)
        return self._resolve(Resolution.SUCCESS)

    def on_finish(self, outcome: Outcome):
        self.lane.beats.clear()
        if outcome == Outcome.WON:
            self.session.message = "The banshee falls silent. You survived!"
        else:
            self.session.message = "The banshee's fury overwhelms you!"

    def wail_message(self) -> str:
        intensity = self.lane.intensity
        if intensity <= 1.5:
            return "The banshee's wail echoes softly..."
        if intensity <= 2.5:
            return "The banshee's wail grows stronger!"
        return "THE BANSHEE'S WAIL IS DEAFENING!"

    def content_view(self) -> dict[str, Any]:
        lane = self.lane
        now = self.scheduler.now_ms()
        return {
            "beats": [
                {"id": b.id, "position": round(min(b.position(now), LANE_END), 1)}
                for b in lane.beats.values()
            ],
            "hit_zone": list(HIT_ZONE),
            "combo": lane.combo,
            "max_combo": lane.max_combo,
            "lives": max(0, self.failure_threshold - self.session.failures),
            "intensity": lane.intensity,
            "wail": self.wail_message(),
        }
