"""
Wretched Wiring - Rewire Dr. Heinous' generator before the clock runs out.

Each puzzle has 4 colored wires on terminals A1-A4 and a hidden target
terminal for each among B1-B4. Connecting a wire to its target locks
it in; a wrong terminal is a failed connection and the wire stays
loose. All 4 locked solves the puzzle, worth 10 points per second left.

Puzzle clocks shrink: 60, 50, then 40 seconds. Solve 3 puzzles to
win. 3 wrong connections, or a puzzle clock reaching zero, lose.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from ..engine_core.action import Action, ActionResult, ActionType, Resolution
from ..engine_core.game import SidequestGame
from ..engine_core.session import Outcome
from ..engine_core.timers import TimerKind

WIRES = ("red", "blue", "green", "yellow")
START_TERMINALS = {"red": "A1", "blue": "A2", "green": "A3", "yellow": "A4"}
END_TERMINALS = ("B1", "B2", "B3", "B4")
WIRE_COLORS = {"red": "#ef4444", "blue": "#3b82f6", "green": "#10b981", "yellow": "#f59e0b"}

PUZZLES = 3
POINTS_PER_SECOND = 10
WRONG_WIRE_MS = 500


def puzzle_seconds(number: int) -> int:
    return 60 - (number - 1) * 10


@dataclass
class WiringPuzzle:
    number: int
    targets: dict[str, str]
    connected: set[str] = field(default_factory=set)

    @property
    def solved(self) -> bool:
        return len(self.connected) == len(self.targets)


class WretchedWiring(SidequestGame):
    """Wire-matching puzzles against a shrinking clock."""

    game_id = "wretched-wiring"
    title = "Wretched Wiring"
    description = "Rewire the generator before the lab goes dark"

    resolve_ms = 1000

    success_threshold = PUZZLES
    failure_threshold = 3

    accepted_actions = frozenset({ActionType.CONNECT})

    def on_session_start(self):
        self.session.extras["puzzle"] = None

    def next_content(self) -> WiringPuzzle:
        puzzle = self.session.extras["puzzle"]
        if puzzle is None or puzzle.solved:
            number = puzzle.number + 1 if puzzle else 1
            targets = dict(zip(WIRES, self.random.shuffled(END_TERMINALS)))
            puzzle = WiringPuzzle(number=number, targets=targets)
            self.session.extras["puzzle"] = puzzle
            self.session.round = number
        return puzzle

    def on_awaiting_input(self):
        # The puzzle clock keeps running through wrong-wire pauses
        if not self.timers.is_running(TimerKind.SESSION_CLOCK):
            seconds = puzzle_seconds(self.session.round)
            self.timers.start(TimerKind.SESSION_CLOCK, seconds * 1000, self._on_clock_fired)

    def handle_action(self, action: Action) -> ActionResult:
        puzzle: WiringPuzzle = self.session.active_content
        wire, terminal = action.get("wire"), action.get("terminal")
        if not isinstance(wire, str) or wire not in puzzle.targets or wire in puzzle.connected:
            return ActionResult.ignored(self.phase)
        if terminal not in END_TERMINALS:
            return ActionResult.ignored(self.phase)

        if puzzle.targets[wire] != terminal:
            return self._resolve(
                Resolution.FAILURE,
                delay_ms=WRONG_WIRE_MS,
                message=f"Sparks fly! The {wire} wire doesn't belong on {terminal}.",
            )

        puzzle.connected.add(wire)
        if not puzzle.solved:
            return self._accepted(message=f"The {wire} wire hums to life.")

        seconds_left = self.timers.remaining_seconds(TimerKind.SESSION_CLOCK)
        self.timers.cancel(TimerKind.SESSION_CLOCK)
        self.session.score += seconds_left * POINTS_PER_SECOND
        return self._resolve(
            Resolution.SUCCESS,
            message=f"Circuit complete! +{seconds_left * POINTS_PER_SECOND} points",
        )

    def on_finish(self, outcome: Outcome):
        if outcome == Outcome.WON:
            self.session.message = "The generator roars back to life!"
        else:
            self.session.message = "The lab goes dark... forever."

    def content_view(self) -> dict[str, Any]:
        puzzle: WiringPuzzle = self.session.active_content
        return {
            "puzzle": puzzle.number,
            "wires": [
                {
                    "id": wire,
                    "color": WIRE_COLORS[wire],
                    "start_terminal": START_TERMINALS[wire],
                    "connected_to": puzzle.targets[wire] if wire in puzzle.connected else None,
                }
                for wire in WIRES
            ],
            "terminals": list(END_TERMINALS),
            "wrong_connections": self.session.failures,
        }
