"""
Phase Machine - The single discriminated state of a play session.

One enum value plus a transition table. Playing, showing a result and
game over are phases, never separate flags.

Transitions:
    idle            -> intro | presenting          (start)
    intro           -> presenting                  (intro delay elapsed)
    presenting      -> awaiting_input              (reveal elapsed / no reveal)
    awaiting_input  -> resolving                   (matching user action or item timer)
    resolving       -> presenting | won | lost
    won | lost      -> intro | presenting          (explicit restart)
    presenting | awaiting_input | resolving -> won | lost
                                                   (session clock / instant loss)
    any             -> idle                        (teardown)

Only awaiting_input accepts user actions. Anything else is silently
ignored by the game; the machine itself only guards transitions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from ..errors import InvalidTransitionError


class Phase(Enum):
    """Phases of a play session."""
    IDLE = "idle"
    INTRO = "intro"  # Fixed-duration, non-interactive
    PRESENTING = "presenting"  # Challenge shown, input disabled (memorize)
    AWAITING_INPUT = "awaiting_input"  # Challenge shown, input enabled
    RESOLVING = "resolving"  # Brief window after an answer
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_PHASES

    @property
    def presents_content(self) -> bool:
        return self in CONTENT_PHASES


TERMINAL_PHASES = frozenset({Phase.WON, Phase.LOST})
CONTENT_PHASES = frozenset({Phase.PRESENTING, Phase.AWAITING_INPUT, Phase.RESOLVING})

TRANSITIONS: dict[Phase, frozenset[Phase]] = {
    Phase.IDLE: frozenset({Phase.INTRO, Phase.PRESENTING}),
    Phase.INTRO: frozenset({Phase.PRESENTING, Phase.IDLE}),
    Phase.PRESENTING: frozenset({Phase.AWAITING_INPUT, Phase.WON, Phase.LOST, Phase.IDLE}),
    Phase.AWAITING_INPUT: frozenset({Phase.RESOLVING, Phase.WON, Phase.LOST, Phase.IDLE}),
    Phase.RESOLVING: frozenset({Phase.PRESENTING, Phase.WON, Phase.LOST, Phase.IDLE}),
    Phase.WON: frozenset({Phase.INTRO, Phase.PRESENTING, Phase.IDLE}),
    Phase.LOST: frozenset({Phase.INTRO, Phase.PRESENTING, Phase.IDLE}),
}

TransitionListener = Callable[[Phase, Phase], None]


@dataclass
class PhaseMachine:
    """
    Holds the current phase and enforces the transition table.

    Listeners run after every transition with (previous, current); the
    game uses one to cancel timers whose relevance ended.
    """
    phase: Phase = Phase.IDLE
    transitions: dict[Phase, frozenset[Phase]] = field(default_factory=lambda: dict(TRANSITIONS))
    _listeners: list[TransitionListener] = field(default_factory=list)

    def can_transition(self, target: Phase) -> bool:
        return target in self.transitions.get(self.phase, frozenset())

    def transition(self, target: Phase) -> Phase:
        """
        Move to target. Returns the previous phase.

        Raises InvalidTransitionError for a transition outside the table.
        """
        if not self.can_transition(target):
            raise InvalidTransitionError(self.phase, target)
        previous = self.phase
        self.phase = target
        for listener in list(self._listeners):
            listener(previous, target)
        return previous

    def add_listener(self, listener: TransitionListener):
        self._listeners.append(listener)

    def accepts_input(self) -> bool:
        return self.phase == Phase.AWAITING_INPUT

    @property
    def is_terminal(self) -> bool:
        return self.phase.is_terminal
