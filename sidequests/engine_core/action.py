"""
Action System - Player actions and their results.

Actions represent everything a player can do inside a sidequest:
answering a riddle, flipping a card, throwing rock/paper/scissors,
whacking a hole, connecting a wire...

An action that arrives outside the awaiting-input phase, or that does
not fit the active challenge, is ignored: the result says so and
nothing about the session changes.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .phase import Phase


class ActionType(Enum):
    """Types of player actions."""
    ANSWER = "answer"  # Text answer (riddles)
    HINT = "hint"  # Ask for a hint
    FLIP = "flip"  # Flip a card (memory)
    CHOOSE = "choose"  # Pick one option (rps throw, duel card, hiding spot)
    INPUT_SYMBOL = "input_symbol"  # Append a glyph (pattern memory)
    CLEAR_INPUT = "clear_input"  # Clear the glyphs entered so far
    WHACK = "whack"  # Hit a hole
    COLLECT = "collect"  # Grab a spawned item
    HIT = "hit"  # Rhythm hit
    CONNECT = "connect"  # Wire to terminal


class Resolution(Enum):
    """How a resolved action counts toward the thresholds."""
    SUCCESS = "success"
    FAILURE = "failure"
    NEUTRAL = "neutral"  # Resolved, but neither (duel ties)


@dataclass
class Action:
    """
    A player action with its parameters.

    Payload keys depend on the action type (answer text, card index,
    choice value, wire/terminal ids).
    """
    action_type: ActionType
    payload: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)

    @classmethod
    def answer(cls, text: str) -> Action:
        return cls(ActionType.ANSWER, {"text": text})

    @classmethod
    def hint(cls) -> Action:
        return cls(ActionType.HINT)

    @classmethod
    def flip(cls, index: int) -> Action:
        return cls(ActionType.FLIP, {"index": index})

    @classmethod
    def choose(cls, value: Any) -> Action:
        return cls(ActionType.CHOOSE, {"value": value})

    @classmethod
    def input_symbol(cls, symbol: str) -> Action:
        return cls(ActionType.INPUT_SYMBOL, {"symbol": symbol})

    @classmethod
    def clear_input(cls) -> Action:
        return cls(ActionType.CLEAR_INPUT)

    @classmethod
    def whack(cls, hole: int) -> Action:
        return cls(ActionType.WHACK, {"hole": hole})

    @classmethod
    def collect(cls, item_id: int) -> Action:
        return cls(ActionType.COLLECT, {"item_id": item_id})

    @classmethod
    def hit(cls) -> Action:
        return cls(ActionType.HIT)

    @classmethod
    def connect(cls, wire: str, terminal: str) -> Action:
        return cls(ActionType.CONNECT, {"wire": wire, "terminal": terminal})


@dataclass
class ActionResult:
    """
    Result of dispatching an action.

    accepted is False for ignored actions; resolution is set when the
    action resolved an attempt.
    """
    accepted: bool
    phase: Phase
    resolution: Resolution | None = None
    message: str = ""
    changes: list[str] = field(default_factory=list)

    @classmethod
    def ignored(cls, phase: Phase) -> ActionResult:
        return cls(accepted=False, phase=phase)

    @classmethod
    def accepted_with(
        cls,
        phase: Phase,
        resolution: Resolution | None = None,
        message: str = "",
        changes: list[str] | None = None,
    ) -> ActionResult:
        return cls(
            accepted=True,
            phase=phase,
            resolution=resolution,
            message=message,
            changes=changes or [],
        )
