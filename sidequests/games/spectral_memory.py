"""
Spectral Memory - Match the haunted card pairs before the candle burns out.

8 symbol pairs (16 cards), 90 second clock. Flipping a second card
resolves a move: a match counts as a success, a mismatch as a failure,
and the pair flips back once the 1 second check is over.

Spectral events fire every 8-15 seconds:
- ghostly shuffle: face-down cards trade places
- phantom flip: every unmatched card shows its face for 3 seconds
- spectral fog: input is blocked for 4 seconds
"""

from __future__ import annotations
from dataclasses import dataclass, field
from functools import partial
from typing import Any

from ..engine_core.action import Action, ActionResult, ActionType, Resolution
from ..engine_core.game import SidequestGame
from ..engine_core.session import Outcome
from ..engine_core.timers import TimerKind

SYMBOLS = ("👻", "🦇", "🕷️", "💀", "🕯️", "⚰️", "🔮", "🗝️")

EVENT_MIN_MS = 8000
EVENT_MAX_MS = 15000
PHANTOM_FLIP_MS = 3000
FOG_MS = 4000

EVENT_MESSAGES = {
    "ghostly_shuffle": "The spirits shuffle the cards!",
    "phantom_flip": "Phantom energy reveals hidden cards!",
    "spectral_fog": "Spectral fog obscures your vision!",
}


@dataclass
class MemoryCard:
    index: int
    symbol: str
    face_up: bool = False
    matched: bool = False


@dataclass
class MemoryBoard:
    """The dealt layout. Persists across moves within a session."""
    cards: list[MemoryCard] = field(default_factory=list)
    flipped: list[int] = field(default_factory=list)
    revealed: bool = False
    fogged: bool = False

    def face_down(self) -> list[MemoryCard]:
        return [c for c in self.cards if not c.face_up and not c.matched]


class SpectralMemory(SidequestGame):
    """Memory match against a session clock."""

    game_id = "spectral-memory"
    title = "Spectral Memory"
    description = "Match the haunted pairs before time runs out"

    resolve_ms = 1000
    session_clock_ms = 90_000

    success_threshold = len(SYMBOLS)

    accepted_actions = frozenset({ActionType.FLIP})

    def on_session_start(self):
        symbols = [s for s in SYMBOLS for _ in range(2)]
        cards = [MemoryCard(i, s) for i, s in enumerate(self.random.shuffled(symbols))]
        self.session.extras["board"] = MemoryBoard(cards=cards)

    @property
    def board(self) -> MemoryBoard:
        return self.session.extras["board"]

    def next_content(self) -> MemoryBoard:
        return self.board

    def on_active(self):
        self._schedule_event()

    def input_blocked(self) -> bool:
        return self.board.fogged

    def handle_action(self, action: Action) -> ActionResult:
        board = self.board
        index = action.get("index")
        if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < len(board.cards):
            return ActionResult.ignored(self.phase)
        card = board.cards[index]
        if card.face_up or card.matched:
            return ActionResult.ignored(self.phase)

        card.face_up = True
        board.flipped.append(index)
        if len(board.flipped) < 2:
            return self._accepted()

        first, second = (board.cards[i] for i in board.flipped)
        if first.symbol == second.symbol:
            first.matched = second.matched = True
            self.session.score += 10
            return self._resolve(Resolution.SUCCESS, message="The spirits approve of your memory!")
        return self._resolve(Resolution.FAILURE)

    def on_next_challenge(self):
        board = self.board
        for i in board.flipped:
            if not board.cards[i].matched:
                board.cards[i].face_up = False
        board.flipped.clear()
        self.session.message = ""

    def on_finish(self, outcome: Outcome):
        if outcome == Outcome.WON:
            self.session.message = "Your memory pierces the veil!"
        else:
            self.session.message = "The candle gutters out... the spirits keep their secrets."

    # -------------------------------------------------------------------------
    # Spectral events
    # -------------------------------------------------------------------------

    def _schedule_event(self):
        delay = self.random.uniform(EVENT_MIN_MS, EVENT_MAX_MS)
        self.timers.start(TimerKind.EVENT, delay, self._trigger_event)

    def _trigger_event(self):
        board = self.board
        event = self.random.choice(tuple(EVENT_MESSAGES))
        self.session.message = EVENT_MESSAGES[event]

        if event == "ghostly_shuffle":
            hidden = board.face_down()
            symbols = self.random.shuffled(c.symbol for c in hidden)
            for card, symbol in zip(hidden, symbols):
                card.symbol = symbol
        elif event == "phantom_flip":
            board.revealed = True
            self.timers.start((TimerKind.EVENT, "phantom_flip"), PHANTOM_FLIP_MS,
                              partial(self._end_effect, "revealed"))
        else:
            board.fogged = True
            self.timers.start((TimerKind.EVENT, "spectral_fog"), FOG_MS,
                              partial(self._end_effect, "fogged"))

        self.session.extras["last_event"] = event
        self._schedule_event()

    def _end_effect(self, flag: str):
        setattr(self.board, flag, False)
        self.session.message = ""

    def content_view(self) -> dict[str, Any]:
        board = self.board
        return {
            "cards": [
                {
                    "index": c.index,
                    "symbol": c.symbol if (c.face_up or c.matched or board.revealed) else None,
                    "matched": c.matched,
                }
                for c in board.cards
            ],
            "matches": self.session.successes,
            "moves": self.session.attempts,
            "fogged": board.fogged,
        }
