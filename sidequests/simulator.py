"""
Simulator - Plays a sidequest with a random player on the manual clock.

The random player sees the same menu a real player would (every action
the game would take right now) and picks uniformly from it, with a
per-step chance of hesitating. Everything runs on a ManualScheduler and
a seeded provider, so a seed replays the exact same session.

Used by the CLI's simulate command and by the smoke tests.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import Callable

from .engine_core.action import Action
from .engine_core.content import RandomContentProvider
from .engine_core.game import SidequestGame
from .engine_core.phase import Phase
from .engine_core.results import SessionResult, SessionResultEmitter
from .engine_core.timers import ManualScheduler
from .games import (
    banshees_wail,
    face_the_chupacabra,
    phantoms_puzzle,
    wack_a_chupacabra,
    wretched_wiring,
)
from .games.registry import create_game
from .persistence.store import PersistenceService

logger = logging.getLogger("sidequests.simulator")

STEP_MS = 250
ACT_CHANCE = 0.6
TIME_LIMIT_MS = 10 * 60 * 1000


# =============================================================================
# Action menus
# =============================================================================

def _lab_escape(game: SidequestGame) -> list[Action]:
    guesses = [Action.answer(unit.value.answer) for unit in game.pool]
    return guesses + [Action.hint()]


def _spectral_memory(game: SidequestGame) -> list[Action]:
    return [
        Action.flip(card.index)
        for card in game.board.cards
        if not card.face_up and not card.matched
    ]


def _phantoms_puzzle(game: SidequestGame) -> list[Action]:
    return [Action.input_symbol(glyph) for glyph in phantoms_puzzle.GLYPHS]


def _face_the_chupacabra(game: SidequestGame) -> list[Action]:
    return [Action.choose(choice) for choice in face_the_chupacabra.CHOICES]


def _necromancers_gambit(game: SidequestGame) -> list[Action]:
    return [Action.choose(card.id) for card in game.duel.player_hand]


def _wack_a_chupacabra(game: SidequestGame) -> list[Action]:
    return [Action.whack(hole) for hole in range(wack_a_chupacabra.HOLES)]


def _glory_grab(game: SidequestGame) -> list[Action]:
    return [Action.collect(vial_id) for vial_id in game.bench.vials]


def _banshees_wail(game: SidequestGame) -> list[Action]:
    return [Action.hit()]


def _chupacabra_challenge(game: SidequestGame) -> list[Action]:
    hunt = game.session.active_content
    if hunt.spot is not None:
        return []
    return [Action.choose(spot.id) for spot in hunt.spots]


def _wretched_wiring(game: SidequestGame) -> list[Action]:
    puzzle = game.session.active_content
    return [
        Action.connect(wire, terminal)
        for wire in wretched_wiring.WIRES
        if wire not in puzzle.connected
        for terminal in wretched_wiring.END_TERMINALS
    ]


ACTION_MENUS: dict[str, Callable[[SidequestGame], list[Action]]] = {
    "lab-escape": _lab_escape,
    "spectral-memory": _spectral_memory,
    "phantoms-puzzle": _phantoms_puzzle,
    "face-the-chupacabra": _face_the_chupacabra,
    "necromancers-gambit": _necromancers_gambit,
    "wack-a-chupacabra": _wack_a_chupacabra,
    "glory-grab": _glory_grab,
    "banshees-wail": _banshees_wail,
    "chupacabra-challenge": _chupacabra_challenge,
    "wretched-wiring": _wretched_wiring,
}


def legal_actions(game: SidequestGame) -> list[Action]:
    """Actions the game would take right now (empty outside awaiting-input)."""
    if game.phase != Phase.AWAITING_INPUT or game.input_blocked():
        return []
    return ACTION_MENUS[game.game_id](game)


# =============================================================================
# Simulation
# =============================================================================

@dataclass
class SimulationReport:
    game_id: str
    seed: int | None
    result: SessionResult | None
    actions_sent: int = 0
    actions_accepted: int = 0
    elapsed_ms: float = 0.0
    log: list[str] = field(default_factory=list)

    @property
    def finished(self) -> bool:
        return self.result is not None


def simulate(
    game_id: str,
    seed: int | None = None,
    player_name: str = "Simulator",
    store: PersistenceService | None = None,
    act_chance: float = ACT_CHANCE,
    step_ms: int = STEP_MS,
    limit_ms: int = TIME_LIMIT_MS,
) -> SimulationReport:
    """
    Play one session of game_id to completion (or limit_ms of game time).

    The game and the player draw from separate seeded streams.
    """
    clock = ManualScheduler()
    game = create_game(
        game_id,
        scheduler=clock,
        provider=RandomContentProvider(seed=seed),
        emitter=SessionResultEmitter(store=store, player_name=player_name),
        store=store,
    )
    player = RandomContentProvider(seed=None if seed is None else seed + 1)
    report = SimulationReport(game_id=game_id, seed=seed, result=None)

    game.start()
    while not game.phase.is_terminal and clock.now_ms() < limit_ms:
        menu = legal_actions(game)
        if menu and player.chance(act_chance):
            action = player.choice(menu)
            result = game.dispatch(action)
            report.actions_sent += 1
            if result.accepted:
                report.actions_accepted += 1
                report.log.append(
                    f"{clock.now_ms():>8.0f}ms {action.action_type.value} {action.payload} "
                    f"-> {result.resolution.value if result.resolution else 'ok'} {result.message}".rstrip()
                )
            continue
        clock.advance(step_ms)

    report.elapsed_ms = clock.now_ms()
    report.result = game.last_result
    if report.result is None:
        logger.warning(f"{game_id}: simulation hit the {limit_ms}ms limit in phase {game.phase.value}")
        game.teardown()
    return report
