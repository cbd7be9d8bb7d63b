"""
Game Registry - Every playable sidequest by id.

create_game() wires a game instance to its collaborators: the
scheduler, the random provider, the result emitter and (for games with
a content model) a pool validated from the store.
"""

from __future__ import annotations
from typing import Any

from ..engine_core.content import RandomContentProvider
from ..engine_core.game import SidequestGame
from ..engine_core.results import SessionResultEmitter
from ..engine_core.timers import Scheduler
from ..errors import UnknownGameError
from ..persistence.content import load_pool
from ..persistence.store import PersistenceService
from .banshees_wail import BansheesWail
from .chupacabra_challenge import ChupacabraChallenge
from .face_the_chupacabra import FaceTheChupacabra
from .glory_grab import GloryGrab
from .lab_escape import LabEscape
from .necromancers_gambit import NecromancersGambit
from .phantoms_puzzle import PhantomsPuzzle
from .spectral_memory import SpectralMemory
from .wack_a_chupacabra import WackAChupacabra
from .wretched_wiring import WretchedWiring

GAMES: dict[str, type[SidequestGame]] = {
    cls.game_id: cls
    for cls in (
        LabEscape,
        SpectralMemory,
        PhantomsPuzzle,
        FaceTheChupacabra,
        NecromancersGambit,
        WackAChupacabra,
        GloryGrab,
        BansheesWail,
        ChupacabraChallenge,
        WretchedWiring,
    )
}


def get_game_class(game_id: str) -> type[SidequestGame]:
    try:
        return GAMES[game_id]
    except KeyError:
        raise UnknownGameError(game_id) from None


def create_game(
    game_id: str,
    scheduler: Scheduler | None = None,
    provider: RandomContentProvider | None = None,
    emitter: SessionResultEmitter | None = None,
    store: PersistenceService | None = None,
    seed: int | None = None,
) -> SidequestGame:
    """
    Build a ready-to-start game instance.

    Raises UnknownGameError for ids not in GAMES.
    """
    cls = get_game_class(game_id)
    pool = None
    if cls.content_model is not None:
        pool = load_pool(game_id, cls.content_model, cls.default_content, store)
    if emitter is None:
        emitter = SessionResultEmitter(store=store)
    return cls(scheduler=scheduler, provider=provider, emitter=emitter, pool=pool, seed=seed)


def catalog() -> list[dict[str, Any]]:
    """Listing metadata for every registered sidequest."""
    return [
        {
            "game_id": cls.game_id,
            "title": cls.title,
            "description": cls.description,
            "difficulty": cls.difficulty,
            "session_clock_seconds": cls.session_clock_ms // 1000 if cls.session_clock_ms else None,
            "success_threshold": cls.success_threshold,
            "failure_threshold": cls.failure_threshold,
            "attempt_limit": cls.attempt_limit,
            "actions": sorted(a.value for a in cls.accepted_actions),
        }
        for cls in GAMES.values()
    ]
