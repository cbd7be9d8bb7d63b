"""
Session Manager - Hosts live sidequest games for the API and the CLI.

LIFECYCLE:
1. Player picks a sidequest -> hosted game created (idle)
2. Player starts -> the game runs its own phase loop and timers
3. Session reaches won/lost -> result emitted, game stays hosted so
   the player can see the terminal screen or restart
4. Player navigates away -> teardown cancels every timer, game removed
5. Finished games untouched for an hour are swept when a new one is hosted

PERSISTENCE RULES:
- Hosted games live in memory only
- Only finished-session results reach the store (via the emitter)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import time
from typing import Any, Callable
import uuid

from ..config import MAX_HOSTED_RESULTS, STALE_SESSION_SECONDS
from ..engine_core.content import RandomContentProvider
from ..engine_core.game import SidequestGame
from ..engine_core.results import SessionResult, SessionResultEmitter
from ..engine_core.timers import AsyncioScheduler, Scheduler
from ..errors import SessionNotFoundError
from ..games.registry import create_game
from ..persistence.store import PersistenceService

logger = logging.getLogger("sidequests.session")


@dataclass
class HostedGame:
    """
    A game instance held by the manager.

    The hosted id is stable across restarts; the game's own session id
    changes with every play-through.
    """
    hosted_id: str
    game: SidequestGame
    player_name: str
    haunt: str | None
    created_at: float
    last_active: float
    results: list[SessionResult] = field(default_factory=list)

    @property
    def game_id(self) -> str:
        return self.game.game_id

    def is_active(self) -> bool:
        return self.game.session.is_active

    def touch(self):
        self.last_active = time.time()

    def record_result(self, result: SessionResult):
        self.results.append(result)
        del self.results[:-MAX_HOSTED_RESULTS]


class SessionManager:
    """
    Manages hosted sidequest games.

    Responsibilities:
    - Create games wired to the store and a result emitter
    - Track hosted games
    - Tear down and sweep finished ones

    Usage:
        manager = SessionManager(store=MemoryStore())
        hosted = manager.create_session("lab-escape", player_name="Vlad")
        hosted.game.start()
    """

    def __init__(
        self,
        store: PersistenceService | None = None,
        scheduler_factory: Callable[[], Scheduler] = AsyncioScheduler,
    ):
        self.store = store
        self.scheduler_factory = scheduler_factory
        self._hosted: dict[str, HostedGame] = {}

    def create_session(
        self,
        game_id: str,
        player_name: str = "Anonymous",
        haunt: str | None = None,
        seed: int | None = None,
    ) -> HostedGame:
        """
        Host a new game instance (idle until started).

        Raises UnknownGameError for unregistered game ids.
        """
        self.cleanup_stale_sessions()
        emitter = SessionResultEmitter(store=self.store, player_name=player_name, haunt=haunt)
        game = create_game(
            game_id,
            scheduler=self.scheduler_factory(),
            provider=RandomContentProvider(seed=seed),
            emitter=emitter,
            store=self.store,
        )

        now = time.time()
        hosted = HostedGame(
            hosted_id=str(uuid.uuid4()),
            game=game,
            player_name=player_name,
            haunt=haunt,
            created_at=now,
            last_active=now,
        )
        emitter.add_listener(hosted.record_result)

        self._hosted[hosted.hosted_id] = hosted
        logger.info(f"Hosted {game_id} as {hosted.hosted_id} for {player_name}")
        return hosted

    def get_session(self, hosted_id: str) -> HostedGame:
        """Raises SessionNotFoundError for unknown or ended ids."""
        hosted = self._hosted.get(hosted_id)
        if hosted is None:
            raise SessionNotFoundError(hosted_id)
        return hosted

    def end_session(self, hosted_id: str) -> bool:
        """
        Tear down a hosted game: cancel its timers and drop it.

        Returns False if the id was not hosted.
        """
        hosted = self._hosted.pop(hosted_id, None)
        if hosted is None:
            return False
        hosted.game.teardown()
        logger.info(f"Ended {hosted.game_id} session {hosted_id}")
        return True

    def list_sessions(self) -> list[HostedGame]:
        return list(self._hosted.values())

    def list_active_sessions(self) -> list[str]:
        """IDs of hosted games with a session in progress."""
        return [hid for hid, hosted in self._hosted.items() if hosted.is_active()]

    def cleanup_stale_sessions(self, max_age_seconds: int = STALE_SESSION_SECONDS) -> int:
        """
        Tear down idle or finished games untouched for max_age_seconds.

        Returns the number removed.
        """
        current_time = time.time()
        stale = [
            hid for hid, hosted in self._hosted.items()
            if current_time - hosted.last_active > max_age_seconds and not hosted.is_active()
        ]
        for hosted_id in stale:
            self.end_session(hosted_id)
        if stale:
            logger.info(f"Swept {len(stale)} stale sessions")
        return len(stale)

    def __len__(self) -> int:
        return len(self._hosted)

    def stats(self) -> dict[str, Any]:
        return {
            "hosted": len(self._hosted),
            "active": len(self.list_active_sessions()),
        }
