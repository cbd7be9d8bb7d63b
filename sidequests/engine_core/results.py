"""
Session Results - Terminal records handed to the leaderboard.

When a session reaches won/lost the game builds a SessionResult and the
emitter passes it to the persistence collaborator. The emitter never
retries; a failed write is logged and the player still sees the
terminal screen.
"""

from __future__ import annotations
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Callable
import logging

from .session import Outcome, Session

if TYPE_CHECKING:
    from ..persistence.store import PersistenceService

logger = logging.getLogger("sidequests.results")


@dataclass(frozen=True)
class SessionResult:
    """Completed-session record."""
    game_id: str
    session_id: str
    outcome: Outcome
    final_score: int
    attempts: int
    successes: int
    failures: int
    elapsed_ms: int
    player_name: str = "Anonymous"
    haunt: str | None = None
    recorded_at: str = ""

    @classmethod
    def from_session(
        cls,
        session: Session,
        now_ms: float,
        player_name: str = "Anonymous",
        haunt: str | None = None,
    ) -> SessionResult:
        if session.outcome is None:
            raise ValueError("Session has no outcome yet")
        return cls(
            game_id=session.game_id,
            session_id=session.session_id,
            outcome=session.outcome,
            final_score=session.score,
            attempts=session.attempts,
            successes=session.successes,
            failures=session.failures,
            elapsed_ms=int(session.elapsed_ms(now_ms)),
            player_name=player_name,
            haunt=haunt,
            recorded_at=datetime.now(timezone.utc).isoformat(),
        )

    @property
    def won(self) -> bool:
        return self.outcome == Outcome.WON

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["outcome"] = self.outcome.value
        return data


ResultListener = Callable[[SessionResult], None]


class SessionResultEmitter:
    """
    Hands terminal records to the persistence collaborator.

    Listeners are notified as well (the hosting layer uses one to keep
    the last result of each hosted session).
    """

    def __init__(
        self,
        store: PersistenceService | None = None,
        player_name: str = "Anonymous",
        haunt: str | None = None,
    ):
        self.store = store
        self.player_name = player_name
        self.haunt = haunt
        self._listeners: list[ResultListener] = []

    def add_listener(self, listener: ResultListener):
        self._listeners.append(listener)

    def emit(self, session: Session, now_ms: float) -> SessionResult:
        """Build the record for a finished session and submit it."""
        result = SessionResult.from_session(
            session, now_ms, player_name=self.player_name, haunt=self.haunt
        )
        logger.info(
            f"{result.game_id} session {result.session_id} {result.outcome.value}: "
            f"score={result.final_score} attempts={result.attempts} elapsed={result.elapsed_ms}ms"
        )

        if self.store is not None:
            try:
                ok = self.store.submit_result(result.game_id, result)
            except (OSError, ValueError) as e:
                logger.warning(f"Result submission raised for {result.game_id}: {e}")
                ok = False
            if not ok:
                logger.warning(f"Result for {result.game_id} session {result.session_id} not saved")

        for listener in list(self._listeners):
            listener(result)

        return result
