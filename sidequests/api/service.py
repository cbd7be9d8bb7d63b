"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Hosts games through the SessionManager
3. Serves leaderboards and novelty generators
4. Formats snapshots and results as response models

This layer is framework-agnostic. It raises SidequestError subclasses;
the app maps them to ErrorResponse codes.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from .schemas import (
    ActionRequest,
    ActionResponse,
    AssetResponse,
    CreateSessionRequest,
    GameInfo,
    GameListResponse,
    LeaderboardEntryInfo,
    LeaderboardResponse,
    NoveltyResponse,
    ResultInfo,
    SessionListResponse,
    SessionResponse,
    SessionSnapshot,
)
from ..config import LEADERBOARD_DEFAULT_LIMIT
from ..engine_core.action import Action
from ..engine_core.content import RandomContentProvider
from ..games.novelty import craft_curse, generate_novelty
from ..games.registry import catalog, get_game_class
from ..persistence.assets import AssetHost
from ..persistence.store import MemoryStore, PersistenceService
from ..session import HostedGame, SessionManager


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService(store=JsonFileStore())

        hosted = service.create_session(CreateSessionRequest(game_id="lab-escape"))
        service.start_session(hosted.hosted_id)
        service.dispatch(hosted.hosted_id, ActionRequest(action_type="answer", payload={"text": "echo"}))
    """
    store: PersistenceService = field(default_factory=MemoryStore)
    assets: AssetHost = field(default_factory=AssetHost)
    session_manager: SessionManager | None = None

    def __post_init__(self):
        if self.session_manager is None:
            self.session_manager = SessionManager(store=self.store)

    # =========================================================================
    # Catalog
    # =========================================================================

    def list_games(self) -> GameListResponse:
        games = [GameInfo(**info) for info in catalog()]
        return GameListResponse(games=games, count=len(games))

    # =========================================================================
    # Sessions
    # =========================================================================

    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        hosted = self.session_manager.create_session(
            request.game_id,
            player_name=request.player_name,
            haunt=request.haunt,
            seed=request.seed,
        )
        return self._session_to_response(hosted)

    def get_session(self, hosted_id: str) -> SessionResponse:
        return self._session_to_response(self.session_manager.get_session(hosted_id))

    def start_session(self, hosted_id: str) -> SessionResponse:
        """Start, or restart from won/lost. Ignored mid-session."""
        hosted = self.session_manager.get_session(hosted_id)
        hosted.touch()
        hosted.game.start()
        return self._session_to_response(hosted)

    def dispatch(self, hosted_id: str, request: ActionRequest) -> ActionResponse:
        hosted = self.session_manager.get_session(hosted_id)
        hosted.touch()
        result = hosted.game.dispatch(Action(request.action_type, dict(request.payload)))
        return ActionResponse(
            accepted=result.accepted,
            phase=result.phase.value,
            resolution=result.resolution.value if result.resolution else None,
            message=result.message,
            snapshot=SessionSnapshot(**hosted.game.snapshot()),
        )

    def end_session(self, hosted_id: str) -> bool:
        return self.session_manager.end_session(hosted_id)

    def list_sessions(self) -> SessionListResponse:
        sessions = [h.hosted_id for h in self.session_manager.list_sessions()]
        return SessionListResponse(
            sessions=sessions,
            active=self.session_manager.list_active_sessions(),
            count=len(sessions),
        )

    # =========================================================================
    # Leaderboards and novelties
    # =========================================================================

    def get_leaderboard(
        self,
        game_id: str,
        limit: int = LEADERBOARD_DEFAULT_LIMIT,
        haunt: str | None = None,
    ) -> LeaderboardResponse:
        entries = self.store.get_leaderboard(game_id, limit=limit, haunt=haunt)
        return LeaderboardResponse(
            game_id=game_id,
            haunt=haunt,
            entries=[
                LeaderboardEntryInfo(
                    rank=i + 1,
                    name=e.name,
                    score=e.score,
                    date=e.date.isoformat(),
                    haunt=e.haunt,
                    questions_answered=e.questions_answered,
                    correct_answers=e.correct_answers,
                )
                for i, e in enumerate(entries)
            ],
        )

    def novelty(
        self,
        kind: str,
        seed: int | None = None,
        ingredients: list[str] | None = None,
    ) -> NoveltyResponse:
        """
        Run a novelty generator.

        Raises UnknownNoveltyError for unknown kinds and ValueError for
        a bad ingredient list.
        """
        provider = RandomContentProvider(seed=seed)
        if kind == "curse-crafting" and ingredients:
            result = craft_curse(provider, ingredients)
        else:
            result = generate_novelty(kind, provider)
        return NoveltyResponse(kind=kind, result=result)

    def asset_url(self, game_id: str, asset_name: str) -> AssetResponse:
        """Raises UnknownGameError for unregistered game ids."""
        get_game_class(game_id)
        return AssetResponse(game_id=game_id, asset_name=asset_name, url=self.assets.url(game_id, asset_name))

    # =========================================================================
    # Conversion Helpers
    # =========================================================================

    def _session_to_response(self, hosted: HostedGame) -> SessionResponse:
        last: dict[str, Any] | None = hosted.results[-1].to_dict() if hosted.results else None
        return SessionResponse(
            hosted_id=hosted.hosted_id,
            player_name=hosted.player_name,
            haunt=hosted.haunt,
            snapshot=SessionSnapshot(**hosted.game.snapshot()),
            last_result=ResultInfo(**last) if last else None,
        )
