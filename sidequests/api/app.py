"""
FastAPI Application - REST API for the Heinous Trivia client.

Endpoints:
    GET    /api/v1/games                       Sidequest catalog
    POST   /api/v1/sessions                    Host a sidequest
    GET    /api/v1/sessions                    List hosted sessions
    GET    /api/v1/sessions/{id}               Session snapshot
    POST   /api/v1/sessions/{id}/start         Start or restart
    POST   /api/v1/sessions/{id}/actions       Dispatch a player action
    DELETE /api/v1/sessions/{id}               Tear down
    GET    /api/v1/leaderboard/{game_id}       Leaderboard
    GET    /api/v1/novelties/{kind}            Novelty generators
    GET    /api/v1/assets/{game_id}/{name}     Asset URL

Game timers run on the server's event loop, so every endpoint that
touches a game is async. Clients poll the snapshot to observe
timer-driven changes.

An action that arrives out of phase is not an error: it returns 200
with accepted=false and an unchanged snapshot.
"""

from typing import Annotated, Optional

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import ALLOWED_ORIGINS, LEADERBOARD_DEFAULT_LIMIT, LEADERBOARD_MAX_LIMIT, SIDEQUESTS_ENV
from ..errors import SessionNotFoundError, UnknownGameError, UnknownNoveltyError
from .schemas import (
    ActionRequest,
    ActionResponse,
    AssetResponse,
    CreateSessionRequest,
    EndSessionResponse,
    ErrorCode,
    ErrorResponse,
    GameListResponse,
    HealthResponse,
    LeaderboardResponse,
    NoveltyResponse,
    SessionListResponse,
    SessionResponse,
)
from .service import APIService


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Heinous Sidequests API",
        description="""
Mini-game sidequests for Heinous Trivia.

## Flow

1. `POST /api/v1/sessions` hosts a sidequest (idle)
2. `POST /api/v1/sessions/{id}/start` starts the play-through
3. Poll `GET /api/v1/sessions/{id}` and send `POST /actions`
4. On `won`/`lost` the result is on the leaderboard

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Hosted session does not exist |
| `UNKNOWN_GAME` | No sidequest with that id |
| `UNKNOWN_NOVELTY` | No novelty generator with that kind |
| `VALIDATION_ERROR` | Malformed request |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(),
        )

    @app.exception_handler(SessionNotFoundError)
    async def session_not_found(request: Request, exc: SessionNotFoundError):
        return make_error_response(ErrorCode.SESSION_NOT_FOUND, str(exc), 404, {"hosted_id": exc.session_id})

    @app.exception_handler(UnknownGameError)
    async def unknown_game(request: Request, exc: UnknownGameError):
        return make_error_response(ErrorCode.UNKNOWN_GAME, str(exc), 404, {"game_id": exc.game_id})

    @app.exception_handler(UnknownNoveltyError)
    async def unknown_novelty(request: Request, exc: UnknownNoveltyError):
        return make_error_response(ErrorCode.UNKNOWN_NOVELTY, str(exc), 404, {"kind": exc.kind})

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Invalid request",
            422,
            {"errors": [{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()]},
        )

    # =========================================================================
    # Catalog
    # =========================================================================

    @app.get(
        "/api/v1/games",
        response_model=GameListResponse,
        tags=["Games"],
        summary="List sidequests",
    )
    async def list_games() -> GameListResponse:
        return api_service.list_games()

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse, "description": "Unknown game id"}},
        tags=["Sessions"],
        summary="Host a new sidequest session",
    )
    async def create_session(request: CreateSessionRequest) -> SessionResponse:
        """Host a sidequest. It stays idle until started."""
        return api_service.create_session(request)

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List hosted sessions",
    )
    async def list_sessions() -> SessionListResponse:
        return api_service.list_sessions()

    @app.get(
        "/api/v1/sessions/{hosted_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session snapshot",
    )
    async def get_session(hosted_id: str) -> SessionResponse:
        return api_service.get_session(hosted_id)

    @app.post(
        "/api/v1/sessions/{hosted_id}/start",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Start or restart a session",
    )
    async def start_session(hosted_id: str) -> SessionResponse:
        """Start from idle, or restart from won/lost. Ignored mid-session."""
        return api_service.start_session(hosted_id)

    @app.post(
        "/api/v1/sessions/{hosted_id}/actions",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Dispatch a player action",
    )
    async def dispatch_action(hosted_id: str, request: ActionRequest) -> ActionResponse:
        """
        Dispatch an action to the hosted game.

        Out-of-phase or non-matching actions return `accepted=false`.
        """
        return api_service.dispatch(hosted_id, request)

    @app.delete(
        "/api/v1/sessions/{hosted_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a session",
    )
    async def end_session(hosted_id: str) -> EndSessionResponse:
        """Cancel every timer of the session and release it."""
        success = api_service.end_session(hosted_id)
        return EndSessionResponse(success=success, hosted_id=hosted_id)

    # =========================================================================
    # Leaderboards and Novelties
    # =========================================================================

    @app.get(
        "/api/v1/leaderboard/{game_id}",
        response_model=LeaderboardResponse,
        tags=["Leaderboards"],
        summary="Top scores for a sidequest",
    )
    async def get_leaderboard(
        game_id: str,
        limit: Annotated[int, Query(ge=1, le=LEADERBOARD_MAX_LIMIT)] = LEADERBOARD_DEFAULT_LIMIT,
        haunt: Annotated[Optional[str], Query(description="Only this haunt's players")] = None,
    ) -> LeaderboardResponse:
        return api_service.get_leaderboard(game_id, limit=limit, haunt=haunt)

    @app.get(
        "/api/v1/novelties/{kind}",
        response_model=NoveltyResponse,
        responses={404: {"model": ErrorResponse}, 400: {"model": ErrorResponse}},
        tags=["Novelties"],
        summary="Run a novelty generator",
    )
    async def get_novelty(
        kind: str,
        seed: Annotated[Optional[int], Query(description="Seed for a reproducible result")] = None,
        ingredients: Annotated[Optional[str], Query(description="Comma-separated ingredient ids (curse-crafting)")] = None,
    ):
        chosen = [i.strip() for i in ingredients.split(",") if i.strip()] if ingredients else None
        try:
            return api_service.novelty(kind, seed=seed, ingredients=chosen)
        except ValueError as e:
            return make_error_response(ErrorCode.VALIDATION_ERROR, str(e))

    @app.get(
        "/api/v1/assets/{game_id}/{asset_name:path}",
        response_model=AssetResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Resolve a sidequest asset URL",
    )
    async def get_asset(game_id: str, asset_name: str) -> AssetResponse:
        return api_service.asset_url(game_id, asset_name)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="heinous-sidequests",
            version=__version__,
            hosted_sessions=len(api_service.session_manager),
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Heinous Sidequests API",
            "version": __version__,
            "environment": SIDEQUESTS_ENV,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn sidequests.api.app:app
app = create_app()
