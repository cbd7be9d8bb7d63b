"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between the Heinous Trivia client and
the sidequest engine.

Error Codes:
- SESSION_NOT_FOUND: Hosted session does not exist or was ended
- UNKNOWN_GAME: No sidequest registered under the game id
- UNKNOWN_NOVELTY: No novelty generator under the kind
- VALIDATION_ERROR: Malformed action or parameters
- INTERNAL_ERROR: Unexpected server error
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from ..engine_core.action import ActionType


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Machine-readable error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    UNKNOWN_GAME = "UNKNOWN_GAME"
    UNKNOWN_NOVELTY = "UNKNOWN_NOVELTY"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class GameInfo(BaseModel):
    """Catalog entry for one sidequest."""
    game_id: str
    title: str
    description: str = ""
    difficulty: str = "Medium"
    session_clock_seconds: Optional[int] = None
    success_threshold: Optional[int] = None
    failure_threshold: Optional[int] = None
    attempt_limit: Optional[int] = None
    actions: list[str] = Field(default_factory=list)


class SessionSnapshot(BaseModel):
    """Player-facing state of the live play-through."""
    game_id: str
    session_id: str
    phase: str = Field(description="idle, intro, presenting, awaiting_input, resolving, won, lost")
    attempts: int = 0
    successes: int = 0
    failures: int = 0
    score: int = 0
    round: int = 0
    message: str = ""
    time_left_seconds: Optional[int] = None
    low_time: bool = False
    elapsed_ms: int = 0
    outcome: Optional[str] = None
    content: Optional[Any] = Field(None, description="Game-specific view of the active challenge")


class ResultInfo(BaseModel):
    """Terminal record of a finished play-through."""
    game_id: str
    session_id: str
    outcome: str
    final_score: int
    attempts: int
    successes: int
    failures: int
    elapsed_ms: int
    player_name: str
    haunt: Optional[str] = None
    recorded_at: str = ""


# =============================================================================
# Requests
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to host a new sidequest."""
    game_id: str = Field(..., description="Sidequest id, e.g. lab-escape")
    player_name: str = Field("Anonymous", min_length=1, max_length=40, description="Leaderboard name")
    haunt: Optional[str] = Field(None, description="Haunt (venue) the player belongs to")
    seed: Optional[int] = Field(None, description="Seed for reproducible sessions")


class ActionRequest(BaseModel):
    """A player action. Payload keys depend on the action type."""
    action_type: ActionType
    payload: dict[str, Any] = Field(default_factory=dict)


# =============================================================================
# Responses
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class GameListResponse(BaseModel):
    games: list[GameInfo]
    count: int


class SessionResponse(BaseModel):
    """A hosted session and its current snapshot."""
    hosted_id: str
    player_name: str
    haunt: Optional[str] = None
    snapshot: SessionSnapshot
    last_result: Optional[ResultInfo] = None


class SessionListResponse(BaseModel):
    """Response listing hosted sessions."""
    sessions: list[str]
    active: list[str]
    count: int


class ActionResponse(BaseModel):
    """Result of dispatching an action; accepted is False when ignored."""
    accepted: bool
    phase: str
    resolution: Optional[str] = None
    message: str = ""
    snapshot: SessionSnapshot


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    hosted_id: str


class LeaderboardEntryInfo(BaseModel):
    rank: int
    name: str
    score: int
    date: str
    haunt: Optional[str] = None
    questions_answered: int = 0
    correct_answers: int = 0


class LeaderboardResponse(BaseModel):
    game_id: str
    haunt: Optional[str] = None
    entries: list[LeaderboardEntryInfo]


class NoveltyResponse(BaseModel):
    kind: str
    result: dict[str, Any]


class AssetResponse(BaseModel):
    """Resolved URL of a sidequest asset."""
    game_id: str
    asset_name: str
    url: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    hosted_sessions: int = 0
