"""
Persistence Store - Content pools in, session results and leaderboards out.

The store is the ONLY persistence in the system. Game state is never
persisted: sessions are ephemeral and only their final results are
submitted.

Implementations:
- MemoryStore: in-process, for tests and the CLI simulator
- JsonFileStore: one JSON document per game under a data directory

Rules:
- submit_result never raises; failures are logged and reported as False
- Leaderboards are sorted by score descending, hidden players excluded
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from datetime import datetime, timezone
import json
import logging
import os
from pathlib import Path
import threading
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from ..config import LEADERBOARD_DEFAULT_LIMIT, LEADERBOARD_MAX_LIMIT, data_dir
from ..engine_core.results import SessionResult

logger = logging.getLogger("sidequests.persistence")


class LeaderboardEntry(BaseModel):
    """One submitted result as it appears on a leaderboard."""
    name: str = "Anonymous"
    score: int = 0
    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    haunt: str | None = None
    questions_answered: int = 0
    correct_answers: int = 0
    outcome: str | None = None
    hidden: bool = False

    @classmethod
    def from_result(cls, result: SessionResult) -> LeaderboardEntry:
        return cls(
            name=result.player_name,
            score=result.final_score,
            date=result.recorded_at or datetime.now(timezone.utc),
            haunt=result.haunt,
            questions_answered=result.attempts,
            correct_answers=result.successes,
            outcome=result.outcome.value,
        )


def rank(entries: list[LeaderboardEntry], limit: int, haunt: str | None = None) -> list[LeaderboardEntry]:
    """Visible entries (optionally one haunt's), best first, capped at limit."""
    limit = max(0, min(limit, LEADERBOARD_MAX_LIMIT))
    visible = [
        e for e in entries
        if not e.hidden and (haunt is None or e.haunt == haunt)
    ]
    visible.sort(key=lambda e: e.score, reverse=True)
    return visible[:limit]


class PersistenceService(ABC):
    """Where content pools come from and results go."""

    @abstractmethod
    def load_content_pool(self, game_id: str) -> list[dict[str, Any]] | None:
        """Raw content units for a game, or None to use the embedded pool."""

    def submit_result(self, game_id: str, result: SessionResult) -> bool:
        """Record a finished session. Returns False (and logs) on failure."""
        try:
            self._append(game_id, LeaderboardEntry.from_result(result))
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to submit result for {game_id}: {e}")
            return False
        logger.info(f"Recorded {result.outcome.value} for {game_id} ({result.player_name}: {result.final_score})")
        return True

    def get_leaderboard(
        self,
        game_id: str,
        limit: int = LEADERBOARD_DEFAULT_LIMIT,
        haunt: str | None = None,
    ) -> list[LeaderboardEntry]:
        return rank(self._entries(game_id), limit, haunt)

    @abstractmethod
    def _append(self, game_id: str, entry: LeaderboardEntry):
        ...

    @abstractmethod
    def _entries(self, game_id: str) -> list[LeaderboardEntry]:
        ...


class MemoryStore(PersistenceService):
    """
    In-memory store.

    Usage:
        store = MemoryStore(pools={"lab-escape": [{"id": "r1", ...}]})
        emitter = SessionResultEmitter(store=store)
    """

    def __init__(self, pools: dict[str, list[dict[str, Any]]] | None = None):
        self.pools = dict(pools or {})
        self.entries: dict[str, list[LeaderboardEntry]] = {}

    def load_content_pool(self, game_id: str) -> list[dict[str, Any]] | None:
        return self.pools.get(game_id)

    def _append(self, game_id: str, entry: LeaderboardEntry):
        self.entries.setdefault(game_id, []).append(entry)

    def _entries(self, game_id: str) -> list[LeaderboardEntry]:
        return list(self.entries.get(game_id, []))


class JsonFileStore(PersistenceService):
    """
    File-based store: one JSON document per game.

    Layout:
        <data_dir>/content/<game_id>.json      list of raw content units
        <data_dir>/leaderboards/<game_id>.json list of leaderboard entries

    A missing or unreadable content file means "use the embedded pool".
    """

    def __init__(self, root: str | Path | None = None):
        self.root = Path(root) if root is not None else data_dir()
        self.content_dir = self.root / "content"
        self.leaderboard_dir = self.root / "leaderboards"
        self.leaderboard_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def load_content_pool(self, game_id: str) -> list[dict[str, Any]] | None:
        path = self.content_dir / f"{game_id}.json"
        if not path.exists():
            return None
        try:
            with open(path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Unreadable content pool {path}: {e}")
            return None
        if not isinstance(data, list):
            logger.warning(f"Content pool {path} is not a list")
            return None
        return data

    def save_content_pool(self, game_id: str, units: list[dict[str, Any]]):
        self.content_dir.mkdir(parents=True, exist_ok=True)
        with open(self.content_dir / f"{game_id}.json", "w") as f:
            json.dump(units, f, indent=2)

    def _append(self, game_id: str, entry: LeaderboardEntry):
        with self._lock:
            entries = self._entries(game_id)
            entries.append(entry)
            path = self._leaderboard_path(game_id)
            tmp_path = path.with_suffix(".json.tmp")
            # Readers only ever see the old document or the new one
            with open(tmp_path, "w") as f:
                json.dump([e.model_dump(mode="json") for e in entries], f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)

    def _entries(self, game_id: str) -> list[LeaderboardEntry]:
        path = self._leaderboard_path(game_id)
        if not path.exists():
            return []
        try:
            with open(path) as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Unreadable leaderboard {path}, starting fresh: {e}")
            return []
        if not isinstance(raw, list):
            logger.warning(f"Leaderboard {path} is not a list, starting fresh")
            return []

        entries = []
        for item in raw:
            try:
                entries.append(LeaderboardEntry.model_validate(item))
            except ValidationError:
                logger.debug(f"Skipping malformed leaderboard entry in {path}")
        return entries

    def _leaderboard_path(self, game_id: str) -> Path:
        return self.leaderboard_dir / f"{game_id}.json"
