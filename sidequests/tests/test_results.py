"""
Tests for SessionResult and SessionResultEmitter.
"""

import pytest

from ..engine_core import Outcome, Session, SessionResult, SessionResultEmitter


def finished_session(outcome=Outcome.WON):
    session = Session(game_id="lab-escape")
    session.scoring.record_outcome(True)
    session.scoring.record_outcome(False)
    session.score = 7
    session.started_at = 1000
    session.finished_at = 4500
    session.outcome = outcome
    return session


class TestSessionResult:

    def test_from_session(self):
        result = SessionResult.from_session(finished_session(), now_ms=9000, player_name="Mina", haunt="crypt")
        assert result.final_score == 7
        assert result.attempts == 2
        assert result.successes == 1
        assert result.failures == 1
        # Frozen at finished_at, not now
        assert result.elapsed_ms == 3500
        assert result.won
        assert result.recorded_at

    def test_unfinished_session_rejected(self):
        with pytest.raises(ValueError):
            SessionResult.from_session(Session(game_id="lab-escape"), now_ms=0)

    def test_to_dict(self):
        data = SessionResult.from_session(finished_session(Outcome.LOST), now_ms=0).to_dict()
        assert data["outcome"] == "lost"
        assert data["player_name"] == "Anonymous"


class TestSessionResultEmitter:

    def test_submits_to_store(self, store):
        emitter = SessionResultEmitter(store=store, player_name="Mina", haunt="crypt")
        emitter.emit(finished_session(), now_ms=0)
        [entry] = store.get_leaderboard("lab-escape")
        assert entry.name == "Mina"
        assert entry.score == 7
        assert entry.outcome == "won"

    def test_without_store(self):
        result = SessionResultEmitter().emit(finished_session(), now_ms=0)
        assert result.game_id == "lab-escape"

    def test_failed_submit_is_logged(self, caplog):
        class RefusingStore:
            def submit_result(self, game_id, result):
                return False

        seen = []
        emitter = SessionResultEmitter(store=RefusingStore())
        emitter.add_listener(seen.append)
        with caplog.at_level("WARNING", logger="sidequests.results"):
            result = emitter.emit(finished_session(), now_ms=0)
        assert "not saved" in caplog.text
        assert seen == [result]
