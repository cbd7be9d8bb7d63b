"""
Tests for ManualScheduler and TimerCoordinator.

Tests:
- One timer per kind, replacement on restart
- Interval timers
- Scoped and structural cancellation
- Nothing fires after cancel_all
- AsyncioScheduler on a real event loop
"""

import asyncio

import pytest

from ..engine_core import Action, Phase, Resolution, SessionResultEmitter
from ..engine_core.timers import AsyncioScheduler, ManualScheduler, TimerCoordinator, TimerKind, TimerScope
from ..games.lab_escape import LabEscape


@pytest.fixture
def timers(clock):
    return TimerCoordinator(clock)


class TestManualScheduler:

    def test_fires_in_due_order(self, clock):
        fired = []
        clock.call_later(300, lambda: fired.append("c"))
        clock.call_later(100, lambda: fired.append("a"))
        clock.call_later(200, lambda: fired.append("b"))
        clock.advance(1000)
        assert fired == ["a", "b", "c"]

    def test_now_tracks_callbacks(self, clock):
        seen = []
        clock.call_later(250, lambda: seen.append(clock.now_ms()))
        clock.advance(400)
        assert seen == [250]
        assert clock.now_ms() == 400

    def test_cancelled_call_does_not_fire(self, clock):
        fired = []
        handle = clock.call_later(100, lambda: fired.append(1))
        handle.cancel()
        clock.advance(200)
        assert fired == []
        assert clock.pending == 0

    def test_run_until_idle(self):
        clock = ManualScheduler(start_ms=1000)
        fired = []
        clock.call_later(500, lambda: fired.append(clock.now_ms()))
        clock.run_until_idle()
        assert fired == [1500]


class TestTimerCoordinator:

    def test_one_shot_fires_once(self, clock, timers):
        fired = []
        timers.start(TimerKind.REVEAL, 1000, lambda: fired.append(1))
        clock.advance(999)
        assert fired == []
        clock.advance(1)
        clock.advance(5000)
        assert fired == [1]
        assert not timers.is_running(TimerKind.REVEAL)

    def test_restarting_a_kind_replaces_it(self, clock, timers):
        fired = []
        timers.start(TimerKind.INPUT, 1000, lambda: fired.append("old"))
        timers.start(TimerKind.INPUT, 2000, lambda: fired.append("new"))
        clock.advance(3000)
        assert fired == ["new"]
        assert len(timers) == 0

    def test_interval_repeats_until_cancelled(self, clock, timers):
        ticks = []
        timers.start_interval(TimerKind.TICK, 500, lambda: ticks.append(clock.now_ms()))
        clock.advance(1600)
        assert ticks == [500, 1000, 1500]
        timers.cancel(TimerKind.TICK)
        clock.advance(2000)
        assert len(ticks) == 3

    def test_interval_must_be_positive(self, timers):
        with pytest.raises(ValueError):
            timers.start_interval(TimerKind.TICK, 0, lambda: None)

    def test_callback_can_restart_its_own_kind(self, clock, timers):
        fired = []

        def respawn():
            fired.append(clock.now_ms())
            if len(fired) < 3:
                timers.start(TimerKind.SPAWN, 100, respawn)

        timers.start(TimerKind.SPAWN, 100, respawn)
        clock.advance(1000)
        assert fired == [100, 200, 300]

    def test_default_scopes(self, clock, timers):
        """Phase-scoped kinds go on cancel_phase_scoped; session kinds survive."""
        for kind in (TimerKind.REVEAL, TimerKind.RESOLVE, TimerKind.SESSION_CLOCK, TimerKind.SPAWN):
            timers.start(kind, 1000, lambda: None)
        timers.cancel_phase_scoped()
        assert set(timers.active_kinds) == {TimerKind.SESSION_CLOCK, TimerKind.SPAWN}

    def test_keyed_item_timers(self, clock, timers):
        """(kind, key) timers run independently and can be session-scoped."""
        fired = []
        for item in (1, 2, 3):
            timers.start((TimerKind.ITEM_LIFETIME, item), 100 * item, lambda i=item: fired.append(i),
                         scope=TimerScope.SESSION)
        timers.cancel_phase_scoped()
        timers.cancel((TimerKind.ITEM_LIFETIME, 2))
        clock.advance(1000)
        assert fired == [1, 3]

    def test_cancel_matching(self, clock, timers):
        fired = []
        timers.start((TimerKind.ITEM_LIFETIME, "a"), 100, lambda: fired.append("a"))
        timers.start((TimerKind.ITEM_LIFETIME, "b"), 100, lambda: fired.append("b"))
        timers.start(TimerKind.SPAWN, 100, lambda: fired.append("spawn"))
        timers.cancel_matching(TimerKind.ITEM_LIFETIME)
        clock.advance(200)
        assert fired == ["spawn"]

    def test_cancel_all_stops_everything(self, clock, timers):
        """After cancel_all, advancing the clock mutates nothing."""
        state = {"count": 0}

        def bump():
            state["count"] += 1

        timers.start(TimerKind.SESSION_CLOCK, 500, bump)
        timers.start_interval(TimerKind.EVENT, 100, bump)
        timers.start((TimerKind.ITEM_LIFETIME, 7), 300, bump, scope=TimerScope.SESSION)
        timers.cancel_all()

        clock.advance(60_000)
        assert state["count"] == 0
        assert len(timers) == 0
        assert clock.pending == 0

    def test_remaining(self, clock, timers):
        timers.start(TimerKind.SESSION_CLOCK, 10_000, lambda: None)
        clock.advance(2_500)
        assert timers.remaining_ms(TimerKind.SESSION_CLOCK) == 7_500
        assert timers.remaining_seconds(TimerKind.SESSION_CLOCK) == 8
        assert timers.remaining_ms(TimerKind.INPUT) == 0


class QuickLabEscape(LabEscape):
    intro_ms = 50
    resolve_ms = 200


class TestAsyncioScheduler:
    """The scheduler the API hosts games on, driven by a real event loop."""

    def test_cancelled_timer_never_fires(self):
        fired = []

        async def scenario():
            timers = TimerCoordinator(AsyncioScheduler())
            timers.start(TimerKind.REVEAL, 20, lambda: fired.append("reveal"))
            timers.start(TimerKind.RESOLVE, 40, lambda: fired.append("resolve"))
            timers.cancel(TimerKind.REVEAL)
            await asyncio.sleep(0.1)
            return len(timers)

        assert asyncio.run(scenario()) == 0
        assert fired == ["resolve"]

    def test_intro_resolve_and_teardown(self, store):
        async def scenario():
            game = QuickLabEscape(scheduler=AsyncioScheduler(), seed=5, emitter=SessionResultEmitter(store=store))
            game.start()
            assert game.phase == Phase.INTRO
            await asyncio.sleep(0.15)
            assert game.phase == Phase.AWAITING_INPUT

            result = game.dispatch(Action.answer(game.session.active_content.answer))
            assert result.resolution == Resolution.SUCCESS
            assert game.phase == Phase.RESOLVING

            game.teardown()
            session = game.session
            await asyncio.sleep(0.4)
            return game, session

        game, session = asyncio.run(scenario())
        assert game.phase == Phase.IDLE
        assert game.session is session
        assert game.session.attempts == 0
        assert game.session.active_content is None
        assert len(game.timers) == 0
