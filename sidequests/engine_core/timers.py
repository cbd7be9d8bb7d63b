"""
Timers - Centralized countdowns and intervals for one game instance.

The coordinator owns every timer a session uses and keeps at most one
timer per kind. Cancelling clears the underlying scheduler handle (the
asyncio TimerHandle, or the entry in the manual queue), so a cancelled
callback can never fire into a stale phase.

Scopes:
- PHASE timers (intro delay, reveal window, input window, resolving
  delay, single-sprite lifetime) end with the phase that started them.
  The game cancels them on every phase transition.
- SESSION timers (session clock, spawn cadence, random events,
  per-item lifetimes on a shared field) survive phase changes and end
  when the session reaches idle or a terminal phase.

Schedulers:
- AsyncioScheduler drives real sessions on the running event loop.
- ManualScheduler is a deterministic fake clock: advance(ms) fires due
  callbacks in order. Tests and the CLI simulator use it.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Hashable
import asyncio
import heapq
import itertools
import math
import time


Callback = Callable[[], None]


class TimerScope(Enum):
    PHASE = "phase"
    SESSION = "session"


class TimerKind(Enum):
    """Declared timer kinds."""
    INTRO = "intro"
    REVEAL = "reveal"
    INPUT = "input"
    RESOLVE = "resolve"
    ITEM_LIFETIME = "item_lifetime"
    SESSION_CLOCK = "session_clock"
    SPAWN = "spawn"
    EVENT = "event"
    TICK = "tick"

    @property
    def default_scope(self) -> TimerScope:
        if self in _SESSION_KINDS:
            return TimerScope.SESSION
        return TimerScope.PHASE


_SESSION_KINDS = frozenset({
    TimerKind.SESSION_CLOCK,
    TimerKind.SPAWN,
    TimerKind.EVENT,
    TimerKind.TICK,
})


def _base_kind(kind: Hashable) -> TimerKind | None:
    """TimerKind for a plain kind or a (TimerKind, key) tuple."""
    if isinstance(kind, TimerKind):
        return kind
    if isinstance(kind, tuple) and kind and isinstance(kind[0], TimerKind):
        return kind[0]
    return None


# =============================================================================
# Schedulers
# =============================================================================

class Scheduler(ABC):
    """Clock plus one-shot callback scheduling, in milliseconds."""

    @abstractmethod
    def now_ms(self) -> float:
        """Current time in milliseconds (monotonic)."""

    @abstractmethod
    def call_later(self, delay_ms: float, callback: Callback) -> Any:
        """Schedule callback; the returned handle has cancel()."""


class AsyncioScheduler(Scheduler):
    """
    Scheduler on an asyncio event loop.

    The loop is looked up when the first timer is scheduled, so the
    scheduler can be created before the server starts its loop.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def now_ms(self) -> float:
        return time.monotonic() * 1000

    def call_later(self, delay_ms: float, callback: Callback) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(max(delay_ms, 0) / 1000, callback)


class _ManualCall:
    """Queue entry of the ManualScheduler."""

    __slots__ = ("scheduler", "due_ms", "seq", "callback", "cancelled")

    def __init__(self, scheduler: ManualScheduler, due_ms: float, seq: int, callback: Callback):
        self.scheduler = scheduler
        self.due_ms = due_ms
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def __lt__(self, other: _ManualCall) -> bool:
        return (self.due_ms, self.seq) < (other.due_ms, other.seq)

    def cancel(self):
        if not self.cancelled:
            self.cancelled = True
            self.scheduler._remove(self)


class ManualScheduler(Scheduler):
    """
    Deterministic fake clock.

    Usage:
        clock = ManualScheduler()
        game = LabEscape(scheduler=clock)
        game.start()
        clock.advance(1500)  # fires the intro timer
    """

    def __init__(self, start_ms: float = 0.0):
        self._now = start_ms
        self._queue: list[_ManualCall] = []
        self._seq = itertools.count()

    def now_ms(self) -> float:
        return self._now

    def call_later(self, delay_ms: float, callback: Callback) -> _ManualCall:
        call = _ManualCall(self, self._now + max(delay_ms, 0), next(self._seq), callback)
        heapq.heappush(self._queue, call)
        return call

    def _remove(self, call: _ManualCall):
        try:
            self._queue.remove(call)
        except ValueError:
            return
        heapq.heapify(self._queue)

    def advance(self, ms: float):
        """Move the clock forward, firing every callback that falls due."""
        target = self._now + ms
        while self._queue and self._queue[0].due_ms <= target:
            call = heapq.heappop(self._queue)
            self._now = call.due_ms
            call.callback()
        self._now = target

    def run_until_idle(self, limit_ms: float = 600_000) -> float:
        """Fire callbacks until the queue drains or limit_ms elapses. Returns elapsed ms."""
        start = self._now
        while self._queue and self._queue[0].due_ms - start <= limit_ms:
            self.advance(self._queue[0].due_ms - self._now)
        return self._now - start

    @property
    def pending(self) -> int:
        return len(self._queue)

    def next_due_ms(self) -> float | None:
        return self._queue[0].due_ms if self._queue else None


# =============================================================================
# Coordinator
# =============================================================================

@dataclass
class _Timer:
    kind: Hashable
    scope: TimerScope
    callback: Callback
    due_ms: float
    interval_ms: float | None = None
    handle: Any = None


class TimerCoordinator:
    """
    Owns all timers for the active session of one game instance.

    At most one timer per kind is running: starting a kind that is
    already running replaces it.
    """

    def __init__(self, scheduler: Scheduler):
        self.scheduler = scheduler
        self._timers: dict[Hashable, _Timer] = {}

    # -------------------------------------------------------------------------
    # Starting
    # -------------------------------------------------------------------------

    def start(
        self,
        kind: Hashable,
        duration_ms: float,
        on_expire: Callback,
        scope: TimerScope | None = None,
    ):
        """Start a one-shot countdown, cancelling any timer of the same kind."""
        self.cancel(kind)
        timer = _Timer(
            kind=kind,
            scope=scope or self._default_scope(kind),
            callback=on_expire,
            due_ms=self.scheduler.now_ms() + duration_ms,
        )
        timer.handle = self.scheduler.call_later(duration_ms, lambda: self._fire(timer))
        self._timers[kind] = timer

    def start_interval(
        self,
        kind: Hashable,
        interval_ms: float,
        on_tick: Callback,
        scope: TimerScope | None = None,
    ):
        """Start a repeating timer, cancelling any timer of the same kind."""
        if interval_ms <= 0:
            raise ValueError("Interval must be positive")
        self.cancel(kind)
        timer = _Timer(
            kind=kind,
            scope=scope or self._default_scope(kind),
            callback=on_tick,
            due_ms=self.scheduler.now_ms() + interval_ms,
            interval_ms=interval_ms,
        )
        timer.handle = self.scheduler.call_later(interval_ms, lambda: self._fire(timer))
        self._timers[kind] = timer

    # -------------------------------------------------------------------------
    # Cancelling
    # -------------------------------------------------------------------------

    def cancel(self, kind: Hashable):
        """Stop and discard the timer of this kind. No-op when none runs."""
        timer = self._timers.pop(kind, None)
        if timer and timer.handle is not None:
            timer.handle.cancel()

    def cancel_all(self):
        """Cancel every timer. Called on idle, terminal phases and reset."""
        for kind in list(self._timers):
            self.cancel(kind)

    def cancel_phase_scoped(self):
        """Cancel timers whose relevance ends with the current phase."""
        for kind, timer in list(self._timers.items()):
            if timer.scope == TimerScope.PHASE:
                self.cancel(kind)

    def cancel_matching(self, base: TimerKind):
        """Cancel every (base, key) timer, e.g. all per-item lifetimes."""
        for kind in list(self._timers):
            if _base_kind(kind) == base:
                self.cancel(kind)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def is_running(self, kind: Hashable) -> bool:
        return kind in self._timers

    def remaining_ms(self, kind: Hashable) -> float:
        """Milliseconds until the timer fires; 0 when not running."""
        timer = self._timers.get(kind)
        if not timer:
            return 0.0
        return max(0.0, timer.due_ms - self.scheduler.now_ms())

    def remaining_seconds(self, kind: Hashable) -> int:
        """Whole seconds left, rounded up, for display."""
        return math.ceil(self.remaining_ms(kind) / 1000)

    @property
    def active_kinds(self) -> list[Hashable]:
        return list(self._timers)

    def __len__(self) -> int:
        return len(self._timers)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _default_scope(self, kind: Hashable) -> TimerScope:
        base = _base_kind(kind)
        return base.default_scope if base else TimerScope.PHASE

    def _fire(self, timer: _Timer):
        # A handle replaced or cancelled in the same tick is not ours anymore
        if self._timers.get(timer.kind) is not timer:
            return

        if timer.interval_ms is None:
            del self._timers[timer.kind]
        else:
            timer.due_ms = self.scheduler.now_ms() + timer.interval_ms
            timer.handle = self.scheduler.call_later(timer.interval_ms, lambda: self._fire(timer))

        timer.callback()
