"""
Sidequest Game - The shared skeleton every mini-game configures.

The loop:
1. start(): reset the session, play the intro (if any)
2. Draw a challenge and present it (memorization window if any)
3. Await input; only matching actions in this phase are handled
4. Resolve: record the outcome, wait out the resolving delay
5. Win check, then lose check; otherwise back to 2
6. On won/lost: cancel every timer and emit the session result

A game subclass declares its thresholds and timings as class
attributes and implements handle_action(). Hooks (on_active,
on_present, on_awaiting_input, on_next_challenge, on_clock_expired)
let it start its own spawners and events.

Timer callbacks are bound methods (or partials carrying an item id)
that read self.session when they fire, never a session captured at
schedule time.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, ClassVar
import logging

from ..config import LOW_TIME_WARNING_SECONDS
from .action import Action, ActionResult, ActionType, Resolution
from .content import ContentPool, RandomContentProvider
from .phase import Phase, PhaseMachine
from .results import SessionResult, SessionResultEmitter
from .scoring import Verdict
from .session import Outcome, Session
from .timers import AsyncioScheduler, Scheduler, TimerCoordinator, TimerKind

logger = logging.getLogger("sidequests.game")


class SidequestGame(ABC):
    """
    Base class for a sidequest mini-game.

    One instance hosts exactly one live session at a time.
    """

    game_id: ClassVar[str]
    title: ClassVar[str]
    description: ClassVar[str] = ""
    difficulty: ClassVar[str] = "Medium"

    # Timings (ms). reveal_ms None means no memorization step.
    intro_ms: ClassVar[int] = 0
    reveal_ms: ClassVar[int | None] = None
    resolve_ms: ClassVar[int] = 0
    session_clock_ms: ClassVar[int | None] = None

    # Thresholds (None never triggers)
    success_threshold: ClassVar[int | None] = None
    failure_threshold: ClassVar[int | None] = None
    attempt_limit: ClassVar[int | None] = None

    accepted_actions: ClassVar[frozenset[ActionType]] = frozenset()

    # Embedded content (pydantic models with an id field) and its unit model
    content_model: ClassVar[type | None] = None
    default_content: ClassVar[tuple] = ()

    def __init__(
        self,
        scheduler: Scheduler | None = None,
        provider: RandomContentProvider | None = None,
        emitter: SessionResultEmitter | None = None,
        pool: ContentPool | None = None,
        seed: int | None = None,
    ):
        self.scheduler = scheduler or AsyncioScheduler()
        self.timers = TimerCoordinator(self.scheduler)
        self.random = provider or RandomContentProvider(seed=seed)
        self.emitter = emitter or SessionResultEmitter()
        self.pool = pool if pool is not None else self.default_pool()

        self.machine = PhaseMachine()
        self.machine.add_listener(self._on_transition)
        self.session = Session(game_id=self.game_id)

        self.sessions_played = 0
        self.last_result: SessionResult | None = None

    # =========================================================================
    # Public API
    # =========================================================================

    @property
    def phase(self) -> Phase:
        return self.machine.phase

    def start(self) -> Session:
        """
        Start a session, or restart from won/lost.

        Ignored while a session is in progress.
        """
        if self.phase not in {Phase.IDLE, Phase.WON, Phase.LOST}:
            return self.session

        self.timers.cancel_all()
        self.session = Session(game_id=self.game_id, phase=self.phase)
        self.sessions_played += 1
        self.on_session_start()
        logger.info(f"{self.game_id}: session {self.session.session_id} started")

        if self.intro_ms > 0:
            self._enter(Phase.INTRO)
            self.timers.start(TimerKind.INTRO, self.intro_ms, self._on_intro_elapsed)
        else:
            self._begin_active()
        return self.session

    restart = start

    def dispatch(self, action: Action) -> ActionResult:
        """
        Handle a player action.

        Actions outside awaiting-input, of a type this game does not
        take, or while input is blocked are ignored without a trace.
        """
        if not self.machine.accepts_input():
            return ActionResult.ignored(self.phase)
        if action.action_type not in self.accepted_actions or self.input_blocked():
            return ActionResult.ignored(self.phase)
        return self.handle_action(action)

    def teardown(self):
        """Navigate away: cancel every timer and discard the session."""
        self.timers.cancel_all()
        if self.phase != Phase.IDLE:
            self._enter(Phase.IDLE)
        self.session = Session(game_id=self.game_id)

    def time_left_ms(self) -> float:
        return self.timers.remaining_ms(TimerKind.SESSION_CLOCK)

    def snapshot(self) -> dict[str, Any]:
        """Player-facing view of the live session."""
        session = self.session
        clock_running = self.timers.is_running(TimerKind.SESSION_CLOCK)
        time_left = self.timers.remaining_seconds(TimerKind.SESSION_CLOCK) if clock_running else None
        return {
            "game_id": self.game_id,
            "session_id": session.session_id,
            "phase": self.phase.value,
            "attempts": session.attempts,
            "successes": session.successes,
            "failures": session.failures,
            "score": session.score,
            "round": session.round,
            "message": session.message,
            "time_left_seconds": time_left,
            "low_time": time_left is not None and time_left <= LOW_TIME_WARNING_SECONDS,
            "elapsed_ms": int(session.elapsed_ms(self.scheduler.now_ms())),
            "outcome": session.outcome.value if session.outcome else None,
            "content": self.content_view() if session.active_content is not None else None,
        }

    # =========================================================================
    # Hooks for subclasses
    # =========================================================================

    def default_pool(self) -> ContentPool | None:
        """Embedded content pool used when none is injected."""
        if not self.default_content:
            return None
        return ContentPool.from_items(self.game_id, self.default_content, key=lambda unit: unit.id)

    def on_session_start(self):
        """Initialize per-session extras."""

    def on_active(self):
        """Session went active (clock started). Start spawners/events here."""

    def next_content(self) -> Any:
        """Draw the next challenge unit. Defaults to the pool."""
        if self.pool is None:
            raise NotImplementedError(f"{self.game_id} has no content pool")
        unit = self.random.draw(self.pool, self.session.used_content_ids)
        return unit.value

    def reveal_duration(self) -> int | None:
        """Memorization window for the current challenge."""
        return self.reveal_ms

    def on_present(self, content: Any):
        """Challenge is now on screen (input still disabled)."""

    def on_awaiting_input(self):
        """Input opened. Start per-challenge timers here."""

    def on_next_challenge(self):
        """Resolution did not end the session; the next draw follows."""

    def on_clock_expired(self):
        """Session clock ran out. Default: the player loses."""
        self._finish(Outcome.LOST)

    def on_finish(self, outcome: Outcome):
        """Session is about to enter won/lost. Set the closing message here."""

    def input_blocked(self) -> bool:
        """True while a game effect temporarily disables input."""
        return False

    def verdict(self) -> Verdict:
        return self.session.scoring.verdict(
            self.success_threshold, self.failure_threshold, self.attempt_limit
        )

    def content_view(self) -> Any:
        """Serializable view of the active content (no answers)."""
        return self.session.active_content

    @abstractmethod
    def handle_action(self, action: Action) -> ActionResult:
        """Handle an action accepted in awaiting-input."""

    # =========================================================================
    # Building blocks for subclasses
    # =========================================================================

    def _accepted(self, resolution: Resolution | None = None, message: str = "") -> ActionResult:
        if message:
            self.session.message = message
        return ActionResult.accepted_with(self.phase, resolution=resolution, message=message)

    def _resolve(self, resolution: Resolution, delay_ms: int | None = None, message: str = "") -> ActionResult:
        """
        Record an outcome and enter resolving.

        Thresholds are checked once the resolving delay has elapsed, so
        a session clock that expires in between still ends the session.
        """
        if resolution == Resolution.SUCCESS:
            self.session.scoring.record_outcome(True)
        elif resolution == Resolution.FAILURE:
            self.session.scoring.record_outcome(False)
        if message:
            self.session.message = message

        self._enter(Phase.RESOLVING)
        result = ActionResult.accepted_with(Phase.RESOLVING, resolution=resolution, message=message)

        delay = self.resolve_ms if delay_ms is None else delay_ms
        if delay > 0:
            self.timers.start(TimerKind.RESOLVE, delay, self._after_resolution)
        else:
            self._after_resolution()
        return result

    def _finish(self, outcome: Outcome):
        """Enter the terminal phase and emit the session result."""
        if self.phase.is_terminal or self.phase == Phase.IDLE:
            return
        session = self.session
        session.outcome = outcome
        session.finished_at = self.scheduler.now_ms()
        self.on_finish(outcome)
        self._enter(Phase.WON if outcome == Outcome.WON else Phase.LOST)
        self.last_result = self.emitter.emit(session, self.scheduler.now_ms())

    # =========================================================================
    # Internals
    # =========================================================================

    def _enter(self, phase: Phase):
        self.machine.transition(phase)

    def _on_transition(self, previous: Phase, current: Phase):
        self.session.phase = current
        if current.is_terminal or current == Phase.IDLE:
            self.timers.cancel_all()
        else:
            self.timers.cancel_phase_scoped()
        if not current.presents_content:
            self.session.active_content = None
        logger.debug(f"{self.game_id}: {previous.value} -> {current.value}")

    def _on_intro_elapsed(self):
        self._begin_active()

    def _begin_active(self):
        self.session.started_at = self.scheduler.now_ms()
        if self.session_clock_ms:
            self.timers.start(TimerKind.SESSION_CLOCK, self.session_clock_ms, self._on_clock_fired)
        self._present_next()
        if self.session.is_active:
            self.on_active()

    def _present_next(self):
        content = self.next_content()
        self._enter(Phase.PRESENTING)
        self.session.active_content = content
        self.on_present(content)
        if self.phase != Phase.PRESENTING:
            return

        reveal = self.reveal_duration()
        if reveal is None:
            self._open_input()
        else:
            self.timers.start(TimerKind.REVEAL, reveal, self._open_input)

    def _open_input(self):
        self._enter(Phase.AWAITING_INPUT)
        self.on_awaiting_input()

    def _after_resolution(self):
        verdict = self.verdict()
        if verdict == Verdict.WIN:
            self._finish(Outcome.WON)
        elif verdict == Verdict.LOSE:
            self._finish(Outcome.LOST)
        else:
            self.on_next_challenge()
            self._present_next()

    def _on_clock_fired(self):
        self.on_clock_expired()
