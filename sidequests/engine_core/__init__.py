"""
Engine Core - The generic sidequest loop.

The engine is the runtime that:
1. Draws randomized content without repetition until exhaustion
2. Drives the phase machine (idle, intro, presenting, awaiting input,
   resolving, won, lost)
3. Owns every countdown and interval of a session
4. Counts attempts against the win/lose thresholds
5. Emits the terminal record of a finished session
"""

from .phase import Phase, PhaseMachine, TRANSITIONS
from .timers import (
    TimerCoordinator,
    TimerKind,
    TimerScope,
    Scheduler,
    AsyncioScheduler,
    ManualScheduler,
)
from .scoring import ScoringTracker, Counts, Verdict
from .content import ContentPool, ContentUnit, RandomContentProvider
from .session import Session, Outcome
from .action import Action, ActionType, ActionResult, Resolution
from .results import SessionResult, SessionResultEmitter
from .game import SidequestGame

__all__ = [
    "Phase",
    "PhaseMachine",
    "TRANSITIONS",
    "TimerCoordinator",
    "TimerKind",
    "TimerScope",
    "Scheduler",
    "AsyncioScheduler",
    "ManualScheduler",
    "ScoringTracker",
    "Counts",
    "Verdict",
    "ContentPool",
    "ContentUnit",
    "RandomContentProvider",
    "Session",
    "Outcome",
    "Action",
    "ActionType",
    "ActionResult",
    "Resolution",
    "SessionResult",
    "SessionResultEmitter",
    "SidequestGame",
]
