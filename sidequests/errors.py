"""
Errors - Exception hierarchy for the sidequest engine.

Gameplay never raises: out-of-phase input is a silent no-op and pool
exhaustion resets the pool. Exceptions are reserved for programming
errors (illegal transitions) and for the hosting layer (unknown games,
missing sessions).
"""


class SidequestError(Exception):
    """Base class for all sidequest errors."""


class InvalidTransitionError(SidequestError):
    """A phase transition not present in the transition table."""

    def __init__(self, source, target):
        self.source = source
        self.target = target
        super().__init__(f"Illegal phase transition: {source.value} -> {target.value}")


class UnknownGameError(SidequestError):
    """No sidequest registered under the requested id."""

    def __init__(self, game_id: str):
        self.game_id = game_id
        super().__init__(f"Unknown sidequest: {game_id}")


class SessionNotFoundError(SidequestError):
    """A hosted session id that does not exist (or was torn down)."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session {session_id} not found")


class ContentPoolError(SidequestError):
    """A content pool with no usable units and no default to fall back on."""


class UnknownNoveltyError(SidequestError):
    """No novelty generator registered under the requested kind."""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Unknown novelty: {kind}")
