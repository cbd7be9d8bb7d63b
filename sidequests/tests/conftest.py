"""
Pytest fixtures for sidequest tests.

Every game under test runs on the ManualScheduler and a seeded
provider, so timer-driven behavior is driven explicitly with
clock.advance().
"""

import pytest

from ..engine_core import ContentPool, ManualScheduler, RandomContentProvider, SessionResultEmitter
from ..games.lab_escape import Riddle
from ..persistence import MemoryStore


@pytest.fixture
def clock() -> ManualScheduler:
    """Deterministic fake clock starting at 0 ms."""
    return ManualScheduler()


@pytest.fixture
def provider() -> RandomContentProvider:
    return RandomContentProvider(seed=1234)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def emitter(store) -> SessionResultEmitter:
    return SessionResultEmitter(store=store, player_name="Tester", haunt="test-haunt")


@pytest.fixture
def make_game(clock, provider, emitter):
    """Build a game wired to the fake clock, seeded provider and memory store."""
    def _make(cls, **kwargs):
        return cls(scheduler=clock, provider=provider, emitter=emitter, **kwargs)
    return _make


@pytest.fixture
def one_riddle_pool() -> ContentPool:
    """A pool with a single riddle whose answer is 'echo'."""
    riddle = Riddle(id="echo", question="I speak without a mouth. What am I?", answer="echo", hint="Shout in a cave")
    return ContentPool.from_items("lab-escape", [riddle], key=lambda r: r.id)


class FixedChanceProvider(RandomContentProvider):
    """Seeded provider whose chance() always answers the same."""

    def __init__(self, hit: bool, seed: int = 0):
        super().__init__(seed=seed)
        self.hit = hit

    def chance(self, probability: float) -> bool:
        return self.hit


@pytest.fixture
def fixed_chance():
    """Factory: fixed_chance(True) always rolls the unlikely branch."""
    return FixedChanceProvider
