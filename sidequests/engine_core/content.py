"""
Content - Immutable content pools and the random content provider.

A ContentPool is loaded once at session start and never changes during
a session. Sessions hold only ids into it (their used-id set), never a
copy, so one pool can be shared across sessions and games.

Draw policy (reset-on-exhaustion):
    remaining = pool - used
    if remaining is empty: used = {} and remaining = pool
    pick uniformly from remaining, add its id to used

Players eventually see riddles repeat within a long session; that is
the visible consequence of the full reset.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Sequence, TypeVar
import random

T = TypeVar("T")


@dataclass(frozen=True)
class ContentUnit(Generic[T]):
    """One challenge unit inside a pool."""
    unit_id: str
    value: T


class ContentPool(Generic[T]):
    """
    Read-only corpus of challenge material.

    Build with from_items() when the items carry their own ids,
    or from_values() to number them.
    """

    def __init__(self, name: str, units: Iterable[ContentUnit[T]]):
        self.name = name
        self._units: tuple[ContentUnit[T], ...] = tuple(units)
        self._by_id: dict[str, ContentUnit[T]] = {u.unit_id: u for u in self._units}
        if len(self._by_id) != len(self._units):
            raise ValueError(f"Duplicate unit ids in pool {name}")

    @classmethod
    def from_items(cls, name: str, items: Iterable[T], key: Callable[[T], Any]) -> ContentPool[T]:
        return cls(name, [ContentUnit(str(key(item)), item) for item in items])

    @classmethod
    def from_values(cls, name: str, values: Iterable[T]) -> ContentPool[T]:
        return cls(name, [ContentUnit(str(i), v) for i, v in enumerate(values)])

    @property
    def ids(self) -> frozenset[str]:
        return frozenset(self._by_id)

    @property
    def units(self) -> tuple[ContentUnit[T], ...]:
        return self._units

    def get(self, unit_id: str) -> ContentUnit[T]:
        return self._by_id[unit_id]

    def __len__(self) -> int:
        return len(self._units)

    def __iter__(self):
        return iter(self._units)

    def __contains__(self, unit_id: object) -> bool:
        return unit_id in self._by_id


class RandomContentProvider:
    """
    Source of randomness for a game instance.

    Every random decision a game makes goes through here, so a seeded
    provider replays a session exactly.
    """

    def __init__(self, rng: random.Random | None = None, seed: int | None = None):
        self.rng = rng or random.Random(seed)

    def draw(self, pool: ContentPool[T], used_ids: set[str]) -> ContentUnit[T]:
        """
        Draw the next unit without repetition until the pool is exhausted.

        Mutates used_ids in place: clears it on exhaustion and adds the
        drawn id.
        """
        if len(pool) == 0:
            raise ValueError(f"Cannot draw from empty pool {pool.name}")

        remaining = [u for u in pool if u.unit_id not in used_ids]
        if not remaining:
            used_ids.clear()
            remaining = list(pool)

        unit = self.rng.choice(remaining)
        used_ids.add(unit.unit_id)
        return unit

    def random_sequence(self, alphabet: Sequence[T], min_len: int, max_len: int) -> list[T]:
        """Independent uniform draws; length uniform in [min_len, max_len]; repeats allowed."""
        if min_len < 1 or max_len < min_len:
            raise ValueError(f"Invalid sequence length range {min_len}-{max_len}")
        length = self.rng.randint(min_len, max_len)
        return [self.rng.choice(alphabet) for _ in range(length)]

    def choice(self, items: Sequence[T]) -> T:
        return self.rng.choice(items)

    def shuffled(self, items: Iterable[T]) -> list[T]:
        result = list(items)
        self.rng.shuffle(result)
        return result

    def sample(self, items: Sequence[T], k: int) -> list[T]:
        return self.rng.sample(list(items), k)

    def chance(self, probability: float) -> bool:
        """True with the given probability."""
        return self.rng.random() < probability

    def uniform(self, low: float, high: float) -> float:
        return self.rng.uniform(low, high)

    def randint(self, low: int, high: int) -> int:
        return self.rng.randint(low, high)
