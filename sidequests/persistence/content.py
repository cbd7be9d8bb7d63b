"""
Content Loading - Validate externally supplied pools against unit models.

Rules:
- Each raw unit is validated with the game's pydantic unit model
- Malformed units are dropped (logged at debug), never fatal
- No store, a failed load, or nothing valid left: the embedded pool
"""

from __future__ import annotations
import logging
from typing import Any, Iterable

from pydantic import BaseModel, ValidationError

from ..engine_core.content import ContentPool
from ..errors import ContentPoolError
from .store import PersistenceService

logger = logging.getLogger("sidequests.persistence")


def validate_units(game_id: str, unit_model: type[BaseModel], raw_units: Iterable[Any]) -> list[BaseModel]:
    """Validated units in order; malformed or duplicate-id units are filtered out."""
    units = []
    seen: set[str] = set()
    for raw in raw_units:
        try:
            unit = unit_model.model_validate(raw)
        except ValidationError as e:
            logger.debug(f"{game_id}: dropping malformed content unit {raw!r}: {e.error_count()} errors")
            continue
        unit_id = str(unit.id)
        if unit_id in seen:
            logger.debug(f"{game_id}: dropping duplicate content unit {unit_id}")
            continue
        seen.add(unit_id)
        units.append(unit)
    return units


def load_pool(
    game_id: str,
    unit_model: type[BaseModel],
    default_units: Iterable[BaseModel],
    store: PersistenceService | None = None,
) -> ContentPool:
    """
    Build the content pool for a game.

    Raises ContentPoolError only when neither the store nor the
    embedded defaults yield a single unit.
    """
    units: list[BaseModel] = []
    if store is not None:
        try:
            raw = store.load_content_pool(game_id)
        except OSError as e:
            logger.warning(f"{game_id}: content pool load failed, using embedded pool: {e}")
            raw = None
        if raw:
            units = validate_units(game_id, unit_model, raw)
            if units:
                logger.info(f"{game_id}: loaded {len(units)} of {len(raw)} content units from store")
            else:
                logger.warning(f"{game_id}: no valid content units in store, using embedded pool")

    if not units:
        units = list(default_units)
    if not units:
        raise ContentPoolError(f"No content available for {game_id}")

    return ContentPool.from_items(game_id, units, key=lambda unit: unit.id)
