from __future__ import annotations

import logging
import threading
from typing import Optional

from cliprecipe.app.domain.models import RecipeRecord
from cliprecipe.app.infra.store.base import RecipeStore

logger = logging.getLogger(__name__)


class InMemoryRecipeStore(RecipeStore):
    def __init__(self) -> None:
        self._records: dict[str, RecipeRecord] = {}
        self._lock = threading.Lock()

    def get(self, recipe_id: str) -> Optional[RecipeRecord]:
        with self._lock:
            return self._records.get(recipe_id)

    def put(self, record: RecipeRecord) -> None:
        with self._lock:
            self._records[record.recipe_id] = record
        logger.debug("Stored recipe in memory: id=%s", record.recipe_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
