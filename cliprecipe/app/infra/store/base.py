# cliprecipe/app/infra/store/base.py
"""
Abstract base class for the recipe store.
This interface allows easy swapping between different storage backends.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from cliprecipe.app.domain.models import RecipeRecord


class RecipeStore(ABC):
    """
    Durable key-value store of recipe records keyed by recipe id.

    Implementations:
    - SupabaseRecipeStore: Postgres table through Supabase
    - InMemoryRecipeStore: process-local dict (local runs, tests)
    """

    @abstractmethod
    def get(self, recipe_id: str) -> Optional[RecipeRecord]:
        """
        Read a stored record.

        Args:
            recipe_id: The content-derived recipe id

        Returns:
            The stored record, or None if not found
        """
        pass

    @abstractmethod
    def put(self, record: RecipeRecord) -> None:
        """
        Write a record, unconditionally replacing any previous one.

        Args:
            record: A fully assembled recipe
        """
        pass
