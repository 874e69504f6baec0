from __future__ import annotations

import logging
from typing import Any, Optional

from supabase import Client, create_client

from cliprecipe.app.domain.errors import RecipeStoreError
from cliprecipe.app.domain.models import RecipeRecord
from cliprecipe.app.infra.store.base import RecipeStore

logger = logging.getLogger(__name__)

DEFAULT_TABLE_NAME = "recipes"


def create_supabase_client(url: Optional[str], key: Optional[str]) -> Client:
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY required")
    return create_client(url, key)


def _record_to_row(record: RecipeRecord) -> dict[str, Any]:
    return {
        "recipe_id": record.recipe_id,
        "source_link": record.source_link,
        "document": record.to_dict(),
    }


def _row_to_record(row: dict[str, Any]) -> RecipeRecord:
    document = row.get("document")
    if not isinstance(document, dict):
        raise ValueError(f"Row {row.get('recipe_id')} has no recipe document")
    return RecipeRecord.from_dict(document)


class SupabaseRecipeStore(RecipeStore):
    def __init__(self, client: Client, table_name: str = DEFAULT_TABLE_NAME):
        self._client = client
        self.table_name = table_name
        logger.info("SupabaseRecipeStore initialized: table=%s", table_name)

    def get(self, recipe_id: str) -> Optional[RecipeRecord]:
        try:
            response = (
                self._client.table(self.table_name)
                .select("recipe_id,document")
                .eq("recipe_id", recipe_id)
                .limit(1)
                .execute()
            )
        except (ConnectionError, TimeoutError) as error:
            logger.error("Network error reading recipe %s: %s", recipe_id, error)
            raise RecipeStoreError("get", str(error)) from error

        rows = response.data or []
        if not rows:
            return None

        try:
            return _row_to_record(rows[0])
        except ValueError as error:
            raise RecipeStoreError("get", str(error)) from error

    def put(self, record: RecipeRecord) -> None:
        try:
            self._client.table(self.table_name).upsert(
                _record_to_row(record),
                on_conflict="recipe_id",
            ).execute()
        except (ConnectionError, TimeoutError) as error:
            logger.error("Network error writing recipe %s: %s", record.recipe_id, error)
            raise RecipeStoreError("put", str(error)) from error

        logger.info("Stored recipe: id=%s", record.recipe_id)
