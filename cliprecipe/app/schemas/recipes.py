from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from cliprecipe.app.domain.models import RecipeRecord


class TranscribeRequest(BaseModel):
    # Optional here so a missing link is reported as invalid-argument by the
    # pipeline rather than as a schema validation error.
    sourceLink: Optional[str] = Field(None, description="Video link to transcribe")
    preferLang: Optional[str] = Field(None, description="Language hint for transcription, e.g. 'en'")


class IngredientItem(BaseModel):
    name: str
    qty: Optional[float] = None
    unit: Optional[str] = None
    category: str
    notes: Optional[str] = None


class RecipeStep(BaseModel):
    index: int
    text: str
    durationSec: Optional[int] = None
    imageUrl: Optional[str] = None
    notes: Optional[str] = None


class RecipeTextBody(BaseModel):
    original: str
    ro: Optional[str] = None


class RecipeResponse(BaseModel):
    recipeId: str
    title: Optional[str] = None
    creatorHandle: Optional[str] = None
    sourceLink: str
    lang: str
    text: RecipeTextBody
    ingredients: list[IngredientItem] = Field(default_factory=list)
    steps: list[RecipeStep] = Field(default_factory=list)

    @classmethod
    def from_record(cls, record: RecipeRecord) -> RecipeResponse:
        return cls.model_validate(record.to_dict())
