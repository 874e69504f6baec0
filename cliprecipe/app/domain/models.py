# cliprecipe/app/domain/models.py
"""
Domain models for link-to-recipe extraction.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class PipelineStage(str, Enum):
    """States a single pipeline run moves through."""
    IDLE = "IDLE"
    IDENTITY_COMPUTED = "IDENTITY_COMPUTED"
    CACHE_CHECKED = "CACHE_CHECKED"
    CACHE_HIT = "CACHE_HIT"
    AUDIO_FETCHED = "AUDIO_FETCHED"
    CONVERTED_TO_WAV = "CONVERTED_TO_WAV"
    TRANSCRIBED = "TRANSCRIBED"
    NORMALIZED = "NORMALIZED"
    EXTRACTED = "EXTRACTED"
    ASSEMBLED = "ASSEMBLED"
    PERSISTED = "PERSISTED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (PipelineStage.CACHE_HIT, PipelineStage.PERSISTED, PipelineStage.FAILED)


@dataclass(frozen=True)
class IngredientEntry:
    name: str
    category: str
    qty: Optional[float] = None
    unit: Optional[str] = None
    notes: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "qty": self.qty,
            "unit": self.unit,
            "category": self.category,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IngredientEntry:
        qty = data.get("qty")
        return cls(
            name=str(data["name"]),
            category=str(data["category"]),
            qty=float(qty) if qty is not None else None,
            unit=data.get("unit"),
            notes=data.get("notes"),
        )


@dataclass(frozen=True)
class StepEntry:
    index: int
    text: str
    duration_sec: Optional[int] = None
    image_url: Optional[str] = None
    notes: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "text": self.text,
            "durationSec": self.duration_sec,
            "imageUrl": self.image_url,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StepEntry:
        duration = data.get("durationSec")
        return cls(
            index=int(data["index"]),
            text=str(data["text"]),
            duration_sec=int(duration) if duration is not None else None,
            image_url=data.get("imageUrl"),
            notes=data.get("notes"),
        )


@dataclass(frozen=True)
class RecipeText:
    original: str
    ro: Optional[str] = None  # reserved for a translated variant


@dataclass(frozen=True)
class RecipeRecord:
    """
    The persisted, returned recipe.

    Immutable once assembled; reprocessing a link replaces the stored
    record as a whole instead of mutating it.
    """
    recipe_id: str
    source_link: str
    lang: str
    text: RecipeText
    title: Optional[str] = None
    creator_handle: Optional[str] = None
    ingredients: tuple[IngredientEntry, ...] = ()
    steps: tuple[StepEntry, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Durable document shape, camelCase keys."""
        return {
            "recipeId": self.recipe_id,
            "title": self.title,
            "creatorHandle": self.creator_handle,
            "sourceLink": self.source_link,
            "lang": self.lang,
            "text": {
                "original": self.text.original,
                "ro": self.text.ro,
            },
            "ingredients": [entry.to_dict() for entry in self.ingredients],
            "steps": [step.to_dict() for step in self.steps],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RecipeRecord:
        """Rebuild a record from its document. Raises ValueError when malformed."""
        try:
            text = data["text"]
            return cls(
                recipe_id=str(data["recipeId"]),
                source_link=str(data["sourceLink"]),
                lang=str(data["lang"]),
                text=RecipeText(original=str(text["original"]), ro=text.get("ro")),
                title=data.get("title"),
                creator_handle=data.get("creatorHandle"),
                ingredients=tuple(IngredientEntry.from_dict(item) for item in data.get("ingredients") or []),
                steps=tuple(StepEntry.from_dict(item) for item in data.get("steps") or []),
            )
        except (KeyError, TypeError, AttributeError, ValueError) as exc:
            raise ValueError(f"Malformed recipe document: {exc!r}") from exc


@dataclass
class TranscriptionResult:
    """Result of a transcription operation."""
    text: str
    language: str
    duration_sec: float = 0.0
    model_version: Optional[str] = None


@dataclass
class PipelineRun:
    """Trace of one pipeline execution."""
    recipe_id: Optional[str] = None
    stage: PipelineStage = PipelineStage.IDLE
    attempting: Optional[PipelineStage] = None  # stage currently being entered
    history: list[PipelineStage] = field(default_factory=lambda: [PipelineStage.IDLE])
    record: Optional[RecipeRecord] = None

    def advance(self, stage: PipelineStage) -> None:
        self.stage = stage
        self.history.append(stage)

    @property
    def cache_hit(self) -> bool:
        return self.stage == PipelineStage.CACHE_HIT
