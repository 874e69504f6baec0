from __future__ import annotations

from typing import Iterable, Optional

from cliprecipe.app.domain.models import IngredientEntry, RecipeRecord, RecipeText, StepEntry
from cliprecipe.services.ids import detect_platform, link_hostname

PLATFORM_CREATOR_LABELS = {
    "youtube": "YouTube Creator",
    "tiktok": "TikTok Creator",
}
UNKNOWN_CREATOR = "Unknown Creator"


def derive_title(text: str) -> Optional[str]:
    for line in text.split("\n"):
        stripped = line.strip()
        if stripped:
            return stripped
    return None


def derive_creator_handle(source_link: str) -> str:
    # Platform links get a generic label; the channel/handle is not parsed.
    hostname = link_hostname(source_link)
    if hostname is None:
        return UNKNOWN_CREATOR

    platform = detect_platform(source_link)
    if platform is not None:
        return PLATFORM_CREATOR_LABELS[platform]
    return hostname


def assemble_recipe(
    *,
    recipe_id: str,
    source_link: str,
    language: str,
    text: str,
    ingredients: Iterable[IngredientEntry],
    steps: Iterable[StepEntry],
) -> RecipeRecord:
    return RecipeRecord(
        recipe_id=recipe_id,
        title=derive_title(text),
        creator_handle=derive_creator_handle(source_link),
        source_link=source_link,
        lang=language,
        text=RecipeText(original=text),
        ingredients=tuple(ingredients),
        steps=tuple(steps),
    )
