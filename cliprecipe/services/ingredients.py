from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional

from cliprecipe.app.domain.models import IngredientEntry
from cliprecipe.services.vocabulary import (
    CATEGORY_KEYWORDS,
    MAX_INGREDIENTS,
    OTHER_CATEGORY,
    UNIT_TOKENS,
    alternation,
)

MIN_LINE_CHARS = 3
BARE_NAME_MAX_CHARS = 50
BARE_NAME_EXCLUDED = ("step", "instruction")

QUANTITY_PATTERN = re.compile(
    rf"(\d+(?:\.\d+)?)\s*({alternation(UNIT_TOKENS)})\s+(.+)",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class IngredientMatch:
    name: str
    qty: Optional[float] = None
    unit: Optional[str] = None


def categorize_ingredient(name: str) -> str:
    lower_name = name.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lower_name for keyword in keywords):
            return category
    return OTHER_CATEGORY


def match_quantity_line(line: str) -> Optional[IngredientMatch]:
    """``2 cups flour`` -> qty 2.0, unit ``cups``, name ``flour``."""
    match = QUANTITY_PATTERN.match(line)
    if not match:
        return None
    name = match.group(3).strip()
    qty = float(match.group(1))
    if not name or qty <= 0:
        return None
    return IngredientMatch(
        name=name,
        qty=qty,
        unit=match.group(2).lower(),
    )


def match_bare_name(line: str) -> Optional[IngredientMatch]:
    if len(line) >= BARE_NAME_MAX_CHARS:
        return None
    if any(word in line for word in BARE_NAME_EXCLUDED):
        return None
    return IngredientMatch(name=line)


INGREDIENT_MATCHERS: tuple[Callable[[str], Optional[IngredientMatch]], ...] = (
    match_quantity_line,
    match_bare_name,
)


def match_ingredient(line: str) -> Optional[IngredientMatch]:
    for matcher in INGREDIENT_MATCHERS:
        found = matcher(line)
        if found is not None:
            return found
    return None


def extract_ingredients(text: str, limit: int = MAX_INGREDIENTS) -> list[IngredientEntry]:
    """Scan ``text`` line by line and keep the first ``limit`` ingredients."""
    ingredients: list[IngredientEntry] = []

    for raw_line in text.split("\n"):
        if len(ingredients) >= limit:
            break

        line = raw_line.strip()
        if len(line) < MIN_LINE_CHARS:
            continue

        found = match_ingredient(line)
        if found is None:
            continue

        ingredients.append(
            IngredientEntry(
                name=found.name,
                qty=found.qty,
                unit=found.unit,
                category=categorize_ingredient(found.name),
            )
        )

    return ingredients
