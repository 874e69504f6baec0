# cliprecipe/services/vocabulary.py
"""
Declared vocabulary used by the rule-based extractors.

Everything the matchers know about units, ordinals and ingredient
categories lives here so the tables can be tested and tuned without
touching control flow.
"""
from __future__ import annotations

import re

VOLUME_UNITS: tuple[str, ...] = (
    "cup",
    "cups",
    "tablespoon",
    "tablespoons",
    "tbsp",
    "teaspoon",
    "teaspoons",
    "tsp",
    "ml",
    "milliliter",
    "milliliters",
    "liter",
    "liters",
    "l",
)

MASS_UNITS: tuple[str, ...] = (
    "pound",
    "pounds",
    "lb",
    "lbs",
    "ounce",
    "ounces",
    "oz",
    "gram",
    "grams",
    "g",
    "kilogram",
    "kilograms",
    "kg",
)

UNIT_TOKENS: tuple[str, ...] = VOLUME_UNITS + MASS_UNITS

ORDINAL_WORDS: tuple[str, ...] = (
    "first",
    "second",
    "third",
    "fourth",
    "fifth",
    "sixth",
    "seventh",
    "eighth",
    "ninth",
    "tenth",
)

# unit token -> seconds per unit
DURATION_UNITS: dict[str, int] = {
    "hour": 3600,
    "hours": 3600,
    "hr": 3600,
    "hrs": 3600,
    "minute": 60,
    "minutes": 60,
    "min": 60,
    "mins": 60,
    "second": 1,
    "seconds": 1,
    "sec": 1,
    "secs": 1,
}

OTHER_CATEGORY = "Other"

# Checked in order; the first bucket with a matching keyword wins.
CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Pantry", ("flour", "sugar", "salt", "pepper")),
    ("Meat & Seafood", ("chicken", "beef", "pork", "fish")),
    ("Vegetables", ("onion", "garlic", "tomato", "carrot")),
    ("Dairy & Eggs", ("milk", "cheese", "butter", "egg")),
    ("Condiments & Oils", ("oil", "vinegar", "sauce")),
)

CATEGORIES: tuple[str, ...] = tuple(name for name, _ in CATEGORY_KEYWORDS) + (OTHER_CATEGORY,)

MAX_INGREDIENTS = 20
MAX_STEPS = 15


def alternation(tokens: tuple[str, ...] | list[str]) -> str:
    """Regex alternation that tries longer tokens first (``tbsp`` before ``t``)."""
    return "|".join(re.escape(token) for token in sorted(tokens, key=len, reverse=True))
