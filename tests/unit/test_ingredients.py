from __future__ import annotations

import pytest

from cliprecipe.app.domain.models import IngredientEntry
from cliprecipe.services.ingredients import (
    categorize_ingredient,
    extract_ingredients,
    match_bare_name,
    match_quantity_line,
)
from cliprecipe.services.vocabulary import CATEGORIES, MAX_INGREDIENTS


class TestCategorizeIngredient:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("all-purpose flour", "Pantry"),
            ("Black Pepper", "Pantry"),
            ("chicken thighs", "Meat & Seafood"),
            ("white fish fillet", "Meat & Seafood"),
            ("red ONION", "Vegetables"),
            ("cherry tomatoes", "Vegetables"),
            ("whole milk", "Dairy & Eggs"),
            ("eggs", "Dairy & Eggs"),
            ("olive oil", "Condiments & Oils"),
            ("soy sauce", "Condiments & Oils"),
            ("basil", "Other"),
        ],
    )
    def test_categories(self, name: str, expected: str) -> None:
        assert categorize_ingredient(name) == expected

    def test_priority_order_first_bucket_wins(self) -> None:
        # salt (Pantry) beats butter (Dairy) and chicken (Meat)
        assert categorize_ingredient("salted butter") == "Pantry"
        assert categorize_ingredient("chicken with garlic") == "Meat & Seafood"
        assert categorize_ingredient("garlic butter sauce") == "Vegetables"

    def test_result_is_always_in_closed_set(self) -> None:
        for name in ("", "xyz", "peppers", "eggplant"):
            assert categorize_ingredient(name) in CATEGORIES


class TestMatchQuantityLine:
    def test_cups_flour(self) -> None:
        found = match_quantity_line("2 cups flour")
        assert found is not None
        assert found.qty == 2
        assert found.unit == "cups"
        assert found.name == "flour"

    @pytest.mark.parametrize(
        ("line", "qty", "unit", "name"),
        [
            ("1.5 TBSP olive oil", 1.5, "tbsp", "olive oil"),
            ("250g sugar", 250.0, "g", "sugar"),
            ("500 ml whole milk", 500.0, "ml", "whole milk"),
            ("2 lbs beef chuck", 2.0, "lbs", "beef chuck"),
            ("1 kg potatoes", 1.0, "kg", "potatoes"),
            ("3 teaspoons salt", 3.0, "teaspoons", "salt"),
            ("1 liter water", 1.0, "liter", "water"),
            ("4 oz cheddar cheese", 4.0, "oz", "cheddar cheese"),
        ],
    )
    def test_units(self, line: str, qty: float, unit: str, name: str) -> None:
        found = match_quantity_line(line)
        assert found is not None
        assert (found.qty, found.unit, found.name) == (qty, unit, name)

    @pytest.mark.parametrize("line", ["0 cups flour", "0.0 g salt"])
    def test_zero_quantity_is_not_a_quantity(self, line: str) -> None:
        assert match_quantity_line(line) is None

    @pytest.mark.parametrize("line", ["2 large eggs", "2 cups", "flour 2 cups", "a pinch of salt"])
    def test_no_match(self, line: str) -> None:
        assert match_quantity_line(line) is None


class TestMatchBareName:
    def test_short_line(self) -> None:
        found = match_bare_name("fresh basil")
        assert found is not None
        assert found.name == "fresh basil"
        assert found.qty is None and found.unit is None

    def test_too_long(self) -> None:
        assert match_bare_name("x" * 50) is None
        assert match_bare_name("x" * 49) is not None

    def test_excluded_words_are_case_sensitive(self) -> None:
        assert match_bare_name("next step") is None
        assert match_bare_name("see instructions") is None
        assert match_bare_name("Step") is not None


class TestExtractIngredients:
    def test_single_quantity_line(self) -> None:
        assert extract_ingredients("2 cups flour") == [
            IngredientEntry(name="flour", qty=2.0, unit="cups", category="Pantry"),
        ]

    def test_onion_line_without_quantity(self) -> None:
        result = extract_ingredients("Half a red Onion, sliced")
        assert len(result) == 1
        assert result[0].category == "Vegetables"
        assert result[0].qty is None and result[0].unit is None

    def test_skips_short_and_long_lines(self) -> None:
        text = "\n".join(
            [
                "ab",
                "   ",
                "Now we are going to cook everything together for a long while",
                "1 cup sugar",
            ]
        )
        result = extract_ingredients(text)
        assert [entry.name for entry in result] == ["sugar"]

    def test_preserves_source_order(self) -> None:
        text = "salt\n2 cups flour\nbutter\nfish"
        assert [entry.name for entry in extract_ingredients(text)] == ["salt", "flour", "butter", "fish"]

    def test_caps_at_twenty_keeping_first(self) -> None:
        text = "\n".join(f"item {i}" for i in range(30))
        result = extract_ingredients(text)
        assert len(result) == MAX_INGREDIENTS
        assert result[0].name == "item 0"
        assert result[-1].name == "item 19"

    def test_notes_never_populated(self) -> None:
        assert all(entry.notes is None for entry in extract_ingredients("salt\n2 cups flour"))

    def test_zero_quantity_falls_back_to_bare_name(self) -> None:
        assert extract_ingredients("0 cups flour") == [
            IngredientEntry(name="0 cups flour", category="Pantry"),
        ]
