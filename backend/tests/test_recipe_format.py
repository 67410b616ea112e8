import pytest
from pydantic import ValidationError

from recipe_api.models.schemas import GeneratedRecipe, PlainIngredient, StructuredIngredient
from recipe_api.services.recipe_format import (
    coerce_nutrition, format_ingredient, format_ingredients,
    normalize_categories, normalize_category, parse_nutrition,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Non-Veg!", "non-vegetarian"),
        ("non_vegetarian", "non-vegetarian"),
        ("VEGAN", "vegan"),
        ("veg", "vegetarian"),
        ("Vegetarian", "vegetarian"),
        ("spicy 🌶", "spicy"),
        ("keto", "other"),
        ("", "other"),
        (None, "other"),
        (42, "other"),
    ],
)
def test_normalize_category(raw, expected):
    assert normalize_category(raw) == expected


def test_normalize_categories_scalar_and_list():
    assert normalize_categories("veg") == ["vegetarian"]
    assert normalize_categories(["Vegan", "vegan", "SPICY"]) == ["vegan", "spicy"]
    assert normalize_categories([]) == ["other"]
    assert normalize_categories(None) == ["other"]


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("200kcal", 200.0),
        ("12.346 g", 12.35),
        (5, 5.0),
        (2.456, 2.46),
        ("~ 30g", 30.0),
        ("1.2.3", 1.2),
        ("-5", 5.0),
        ("abc", 0.0),
        ("", 0.0),
        (None, 0.0),
        (0, 0.0),
        (True, 0.0),
    ],
)
def test_parse_nutrition(raw, expected):
    assert parse_nutrition(raw) == expected


def test_coerce_nutrition_defaults_and_merge():
    assert coerce_nutrition({"calories": "200kcal"}) == {
        "calories": 200.0, "protein": 0.0, "fat": 0.0, "carbs": 0.0,
    }
    base = {"calories": 100, "protein": 5, "fat": 2, "carbs": 40}
    merged = coerce_nutrition({"fat": "3.333"}, base=base)
    assert merged == {"calories": 100.0, "protein": 5.0, "fat": 3.33, "carbs": 40.0}


def test_format_ingredient_variants():
    assert format_ingredient(PlainIngredient(text="  2 cups   rice ")) == "2 cups rice"
    assert format_ingredient(StructuredIngredient(item="salt", amount="1", unit="tsp")) == "1 tsp salt"
    # amount/unit 없으면 앞뒤 공백 없이
    assert format_ingredient(StructuredIngredient(item="pepper")) == "pepper"
    assert format_ingredient(StructuredIngredient(item="eggs", amount=2)) == "2 eggs"


def test_generated_recipe_accepts_mixed_ingredients():
    parsed = GeneratedRecipe.model_validate({
        "title": "Mix",
        "description": "One line",
        "ingredients": ["2 cups rice", {"item": "salt", "amount": 1, "unit": "tsp"}, {"item": ""}],
        "instructions": ["Cook"],
    })
    assert parsed.description == ["One line"]
    assert format_ingredients(parsed.ingredients) == ["2 cups rice", "1 tsp salt"]
    assert parsed.nutritionalInfo == {}


def test_generated_recipe_title_is_coerced_to_text():
    assert GeneratedRecipe.model_validate({"title": 123}).title == "123"
    assert GeneratedRecipe.model_validate({"title": "  Dal  "}).title == "Dal"
    with pytest.raises(ValidationError):
        GeneratedRecipe.model_validate({"title": "   "})
