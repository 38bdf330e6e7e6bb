"""Tests for recipe version comparison."""

import asyncio

import pytest

from recipe_engine.domain.generation import RecipeSnapshot
from recipe_engine.errors import NotFoundError
from recipe_engine.services.comparison import (
    diff_difficulty,
    diff_recipes,
    health_impact,
    parse_quantity,
    quantity_change_type,
    recommend,
)
from tests.conftest import USER_ID, Engine, modification_json, recipe_content


def _snapshot(**overrides: object) -> RecipeSnapshot:
    return RecipeSnapshot.model_validate(recipe_content(**overrides))


def test_quicker_cheaper_variation() -> None:
    original = _snapshot(prep_time=10, cook_time=20, estimated_cost=8.0)
    variation = _snapshot(prep_time=10, cook_time=15, estimated_cost=6.5)

    differences = diff_recipes(original, variation)

    assert differences.timing.prep_time_diff == 0
    assert differences.timing.cook_time_diff == -5
    assert differences.timing.total_time_diff == -5
    assert differences.timing.efficiency_impact == "Slightly faster"
    assert differences.cost.cost_diff == -1.5
    assert differences.cost.percentage == -19
    assert differences.cost.cost_factors[0] == "Substituted with budget ingredients"

    recommendation = recommend(differences)
    assert recommendation.preferred_version == "variation"
    assert recommendation.reasoning == ["Reduced cooking time", "Lower cost"]


def test_identical_versions_have_no_differences() -> None:
    snapshot = _snapshot()

    differences = diff_recipes(snapshot, snapshot.model_copy(deep=True))

    assert differences.ingredients.added == []
    assert differences.ingredients.removed == []
    assert differences.ingredients.modified == []
    assert len(differences.ingredients.unchanged) == 3
    assert differences.instructions.added_steps == []
    assert differences.instructions.removed_steps == []
    assert differences.instructions.technique_changes == []
    assert differences.nutrition.overall_health_impact == "neutral"
    assert differences.nutrition.protein.impact == "No significant change"
    assert differences.timing.efficiency_impact == "Similar timing"
    assert differences.difficulty.change_reason == "No difficulty change"
    assert differences.cost.cost_factors == ["Similar ingredient costs"]

    recommendation = recommend(differences)
    assert recommendation.preferred_version == "original"
    assert recommendation.reasoning == ["Both versions have their merits"]


def test_ingredient_differences_match_names_case_insensitively() -> None:
    original = _snapshot()
    variation = _snapshot(
        ingredients=[
            {"name": "salmon FILLET", "quantity": "3 pieces"},
            {"name": "Lemon", "quantity": "1"},
            {"name": "Sea salt", "quantity": "1 tsp"},
        ]
    )

    ingredients = diff_recipes(original, variation).ingredients

    assert [(item.name, item.impact) for item in ingredients.added] == [
        ("Sea salt", "Enhanced seasoning")
    ]
    assert [(item.name, item.impact) for item in ingredients.removed] == [
        ("Olive oil", "Reduced fat content")
    ]
    modified = ingredients.modified[0]
    assert modified.name == "Salmon fillet"
    assert modified.original_quantity == "2 pieces"
    assert modified.new_quantity == "3 pieces"
    assert modified.change_type == "increased"
    assert modified.impact == "More prominent flavor"
    assert [item.name for item in ingredients.unchanged] == ["Lemon"]


def test_renamed_ingredient_is_a_removal_plus_an_addition() -> None:
    original = _snapshot(ingredients=[{"name": "Butter", "quantity": "1 tbsp"}])
    variation = _snapshot(ingredients=[{"name": "Ghee", "quantity": "1 tbsp"}])

    ingredients = diff_recipes(original, variation).ingredients

    assert [item.name for item in ingredients.removed] == ["Butter"]
    assert [item.name for item in ingredients.added] == ["Ghee"]
    assert ingredients.modified == []


def test_repeated_ingredient_names_pair_in_order() -> None:
    snapshot = _snapshot(
        ingredients=[
            {"name": "Eggs", "quantity": "2"},
            {"name": "eggs", "quantity": "1 yolk"},
            {"name": "Salt", "quantity": "1 pinch"},
        ]
    )

    same = diff_recipes(snapshot, snapshot.model_copy(deep=True)).ingredients

    assert same.added == []
    assert same.removed == []
    assert same.modified == []
    assert [item.quantity for item in same.unchanged] == ["2", "1 yolk", "1 pinch"]

    fewer = diff_recipes(
        snapshot, _snapshot(ingredients=[{"name": "EGGS", "quantity": "3"}])
    ).ingredients

    assert [(item.name, item.new_quantity) for item in fewer.modified] == [("Eggs", "3")]
    assert [item.name for item in fewer.removed] == ["eggs", "Salt"]
    assert fewer.added == []


def test_instruction_and_technique_changes() -> None:
    original = _snapshot(instructions="1. Season the salmon. 2. Bake for 15 minutes.")
    variation = _snapshot(instructions="1. Season the salmon.\n2. Grill for 10 minutes.")

    instructions = diff_recipes(original, variation).instructions

    assert instructions.added_steps == ["Grill for 10 minutes."]
    assert instructions.removed_steps == ["Bake for 15 minutes."]
    assert instructions.technique_changes == [
        "Removed bake technique",
        "Added grill technique",
    ]


def test_nutrition_differences() -> None:
    original = _snapshot()
    variation = _snapshot(
        nutritional_info={"calories": 380, "protein": "30g", "carbs": "6g"}
    )

    nutrition = diff_recipes(original, variation).nutrition

    assert nutrition.calories.change == -40
    assert nutrition.calories.percentage == -10
    assert nutrition.protein.impact == "Decreased protein"
    assert nutrition.carbs.impact == "No significant change"
    assert nutrition.fats.new == "0g"
    assert nutrition.fats.impact == "No change"
    assert nutrition.overall_health_impact == "improved"


@pytest.mark.parametrize(
    ("before", "after", "expected"),
    [
        (420, 380, "improved"),
        (420, 480, "neutral"),
        (420, 520, "decreased"),
        (420, 0, "neutral"),
        (0, 300, "decreased"),
    ],
)
def test_health_impact(before: float, after: float, expected: str) -> None:
    assert health_impact(before, after) == expected


def test_difficulty_changes() -> None:
    harder = diff_difficulty("Easy", "Hard")
    easier = diff_difficulty("Hard", "Medium")
    unknown = diff_difficulty(None, "Easy")

    assert harder.change_reason == "Added complexity through technique or ingredients"
    assert harder.skill_requirements[0] == "Advanced techniques"
    assert easier.change_reason == "Simplified preparation or techniques"
    assert unknown.original == "Medium"
    assert unknown.change_reason == "No difficulty change"


def test_parse_quantity() -> None:
    assert parse_quantity("1 1/2 cups") == 1.5
    assert parse_quantity("3/4 cup") == 0.75
    assert parse_quantity("2.5 kg") == 2.5
    assert parse_quantity(".5 tsp") == 0.5
    assert parse_quantity("a pinch") is None
    assert parse_quantity("1/0 cup") is None
    assert quantity_change_type("2 cups", "1 1/2 cups") == "decreased"
    assert quantity_change_type("a pinch", "2 pinches") == "unit_changed"
    assert quantity_change_type("200 g", "200 grams") == "unit_changed"


def test_compare_recipe_versions_uses_latest_variation(engine: Engine) -> None:
    original = engine.recipe_repository.add()
    engine.openai.responses.extend(
        [
            modification_json(modified={"cook_time": 25}),
            modification_json(modified={"cook_time": 15, "estimated_cost": 6.5}),
        ]
    )
    for request in ("Slower", "Cheaper"):
        asyncio.run(
            engine.variation_engine.create_variation(USER_ID, original.id, request)
        )

    comparison = engine.variation_engine.compare_recipe_versions(USER_ID, original.id)

    assert len(comparison.variations) == 2
    assert comparison.differences.timing.cook_time_diff == -5
    assert comparison.differences.cost.cost_diff == -1.5


def test_compare_recipe_without_variations_is_empty(engine: Engine) -> None:
    original = engine.recipe_repository.add()

    comparison = engine.variation_engine.compare_recipe_versions(USER_ID, original.id)

    assert comparison.variations == []
    assert comparison.differences.timing.total_time_diff == 0
    assert comparison.differences.ingredients.added == []
    assert comparison.differences.nutrition.overall_health_impact == "neutral"


def test_detailed_comparison(engine: Engine) -> None:
    original = engine.recipe_repository.add()
    other = engine.recipe_repository.add()
    engine.openai.responses.extend(
        [
            modification_json(modified={"cook_time": 15, "estimated_cost": 6.5}),
            modification_json(),
        ]
    )
    variation = asyncio.run(
        engine.variation_engine.create_variation(USER_ID, original.id, "Cheaper")
    ).variation
    foreign = asyncio.run(
        engine.variation_engine.create_variation(USER_ID, other.id, "Spicy")
    ).variation

    detailed = engine.variation_engine.get_detailed_recipe_comparison(
        USER_ID, original.id, variation.id
    )

    assert detailed.comparison_target.id == variation.id
    assert detailed.recommendation.preferred_version == "variation"
    assert "Lower cost" in detailed.recommendation.reasoning

    latest = engine.variation_engine.get_detailed_recipe_comparison(USER_ID, original.id)
    assert latest.comparison_target.id == variation.id

    with pytest.raises(NotFoundError):
        engine.variation_engine.get_detailed_recipe_comparison(
            USER_ID, original.id, foreign.id
        )


def test_detailed_comparison_without_variations_is_not_found(engine: Engine) -> None:
    original = engine.recipe_repository.add()

    with pytest.raises(NotFoundError):
        engine.variation_engine.get_detailed_recipe_comparison(USER_ID, original.id)
