"""Tests for AI-assisted recipe variations."""

import asyncio
import json
from uuid import uuid4

import pytest

from recipe_engine.errors import NotFoundError, ParseError
from recipe_engine.services.categories import classify, popular_types, variation_name
from tests.conftest import (
    OTHER_USER_ID,
    USER_ID,
    VARIATION_COLUMNS,
    Engine,
    modification_json,
    recipe_content,
)


def test_create_variation_stores_snapshot_and_explanation(engine: Engine) -> None:
    original = engine.recipe_repository.add()
    engine.openai.responses.append(
        modification_json(
            modified=recipe_content(recipe_name="Spicy Lemon Salmon", cook_time=15)
        )
    )

    result = asyncio.run(
        engine.variation_engine.create_variation(USER_ID, original.id, "Make it spicy")
    )

    variation = result.variation
    assert variation.original_recipe_id == original.id
    assert variation.variation_name == "Lemon Herb Salmon (Spicy Version)"
    assert variation.variation_description == "Make it spicy"
    assert variation.variation_type == "variation"
    assert variation.created_via == "manual"
    assert variation.chat_session_id is None
    assert variation.recipe_data["recipe_name"] == "Spicy Lemon Salmon"
    assert variation.recipe_data["cook_time"] == 15
    assert variation.recipe_data["id"] == str(original.id)
    assert variation.recipe_data["ai_model_used"] == "gpt-test"
    assert result.explanation.changes_made == ["Reduced cooking time"]
    assert result.explanation.suggestions == ["Serve with quinoa"]

    _api_key, prompt = engine.openai.calls[0]
    assert 'USER MODIFICATION REQUEST: "Make it spicy"' in prompt
    assert "Name: Lemon Herb Salmon" in prompt


def test_partial_modification_keeps_original_fields(engine: Engine) -> None:
    original = engine.recipe_repository.add()
    engine.openai.responses.append(
        modification_json(modified={"cook_time": 12}, explanation={})
    )

    result = asyncio.run(
        engine.variation_engine.create_variation(USER_ID, original.id, "Faster please")
    )

    data = result.variation.recipe_data
    assert data["recipe_name"] == "Lemon Herb Salmon"
    assert data["cook_time"] == 12
    assert data["prep_time"] == 10
    assert len(data["ingredients"]) == 3
    assert result.variation.variation_name == "Lemon Herb Salmon (Quick Version)"
    assert result.explanation.changes_made == []


def test_chat_variation_records_session(engine: Engine) -> None:
    session_id = uuid4()
    original = engine.recipe_repository.add()
    engine.openai.responses.append(modification_json())

    result = asyncio.run(
        engine.variation_engine.create_variation(
            USER_ID, original.id, "Swap lemon for lime", session_id=session_id
        )
    )

    assert result.variation.created_via == "chat"
    assert result.variation.chat_session_id == session_id
    assert result.variation.recipe_data["chat_session_id"] == str(session_id)


@pytest.mark.parametrize(
    "response",
    [
        json.dumps({"explanation": {}}),
        json.dumps({"modified_recipe": recipe_content()}),
        json.dumps({"modified_recipe": "not a recipe", "explanation": {}}),
        "Sorry, I cannot modify this recipe.",
    ],
)
def test_malformed_modification_raises_parse_error(
    engine: Engine, response: str
) -> None:
    original = engine.recipe_repository.add()
    engine.openai.responses.append(response)

    with pytest.raises(ParseError):
        asyncio.run(
            engine.variation_engine.create_variation(USER_ID, original.id, "Vegan")
        )

    assert engine.variation_repository.variations == {}


def test_modified_recipe_without_ingredients_raises_parse_error(
    engine: Engine,
) -> None:
    original = engine.recipe_repository.add()
    engine.openai.responses.append(modification_json(modified={"ingredients": []}))

    with pytest.raises(ParseError):
        asyncio.run(
            engine.variation_engine.create_variation(USER_ID, original.id, "Remove all")
        )


def test_variation_of_someone_elses_recipe_is_not_found(engine: Engine) -> None:
    original = engine.recipe_repository.add(user_id=OTHER_USER_ID)

    with pytest.raises(NotFoundError):
        asyncio.run(
            engine.variation_engine.create_variation(USER_ID, original.id, "Vegan")
        )

    assert engine.openai.calls == []


def test_list_and_delete_variations(engine: Engine) -> None:
    original = engine.recipe_repository.add()
    engine.openai.responses.extend([modification_json(), modification_json()])
    first = asyncio.run(
        engine.variation_engine.create_variation(USER_ID, original.id, "Healthy")
    ).variation
    second = asyncio.run(
        engine.variation_engine.create_variation(USER_ID, original.id, "Spicy")
    ).variation

    listed = engine.variation_engine.list_variations(USER_ID, original.id)
    assert [item.id for item in listed] == [first.id, second.id]

    engine.variation_engine.delete_variation(USER_ID, first.id)

    listed = engine.variation_engine.list_variations(USER_ID, original.id)
    assert [item.id for item in listed] == [second.id]
    with pytest.raises(NotFoundError):
        engine.variation_engine.delete_variation(USER_ID, first.id)
    with pytest.raises(NotFoundError):
        engine.variation_engine.delete_variation(OTHER_USER_ID, second.id)


def test_save_variation_as_new_recipe(engine: Engine) -> None:
    original = engine.recipe_repository.add()
    engine.openai.responses.append(
        modification_json(modified=recipe_content(recipe_name="Vegan Bowl"))
    )
    variation = asyncio.run(
        engine.variation_engine.create_variation(USER_ID, original.id, "Vegan")
    ).variation

    saved = engine.variation_engine.save_variation_as_new_recipe(USER_ID, variation.id)
    renamed = engine.variation_engine.save_variation_as_new_recipe(
        USER_ID, variation.id, new_name="Weeknight Bowl"
    )

    assert saved.id != original.id
    assert saved.recipe_name == "Vegan Bowl"
    assert saved.created_via == "chat"
    assert saved.ai_model_used == "gpt-test"
    assert renamed.recipe_name == "Weeknight Bowl"
    with pytest.raises(NotFoundError):
        engine.variation_engine.save_variation_as_new_recipe(OTHER_USER_ID, variation.id)


def test_session_modification_history(engine: Engine) -> None:
    session_id = uuid4()
    chat_recipe = engine.recipe_repository.add(chat_session_id=str(session_id))
    engine.recipe_repository.add()
    engine.openai.responses.append(modification_json())
    variation = asyncio.run(
        engine.variation_engine.create_variation(
            USER_ID, chat_recipe.id, "Lighter", session_id=session_id
        )
    ).variation

    history = engine.variation_engine.get_session_modification_history(
        USER_ID, session_id
    )

    assert [recipe.id for recipe in history.original_recipes] == [chat_recipe.id]
    assert [item.id for item in history.variations] == [variation.id]
    assert history.modification_chain[0].recipe_id == chat_recipe.id
    assert history.modification_chain[0].modifications == [variation]


def test_modification_categories() -> None:
    assert [category.slug for category in classify("Make it vegan and spicy")] == [
        "dietary_modification",
        "spice_adjustment",
    ]
    assert variation_name("Pasta", "please substitute the cheese") == "Pasta (Modified)"
    assert variation_name("Pasta", "more basil") == "Pasta (Variation)"
    assert popular_types(["spicy", "vegan spicy", "a healthy take", None]) == [
        "spice_adjustment",
        "dietary_modification",
        "health_optimization",
    ]


def test_variation_insert_uses_only_table_columns(engine: Engine) -> None:
    original = engine.recipe_repository.add()
    engine.openai.responses.append(modification_json())
    inserted: list[dict[str, object]] = []
    create = engine.variation_repository.create_variation

    def recording_create(user_id, payload):  # type: ignore[no-untyped-def]
        inserted.append(payload)
        return create(user_id, payload)

    engine.variation_repository.create_variation = recording_create  # type: ignore[method-assign]
    variation = asyncio.run(
        engine.variation_engine.create_variation(USER_ID, original.id, "Vegan")
    ).variation
    engine.variation_engine.rollback_to_version(USER_ID, original.id, variation.id)

    assert [set(payload) <= VARIATION_COLUMNS for payload in inserted] == [True, True]
    assert [payload["recipe_data"]["variation_type"] for payload in inserted] == [
        "variation",
        "rollback",
    ]
