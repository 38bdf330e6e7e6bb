"""Models for recipe data returned by generation backends."""

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_LEADING_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")


def _leading_number(value: object) -> object:
    """Pull the first number out of strings such as "15 minutes" or "$12.50"."""
    if not isinstance(value, str):
        return value
    match = _LEADING_NUMBER.search(value.replace(",", ""))
    if match is None:
        return value
    return match.group(0)


def _stringify(value: object) -> str:
    if isinstance(value, dict):
        return " - ".join(str(item) for item in value.values() if item)
    return str(value)


class GeneratedIngredient(BaseModel):
    """Ingredient line as produced by a model."""

    model_config = ConfigDict(extra="ignore")

    name: str
    quantity: str = ""
    notes: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_plain_text(cls, data: object) -> object:
        if isinstance(data, str):
            return {"name": data}
        return data

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity_as_text(cls, value: object) -> object:
        if value is None:
            return ""
        if isinstance(value, int | float):
            return str(value)
        return value


class GeneratedNutrition(BaseModel):
    """Nutrition block; macros stay free text as the models write them."""

    model_config = ConfigDict(extra="ignore")

    calories: float | None = None
    protein: str | None = None
    carbs: str | None = None
    fats: str | None = None
    highlights: str | None = None
    fiber: str | None = None
    sugar: str | None = None
    sodium: str | None = None

    @field_validator("calories", mode="before")
    @classmethod
    def _calories_number(cls, value: object) -> object:
        parsed = _leading_number(value)
        if isinstance(parsed, str) and not _LEADING_NUMBER.fullmatch(parsed):
            return None
        return parsed

    @field_validator(
        "protein", "carbs", "fats", "highlights", "fiber", "sugar", "sodium",
        mode="before",
    )
    @classmethod
    def _macro_text(cls, value: object) -> object:
        if isinstance(value, int | float):
            return f"{value}g"
        return value


class RecipeSnapshot(BaseModel):
    """Lenient view over stored recipe data used for diffs and rollbacks."""

    model_config = ConfigDict(extra="ignore")

    recipe_name: str = ""
    meal_type: str | None = None
    ingredients: list[GeneratedIngredient] = Field(default_factory=list)
    instructions: str = ""
    prep_time: int = 0
    cook_time: int = 0
    servings: int = 0
    estimated_cost: float = 0.0
    nutritional_info: GeneratedNutrition = Field(default_factory=GeneratedNutrition)
    season: str | None = None
    difficulty: str | None = None
    cuisine_type: str | None = None
    tags: list[str] = Field(default_factory=list)
    variations: list[str] = Field(default_factory=list)
    cooking_tips: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: object) -> object:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    @field_validator("prep_time", "cook_time", "servings", mode="before")
    @classmethod
    def _whole_number(cls, value: object) -> object:
        parsed = _leading_number(value)
        if isinstance(parsed, str) and _LEADING_NUMBER.fullmatch(parsed):
            return round(float(parsed))
        if isinstance(parsed, float):
            return round(parsed)
        return parsed

    @field_validator("estimated_cost", mode="before")
    @classmethod
    def _cost_number(cls, value: object) -> object:
        return _leading_number(value)

    @field_validator("tags", "variations", "cooking_tips", mode="before")
    @classmethod
    def _text_list(cls, value: object) -> object:
        if isinstance(value, str):
            return [value]
        if isinstance(value, list):
            return [_stringify(item) for item in value if item]
        return value


class GeneratedRecipe(RecipeSnapshot):
    """Canonical partial recipe returned by a provider adapter."""

    recipe_name: str = Field(min_length=1)
    ingredients: list[GeneratedIngredient] = Field(min_length=1)
    instructions: str
    prep_time: int = Field(default=15, ge=0)
    cook_time: int = Field(default=30, ge=0)
    servings: int = Field(default=4, ge=0)
    estimated_cost: float = Field(default=12.0, ge=0)


class ModificationExplanation(BaseModel):
    """Model-written explanation of what a modification changed."""

    model_config = ConfigDict(extra="ignore")

    changes_made: list[str] = Field(default_factory=list)
    reasoning: list[str] = Field(default_factory=list)
    impact_on_nutrition: str = ""
    impact_on_cooking_time: str = ""
    impact_on_difficulty: str = ""
    suggestions: list[str] = Field(default_factory=list)

    @field_validator("changes_made", "reasoning", "suggestions", mode="before")
    @classmethod
    def _text_list(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value
