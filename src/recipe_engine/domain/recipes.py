"""Domain models for stored recipes and their variations."""

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID


@dataclass(frozen=True)
class Ingredient:
    """Single ingredient line of a recipe."""

    name: str
    quantity: str
    notes: str | None = None


@dataclass(frozen=True)
class NutritionInfo:
    """Per-serving nutrition summary as reported by the model."""

    calories: float | None = None
    protein: str | None = None
    carbs: str | None = None
    fats: str | None = None
    highlights: str | None = None
    fiber: str | None = None
    sugar: str | None = None
    sodium: str | None = None


@dataclass(frozen=True)
class Recipe:
    """A persisted recipe row."""

    id: UUID
    user_id: UUID
    recipe_date: date
    meal_type: str
    recipe_name: str
    ingredients: list[Ingredient]
    instructions: str
    prep_time: int
    cook_time: int
    servings: int
    estimated_cost: float
    nutritional_info: NutritionInfo
    created_at: datetime
    season: str | None = None
    is_favorite: bool = False
    created_via: str = "daily"
    ai_model_used: str | None = None
    chat_session_id: UUID | None = None
    difficulty: str | None = None
    cuisine_type: str | None = None
    tags: list[str] = field(default_factory=list)
    variations: list[str] = field(default_factory=list)
    cooking_tips: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RecipeVariation:
    """Immutable snapshot of a recipe after an AI-assisted edit or rollback."""

    id: UUID
    user_id: UUID
    original_recipe_id: UUID
    variation_name: str
    variation_description: str | None
    recipe_data: dict[str, object]
    created_via: str
    created_at: datetime
    chat_session_id: UUID | None = None
    variation_type: str = "variation"
