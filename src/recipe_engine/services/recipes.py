"""Recipe generation and persistence service."""

import logging
from dataclasses import asdict, dataclass
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID

from recipe_engine.domain.generation import GeneratedRecipe
from recipe_engine.domain.recipes import Recipe
from recipe_engine.domain.routing import RecipeRequest
from recipe_engine.errors import NotFoundError
from recipe_engine.services.preferences import PreferencesService
from recipe_engine.services.prompts import current_season
from recipe_engine.services.requests import build_recipe_request
from recipe_engine.services.router import GenerationRouter

_logger = logging.getLogger(__name__)

CONTENT_FIELDS: tuple[str, ...] = (
    "recipe_name",
    "meal_type",
    "ingredients",
    "instructions",
    "prep_time",
    "cook_time",
    "servings",
    "estimated_cost",
    "nutritional_info",
    "season",
    "difficulty",
    "cuisine_type",
    "tags",
    "variations",
    "cooking_tips",
)


class RecipeRepository(Protocol):
    """Persistence interface for recipes."""

    def create_recipe(self, user_id: UUID, payload: dict[str, object]) -> Recipe:
        """Insert a recipe row and return it."""

    def get_recipe(self, user_id: UUID, recipe_id: UUID) -> Recipe | None:
        """Return a recipe owned by the user, if present."""

    def list_session_recipes(self, user_id: UUID, session_id: UUID) -> list[Recipe]:
        """Return recipes created during a chat session, oldest first."""


def recipe_to_snapshot(recipe: Recipe) -> dict[str, object]:
    """Return the content-bearing fields of a recipe as plain JSON data."""
    data = asdict(recipe)
    snapshot = {key: data[key] for key in CONTENT_FIELDS}
    snapshot["nutritional_info"] = {
        key: value
        for key, value in data["nutritional_info"].items()
        if value is not None
    }
    return snapshot


def recipe_payload(  # noqa: PLR0913
    recipe: GeneratedRecipe,
    *,
    recipe_date: date,
    meal_type: str | None,
    created_via: str,
    ai_model_used: str | None,
    chat_session_id: UUID | None,
    name_suffix: str = "",
) -> dict[str, object]:
    """Build the insert payload for a recipe row from validated content."""
    content = recipe.model_dump(mode="json", exclude_none=True)
    payload: dict[str, object] = {
        **content,
        "recipe_name": f"{recipe.recipe_name}{name_suffix}",
        "meal_type": meal_type or recipe.meal_type or "dinner",
        "recipe_date": recipe_date.isoformat(),
        "season": recipe.season or current_season(recipe_date),
        "created_via": created_via,
        "ai_model_used": ai_model_used,
        "chat_session_id": str(chat_session_id) if chat_session_id else None,
    }
    return payload


@dataclass
class RecipeService:
    """Service that generates recipes and stores them with provenance."""

    router: GenerationRouter
    preferences: PreferencesService
    repository: RecipeRepository

    async def generate_recipe(self, user_id: UUID, request: RecipeRequest) -> Recipe:
        """Generate a recipe for a prepared request and persist it."""
        result = await self.router.generate(user_id, request)
        payload = recipe_payload(
            result.recipe,
            recipe_date=datetime.now(tz=UTC).date(),
            meal_type=request.meal_type,
            created_via=result.created_via,
            ai_model_used=result.ai_model_used,
            chat_session_id=result.chat_session_id,
        )
        recipe = self.repository.create_recipe(user_id, payload)
        _logger.info(
            "Stored recipe %s from %s (fallback=%s)",
            recipe.id,
            result.backend,
            result.used_fallback,
        )
        return recipe

    async def generate_from_prompt(
        self, user_id: UUID, prompt: str, session_id: UUID | None = None
    ) -> Recipe:
        """Generate a recipe from a chat message."""
        preferences = self.preferences.get_preferences(user_id)
        request = build_recipe_request(
            prompt,
            preferences,
            session_id=session_id,
            enhanced_dietary_clause=self.preferences.enhanced_dietary_clause(user_id),
        )
        return await self.generate_recipe(user_id, request)

    def get_recipe(self, user_id: UUID, recipe_id: UUID) -> Recipe:
        """Return a recipe owned by the user or raise NotFoundError."""
        recipe = self.repository.get_recipe(user_id, recipe_id)
        if recipe is None:
            raise NotFoundError(f"Recipe {recipe_id} not found for user {user_id}")
        return recipe
