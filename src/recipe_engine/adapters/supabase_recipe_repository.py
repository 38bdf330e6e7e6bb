"""Supabase repository for recipes."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from recipe_engine.domain.recipes import Ingredient, NutritionInfo, Recipe
from recipe_engine.services.recipes import RecipeRepository


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase-backed repository for the daily_recipes table."""

    client: Client

    def create_recipe(self, user_id: UUID, payload: dict[str, object]) -> Recipe:
        """Insert a recipe row and return it."""
        response = (
            self.client.table("daily_recipes")
            .insert({"user_id": str(user_id), **payload})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create recipe")
        return parse_recipe(response.data[0])

    def get_recipe(self, user_id: UUID, recipe_id: UUID) -> Recipe | None:
        """Return a recipe owned by the user, if present."""
        response = (
            self.client.table("daily_recipes")
            .select("*")
            .eq("id", str(recipe_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_recipe(response.data[0])

    def list_session_recipes(self, user_id: UUID, session_id: UUID) -> list[Recipe]:
        """Return recipes created during a chat session."""
        response = (
            self.client.table("daily_recipes")
            .select("*")
            .eq("user_id", str(user_id))
            .eq("chat_session_id", str(session_id))
            .order("created_at")
            .execute()
        )
        return [parse_recipe(row) for row in response.data or []]


def parse_recipe(row: dict[str, object]) -> Recipe:
    """Parse a daily_recipes row into a domain model."""
    nutrition = row.get("nutritional_info") or {}
    session_raw = row.get("chat_session_id")
    calories = nutrition.get("calories")
    return Recipe(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        recipe_date=date.fromisoformat(str(row["recipe_date"])),
        meal_type=str(row.get("meal_type") or "dinner"),
        recipe_name=str(row.get("recipe_name", "")),
        ingredients=[_parse_ingredient(item) for item in row.get("ingredients") or []],
        instructions=str(row.get("instructions", "")),
        prep_time=int(row.get("prep_time") or 0),
        cook_time=int(row.get("cook_time") or 0),
        servings=int(row.get("servings") or 0),
        estimated_cost=float(row.get("estimated_cost") or 0.0),
        nutritional_info=NutritionInfo(
            calories=float(calories) if calories is not None else None,
            protein=nutrition.get("protein"),
            carbs=nutrition.get("carbs"),
            fats=nutrition.get("fats"),
            highlights=nutrition.get("highlights"),
            fiber=nutrition.get("fiber"),
            sugar=nutrition.get("sugar"),
            sodium=nutrition.get("sodium"),
        ),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        season=row.get("season"),
        is_favorite=bool(row.get("is_favorite", False)),
        created_via=str(row.get("created_via") or "daily"),
        ai_model_used=row.get("ai_model_used"),
        chat_session_id=UUID(str(session_raw)) if session_raw else None,
        difficulty=row.get("difficulty"),
        cuisine_type=row.get("cuisine_type"),
        tags=list(row.get("tags") or []),
        variations=list(row.get("variations") or []),
        cooking_tips=list(row.get("cooking_tips") or []),
    )


def _parse_ingredient(item: object) -> Ingredient:
    if isinstance(item, str):
        return Ingredient(name=item, quantity="")
    return Ingredient(
        name=str(item.get("name", "")),
        quantity=str(item.get("quantity") or ""),
        notes=item.get("notes"),
    )
