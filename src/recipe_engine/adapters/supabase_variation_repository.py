"""Supabase repository for recipe variations."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from recipe_engine.domain.recipes import RecipeVariation
from recipe_engine.services.variations import VariationRepository


@dataclass
class SupabaseVariationRepository(VariationRepository):
    """Supabase-backed repository for the recipe_variations table."""

    client: Client

    def create_variation(
        self, user_id: UUID, payload: dict[str, object]
    ) -> RecipeVariation:
        """Insert a variation row and return it."""
        response = (
            self.client.table("recipe_variations")
            .insert({"user_id": str(user_id), **payload})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create recipe variation")
        return _parse_variation(response.data[0])

    def get_variation(
        self, user_id: UUID, variation_id: UUID
    ) -> RecipeVariation | None:
        response = (
            self.client.table("recipe_variations")
            .select("*")
            .eq("id", str(variation_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_variation(response.data[0])

    def list_variations(
        self, user_id: UUID, original_recipe_id: UUID
    ) -> list[RecipeVariation]:
        response = (
            self.client.table("recipe_variations")
            .select("*")
            .eq("original_recipe_id", str(original_recipe_id))
            .eq("user_id", str(user_id))
            .order("created_at")
            .execute()
        )
        return [_parse_variation(row) for row in response.data or []]

    def list_session_variations(
        self, user_id: UUID, session_id: UUID
    ) -> list[RecipeVariation]:
        response = (
            self.client.table("recipe_variations")
            .select("*")
            .eq("user_id", str(user_id))
            .eq("chat_session_id", str(session_id))
            .order("created_at")
            .execute()
        )
        return [_parse_variation(row) for row in response.data or []]

    def delete_variation(self, user_id: UUID, variation_id: UUID) -> bool:
        """Delete a variation and report whether a row was removed."""
        response = (
            self.client.table("recipe_variations")
            .delete()
            .eq("id", str(variation_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)


def _parse_variation(row: dict[str, object]) -> RecipeVariation:
    session_raw = row.get("chat_session_id")
    recipe_data = dict(row.get("recipe_data") or {})
    return RecipeVariation(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        original_recipe_id=UUID(str(row["original_recipe_id"])),
        variation_name=str(row.get("variation_name", "")),
        variation_description=row.get("variation_description"),
        recipe_data=recipe_data,
        created_via=str(row.get("created_via") or "manual"),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        chat_session_id=UUID(str(session_raw)) if session_raw else None,
        variation_type=str(recipe_data.get("variation_type") or "variation"),
    )
