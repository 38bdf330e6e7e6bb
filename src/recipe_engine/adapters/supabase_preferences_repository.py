"""Supabase repository for user preferences."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client, PostgrestAPIError

from recipe_engine.domain.preferences import UserPreferences
from recipe_engine.domain.routing import SubscriptionTier
from recipe_engine.errors import NotFoundError
from recipe_engine.services.preferences import PreferencesRepository

_logger = logging.getLogger(__name__)


@dataclass
class SupabasePreferencesRepository(PreferencesRepository):
    """Supabase implementation for user preferences."""

    client: Client

    def get_preferences(self, user_id: UUID) -> UserPreferences | None:
        """Return stored preferences for a user."""
        response = (
            self.client.table("user_preferences")
            .select("*")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_preferences(response.data[0])

    def update_subscription_tier(self, user_id: UUID, tier: SubscriptionTier) -> None:
        response = (
            self.client.table("user_preferences")
            .update(
                {
                    "subscription_tier": str(tier),
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            raise NotFoundError(
                f"No preferences row for user {user_id}",
                user_message="No preferences were found for that user.",
            )

    def generate_enhanced_dietary_prompt(self, user_id: UUID) -> str | None:
        """Call the enhanced dietary prompt function, or None when it fails."""
        try:
            response = self.client.rpc(
                "generate_enhanced_dietary_prompt", {"user_id_param": str(user_id)}
            ).execute()
        except PostgrestAPIError as exc:
            _logger.warning("Enhanced dietary prompt unavailable: %s", exc)
            return None
        data = response.data
        return data if isinstance(data, str) else ""


def _parse_preferences(row: dict[str, object]) -> UserPreferences:
    restrictions = row.get("dietary_restrictions")
    if not restrictions:
        restrictions = list((row.get("detailed_dietary_restrictions") or {}).keys())
    return UserPreferences(
        user_id=UUID(str(row["user_id"])),
        api_provider=str(row.get("api_provider") or "openai"),
        api_key=row.get("api_key"),
        subscription_tier=str(row.get("subscription_tier") or "free"),
        preferred_ai_model=row.get("preferred_ai_model"),
        location=str(row.get("location") or "United States"),
        dietary_restrictions=list(restrictions),
        cooking_skill_level=str(row.get("cooking_skill_level") or "beginner"),
        preferred_cuisines=list(row.get("preferred_cuisines") or []),
        ingredient_blacklist=list(row.get("ingredient_blacklist") or []),
    )
