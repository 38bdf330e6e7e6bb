"""User preference service."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from recipe_engine.domain.preferences import UserPreferences
from recipe_engine.domain.routing import SubscriptionTier

_logger = logging.getLogger(__name__)


class PreferencesRepository(Protocol):
    """Persistence interface for user preferences."""

    def get_preferences(self, user_id: UUID) -> UserPreferences | None:
        """Return stored preferences for a user, if any."""

    def update_subscription_tier(self, user_id: UUID, tier: SubscriptionTier) -> None:
        """Persist a new subscription tier.

        Raises NotFoundError when the user has no preferences row.
        """

    def generate_enhanced_dietary_prompt(self, user_id: UUID) -> str | None:
        """Return the store-generated dietary clause, or None when unavailable."""


@dataclass
class PreferencesService:
    """Service for generation-relevant user preferences."""

    repository: PreferencesRepository

    def get_preferences(self, user_id: UUID) -> UserPreferences:
        """Return stored preferences or defaults for a new user."""
        return self.repository.get_preferences(user_id) or UserPreferences(
            user_id=user_id
        )

    def set_subscription_tier(self, user_id: UUID, tier: SubscriptionTier) -> None:
        self.repository.update_subscription_tier(user_id, tier)

    def enhanced_dietary_clause(self, user_id: UUID) -> str:
        """Return the enhanced dietary clause, falling back to a basic one."""
        clause = self.repository.generate_enhanced_dietary_prompt(user_id)
        if clause is not None:
            return clause
        _logger.info("Using basic dietary clause for user %s", user_id)
        return basic_dietary_clause(self.get_preferences(user_id))


def basic_dietary_clause(preferences: UserPreferences) -> str:
    """Render stored restrictions as a prompt suffix."""
    requirements = [
        f"Must be {restriction.lower()}-compliant"
        for restriction in preferences.dietary_restrictions
    ]
    if preferences.ingredient_blacklist:
        requirements.append(
            f"Avoid these ingredients: {', '.join(preferences.ingredient_blacklist)}"
        )
    if not requirements:
        return ""
    lines = "\n".join(f"- {requirement}" for requirement in requirements)
    return f"\n\nDIETARY REQUIREMENTS:\n{lines}"
