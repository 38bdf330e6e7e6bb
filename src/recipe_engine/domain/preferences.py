"""Domain models for user preferences."""

from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True)
class UserPreferences:
    """Generation-relevant preferences for a user."""

    user_id: UUID
    api_provider: str = "openai"
    api_key: str | None = None
    subscription_tier: str = "free"
    preferred_ai_model: str | None = None
    location: str = "United States"
    dietary_restrictions: list[str] = field(default_factory=list)
    cooking_skill_level: str = "beginner"
    preferred_cuisines: list[str] = field(default_factory=list)
    ingredient_blacklist: list[str] = field(default_factory=list)
