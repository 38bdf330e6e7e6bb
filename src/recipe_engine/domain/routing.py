"""Domain models for backend selection."""

from dataclasses import dataclass, field
from enum import StrEnum
from uuid import UUID

from recipe_engine.domain.generation import GeneratedRecipe
from recipe_engine.domain.preferences import UserPreferences


class SubscriptionTier(StrEnum):
    """Billing tier that decides the cloud backend."""

    FREE = "free"
    PREMIUM = "premium"


class Backend(StrEnum):
    """Generation backend families."""

    CLOUD_PREMIUM = "cloud_premium"
    CLOUD_BASIC = "cloud_basic"
    LOCAL = "local"


@dataclass(frozen=True)
class RouterConfig:
    """Snapshot of everything backend selection depends on."""

    subscription_tier: SubscriptionTier
    is_online: bool
    local_model_ready: bool
    preferences: UserPreferences
    preferred_model: str | None = None


@dataclass(frozen=True)
class RecipeRequest:
    """A recipe generation request.

    A request without a prompt is templated: a meal for the current season
    and location. A request with a prompt is conversational.
    """

    prompt: str | None = None
    meal_type: str = "dinner"
    dietary_restrictions: list[str] = field(default_factory=list)
    preferred_cuisine: str | None = None
    cooking_time: str | None = None
    difficulty: str | None = None
    servings: int | None = None
    enhanced_dietary_clause: str = ""
    session_id: UUID | None = None


@dataclass(frozen=True)
class GenerationResult:
    """Recipe produced by the router, tagged with where it came from."""

    recipe: GeneratedRecipe
    backend: Backend
    ai_model_used: str
    used_fallback: bool = False
    chat_session_id: UUID | None = None
    created_via: str = "chat"
