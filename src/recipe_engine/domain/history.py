"""Domain models for recipe history, timelines and rollbacks."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from recipe_engine.domain.generation import ModificationExplanation
from recipe_engine.domain.recipes import Recipe, RecipeVariation


@dataclass(frozen=True)
class TimelineEntry:
    """One version in a recipe's history."""

    id: UUID
    entry_type: str
    name: str
    description: str
    created_at: datetime
    created_via: str
    chat_session_id: UUID | None = None
    changes_summary: list[str] = field(default_factory=list)
    parent_id: UUID | None = None


@dataclass(frozen=True)
class TimelineStatistics:
    """Aggregate numbers over a recipe's variations."""

    total_variations: int
    most_recent_modification: datetime
    modifications_per_day: float
    popular_modification_types: list[str]


@dataclass(frozen=True)
class RecipeTimeline:
    """An original recipe with its ordered history."""

    original: Recipe
    timeline: list[TimelineEntry]
    statistics: TimelineStatistics


@dataclass(frozen=True)
class VariationResult:
    """A newly created variation with the model's explanation."""

    variation: RecipeVariation
    explanation: ModificationExplanation


@dataclass(frozen=True)
class RollbackInfo:
    """Audit details of a rollback."""

    from_version: str
    to_version: str
    rollback_reason: str
    changes_reverted: list[str]
    rollback_timestamp: datetime


@dataclass(frozen=True)
class RollbackResult:
    """The recipe created by a rollback and how it came about."""

    recipe: Recipe
    rollback_info: RollbackInfo


@dataclass(frozen=True)
class ModificationChain:
    """Variations made to one recipe during a chat session."""

    recipe_id: UUID
    recipe_name: str
    modifications: list[RecipeVariation]


@dataclass(frozen=True)
class SessionModificationHistory:
    """Everything created during a chat session."""

    original_recipes: list[Recipe]
    variations: list[RecipeVariation]
    modification_chain: list[ModificationChain]
