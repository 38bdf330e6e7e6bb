"""Recipe variations: AI-assisted edits, history, comparison and rollback.

Variations are insert-only snapshots hanging off an original recipe.
Rollback never rewrites history: it inserts a new recipe plus a
``rollback`` variation so the timeline shows what happened.
"""

import logging
import math
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from pydantic import ValidationError

from recipe_engine.domain.comparison import DetailedComparison, RecipeComparison
from recipe_engine.domain.generation import (
    GeneratedRecipe,
    ModificationExplanation,
    RecipeSnapshot,
)
from recipe_engine.domain.history import (
    ModificationChain,
    RecipeTimeline,
    RollbackInfo,
    RollbackResult,
    SessionModificationHistory,
    TimelineEntry,
    TimelineStatistics,
    VariationResult,
)
from recipe_engine.domain.recipes import Recipe, RecipeVariation
from recipe_engine.errors import NotFoundError, ParseError
from recipe_engine.services import categories
from recipe_engine.services.comparison import diff_recipes, recommend
from recipe_engine.services.json_extraction import extract_json_object
from recipe_engine.services.preferences import PreferencesService
from recipe_engine.services.prompts import build_modification_prompt
from recipe_engine.services.providers import parse_recipe_payload
from recipe_engine.services.recipes import (
    RecipeRepository,
    recipe_payload,
    recipe_to_snapshot,
)
from recipe_engine.services.router import GenerationRouter

_logger = logging.getLogger(__name__)

VARIATION = "variation"
ROLLBACK = "rollback"
ROLLED_BACK_SUFFIX = " (Rolled Back)"
DEFAULT_ROLLBACK_REASON = "User requested rollback"


class VariationRepository(Protocol):
    """Persistence interface for recipe variations."""

    def create_variation(
        self, user_id: UUID, payload: dict[str, object]
    ) -> RecipeVariation:
        """Insert a variation row and return it."""

    def get_variation(
        self, user_id: UUID, variation_id: UUID
    ) -> RecipeVariation | None:
        """Return a variation owned by the user, if present."""

    def list_variations(
        self, user_id: UUID, original_recipe_id: UUID
    ) -> list[RecipeVariation]:
        """Return variations of a recipe, oldest first."""

    def list_session_variations(
        self, user_id: UUID, session_id: UUID
    ) -> list[RecipeVariation]:
        """Return variations created during a chat session, oldest first."""

    def delete_variation(self, user_id: UUID, variation_id: UUID) -> bool:
        """Delete a variation and return True if a row was removed."""


@dataclass
class VariationEngine:
    """Service that versions recipes through variations."""

    router: GenerationRouter
    preferences: PreferencesService
    recipe_repository: RecipeRepository
    repository: VariationRepository

    async def create_variation(
        self,
        user_id: UUID,
        original_recipe_id: UUID,
        modification_request: str,
        session_id: UUID | None = None,
    ) -> VariationResult:
        """Ask a model to modify a recipe and store the result as a variation."""
        original = self._load_recipe(user_id, original_recipe_id)
        preferences = self.preferences.get_preferences(user_id)
        snapshot = recipe_to_snapshot(original)
        prompt = build_modification_prompt(snapshot, modification_request, preferences)

        completion = await self.router.complete_modification(user_id, prompt)
        payload = extract_json_object(completion.text)
        modified = payload.get("modified_recipe")
        explanation_data = payload.get("explanation")
        if not isinstance(modified, dict):
            raise ParseError("Modification response is missing modified_recipe")
        if not isinstance(explanation_data, dict):
            raise ParseError("Modification response is missing explanation")

        content = parse_recipe_payload({**snapshot, **modified})
        try:
            explanation = ModificationExplanation.model_validate(explanation_data)
        except ValidationError as exc:
            raise ParseError(f"Invalid modification explanation: {exc}") from exc

        created_via = "chat" if session_id else "manual"
        recipe_data = {
            **content.model_dump(mode="json", exclude_none=True),
            "id": str(original.id),
            "user_id": str(original.user_id),
            "recipe_date": original.recipe_date.isoformat(),
            "created_at": original.created_at.isoformat(),
            "is_favorite": original.is_favorite,
            "created_via": created_via,
            "ai_model_used": completion.ai_model_used,
            "chat_session_id": str(session_id) if session_id else None,
            # recipe_variations has no kind column, so the kind lives in the snapshot.
            "variation_type": VARIATION,
        }
        variation = self.repository.create_variation(
            user_id,
            {
                "original_recipe_id": str(original.id),
                "variation_name": categories.variation_name(
                    original.recipe_name, modification_request
                ),
                "variation_description": modification_request,
                "recipe_data": recipe_data,
                "created_via": created_via,
                "chat_session_id": str(session_id) if session_id else None,
            },
        )
        _logger.info(
            "Created variation %s of recipe %s via %s",
            variation.id,
            original.id,
            completion.backend,
        )
        return VariationResult(variation=variation, explanation=explanation)

    def list_variations(
        self, user_id: UUID, original_recipe_id: UUID
    ) -> list[RecipeVariation]:
        self._load_recipe(user_id, original_recipe_id)
        return self.repository.list_variations(user_id, original_recipe_id)

    def get_recipe_history_timeline(
        self, user_id: UUID, recipe_id: UUID
    ) -> RecipeTimeline:
        """Return the original recipe, its ordered history and statistics."""
        original = self._load_recipe(user_id, recipe_id)
        variations = self.repository.list_variations(user_id, recipe_id)

        entries = [
            TimelineEntry(
                id=original.id,
                entry_type="original",
                name=original.recipe_name,
                description="Original recipe created",
                created_at=original.created_at,
                created_via=original.created_via or "manual",
                chat_session_id=original.chat_session_id,
            )
        ]
        entries.extend(
            TimelineEntry(
                id=variation.id,
                entry_type=ROLLBACK if variation.variation_type == ROLLBACK else VARIATION,
                name=variation.variation_name,
                description=variation.variation_description or "Recipe variation",
                created_at=variation.created_at,
                created_via=variation.created_via,
                chat_session_id=variation.chat_session_id,
                changes_summary=changes_summary(variation.recipe_data),
                parent_id=variation.original_recipe_id,
            )
            for variation in variations
        )
        entries.sort(key=lambda entry: entry.created_at)

        return RecipeTimeline(
            original=original,
            timeline=entries,
            statistics=_statistics(original, variations),
        )

    def compare_recipe_versions(
        self, user_id: UUID, recipe_id: UUID
    ) -> RecipeComparison:
        """Compare a recipe with its most recent variation.

        Without variations the recipe is compared with itself.
        """
        original = self._load_recipe(user_id, recipe_id)
        variations = self.repository.list_variations(user_id, recipe_id)
        base = _snapshot_of(original)
        target = (
            RecipeSnapshot.model_validate(variations[-1].recipe_data)
            if variations
            else base
        )
        return RecipeComparison(
            original=original,
            variations=variations,
            differences=diff_recipes(base, target),
        )

    def get_detailed_recipe_comparison(
        self,
        user_id: UUID,
        recipe_id: UUID,
        variation_id: UUID | None = None,
    ) -> DetailedComparison:
        """Compare a recipe with one variation and recommend a version."""
        original = self._load_recipe(user_id, recipe_id)
        if variation_id is not None:
            target = self._load_variation(user_id, variation_id, recipe_id)
        else:
            variations = self.repository.list_variations(user_id, recipe_id)
            if not variations:
                raise NotFoundError(
                    f"No variations found for recipe {recipe_id}",
                    user_message="This recipe has no variations to compare yet.",
                )
            target = variations[-1]
        differences = diff_recipes(
            _snapshot_of(original), RecipeSnapshot.model_validate(target.recipe_data)
        )
        return DetailedComparison(
            original=original,
            comparison_target=target,
            differences=differences,
            recommendation=recommend(differences),
        )

    def rollback_to_version(
        self,
        user_id: UUID,
        original_recipe_id: UUID,
        target_version_id: UUID | None = None,
        reason: str | None = None,
    ) -> RollbackResult:
        """Restore an earlier version as a brand-new recipe."""
        original = self._load_recipe(user_id, original_recipe_id)
        if target_version_id is not None:
            variation = self._load_variation(user_id, target_version_id, original.id)
            target_data = dict(variation.recipe_data)
            from_version, to_version = "current", variation.variation_name
        else:
            target_data = {
                **recipe_to_snapshot(original),
                "ai_model_used": original.ai_model_used,
            }
            from_version, to_version = "current_variation", "original"

        content = parse_recipe_payload(target_data)
        ai_model_used = target_data.get("ai_model_used")
        recipe = self.recipe_repository.create_recipe(
            user_id,
            recipe_payload(
                content,
                recipe_date=datetime.now(tz=UTC).date(),
                meal_type=content.meal_type or original.meal_type,
                created_via="chat",
                ai_model_used=ai_model_used if isinstance(ai_model_used, str) else None,
                chat_session_id=None,
                name_suffix=ROLLED_BACK_SUFFIX,
            ),
        )
        self.repository.create_variation(
            user_id,
            {
                "original_recipe_id": str(original.id),
                "variation_name": f"Rollback to {to_version}",
                "variation_description": reason
                or f"Rolled back from {from_version} to {to_version}",
                "recipe_data": {**target_data, "variation_type": ROLLBACK},
                "created_via": "manual",
                "chat_session_id": None,
            },
        )
        _logger.info(
            "Rolled back recipe %s to %s as new recipe %s",
            original.id,
            to_version,
            recipe.id,
        )
        return RollbackResult(
            recipe=recipe,
            rollback_info=RollbackInfo(
                from_version=from_version,
                to_version=to_version,
                rollback_reason=reason or DEFAULT_ROLLBACK_REASON,
                changes_reverted=reverted_changes(target_data),
                rollback_timestamp=datetime.now(tz=UTC),
            ),
        )

    def delete_variation(self, user_id: UUID, variation_id: UUID) -> None:
        """Hard-delete a variation owned by the user."""
        if not self.repository.delete_variation(user_id, variation_id):
            raise NotFoundError(f"Variation {variation_id} not found for user {user_id}")
        _logger.info("Deleted variation %s", variation_id)

    def save_variation_as_new_recipe(
        self, user_id: UUID, variation_id: UUID, new_name: str | None = None
    ) -> Recipe:
        """Promote a variation snapshot to a standalone recipe."""
        variation = self._load_variation(user_id, variation_id)
        content = parse_recipe_payload(variation.recipe_data)
        ai_model_used = variation.recipe_data.get("ai_model_used")
        payload = recipe_payload(
            content,
            recipe_date=datetime.now(tz=UTC).date(),
            meal_type=content.meal_type,
            created_via="chat",
            ai_model_used=ai_model_used if isinstance(ai_model_used, str) else None,
            chat_session_id=variation.chat_session_id,
        )
        if new_name:
            payload["recipe_name"] = new_name
        return self.recipe_repository.create_recipe(user_id, payload)

    def get_session_modification_history(
        self, user_id: UUID, session_id: UUID
    ) -> SessionModificationHistory:
        recipes = self.recipe_repository.list_session_recipes(user_id, session_id)
        variations = self.repository.list_session_variations(user_id, session_id)
        chains = [
            ModificationChain(
                recipe_id=recipe.id,
                recipe_name=recipe.recipe_name,
                modifications=[
                    variation
                    for variation in variations
                    if variation.original_recipe_id == recipe.id
                ],
            )
            for recipe in recipes
        ]
        return SessionModificationHistory(
            original_recipes=recipes,
            variations=variations,
            modification_chain=chains,
        )

    def _load_recipe(self, user_id: UUID, recipe_id: UUID) -> Recipe:
        recipe = self.recipe_repository.get_recipe(user_id, recipe_id)
        if recipe is None:
            raise NotFoundError(f"Recipe {recipe_id} not found for user {user_id}")
        return recipe

    def _load_variation(
        self,
        user_id: UUID,
        variation_id: UUID,
        original_recipe_id: UUID | None = None,
    ) -> RecipeVariation:
        variation = self.repository.get_variation(user_id, variation_id)
        if variation is None or (
            original_recipe_id is not None
            and variation.original_recipe_id != original_recipe_id
        ):
            raise NotFoundError(
                f"Variation {variation_id} not found for user {user_id}",
                user_message="That recipe version could not be found.",
            )
        return variation


def changes_summary(recipe_data: dict[str, object]) -> list[str]:
    """Summarise a snapshot for display in the timeline."""
    changes: list[str] = []
    ingredients = recipe_data.get("ingredients")
    if isinstance(ingredients, list) and ingredients:
        changes.append(f"{len(ingredients)} ingredients")
    if recipe_data.get("difficulty"):
        changes.append(f"Difficulty: {recipe_data['difficulty']}")
    prep = _minutes(recipe_data.get("prep_time"))
    cook = _minutes(recipe_data.get("cook_time"))
    if prep or cook:
        changes.append(f"Total time: {prep + cook} minutes")
    return changes


def reverted_changes(recipe_data: dict[str, object]) -> list[str]:
    """List the parts of a recipe a rollback restores."""
    changes: list[str] = []
    if recipe_data.get("ingredients"):
        changes.append("Ingredient list restored")
    if recipe_data.get("instructions"):
        changes.append("Cooking instructions restored")
    if recipe_data.get("prep_time") or recipe_data.get("cook_time"):
        changes.append("Timing restored")
    if recipe_data.get("difficulty"):
        changes.append("Difficulty level restored")
    return changes


def _minutes(value: object) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int | float):
        return round(value)
    return 0


def _snapshot_of(recipe: Recipe) -> RecipeSnapshot:
    return RecipeSnapshot.model_validate(recipe_to_snapshot(recipe))


def _statistics(
    original: Recipe, variations: list[RecipeVariation]
) -> TimelineStatistics:
    now = datetime.now(tz=UTC)
    if variations:
        elapsed = now - variations[0].created_at
        days = max(1, math.ceil(elapsed / timedelta(days=1)))
        most_recent = variations[-1].created_at
    else:
        days = 1
        most_recent = original.created_at
    return TimelineStatistics(
        total_variations=len(variations),
        most_recent_modification=most_recent,
        modifications_per_day=len(variations) / days,
        popular_modification_types=categories.popular_types(
            variation.variation_description for variation in variations
        ),
    )
