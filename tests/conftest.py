"""Shared test fixtures."""

import json
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from recipe_engine.adapters.local_model_client import LocalModelAdapter
from recipe_engine.adapters.supabase_recipe_repository import parse_recipe
from recipe_engine.config import Settings
from recipe_engine.containers import AppContainer
from recipe_engine.domain.preferences import UserPreferences
from recipe_engine.domain.recipes import Recipe, RecipeVariation
from recipe_engine.domain.routing import SubscriptionTier
from recipe_engine.errors import NotFoundError
from recipe_engine.services.preferences import PreferencesRepository, PreferencesService
from recipe_engine.services.providers import ProviderAdapter
from recipe_engine.services.recipes import RecipeRepository, RecipeService
from recipe_engine.services.router import ConnectivityProbe, GenerationRouter, LocalModel
from recipe_engine.services.variations import VariationEngine, VariationRepository

USER_ID = UUID("11111111-1111-1111-1111-111111111111")
OTHER_USER_ID = UUID("22222222-2222-2222-2222-222222222222")


def recipe_content(**overrides: object) -> dict[str, object]:
    content: dict[str, object] = {
        "recipe_name": "Lemon Herb Salmon",
        "ingredients": [
            {"name": "Salmon fillet", "quantity": "2 pieces"},
            {"name": "Olive oil", "quantity": "2 tbsp"},
            {"name": "Lemon", "quantity": "1"},
        ],
        "instructions": "1. Season the salmon. 2. Bake for 15 minutes.",
        "prep_time": 10,
        "cook_time": 20,
        "servings": 2,
        "estimated_cost": 8.0,
        "nutritional_info": {
            "calories": 420,
            "protein": "34g",
            "carbs": "6g",
            "fats": "28g",
            "highlights": "Rich in omega-3",
        },
    }
    content.update(overrides)
    return content


def recipe_json(**overrides: object) -> str:
    return json.dumps(recipe_content(**overrides))


def modification_json(
    modified: dict[str, object] | None = None,
    explanation: dict[str, object] | None = None,
) -> str:
    return json.dumps(
        {
            "modified_recipe": modified if modified is not None else recipe_content(),
            "explanation": explanation
            if explanation is not None
            else {
                "changes_made": ["Reduced cooking time"],
                "reasoning": ["Thinner fillets cook faster"],
                "impact_on_nutrition": "Unchanged",
                "impact_on_cooking_time": "5 minutes quicker",
                "impact_on_difficulty": "Same",
                "suggestions": ["Serve with quinoa"],
            },
        }
    )


@dataclass
class Clock:
    """Hands out strictly increasing timestamps."""

    current: datetime = field(
        default_factory=lambda: datetime.now(tz=UTC) - timedelta(days=3)
    )
    step: timedelta = timedelta(minutes=1)

    def __call__(self) -> datetime:
        self.current += self.step
        return self.current


@dataclass
class InMemoryRecipeRepository(RecipeRepository):
    clock: Clock = field(default_factory=Clock)
    recipes: dict[UUID, Recipe] = field(default_factory=dict)
    payloads: list[dict[str, object]] = field(default_factory=list)

    def create_recipe(self, user_id: UUID, payload: dict[str, object]) -> Recipe:
        self.payloads.append(payload)
        row = {
            "id": str(uuid4()),
            "user_id": str(user_id),
            "created_at": self.clock().isoformat(),
            **payload,
        }
        recipe = parse_recipe(json.loads(json.dumps(row)))
        self.recipes[recipe.id] = recipe
        return recipe

    def get_recipe(self, user_id: UUID, recipe_id: UUID) -> Recipe | None:
        recipe = self.recipes.get(recipe_id)
        if recipe is None or recipe.user_id != user_id:
            return None
        return recipe

    def list_session_recipes(self, user_id: UUID, session_id: UUID) -> list[Recipe]:
        return sorted(
            (
                recipe
                for recipe in self.recipes.values()
                if recipe.user_id == user_id and recipe.chat_session_id == session_id
            ),
            key=lambda recipe: recipe.created_at,
        )

    def add(self, user_id: UUID = USER_ID, **overrides: object) -> Recipe:
        payload: dict[str, object] = {
            **recipe_content(),
            "meal_type": "dinner",
            "recipe_date": date(2025, 3, 1).isoformat(),
            "season": "spring",
            "created_via": "daily",
        }
        payload.update(overrides)
        return self.create_recipe(user_id, payload)


VARIATION_COLUMNS = frozenset(
    {
        "original_recipe_id",
        "variation_name",
        "variation_description",
        "recipe_data",
        "created_via",
        "chat_session_id",
    }
)


@dataclass
class InMemoryVariationRepository(VariationRepository):
    clock: Clock = field(default_factory=Clock)
    variations: dict[UUID, RecipeVariation] = field(default_factory=dict)

    def create_variation(
        self, user_id: UUID, payload: dict[str, object]
    ) -> RecipeVariation:
        unknown = set(payload) - VARIATION_COLUMNS
        if unknown:
            raise ValueError(f"recipe_variations has no columns {sorted(unknown)}")
        stored = json.loads(json.dumps(payload))
        session_raw = stored.get("chat_session_id")
        variation = RecipeVariation(
            id=uuid4(),
            user_id=user_id,
            original_recipe_id=UUID(stored["original_recipe_id"]),
            variation_name=stored["variation_name"],
            variation_description=stored.get("variation_description"),
            recipe_data=stored["recipe_data"],
            created_via=stored["created_via"],
            created_at=self.clock(),
            chat_session_id=UUID(session_raw) if session_raw else None,
            variation_type=stored["recipe_data"].get("variation_type", "variation"),
        )
        self.variations[variation.id] = variation
        return variation

    def get_variation(
        self, user_id: UUID, variation_id: UUID
    ) -> RecipeVariation | None:
        variation = self.variations.get(variation_id)
        if variation is None or variation.user_id != user_id:
            return None
        return variation

    def list_variations(
        self, user_id: UUID, original_recipe_id: UUID
    ) -> list[RecipeVariation]:
        return self._matching(
            lambda item: item.user_id == user_id
            and item.original_recipe_id == original_recipe_id
        )

    def list_session_variations(
        self, user_id: UUID, session_id: UUID
    ) -> list[RecipeVariation]:
        return self._matching(
            lambda item: item.user_id == user_id and item.chat_session_id == session_id
        )

    def delete_variation(self, user_id: UUID, variation_id: UUID) -> bool:
        variation = self.variations.get(variation_id)
        if variation is None or variation.user_id != user_id:
            return False
        del self.variations[variation_id]
        return True

    def _matching(self, predicate) -> list[RecipeVariation]:  # type: ignore[no-untyped-def]
        return sorted(
            (item for item in self.variations.values() if predicate(item)),
            key=lambda item: item.created_at,
        )


@dataclass
class InMemoryPreferencesRepository(PreferencesRepository):
    preferences: dict[UUID, UserPreferences] = field(default_factory=dict)
    enhanced_prompt: str | None = None

    def get_preferences(self, user_id: UUID) -> UserPreferences | None:
        return self.preferences.get(user_id)

    def update_subscription_tier(self, user_id: UUID, tier: SubscriptionTier) -> None:
        current = self.preferences.get(user_id)
        if current is None:
            raise NotFoundError(
                f"No preferences row for user {user_id}",
                user_message="No preferences were found for that user.",
            )
        self.preferences[user_id] = replace(current, subscription_tier=str(tier))

    def generate_enhanced_dietary_prompt(self, user_id: UUID) -> str | None:
        return self.enhanced_prompt

    def set(self, user_id: UUID = USER_ID, **overrides: object) -> UserPreferences:
        preferences = replace(UserPreferences(user_id=user_id), **overrides)
        self.preferences[user_id] = preferences
        return preferences


@dataclass
class FakeConnectivityProbe(ConnectivityProbe):
    online: bool = True
    checks: int = 0

    async def is_online(self) -> bool:
        self.checks += 1
        return self.online


@dataclass
class FakeLocalModel(LocalModel):
    ready: bool = False
    responses: list[str | Exception] = field(default_factory=list)
    prompts: list[str] = field(default_factory=list)

    async def is_ready(self) -> bool:
        return self.ready

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return _next_response(self.responses)


@dataclass
class FakeProvider(ProviderAdapter):
    name: str
    model: str
    responses: list[str | Exception] = field(default_factory=list)
    calls: list[tuple[str | None, str]] = field(default_factory=list)

    async def complete(self, api_key: str | None, prompt: str) -> str:
        self.calls.append((api_key, prompt))
        return _next_response(self.responses)


def _next_response(responses: list[str | Exception]) -> str:
    if not responses:
        raise AssertionError("No fake response queued")
    response = responses.pop(0)
    if isinstance(response, Exception):
        raise response
    return response


@dataclass
class Engine:
    """Everything a routing or versioning test needs to poke at."""

    preferences_repository: InMemoryPreferencesRepository
    recipe_repository: InMemoryRecipeRepository
    variation_repository: InMemoryVariationRepository
    connectivity: FakeConnectivityProbe
    local_model: FakeLocalModel
    premium: FakeProvider
    openai: FakeProvider
    gemini: FakeProvider
    router: GenerationRouter
    recipe_service: RecipeService
    variation_engine: VariationEngine


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        api_token="api-token",
    )


@pytest.fixture
def engine() -> Engine:
    clock = Clock()
    preferences_repository = InMemoryPreferencesRepository()
    preferences_repository.set(api_key="user-key")
    recipe_repository = InMemoryRecipeRepository(clock=clock)
    variation_repository = InMemoryVariationRepository(clock=clock)
    connectivity = FakeConnectivityProbe()
    local_model = FakeLocalModel()
    premium = FakeProvider(name="claude", model="claude-test")
    openai = FakeProvider(name="openai", model="gpt-test")
    gemini = FakeProvider(name="gemini", model="gemini-test")
    preferences_service = PreferencesService(preferences_repository)
    router = GenerationRouter(
        preferences=preferences_service,
        connectivity=connectivity,
        local_model=local_model,
        premium_adapter=premium,
        basic_adapters={"openai": openai, "gemini": gemini},
        local_adapter=LocalModelAdapter(local_model, model="llama-test"),
    )
    return Engine(
        preferences_repository=preferences_repository,
        recipe_repository=recipe_repository,
        variation_repository=variation_repository,
        connectivity=connectivity,
        local_model=local_model,
        premium=premium,
        openai=openai,
        gemini=gemini,
        router=router,
        recipe_service=RecipeService(
            router=router,
            preferences=preferences_service,
            repository=recipe_repository,
        ),
        variation_engine=VariationEngine(
            router=router,
            preferences=preferences_service,
            recipe_repository=recipe_repository,
            repository=variation_repository,
        ),
    )


@pytest.fixture
def container(settings: Settings, engine: Engine) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        preferences_service=engine.router.preferences,
        router=engine.router,
        recipe_service=engine.recipe_service,
        variation_engine=engine.variation_engine,
        close_resources=close_resources,
    )
