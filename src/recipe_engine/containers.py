"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from recipe_engine.adapters.anthropic_client import AnthropicRecipeClient
from recipe_engine.adapters.connectivity import HttpxConnectivityProbe
from recipe_engine.adapters.gemini_client import GeminiRecipeClient
from recipe_engine.adapters.local_model_client import (
    DisabledLocalModel,
    HttpxLlamaServerModel,
    LocalModelAdapter,
)
from recipe_engine.adapters.openai_client import OpenAIRecipeClient
from recipe_engine.adapters.supabase_preferences_repository import (
    SupabasePreferencesRepository,
)
from recipe_engine.adapters.supabase_recipe_repository import SupabaseRecipeRepository
from recipe_engine.adapters.supabase_variation_repository import (
    SupabaseVariationRepository,
)
from recipe_engine.config import Settings
from recipe_engine.services.preferences import PreferencesService
from recipe_engine.services.recipes import RecipeService
from recipe_engine.services.router import GenerationRouter, LocalModel
from recipe_engine.services.variations import VariationEngine


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    preferences_service: PreferencesService
    router: GenerationRouter
    recipe_service: RecipeService
    variation_engine: VariationEngine
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    recipe_repository = SupabaseRecipeRepository(supabase_client)
    variation_repository = SupabaseVariationRepository(supabase_client)
    preferences_service = PreferencesService(
        SupabasePreferencesRepository(supabase_client)
    )

    anthropic_client = AnthropicRecipeClient.create(
        model=resolved_settings.anthropic_model,
        base_url=resolved_settings.anthropic_base_url,
        max_tokens=resolved_settings.max_tokens,
        temperature=resolved_settings.temperature,
        timeout=resolved_settings.request_timeout_seconds,
    )
    openai_client = OpenAIRecipeClient.create(
        model=resolved_settings.openai_model,
        max_tokens=resolved_settings.max_tokens,
        temperature=resolved_settings.temperature,
        timeout=resolved_settings.request_timeout_seconds,
    )
    gemini_client = GeminiRecipeClient.create(
        model=resolved_settings.gemini_model,
        base_url=resolved_settings.gemini_base_url,
        max_tokens=resolved_settings.max_tokens,
        temperature=resolved_settings.temperature,
        timeout=resolved_settings.request_timeout_seconds,
    )
    llama_server: HttpxLlamaServerModel | None = None
    local_model: LocalModel = DisabledLocalModel()
    if resolved_settings.local_model_url:
        llama_server = HttpxLlamaServerModel.create(
            base_url=resolved_settings.local_model_url,
            max_tokens=resolved_settings.max_tokens,
            timeout=resolved_settings.request_timeout_seconds,
        )
        local_model = llama_server
    connectivity = HttpxConnectivityProbe.create(
        resolved_settings.connectivity_check_url
    )

    router = GenerationRouter(
        preferences=preferences_service,
        connectivity=connectivity,
        local_model=local_model,
        premium_adapter=anthropic_client,
        basic_adapters={"openai": openai_client, "gemini": gemini_client},
        local_adapter=LocalModelAdapter(
            local_model, model=resolved_settings.local_model_name
        ),
    )
    recipe_service = RecipeService(
        router=router,
        preferences=preferences_service,
        repository=recipe_repository,
    )
    variation_engine = VariationEngine(
        router=router,
        preferences=preferences_service,
        recipe_repository=recipe_repository,
        repository=variation_repository,
    )

    async def close_resources() -> None:
        await anthropic_client.close()
        await openai_client.close()
        await gemini_client.close()
        await connectivity.close()
        if llama_server is not None:
            await llama_server.close()

    return AppContainer(
        settings=resolved_settings,
        preferences_service=preferences_service,
        router=router,
        recipe_service=recipe_service,
        variation_engine=variation_engine,
        close_resources=close_resources,
    )
