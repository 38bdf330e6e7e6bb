"""Backend selection for recipe generation."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Protocol, TypeVar, assert_never
from uuid import UUID

from recipe_engine.domain.generation import GeneratedRecipe
from recipe_engine.domain.preferences import UserPreferences
from recipe_engine.domain.routing import (
    Backend,
    GenerationResult,
    RecipeRequest,
    RouterConfig,
    SubscriptionTier,
)
from recipe_engine.errors import AuthError, NoServiceAvailableError, ProviderError
from recipe_engine.services.preferences import PreferencesService
from recipe_engine.services.prompts import PromptKind, build_prompt, context_for_request
from recipe_engine.services.providers import ProviderAdapter

_logger = logging.getLogger(__name__)

_T = TypeVar("_T")

LOCAL_FALLBACK_MODEL = "local_fallback"

PREMIUM_FEATURES: tuple[str, ...] = (
    "Advanced nutritional analysis",
    "Recipe variations and substitutions",
    "Professional cooking tips",
    "Cultural context and pairing suggestions",
    "Complex recipe generation",
    "Recipe modification through chat",
    "Unlimited image generation",
)

FREE_FEATURES: tuple[str, ...] = (
    "Basic recipe generation",
    "Simple nutritional info",
    "Limited image fetching (50/hour)",
    "Basic cooking instructions",
)

PREMIUM_GATED_FEATURES = frozenset(
    {
        "recipe_variations",
        "cooking_tips",
        "detailed_nutrition",
        "recipe_modification",
        "unlimited_images",
        "complex_recipes",
    }
)


class ConnectivityProbe(Protocol):
    """Interface for the online/offline signal."""

    async def is_online(self) -> bool:
        """Return True when cloud backends are reachable."""


class LocalModel(Protocol):
    """Interface for the on-device model."""

    async def is_ready(self) -> bool:
        """Return True when the model is loaded and can serve prompts."""

    async def complete(self, prompt: str) -> str:
        """Return the raw completion for a prompt."""


def candidate_backends(config: RouterConfig) -> list[Backend]:
    """Return the ordered backends to attempt for a generation request."""
    if not config.is_online:
        if config.local_model_ready:
            return [Backend.LOCAL]
        raise NoServiceAvailableError("Offline and no local model is ready")
    if config.subscription_tier is SubscriptionTier.PREMIUM:
        primary = Backend.CLOUD_PREMIUM
    else:
        primary = Backend.CLOUD_BASIC
    return _with_local_fallback(primary, config)


def modification_backends(config: RouterConfig) -> list[Backend]:
    """Return the ordered backends to attempt for a recipe modification.

    Premium users always try the premium cloud backend first, whatever the
    last connectivity probe said.
    """
    if config.subscription_tier is SubscriptionTier.PREMIUM:
        return _with_local_fallback(Backend.CLOUD_PREMIUM, config)
    return candidate_backends(config)


def _with_local_fallback(primary: Backend, config: RouterConfig) -> list[Backend]:
    if primary is not Backend.LOCAL and config.local_model_ready:
        return [primary, Backend.LOCAL]
    return [primary]


@dataclass(frozen=True)
class RoutedCompletion:
    """Raw model text together with the backend that produced it."""

    text: str
    backend: Backend
    ai_model_used: str
    used_fallback: bool


@dataclass
class GenerationRouter:
    """Chooses a backend per request and falls back to the local model once."""

    preferences: PreferencesService
    connectivity: ConnectivityProbe
    local_model: LocalModel
    premium_adapter: ProviderAdapter
    basic_adapters: dict[str, ProviderAdapter]
    local_adapter: ProviderAdapter
    _configs: dict[UUID, RouterConfig] = field(default_factory=dict, init=False)

    async def refresh(self, user_id: UUID) -> RouterConfig:
        """Re-read preferences, connectivity and local readiness for a user."""
        preferences = self.preferences.get_preferences(user_id)
        is_online = await self.connectivity.is_online()
        local_ready = await self.local_model.is_ready()
        config = RouterConfig(
            subscription_tier=_tier(preferences.subscription_tier),
            is_online=is_online,
            local_model_ready=local_ready,
            preferences=preferences,
            preferred_model=preferences.preferred_ai_model,
        )
        self._configs[user_id] = config
        _logger.debug(
            "Router config for %s: tier=%s online=%s local=%s",
            user_id,
            config.subscription_tier,
            is_online,
            local_ready,
        )
        return config

    def config_for(self, user_id: UUID) -> RouterConfig | None:
        """Return the last refreshed config for a user without any I/O."""
        return self._configs.get(user_id)

    async def generate(self, user_id: UUID, request: RecipeRequest) -> GenerationResult:
        """Generate a recipe on the best available backend."""
        config = await self.refresh(user_id)
        premium = config.subscription_tier is SubscriptionTier.PREMIUM
        kind = PromptKind.CONVERSATIONAL if request.prompt else PromptKind.TEMPLATED
        context = context_for_request(
            request, config.preferences, premium=premium
        )
        prompt = build_prompt(kind, context)

        async def attempt(adapter: ProviderAdapter, api_key: str | None) -> GeneratedRecipe:
            return await adapter.call(api_key, prompt)

        recipe, backend, model, used_fallback = await self._run_candidates(
            config, candidate_backends(config), attempt
        )
        return GenerationResult(
            recipe=recipe,
            backend=backend,
            ai_model_used=model,
            used_fallback=used_fallback,
            chat_session_id=request.session_id,
        )

    async def complete_modification(
        self, user_id: UUID, prompt: str
    ) -> RoutedCompletion:
        """Send a modification prompt and return the raw model text."""
        config = await self.refresh(user_id)

        async def attempt(adapter: ProviderAdapter, api_key: str | None) -> str:
            return await adapter.complete(api_key, prompt)

        text, backend, model, used_fallback = await self._run_candidates(
            config, modification_backends(config), attempt
        )
        return RoutedCompletion(
            text=text,
            backend=backend,
            ai_model_used=model,
            used_fallback=used_fallback,
        )

    async def set_subscription_tier(
        self, user_id: UUID, tier: SubscriptionTier
    ) -> RouterConfig:
        """Persist a new tier and refresh the cached config."""
        self.preferences.set_subscription_tier(user_id, tier)
        return await self.refresh(user_id)

    def adapter_for(
        self, backend: Backend, preferences: UserPreferences
    ) -> ProviderAdapter:
        """Return the adapter that serves ``backend`` for a user."""
        match backend:
            case Backend.CLOUD_PREMIUM:
                return self.premium_adapter
            case Backend.CLOUD_BASIC:
                provider = (preferences.api_provider or "openai").lower()
                adapter = self.basic_adapters.get(provider)
                if adapter is None:
                    raise AuthError(f"Unsupported API provider: {provider}")
                return adapter
            case Backend.LOCAL:
                return self.local_adapter
            case _:
                assert_never(backend)

    def has_premium_features(self, user_id: UUID) -> bool:
        config = self._configs.get(user_id)
        return config is not None and (
            config.subscription_tier is SubscriptionTier.PREMIUM
        )

    def is_local_available(self, user_id: UUID) -> bool:
        config = self._configs.get(user_id)
        return config is not None and config.local_model_ready

    def is_cloud_available(self, user_id: UUID) -> bool:
        config = self._configs.get(user_id)
        return config is not None and config.is_online

    def available_services(self, user_id: UUID) -> list[str]:
        """Return human-readable names of the reachable backends."""
        services: list[str] = []
        if self.is_cloud_available(user_id):
            if self.has_premium_features(user_id):
                services.append("Premium Cloud AI")
            services.append("Basic Cloud AI")
        if self.is_local_available(user_id):
            services.append("Local AI")
        return services

    def available_premium_features(self, user_id: UUID) -> list[str]:
        if self.has_premium_features(user_id):
            return list(PREMIUM_FEATURES)
        return list(FREE_FEATURES)

    def has_feature(self, user_id: UUID, feature: str) -> bool:
        """Return True if ``feature`` is usable on the user's tier."""
        if feature in PREMIUM_GATED_FEATURES:
            return self.has_premium_features(user_id)
        return True

    async def _run_candidates(
        self,
        config: RouterConfig,
        backends: list[Backend],
        attempt: Callable[[ProviderAdapter, str | None], Awaitable[_T]],
    ) -> tuple[_T, Backend, str, bool]:
        last_error: ProviderError | None = None
        for index, backend in enumerate(backends):
            adapter = self.adapter_for(backend, config.preferences)
            api_key = self._api_key(backend, config.preferences)
            used_fallback = index > 0
            if used_fallback:
                _logger.warning(
                    "Falling back to %s after %s failed: %s",
                    backend,
                    backends[index - 1],
                    last_error,
                )
            else:
                _logger.info("Routing request to %s (%s)", backend, adapter.model)
            try:
                result = await attempt(adapter, api_key)
            except ProviderError as exc:
                last_error = exc
                continue
            model = LOCAL_FALLBACK_MODEL if used_fallback else adapter.model
            return result, backend, model, used_fallback
        if last_error is None:
            raise NoServiceAvailableError("No generation backend was attempted")
        raise last_error

    @staticmethod
    def _api_key(backend: Backend, preferences: UserPreferences) -> str | None:
        if backend is Backend.LOCAL:
            return None
        if not preferences.api_key:
            raise AuthError(f"API key not configured for {backend}")
        return preferences.api_key


def _tier(value: str | None) -> SubscriptionTier:
    try:
        return SubscriptionTier((value or "").lower())
    except ValueError:
        return SubscriptionTier.FREE
