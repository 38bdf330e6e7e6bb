"""Recipe generation and versioning endpoints with token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field

from recipe_engine.domain.routing import RecipeRequest, SubscriptionTier

if TYPE_CHECKING:
    from recipe_engine.containers import AppContainer

router = APIRouter(prefix="/users/{user_id}", tags=["recipes"])


class GenerateRecipeBody(BaseModel):
    """Chat prompt or templated meal request."""

    prompt: str | None = None
    meal_type: str = "dinner"
    session_id: UUID | None = None


class CreateVariationBody(BaseModel):
    modification_request: str = Field(min_length=1)
    session_id: UUID | None = None


class RollbackBody(BaseModel):
    target_version_id: UUID | None = None
    reason: str | None = None


class SaveVariationBody(BaseModel):
    new_name: str | None = None


class SubscriptionBody(BaseModel):
    tier: SubscriptionTier


def _get_api_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.api_token


async def require_api_token(
    x_api_token: str | None = Header(default=None),
    api_token: str = Depends(_get_api_token),
) -> None:
    """Ensure requests include a valid API token."""
    if not x_api_token or x_api_token != api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.post("/recipes/generate", dependencies=[Depends(require_api_token)])
async def generate_recipe(
    user_id: UUID, body: GenerateRecipeBody, request: Request
) -> dict[str, object]:
    """Generate a recipe and store it."""
    service = _container(request).recipe_service
    if body.prompt:
        recipe = await service.generate_from_prompt(
            user_id, body.prompt, session_id=body.session_id
        )
    else:
        recipe = await service.generate_recipe(
            user_id,
            RecipeRequest(meal_type=body.meal_type, session_id=body.session_id),
        )
    return {"recipe": jsonable_encoder(recipe)}


@router.get("/recipes/{recipe_id}", dependencies=[Depends(require_api_token)])
async def get_recipe(
    user_id: UUID, recipe_id: UUID, request: Request
) -> dict[str, object]:
    recipe = _container(request).recipe_service.get_recipe(user_id, recipe_id)
    return {"recipe": jsonable_encoder(recipe)}


@router.post(
    "/recipes/{recipe_id}/variations", dependencies=[Depends(require_api_token)]
)
async def create_variation(
    user_id: UUID, recipe_id: UUID, body: CreateVariationBody, request: Request
) -> dict[str, object]:
    """Modify a recipe with AI and store the variation."""
    result = await _container(request).variation_engine.create_variation(
        user_id, recipe_id, body.modification_request, session_id=body.session_id
    )
    return jsonable_encoder(result)


@router.get(
    "/recipes/{recipe_id}/variations", dependencies=[Depends(require_api_token)]
)
async def list_variations(
    user_id: UUID, recipe_id: UUID, request: Request
) -> dict[str, object]:
    variations = _container(request).variation_engine.list_variations(
        user_id, recipe_id
    )
    return {"variations": jsonable_encoder(variations)}


@router.get("/recipes/{recipe_id}/timeline", dependencies=[Depends(require_api_token)])
async def recipe_timeline(
    user_id: UUID, recipe_id: UUID, request: Request
) -> dict[str, object]:
    """Return the recipe history timeline."""
    timeline = _container(request).variation_engine.get_recipe_history_timeline(
        user_id, recipe_id
    )
    return jsonable_encoder(timeline)


@router.get(
    "/recipes/{recipe_id}/comparison", dependencies=[Depends(require_api_token)]
)
async def compare_versions(
    user_id: UUID, recipe_id: UUID, request: Request
) -> dict[str, object]:
    comparison = _container(request).variation_engine.compare_recipe_versions(
        user_id, recipe_id
    )
    return jsonable_encoder(comparison)


@router.get(
    "/recipes/{recipe_id}/comparison/detailed",
    dependencies=[Depends(require_api_token)],
)
async def detailed_comparison(
    user_id: UUID,
    recipe_id: UUID,
    request: Request,
    variation_id: UUID | None = None,
) -> dict[str, object]:
    """Return a detailed diff with a recommendation."""
    comparison = _container(request).variation_engine.get_detailed_recipe_comparison(
        user_id, recipe_id, variation_id
    )
    return jsonable_encoder(comparison)


@router.post("/recipes/{recipe_id}/rollback", dependencies=[Depends(require_api_token)])
async def rollback(
    user_id: UUID, recipe_id: UUID, body: RollbackBody, request: Request
) -> dict[str, object]:
    """Restore an earlier version as a new recipe."""
    result = _container(request).variation_engine.rollback_to_version(
        user_id, recipe_id, body.target_version_id, body.reason
    )
    return jsonable_encoder(result)


@router.delete(
    "/variations/{variation_id}", dependencies=[Depends(require_api_token)]
)
async def delete_variation(
    user_id: UUID, variation_id: UUID, request: Request
) -> dict[str, str]:
    _container(request).variation_engine.delete_variation(user_id, variation_id)
    return {"status": "deleted"}


@router.post(
    "/variations/{variation_id}/save", dependencies=[Depends(require_api_token)]
)
async def save_variation(
    user_id: UUID,
    variation_id: UUID,
    request: Request,
    body: SaveVariationBody | None = None,
) -> dict[str, object]:
    """Save a variation as a standalone recipe."""
    recipe = _container(request).variation_engine.save_variation_as_new_recipe(
        user_id, variation_id, body.new_name if body else None
    )
    return {"recipe": jsonable_encoder(recipe)}


@router.get(
    "/sessions/{session_id}/modifications", dependencies=[Depends(require_api_token)]
)
async def session_modifications(
    user_id: UUID, session_id: UUID, request: Request
) -> dict[str, object]:
    history = _container(request).variation_engine.get_session_modification_history(
        user_id, session_id
    )
    return jsonable_encoder(history)


@router.get("/ai/status", dependencies=[Depends(require_api_token)])
async def ai_status(user_id: UUID, request: Request) -> dict[str, object]:
    """Refresh routing state and report which AI services are usable."""
    ai_router = _container(request).router
    config = await ai_router.refresh(user_id)
    return {
        "subscription_tier": config.subscription_tier,
        "is_online": config.is_online,
        "local_model_ready": config.local_model_ready,
        "available_services": ai_router.available_services(user_id),
        "features": ai_router.available_premium_features(user_id),
    }


@router.put("/subscription", dependencies=[Depends(require_api_token)])
async def update_subscription(
    user_id: UUID, body: SubscriptionBody, request: Request
) -> dict[str, object]:
    ai_router = _container(request).router
    config = await ai_router.set_subscription_tier(user_id, body.tier)
    return {
        "subscription_tier": config.subscription_tier,
        "available_services": ai_router.available_services(user_id),
    }
