"""Provider adapter interface and response parsing."""

import logging
from typing import Protocol

from pydantic import ValidationError

from recipe_engine.domain.generation import GeneratedRecipe
from recipe_engine.errors import ParseError
from recipe_engine.services.json_extraction import extract_json_object

_logger = logging.getLogger(__name__)


class ProviderAdapter(Protocol):
    """Interface shared by every generation backend.

    ``complete`` performs exactly one network call and returns the raw model
    text. Adapters never retry; fallback belongs to the router.
    """

    name: str
    model: str

    async def complete(self, api_key: str | None, prompt: str) -> str:
        """Send a prompt and return the raw model text."""

    async def call(self, api_key: str | None, prompt: str) -> GeneratedRecipe:
        """Send a prompt and parse the reply into a recipe."""
        text = await self.complete(api_key, prompt)
        return parse_recipe_response(text)


def parse_recipe_response(text: str) -> GeneratedRecipe:
    """Extract and validate the recipe JSON embedded in ``text``."""
    payload = extract_json_object(text)
    return parse_recipe_payload(payload)


def parse_recipe_payload(payload: dict[str, object]) -> GeneratedRecipe:
    try:
        return GeneratedRecipe.model_validate(payload)
    except ValidationError as exc:
        _logger.warning("Model returned an invalid recipe: %s", exc.error_count())
        raise ParseError(f"Model returned an invalid recipe: {exc}") from exc
