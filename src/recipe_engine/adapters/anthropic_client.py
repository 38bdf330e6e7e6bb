"""Anthropic Messages API client for premium recipe generation."""

from dataclasses import dataclass

import httpx

from recipe_engine.adapters.http_errors import raise_for_provider_status
from recipe_engine.errors import AuthError, NetworkError, ParseError
from recipe_engine.services.providers import ProviderAdapter

ANTHROPIC_VERSION = "2023-06-01"


@dataclass
class AnthropicRecipeClient(ProviderAdapter):
    """HTTPX-backed client for Claude models."""

    model: str
    base_url: str
    http_client: httpx.AsyncClient
    max_tokens: int = 3000
    temperature: float = 0.7
    timeout: float = 60.0
    name: str = "claude"

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        model: str,
        base_url: str,
        max_tokens: int,
        temperature: float,
        timeout: float,
    ) -> "AnthropicRecipeClient":
        """Create a client with a managed httpx session."""
        return cls(
            model=model,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            max_tokens=max_tokens,
            temperature=temperature,
            timeout=timeout,
        )

    async def complete(self, api_key: str | None, prompt: str) -> str:
        """Send one message and return the first text block."""
        if not api_key:
            raise AuthError("Claude API key not configured")
        try:
            response = await self.http_client.post(
                f"{self.base_url}/v1/messages",
                headers={
                    "x-api-key": api_key,
                    "anthropic-version": ANTHROPIC_VERSION,
                    "content-type": "application/json",
                },
                json={
                    "model": self.model,
                    "max_tokens": self.max_tokens,
                    "messages": [{"role": "user", "content": prompt}],
                    "temperature": self.temperature,
                },
                timeout=self.timeout,
            )
        except httpx.TransportError as exc:
            raise NetworkError(
                f"Claude request failed: {exc}", provider=self.name
            ) from exc
        raise_for_provider_status(response, self.name)
        try:
            return str(response.json()["content"][0]["text"])
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise ParseError("Claude response had no text content") from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
