"""Google Gemini client for basic recipe generation."""

from dataclasses import dataclass

import httpx

from recipe_engine.adapters.http_errors import raise_for_provider_status
from recipe_engine.errors import AuthError, NetworkError, ParseError
from recipe_engine.services.providers import ProviderAdapter

# Gemini reports a bad key as a 400 rather than 401 or 403.
_INVALID_KEY_REASON = "API_KEY_INVALID"


@dataclass
class GeminiRecipeClient(ProviderAdapter):
    """HTTPX-backed client for the generateContent endpoint."""

    model: str
    base_url: str
    http_client: httpx.AsyncClient
    max_tokens: int = 3000
    temperature: float = 0.7
    timeout: float = 60.0
    name: str = "gemini"

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        model: str,
        base_url: str,
        max_tokens: int,
        temperature: float,
        timeout: float,
    ) -> "GeminiRecipeClient":
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
        if not api_key:
            raise AuthError("Gemini API key not configured")
        try:
            response = await self.http_client.post(
                f"{self.base_url}/models/{self.model}:generateContent",
                params={"key": api_key},
                json={
                    "contents": [{"parts": [{"text": prompt}]}],
                    "generationConfig": {
                        "temperature": self.temperature,
                        "maxOutputTokens": self.max_tokens,
                    },
                },
                timeout=self.timeout,
            )
        except httpx.TransportError as exc:
            raise NetworkError(
                f"Gemini request failed: {exc}", provider=self.name
            ) from exc
        if response.status_code == 400 and _INVALID_KEY_REASON in response.text:
            raise AuthError("gemini rejected the API key (400)")
        raise_for_provider_status(response, self.name)
        try:
            data = response.json()
            return str(data["candidates"][0]["content"]["parts"][0]["text"])
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise ParseError("Gemini response had no candidate text") from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
