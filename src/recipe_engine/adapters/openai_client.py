"""OpenAI chat completions client for basic recipe generation."""

from collections.abc import Callable
from dataclasses import dataclass, field

import openai
from openai import AsyncOpenAI

from recipe_engine.errors import AuthError, NetworkError, ParseError, ProviderError
from recipe_engine.services.providers import ProviderAdapter


def _default_factory(api_key: str, timeout: float) -> AsyncOpenAI:
    # Retries belong to the router, not the SDK.
    return AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)


@dataclass
class OpenAIRecipeClient(ProviderAdapter):
    """Recipe client backed by the OpenAI SDK.

    API keys belong to users, so one SDK client is kept per key.
    """

    model: str
    max_tokens: int = 3000
    temperature: float = 0.7
    timeout: float = 60.0
    client_factory: Callable[[str, float], AsyncOpenAI] = _default_factory
    name: str = "openai"
    _clients: dict[str, AsyncOpenAI] = field(default_factory=dict, init=False)

    @classmethod
    def create(
        cls, model: str, max_tokens: int, temperature: float, timeout: float
    ) -> "OpenAIRecipeClient":
        """Create an OpenAI recipe client."""
        return cls(
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
            timeout=timeout,
        )

    async def complete(self, api_key: str | None, prompt: str) -> str:
        """Run one chat completion and return the message content."""
        if not api_key:
            raise AuthError("OpenAI API key not configured")
        client = self._client_for(api_key)
        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except (openai.AuthenticationError, openai.PermissionDeniedError) as exc:
            raise AuthError(f"OpenAI rejected the API key: {exc}") from exc
        except openai.APIStatusError as exc:
            raise ProviderError(
                f"OpenAI returned {exc.status_code}: {exc.message}",
                provider=self.name,
                status_code=exc.status_code,
            ) from exc
        except openai.APIConnectionError as exc:
            raise NetworkError(
                f"OpenAI request failed: {exc}", provider=self.name
            ) from exc
        if not response.choices or not response.choices[0].message.content:
            raise ParseError("OpenAI returned an empty response")
        return response.choices[0].message.content

    async def close(self) -> None:
        """Close every SDK client created so far."""
        for client in self._clients.values():
            await client.close()
        self._clients.clear()

    def _client_for(self, api_key: str) -> AsyncOpenAI:
        client = self._clients.get(api_key)
        if client is None:
            client = self.client_factory(api_key, self.timeout)
            self._clients[api_key] = client
        return client
