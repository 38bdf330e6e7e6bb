"""On-device model clients.

The local model is a llama.cpp server reachable over HTTP. When no server is
configured, a disabled model reports itself as never ready.
"""

import logging
from dataclasses import dataclass

import httpx

from recipe_engine.adapters.http_errors import raise_for_provider_status
from recipe_engine.errors import NetworkError, ParseError, ProviderError
from recipe_engine.services.providers import ProviderAdapter
from recipe_engine.services.router import LocalModel

_logger = logging.getLogger(__name__)


@dataclass
class HttpxLlamaServerModel(LocalModel):
    """Local model served by llama.cpp's HTTP server."""

    base_url: str
    http_client: httpx.AsyncClient
    max_tokens: int = 3000
    timeout: float = 60.0

    @classmethod
    def create(
        cls, base_url: str, max_tokens: int, timeout: float
    ) -> "HttpxLlamaServerModel":
        """Create a local model client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            max_tokens=max_tokens,
            timeout=timeout,
        )

    async def is_ready(self) -> bool:
        """Return True when the server reports a loaded model."""
        try:
            response = await self.http_client.get(f"{self.base_url}/health", timeout=5)
        except httpx.TransportError as exc:
            _logger.info("Local model unreachable: %s", exc)
            return False
        return response.is_success

    async def complete(self, prompt: str) -> str:
        try:
            response = await self.http_client.post(
                f"{self.base_url}/completion",
                json={"prompt": prompt, "n_predict": self.max_tokens},
                timeout=self.timeout,
            )
        except httpx.TransportError as exc:
            raise NetworkError(
                f"Local model request failed: {exc}", provider="local"
            ) from exc
        raise_for_provider_status(response, "local")
        try:
            return str(response.json()["content"])
        except (ValueError, KeyError, TypeError) as exc:
            raise ParseError("Local model response had no content") from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


class DisabledLocalModel(LocalModel):
    """Stand-in used when no local model is configured."""

    async def is_ready(self) -> bool:
        return False

    async def complete(self, prompt: str) -> str:
        raise ProviderError("No local model is configured", provider="local")


@dataclass
class LocalModelAdapter(ProviderAdapter):
    """Provider adapter over a local model. Needs no API key."""

    local_model: LocalModel
    model: str = "llama-3.2-1b"
    name: str = "local"

    async def complete(self, api_key: str | None, prompt: str) -> str:
        return await self.local_model.complete(prompt)
