"""Connectivity probe used by the generation router."""

import logging
from dataclasses import dataclass

import httpx

from recipe_engine.services.router import ConnectivityProbe

_logger = logging.getLogger(__name__)


@dataclass
class HttpxConnectivityProbe(ConnectivityProbe):
    """Treats any HTTP answer from a well-known URL as being online."""

    check_url: str
    http_client: httpx.AsyncClient
    timeout: float = 5.0

    @classmethod
    def create(cls, check_url: str) -> "HttpxConnectivityProbe":
        """Create a probe with a managed httpx session."""
        return cls(check_url=check_url, http_client=httpx.AsyncClient())

    async def is_online(self) -> bool:
        try:
            await self.http_client.head(self.check_url, timeout=self.timeout)
        except httpx.TransportError as exc:
            _logger.info("Connectivity check failed: %s", exc)
            return False
        return True

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
