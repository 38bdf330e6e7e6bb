"""Mapping of httpx outcomes onto engine errors."""

import httpx

from recipe_engine.errors import AuthError, ProviderError

_AUTH_STATUSES = frozenset({401, 403})


def raise_for_provider_status(response: httpx.Response, provider: str) -> None:
    """Raise AuthError or ProviderError for a non-success response."""
    if response.is_success:
        return
    detail = response.text[:200]
    if response.status_code in _AUTH_STATUSES:
        raise AuthError(f"{provider} rejected the API key ({response.status_code})")
    raise ProviderError(
        f"{provider} returned {response.status_code}: {detail}",
        provider=provider,
        status_code=response.status_code,
    )
