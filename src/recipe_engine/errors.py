"""Typed errors raised by the recipe engine."""


class RecipeEngineError(Exception):
    """Base error carrying a message that can be shown to the user."""

    default_user_message = "Something went wrong while working on your recipe."

    def __init__(self, message: str, *, user_message: str | None = None) -> None:
        super().__init__(message)
        self.user_message = user_message or self.default_user_message


class AuthError(RecipeEngineError):
    """Missing or rejected API key. Never retried."""

    default_user_message = (
        "Your AI provider API key is missing or invalid. "
        "Update it in settings and try again."
    )


class ProviderError(RecipeEngineError):
    """A generation backend answered with a non-success status."""

    default_user_message = "The AI service could not complete the request."

    def __init__(
        self,
        message: str,
        *,
        provider: str | None = None,
        status_code: int | None = None,
        user_message: str | None = None,
    ) -> None:
        super().__init__(message, user_message=user_message)
        self.provider = provider
        self.status_code = status_code


class NetworkError(ProviderError):
    """A generation backend could not be reached."""

    default_user_message = (
        "Could not reach the AI service. Check your internet connection."
    )


class ParseError(RecipeEngineError):
    """A model response did not contain the expected JSON."""

    default_user_message = (
        "The AI returned a recipe we could not read. Try rephrasing your request."
    )


class NotFoundError(RecipeEngineError):
    """A recipe or variation is missing or owned by someone else."""

    default_user_message = "That recipe could not be found."


class NoServiceAvailableError(RecipeEngineError):
    """No generation backend is reachable."""

    default_user_message = (
        "No AI service available. Check your internet connection "
        "or download an offline model."
    )
