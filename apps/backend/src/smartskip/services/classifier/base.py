"""Base interface for classifier providers."""

from typing import Any, Protocol


class IClassifierProvider(Protocol):
    """Protocol defining the contract for classifier providers.

    A provider knows its endpoint, payload shape and auth scheme. The
    classifier client builds prompts and validates results; providers only
    move a prompt to the model and reduce the reply to one completion string.
    """

    @property
    def name(self) -> str:
        """Provider name identifier."""
        ...

    @property
    def is_available(self) -> bool:
        """Whether this provider has a usable API key."""
        ...

    def available_models(self) -> dict[str, str]:
        """Map of model aliases to provider model identifiers."""
        ...

    def resolve_model(self, model: str | None) -> str:
        """Resolve an alias (or full identifier) to the model id to send."""
        ...

    def validate_key(self, api_key: str | None) -> bool:
        """Check that an API key has this provider's expected format."""
        ...

    def create_payload(self, system_prompt: str, user_message: str, model: str | None) -> dict[str, Any]:
        """Build the provider-specific request body."""
        ...

    async def send_request(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Send a request and return the decoded response body.

        Raises:
            ClassifierTransportError: On network or API errors.
            ClassifierTimeoutError: If the transport times out.
        """
        ...

    def parse_response(self, response: dict[str, Any]) -> str:
        """Extract the completion text from a response body.

        Raises:
            ClassifierParseError: If the response carries no text.
        """
        ...
