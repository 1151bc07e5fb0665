"""
Error taxonomy for the LLM gateway.

Every failure this package raises on its own is a subclass of
LLMServiceError with a machine-readable ``code``. Errors reported by a
provider SDK (rate limits, auth failures, bad requests) are NOT wrapped:
they reach the caller as the SDK raised them.
"""


class LLMServiceError(Exception):
    """Base class for gateway errors."""

    code = "LLM_SERVICE_ERROR"

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        model: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.model = model


class UnknownProviderError(LLMServiceError):
    """Provider tag is not in the registry."""

    code = "UNKNOWN_PROVIDER"

    def __init__(self, provider: str) -> None:
        super().__init__(f"Unknown provider: {provider}", provider=provider)


class UnknownModelError(LLMServiceError):
    """Model is not listed under an otherwise known provider."""

    code = "UNKNOWN_MODEL"

    def __init__(self, provider: str, model: str, kind: str = "chat") -> None:
        super().__init__(
            f"Unknown {kind} model '{model}' for provider '{provider}'",
            provider=provider,
            model=model,
        )


class ProviderNotConfiguredError(LLMServiceError):
    """No credential was available for the provider at startup."""

    code = "PROVIDER_NOT_CONFIGURED"

    def __init__(self, provider: str) -> None:
        super().__init__(
            f"Provider '{provider}' is not configured (no API key)",
            provider=provider,
        )


class ProviderUnavailableError(LLMServiceError):
    """The backend could not be reached or answered with a failure status."""

    code = "PROVIDER_UNAVAILABLE"


class EmbeddingNotSupportedError(LLMServiceError):
    """Embeddings were requested from a provider that cannot produce them."""

    code = "EMBEDDING_NOT_SUPPORTED"

    def __init__(self, provider: str) -> None:
        super().__init__(
            f"Embedding not supported for provider: {provider}",
            provider=provider,
        )


class InvalidMessagesError(LLMServiceError):
    """The message list cannot be sent (e.g. it holds only system prompts)."""

    code = "INVALID_MESSAGES"
