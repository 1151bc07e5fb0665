"""
Pydantic Schemas for Completions and Embeddings

This module defines the provider-agnostic data model shared by the
adapters, the dispatcher and the HTTP layer:
- ChatMessage / ChatRole: one conversation turn
- CompletionConfig: target provider/model plus generation parameters
- Usage: token accounting with total always equal to input + output
- CompletionResult: normalized chat completion
- EmbeddingConfig / EmbeddingUsage / EmbeddingResult: embedding calls
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, SecretStr, computed_field


class ChatRole(str, Enum):
    """Author of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ChatMessage(BaseModel):
    """
    A single conversation turn.

    Messages carry no identity or timestamp; their position in the
    list is the conversation order and is preserved end to end.
    """

    model_config = ConfigDict(frozen=True)

    role: ChatRole = Field(..., description="Author of the turn")
    content: str = Field(..., description="Text of the turn")


class CompletionConfig(BaseModel):
    """
    Target and generation parameters for one chat completion.

    temperature and max_output_tokens are forwarded to the backend
    verbatim; no local range check is applied.
    """

    provider: str = Field(..., description="Provider tag, e.g. 'openai'")
    model: str = Field(..., description="Model name listed under the provider")
    temperature: float = Field(default=0.7, description="Sampling temperature")
    max_output_tokens: int = Field(default=1000, description="Completion token cap")
    api_key_override: SecretStr | None = Field(
        default=None,
        description="Use this key for the call instead of the configured one",
    )
    base_url_override: str | None = Field(
        default=None,
        description="Send the call to this endpoint instead of the default",
    )

    model_config = ConfigDict(
        protected_namespaces=(),
        json_schema_extra={
            "examples": [
                {
                    "provider": "openai",
                    "model": "gpt-4o-mini",
                    "temperature": 0.7,
                    "max_output_tokens": 500,
                }
            ]
        },
    )


class Usage(BaseModel):
    """Token usage reported by the backend."""

    input_tokens: int = Field(default=0, ge=0, description="Prompt tokens")
    output_tokens: int = Field(default=0, ge=0, description="Completion tokens")

    @computed_field
    @property
    def total_tokens(self) -> int:
        """Total tokens consumed (input + output)."""
        return self.input_tokens + self.output_tokens


class CompletionResult(BaseModel):
    """
    Normalized chat completion from any provider.

    usage and cost_estimate_usd are None when the backend did not report
    token counts. A free model always reports a cost of exactly 0.0.
    """

    content: str = Field(..., description="Generated text")
    usage: Usage | None = Field(default=None, description="Token usage, if reported")
    cost_estimate_usd: float | None = Field(
        default=None, ge=0.0, description="Estimated cost in USD"
    )
    provider: str = Field(..., description="Provider that produced the result")
    model: str = Field(..., description="Model that produced the result")
    latency_ms: float | None = Field(
        default=None, ge=0.0, description="Round-trip time in milliseconds"
    )

    model_config = ConfigDict(protected_namespaces=())


class EmbeddingConfig(BaseModel):
    """Target of an embedding call."""

    provider: str = Field(..., description="Provider tag")
    model: str = Field(..., description="Embedding model name")

    model_config = ConfigDict(protected_namespaces=())


class EmbeddingUsage(BaseModel):
    """Embedding calls are billed on total tokens only."""

    tokens: int = Field(default=0, ge=0)


class EmbeddingResult(BaseModel):
    """Embedding vector with accounting data."""

    vector: list[float] = Field(..., description="Embedding vector")
    usage: EmbeddingUsage | None = None
    cost_estimate_usd: float | None = Field(default=None, ge=0.0)
    provider: str
    model: str

    model_config = ConfigDict(protected_namespaces=())


class ComparisonTarget(BaseModel):
    """One provider/model pair in a side-by-side comparison."""

    provider: str
    model: str

    model_config = ConfigDict(protected_namespaces=())


class ComparisonOutcome(BaseModel):
    """
    Result of one comparison target.

    Exactly one of result or error is set.
    """

    provider: str
    model: str
    result: CompletionResult | None = None
    error_code: str | None = None
    error: str | None = None

    model_config = ConfigDict(protected_namespaces=())

    @property
    def success(self) -> bool:
        """Check if the target completed without errors."""
        return self.error is None
