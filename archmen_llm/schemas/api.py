"""
Pydantic Schemas for the HTTP API

Request and response bodies for the FastAPI surface, plus the error
envelope and health check models.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from archmen_llm.schemas.completion import (
    ChatMessage,
    ComparisonTarget,
    CompletionConfig,
    EmbeddingConfig,
)


# =============================================================================
# REQUEST MODELS
# =============================================================================


class ChatCompletionRequest(BaseModel):
    """
    Request body for POST /chat/completions.

    Example:
        {
            "messages": [
                {"role": "system", "content": "You are a Jungian analyst."},
                {"role": "user", "content": "Which archetype fits a caregiver?"}
            ],
            "config": {"provider": "openai", "model": "gpt-4o-mini"}
        }
    """

    messages: list[ChatMessage] = Field(..., description="Ordered conversation")
    config: CompletionConfig


class CompareRequest(BaseModel):
    """Request body for POST /chat/compare."""

    messages: list[ChatMessage]
    targets: list[ComparisonTarget] = Field(..., min_length=1)
    temperature: float = 0.7
    max_output_tokens: int = 1000


class EmbeddingRequest(BaseModel):
    """Request body for POST /embeddings."""

    text: str = Field(..., description="Text to embed")
    config: EmbeddingConfig


class CostEstimateRequest(BaseModel):
    """Request body for POST /cost/estimate."""

    provider: str
    model: str
    input_tokens: int = Field(..., ge=0)
    output_tokens: int = Field(..., ge=0)

    model_config = ConfigDict(protected_namespaces=())


# =============================================================================
# RESPONSE MODELS
# =============================================================================


class CostEstimateResponse(BaseModel):
    """Cost preview with its input/output split."""

    provider: str
    model: str
    pricing_kind: Literal["asymmetric", "combined", "free"]
    input_tokens: int
    output_tokens: int
    total_tokens: int
    input_cost_usd: float
    output_cost_usd: float
    total_cost_usd: float

    model_config = ConfigDict(protected_namespaces=())


class ProviderSummary(BaseModel):
    """A configured provider and the chat models it offers."""

    id: str
    name: str
    models: list[str]


class ProvidersResponse(BaseModel):
    """Response body for GET /providers."""

    providers: list[str] = Field(..., description="Configured provider tags")
    providers_with_models: list[ProviderSummary]


class ModelInfo(BaseModel):
    """Catalog entry for one model."""

    name: str
    pricing: dict


class ProviderModelsResponse(BaseModel):
    """Response body for GET /providers/{provider}/models."""

    provider: str
    name: str
    configured: bool
    models: list[ModelInfo]
    embedding_models: list[ModelInfo] = Field(default_factory=list)


# =============================================================================
# ERROR MODELS
# =============================================================================


class ErrorCodes:
    """
    Standard error codes for API responses.

    These codes enable programmatic error handling by clients
    without parsing human-readable messages.
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNKNOWN_PROVIDER = "UNKNOWN_PROVIDER"
    UNKNOWN_MODEL = "UNKNOWN_MODEL"
    INVALID_MESSAGES = "INVALID_MESSAGES"
    PROVIDER_NOT_CONFIGURED = "PROVIDER_NOT_CONFIGURED"
    PROVIDER_UNAVAILABLE = "PROVIDER_UNAVAILABLE"
    EMBEDDING_NOT_SUPPORTED = "EMBEDDING_NOT_SUPPORTED"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorDetail(BaseModel):
    """Machine-readable code plus human-readable message."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    provider: str | None = Field(default=None, description="Provider involved, if any")
    field: str | None = Field(
        default=None, description="Field that caused the error (for validation errors)"
    )


class ErrorResponse(BaseModel):
    """
    Standard error response format for all API errors.

    Example:
        {
            "error": {
                "code": "PROVIDER_NOT_CONFIGURED",
                "message": "Provider 'anthropic' is not configured (no API key)",
                "provider": "anthropic"
            }
        }
    """

    error: ErrorDetail


# =============================================================================
# HEALTH MODELS
# =============================================================================


class ComponentHealth(BaseModel):
    """Health of one component."""

    name: str
    status: Literal["healthy", "degraded", "unhealthy"]
    message: str | None = None


class HealthResponse(BaseModel):
    """Response body for GET /health."""

    status: Literal["healthy", "degraded", "unhealthy"]
    service: str = "archmen-llm"
    version: str
    components: list[ComponentHealth] = Field(default_factory=list)
    uptime_seconds: float | None = Field(default=None, ge=0.0)
