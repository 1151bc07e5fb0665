"""
Schemas module: Pydantic data models.

- completion.py: provider-agnostic messages, configs and results
- api.py: HTTP request/response bodies, error envelope, health
"""

from archmen_llm.schemas.api import (
    ChatCompletionRequest,
    CompareRequest,
    ComponentHealth,
    CostEstimateRequest,
    CostEstimateResponse,
    EmbeddingRequest,
    ErrorCodes,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    ModelInfo,
    ProviderModelsResponse,
    ProviderSummary,
    ProvidersResponse,
)
from archmen_llm.schemas.completion import (
    ChatMessage,
    ChatRole,
    ComparisonOutcome,
    ComparisonTarget,
    CompletionConfig,
    CompletionResult,
    EmbeddingConfig,
    EmbeddingResult,
    EmbeddingUsage,
    Usage,
)

__all__ = [
    # Core data model
    "ChatRole",
    "ChatMessage",
    "CompletionConfig",
    "Usage",
    "CompletionResult",
    "EmbeddingConfig",
    "EmbeddingUsage",
    "EmbeddingResult",
    "ComparisonTarget",
    "ComparisonOutcome",
    # Requests
    "ChatCompletionRequest",
    "CompareRequest",
    "EmbeddingRequest",
    "CostEstimateRequest",
    # Responses
    "CostEstimateResponse",
    "ProviderSummary",
    "ProvidersResponse",
    "ModelInfo",
    "ProviderModelsResponse",
    # Errors
    "ErrorCodes",
    "ErrorDetail",
    "ErrorResponse",
    # Health
    "ComponentHealth",
    "HealthResponse",
]
