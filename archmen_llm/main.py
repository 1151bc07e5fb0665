"""
ArchMen LLM Gateway: FastAPI Application Entry Point

This module exposes the completion dispatcher over HTTP:
- /health: Health check endpoint
- /providers: Configured providers and their models
- /providers/{provider}/models: Catalog and pricing for one provider
- /chat/completions: Single chat completion
- /chat/compare: Same conversation against several provider/model pairs
- /embeddings: Text embedding
- /cost/estimate: Cost preview without calling any provider

The lifespan handler loads configuration, configures logging and builds
the dispatcher once; routes receive it through dependency injection.
"""

from contextlib import asynccontextmanager
import logging
import time

import anthropic
import groq
import openai
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from archmen_llm import __version__
from archmen_llm.config import configure_logging, get_settings
from archmen_llm.dispatcher import CompletionDispatcher, build_dispatcher
from archmen_llm.errors import (
    EmbeddingNotSupportedError,
    InvalidMessagesError,
    LLMServiceError,
    ProviderNotConfiguredError,
    ProviderUnavailableError,
    UnknownModelError,
    UnknownProviderError,
)
from archmen_llm.schemas import (
    ChatCompletionRequest,
    CompareRequest,
    ComparisonOutcome,
    ComponentHealth,
    CompletionResult,
    CostEstimateRequest,
    CostEstimateResponse,
    EmbeddingRequest,
    EmbeddingResult,
    ErrorCodes,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    ModelInfo,
    ProviderModelsResponse,
    ProviderSummary,
    ProvidersResponse,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    UnknownProviderError: 404,
    UnknownModelError: 404,
    InvalidMessagesError: 422,
    EmbeddingNotSupportedError: 400,
    ProviderNotConfiguredError: 503,
    ProviderUnavailableError: 502,
}

SDK_STATUS_ERRORS = (openai.APIStatusError, anthropic.APIStatusError, groq.APIStatusError)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler for startup/shutdown events.

    On startup:
    - Loads configuration from environment
    - Configures logging
    - Builds the dispatcher and one adapter per provider

    On shutdown:
    - Closes every provider client
    """
    settings = get_settings()
    configure_logging(settings)

    logger.info("ArchMen LLM gateway starting up...")
    logger.info(f"Local endpoint: {settings.local_base_url}")
    logger.info(f"Request timeout: {settings.request_timeout_seconds}s")

    dispatcher = build_dispatcher(settings)
    app.state.dispatcher = dispatcher
    app.state.start_time = time.time()

    configured = [p.value for p in dispatcher.list_configured_providers()]
    logger.info(f"Configured providers: {', '.join(configured)}")

    yield  # Application runs here

    logger.info("ArchMen LLM gateway shutting down...")
    await dispatcher.aclose()


app = FastAPI(
    title="ArchMen LLM Gateway",
    description="Multi-provider chat completion dispatch and cost accounting",
    version=__version__,
    lifespan=lifespan,
)


def get_dispatcher(request: Request) -> CompletionDispatcher:
    """Dependency returning the dispatcher built at startup."""
    return request.app.state.dispatcher


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "ArchMen LLM Gateway",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
        "providers": "/providers",
    }


@app.get("/health", response_model=HealthResponse)
async def health_check(
    request: Request, dispatcher: CompletionDispatcher = Depends(get_dispatcher)
):
    """
    Health check endpoint.

    The registry must be loaded; the service is degraded when only the
    local provider is available.
    """
    components = []
    overall_status = "healthy"

    providers = dispatcher.registry.list_providers()
    components.append(
        ComponentHealth(
            name="registry",
            status="healthy",
            message=f"{len(providers)} providers catalogued",
        )
    )

    configured = dispatcher.list_configured_providers()
    hosted = [p for p in configured if p.value != "local"]
    if not hosted:
        overall_status = "degraded"
    components.append(
        ComponentHealth(
            name="providers",
            status="healthy" if hosted else "degraded",
            message=f"Configured: {', '.join(p.value for p in configured)}",
        )
    )

    start_time = getattr(request.app.state, "start_time", 0.0)
    uptime = time.time() - start_time if start_time > 0 else 0.0

    return HealthResponse(
        status=overall_status,
        version=__version__,
        components=components,
        uptime_seconds=uptime,
    )


@app.get("/providers", response_model=ProvidersResponse)
async def list_providers(dispatcher: CompletionDispatcher = Depends(get_dispatcher)):
    """List configured providers with their chat models."""
    configured = dispatcher.list_configured_providers()
    return ProvidersResponse(
        providers=[p.value for p in configured],
        providers_with_models=[
            ProviderSummary(
                id=p.value,
                name=dispatcher.registry.get_entry(p).display_name,
                models=dispatcher.list_models(p),
            )
            for p in configured
        ],
    )


@app.get("/providers/{provider}/models", response_model=ProviderModelsResponse)
async def list_provider_models(
    provider: str, dispatcher: CompletionDispatcher = Depends(get_dispatcher)
):
    """Catalog entry for one provider, including pricing."""
    entry = dispatcher.registry.get_entry(provider)
    return ProviderModelsResponse(
        provider=entry.provider.value,
        name=entry.display_name,
        configured=entry.provider in dispatcher.list_configured_providers(),
        models=[
            ModelInfo(name=name, pricing=pricing.model_dump())
            for name, pricing in entry.models.items()
        ],
        embedding_models=[
            ModelInfo(name=name, pricing=pricing.model_dump())
            for name, pricing in entry.embeddings.items()
        ],
    )


@app.post("/chat/completions", response_model=CompletionResult)
async def chat_completion(
    body: ChatCompletionRequest,
    dispatcher: CompletionDispatcher = Depends(get_dispatcher),
):
    """Run one chat completion."""
    return await dispatcher.generate_chat_completion(body.messages, body.config)


@app.post("/chat/compare", response_model=list[ComparisonOutcome])
async def compare_completions(
    body: CompareRequest,
    dispatcher: CompletionDispatcher = Depends(get_dispatcher),
):
    """Run one conversation against several provider/model pairs."""
    return await dispatcher.compare_completions(
        body.messages,
        body.targets,
        temperature=body.temperature,
        max_output_tokens=body.max_output_tokens,
    )


@app.post("/embeddings", response_model=EmbeddingResult)
async def create_embedding(
    body: EmbeddingRequest,
    dispatcher: CompletionDispatcher = Depends(get_dispatcher),
):
    """Embed text."""
    return await dispatcher.generate_embedding(body.text, body.config)


@app.post("/cost/estimate", response_model=CostEstimateResponse)
async def estimate_cost(
    body: CostEstimateRequest,
    dispatcher: CompletionDispatcher = Depends(get_dispatcher),
):
    """Cost preview; never calls a provider."""
    breakdown = dispatcher.calculator.breakdown(
        body.provider, body.model, body.input_tokens, body.output_tokens
    )
    return CostEstimateResponse(
        provider=breakdown.provider,
        model=breakdown.model,
        pricing_kind=breakdown.pricing_kind,
        input_tokens=breakdown.input_tokens,
        output_tokens=breakdown.output_tokens,
        total_tokens=breakdown.total_tokens,
        input_cost_usd=breakdown.input_cost_usd,
        output_cost_usd=breakdown.output_cost_usd,
        total_cost_usd=breakdown.total_cost_usd,
    )


def _error_response(status_code: int, detail: ErrorDetail) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=detail).model_dump(exclude_none=True),
    )


@app.exception_handler(LLMServiceError)
async def service_error_handler(request: Request, exc: LLMServiceError) -> JSONResponse:
    """Translate gateway errors into the standard error envelope."""
    status_code = ERROR_STATUS.get(type(exc), 500)
    return _error_response(
        status_code,
        ErrorDetail(code=exc.code, message=exc.message, provider=exc.provider),
    )


@app.exception_handler(openai.APIError)
@app.exception_handler(anthropic.APIError)
@app.exception_handler(groq.APIError)
async def provider_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Report an error raised by a provider SDK.

    Status errors keep the provider's HTTP status; connection and timeout
    errors become 502.
    """
    status_code = exc.status_code if isinstance(exc, SDK_STATUS_ERRORS) else 502
    logger.warning(f"Provider error ({type(exc).__name__}): {exc}")
    return _error_response(
        status_code,
        ErrorDetail(code=ErrorCodes.PROVIDER_ERROR, message=str(exc)),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Returns the first validation error's details in the standard envelope.
    """
    errors = exc.errors()
    first_error = errors[0] if errors else {}

    return _error_response(
        422,
        ErrorDetail(
            code=ErrorCodes.VALIDATION_ERROR,
            message=first_error.get("msg", "Validation failed"),
            field=".".join(str(loc) for loc in first_error.get("loc", [])),
        ),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions.

    Logs the full exception and returns a generic error response to avoid
    leaking implementation details.
    """
    logger.exception("Unhandled exception")
    return _error_response(
        500,
        ErrorDetail(code=ErrorCodes.INTERNAL_ERROR, message="An unexpected error occurred"),
    )
