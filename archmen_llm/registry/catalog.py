"""
Provider Catalog

This module defines the static catalog of supported providers, the models
each one serves and how every model is priced. Prices are USD per 1,000
tokens and come in exactly one of three shapes:

- AsymmetricPricing: separate input and output rates (most hosted APIs)
- CombinedPricing: one rate applied to input + output tokens together
- FreePricing: local or free-tier models, cost is always zero

The catalog is built once at process start and never mutated. A price
change means shipping new catalog data, there is no runtime update path.
"""

from enum import Enum
from types import MappingProxyType
from typing import Annotated, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from archmen_llm.errors import UnknownModelError, UnknownProviderError


class ProviderId(str, Enum):
    """Supported inference providers."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    KIMI = "kimi"
    GROQ = "groq"
    PERPLEXITY = "perplexity"
    TOGETHER = "together"
    OPENROUTER = "openrouter"
    LOCAL = "local"


class AsymmetricPricing(BaseModel):
    """Separate rates for prompt and completion tokens."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["asymmetric"] = "asymmetric"
    input_cost_per_1k: float = Field(..., ge=0, description="USD per 1K input tokens")
    output_cost_per_1k: float = Field(..., ge=0, description="USD per 1K output tokens")


class CombinedPricing(BaseModel):
    """A single rate billed on input + output tokens."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["combined"] = "combined"
    combined_cost_per_1k: float = Field(..., ge=0, description="USD per 1K tokens")


class FreePricing(BaseModel):
    """No charge, regardless of usage."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["free"] = "free"
    free: Literal[True] = True


ModelPricing = Annotated[
    Union[AsymmetricPricing, CombinedPricing, FreePricing],
    Field(discriminator="kind"),
]


class EmbeddingPricing(BaseModel):
    """Embedding models are billed on total tokens only."""

    model_config = ConfigDict(frozen=True)

    cost_per_1k: float = Field(..., ge=0, description="USD per 1K tokens")


class ProviderCatalogEntry(BaseModel):
    """
    Catalog record for one provider.

    Attributes:
        provider: Provider tag
        display_name: Human-readable provider name
        models: Chat model name -> pricing
        embeddings: Embedding model name -> pricing (empty when unsupported)
        default_base_url: API endpoint used when no override is given
    """

    model_config = ConfigDict(frozen=True)

    provider: ProviderId
    display_name: str
    models: Mapping[str, ModelPricing]
    embeddings: Mapping[str, EmbeddingPricing] = Field(default_factory=dict)
    default_base_url: str | None = None

    @field_validator("models", "embeddings", mode="after")
    @classmethod
    def freeze_mapping(cls, v: Mapping) -> Mapping:
        return MappingProxyType(dict(v))

    @field_serializer("models", "embeddings")
    def serialize_mapping(self, v: Mapping) -> dict:
        return {name: pricing.model_dump() for name, pricing in v.items()}


def _asym(input_cost: float, output_cost: float) -> AsymmetricPricing:
    return AsymmetricPricing(input_cost_per_1k=input_cost, output_cost_per_1k=output_cost)


def _combined(cost: float) -> CombinedPricing:
    return CombinedPricing(combined_cost_per_1k=cost)


FREE = FreePricing()


def build_default_catalog() -> Mapping[ProviderId, ProviderCatalogEntry]:
    """
    Build the shipped provider catalog.

    Returns:
        Read-only mapping of provider -> catalog entry, in declaration order.
    """
    entries = [
        ProviderCatalogEntry(
            provider=ProviderId.OPENAI,
            display_name="OpenAI",
            models={
                "gpt-4o": _asym(0.005, 0.015),
                "gpt-4o-mini": _asym(0.00015, 0.0006),
                "gpt-4-turbo-preview": _asym(0.01, 0.03),
                "gpt-4": _asym(0.03, 0.06),
                "gpt-3.5-turbo": _asym(0.0015, 0.002),
            },
            embeddings={
                "text-embedding-3-small": EmbeddingPricing(cost_per_1k=0.00002),
                "text-embedding-3-large": EmbeddingPricing(cost_per_1k=0.00013),
                "text-embedding-ada-002": EmbeddingPricing(cost_per_1k=0.0001),
            },
            default_base_url=None,  # SDK default
        ),
        ProviderCatalogEntry(
            provider=ProviderId.ANTHROPIC,
            display_name="Anthropic",
            models={
                "claude-3-5-sonnet-20241022": _asym(0.003, 0.015),
                "claude-3-5-haiku-20241022": _asym(0.0008, 0.004),
                "claude-3-opus-20240229": _asym(0.015, 0.075),
                "claude-3-haiku-20240307": _asym(0.00025, 0.00125),
            },
            default_base_url=None,  # SDK default
        ),
        ProviderCatalogEntry(
            provider=ProviderId.KIMI,
            display_name="Kimi AI (Moonshot)",
            models={
                "moonshot-v1-8k": _combined(0.0012),
                "moonshot-v1-32k": _combined(0.0024),
                "moonshot-v1-128k": _combined(0.0060),
            },
            default_base_url="https://api.moonshot.cn/v1",
        ),
        ProviderCatalogEntry(
            provider=ProviderId.GROQ,
            display_name="Groq",
            models={
                "llama-3.1-70b-versatile": _asym(0.00059, 0.00079),
                "llama-3.1-8b-instant": _asym(0.00005, 0.00008),
                "mixtral-8x7b-32768": _asym(0.00024, 0.00024),
                "gemma2-9b-it": _asym(0.00020, 0.00020),
            },
            default_base_url=None,  # SDK default
        ),
        ProviderCatalogEntry(
            provider=ProviderId.PERPLEXITY,
            display_name="Perplexity",
            models={
                "llama-3.1-sonar-small-128k-online": _asym(0.0002, 0.0002),
                "llama-3.1-sonar-large-128k-online": _asym(0.001, 0.001),
                "llama-3.1-8b-instruct": _asym(0.0002, 0.0002),
                "llama-3.1-70b-instruct": _asym(0.001, 0.001),
            },
            default_base_url="https://api.perplexity.ai",
        ),
        ProviderCatalogEntry(
            provider=ProviderId.TOGETHER,
            display_name="Together AI",
            models={
                "meta-llama/Meta-Llama-3.1-8B-Instruct-Turbo": _combined(0.00018),
                "meta-llama/Meta-Llama-3.1-70B-Instruct-Turbo": _combined(0.00088),
                "meta-llama/Meta-Llama-3.1-405B-Instruct-Turbo": _combined(0.005),
                "mistralai/Mixtral-8x7B-Instruct-v0.1": _combined(0.0006),
            },
            default_base_url="https://api.together.xyz/v1",
        ),
        ProviderCatalogEntry(
            provider=ProviderId.OPENROUTER,
            display_name="OpenRouter",
            models={
                "openai/gpt-4o-mini": _asym(0.00015, 0.0006),
                "anthropic/claude-3.5-sonnet": _asym(0.003, 0.015),
                "meta-llama/llama-3.1-8b-instruct:free": FREE,
            },
            default_base_url="https://openrouter.ai/api/v1",
        ),
        ProviderCatalogEntry(
            provider=ProviderId.LOCAL,
            display_name="Local (Ollama)",
            models={
                "llama3.1:8b": FREE,
                "llama3.1:70b": FREE,
                "llama3.2:3b": FREE,
                "qwen2.5:7b": FREE,
                "mistral:7b": FREE,
                "codellama:7b": FREE,
            },
            default_base_url="http://localhost:11434",
        ),
    ]
    return MappingProxyType({entry.provider: entry for entry in entries})


class ProviderRegistry:
    """
    Read-only lookup over the provider catalog.

    The registry holds no mutable state and is safe to share between
    any number of concurrent readers.
    """

    def __init__(
        self, catalog: Mapping[ProviderId, ProviderCatalogEntry] | None = None
    ) -> None:
        if catalog is None:
            catalog = build_default_catalog()
        self._catalog: Mapping[ProviderId, ProviderCatalogEntry] = MappingProxyType(
            dict(catalog)
        )

    def resolve_provider(self, provider: str | ProviderId) -> ProviderId:
        """
        Turn a provider tag into a ProviderId.

        Raises:
            UnknownProviderError: If the tag is not in the catalog.
        """
        try:
            provider_id = ProviderId(provider)
        except ValueError:
            raise UnknownProviderError(str(provider)) from None
        if provider_id not in self._catalog:
            raise UnknownProviderError(provider_id.value)
        return provider_id

    def list_providers(self) -> list[ProviderId]:
        """Return every catalogued provider in declaration order."""
        return list(self._catalog.keys())

    def get_entry(self, provider: str | ProviderId) -> ProviderCatalogEntry:
        """Return the catalog entry for a provider."""
        return self._catalog[self.resolve_provider(provider)]

    def list_models(self, provider: str | ProviderId) -> list[str]:
        """
        Return chat model names for a provider.

        Raises:
            UnknownProviderError: If the provider is not catalogued.
        """
        return list(self.get_entry(provider).models.keys())

    def get_pricing(
        self, provider: str | ProviderId, model: str
    ) -> AsymmetricPricing | CombinedPricing | FreePricing:
        """
        Return the pricing shape of a chat model.

        Raises:
            UnknownProviderError: If the provider is not catalogued.
            UnknownModelError: If the model is not listed for the provider.
        """
        entry = self.get_entry(provider)
        pricing = entry.models.get(model)
        if pricing is None:
            raise UnknownModelError(entry.provider.value, model)
        return pricing

    def list_embedding_models(self, provider: str | ProviderId) -> list[str]:
        """Return embedding model names for a provider (may be empty)."""
        return list(self.get_entry(provider).embeddings.keys())

    def get_embedding_pricing(
        self, provider: str | ProviderId, model: str
    ) -> EmbeddingPricing:
        """
        Return the pricing of an embedding model.

        Raises:
            UnknownProviderError: If the provider is not catalogued.
            UnknownModelError: If the embedding model is not listed.
        """
        entry = self.get_entry(provider)
        pricing = entry.embeddings.get(model)
        if pricing is None:
            raise UnknownModelError(entry.provider.value, model, kind="embedding")
        return pricing
