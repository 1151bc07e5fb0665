"""
Cost Calculator for Model Inference

Prices chat completions and embeddings from the provider catalog.
All rates are USD per 1,000 tokens:

- asymmetric: (input * input_rate + output * output_rate) / 1000
- combined:   (input + output) * combined_rate / 1000
- free:       0

Every method here is pure: no network or file I/O, so cost previews can be
shown before a real request is issued.
"""

from dataclasses import dataclass

from archmen_llm.registry.catalog import (
    AsymmetricPricing,
    CombinedPricing,
    EmbeddingPricing,
    FreePricing,
    ProviderId,
    ProviderRegistry,
)
from archmen_llm.schemas.completion import EmbeddingUsage, Usage


def _check_tokens(input_tokens: int, output_tokens: int) -> None:
    if input_tokens < 0 or output_tokens < 0:
        raise ValueError("Token counts must be non-negative")


def compute_cost(
    pricing: AsymmetricPricing | CombinedPricing | FreePricing,
    input_tokens: int,
    output_tokens: int,
) -> float:
    """
    Apply a pricing shape to token counts.

    Args:
        pricing: Pricing shape from the registry
        input_tokens: Prompt tokens
        output_tokens: Completion tokens

    Returns:
        Cost in USD
    """
    _check_tokens(input_tokens, output_tokens)

    match pricing:
        case AsymmetricPricing():
            return (
                input_tokens * pricing.input_cost_per_1k
                + output_tokens * pricing.output_cost_per_1k
            ) / 1000
        case CombinedPricing():
            return ((input_tokens + output_tokens) * pricing.combined_cost_per_1k) / 1000
        case FreePricing():
            return 0.0
        case _:
            raise TypeError(f"Unsupported pricing shape: {type(pricing).__name__}")


@dataclass
class CostBreakdown:
    """
    Cost preview for a hypothetical request.

    For combined and free pricing the input/output split is proportional
    to the token counts, so input_cost_usd + output_cost_usd always equals
    total_cost_usd.
    """

    provider: str
    model: str
    pricing_kind: str
    input_tokens: int
    output_tokens: int
    input_cost_usd: float
    output_cost_usd: float
    total_cost_usd: float

    @property
    def total_tokens(self) -> int:
        """Total tokens priced (input + output)."""
        return self.input_tokens + self.output_tokens


class CostCalculator:
    """
    Calculate inference costs from registry pricing.

    The calculator only performs read operations on the registry and is
    safe for concurrent use.

    Example:
        calculator = CostCalculator(ProviderRegistry())
        cost = calculator.estimate("openai", "gpt-4", 500, 500)  # 0.045
    """

    def __init__(self, registry: ProviderRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    def estimate(
        self,
        provider: str | ProviderId,
        model: str,
        input_tokens: int,
        output_tokens: int,
    ) -> float:
        """
        Estimate the cost of a chat completion without calling the backend.

        Raises:
            UnknownProviderError: If the provider is not catalogued.
            UnknownModelError: If the model is not listed for the provider.
            ValueError: If a token count is negative.
        """
        pricing = self._registry.get_pricing(provider, model)
        return compute_cost(pricing, input_tokens, output_tokens)

    def breakdown(
        self,
        provider: str | ProviderId,
        model: str,
        input_tokens: int,
        output_tokens: int,
    ) -> CostBreakdown:
        """Estimate a cost and split it into input and output parts."""
        provider_id = self._registry.resolve_provider(provider)
        pricing = self._registry.get_pricing(provider_id, model)
        input_cost = compute_cost(pricing, input_tokens, 0)
        output_cost = compute_cost(pricing, 0, output_tokens)

        return CostBreakdown(
            provider=provider_id.value,
            model=model,
            pricing_kind=pricing.kind,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            input_cost_usd=input_cost,
            output_cost_usd=output_cost,
            total_cost_usd=compute_cost(pricing, input_tokens, output_tokens),
        )

    @staticmethod
    def for_usage(
        pricing: AsymmetricPricing | CombinedPricing | FreePricing,
        usage: Usage | None,
    ) -> float | None:
        """
        Price a completed call.

        Missing usage yields None rather than a fabricated zero, except for
        free models which always cost exactly 0.
        """
        if isinstance(pricing, FreePricing):
            return 0.0
        if usage is None:
            return None
        return compute_cost(pricing, usage.input_tokens, usage.output_tokens)

    @staticmethod
    def for_embedding(
        pricing: EmbeddingPricing, usage: EmbeddingUsage | None
    ) -> float | None:
        """Price an embedding call; None when the backend reported no usage."""
        if usage is None:
            return None
        return (usage.tokens * pricing.cost_per_1k) / 1000
