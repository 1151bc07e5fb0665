"""
Registry module: provider catalog and pricing lookup.

Public API:
- ProviderId: Enum of supported providers
- AsymmetricPricing / CombinedPricing / FreePricing: chat pricing shapes
- EmbeddingPricing: embedding pricing
- ProviderCatalogEntry: one provider's models and prices
- ProviderRegistry: read-only lookup class
- build_default_catalog: the shipped catalog data
"""

from archmen_llm.registry.catalog import (
    AsymmetricPricing,
    CombinedPricing,
    EmbeddingPricing,
    FreePricing,
    ModelPricing,
    ProviderCatalogEntry,
    ProviderId,
    ProviderRegistry,
    build_default_catalog,
)

__all__ = [
    "ProviderId",
    "AsymmetricPricing",
    "CombinedPricing",
    "FreePricing",
    "ModelPricing",
    "EmbeddingPricing",
    "ProviderCatalogEntry",
    "ProviderRegistry",
    "build_default_catalog",
]
