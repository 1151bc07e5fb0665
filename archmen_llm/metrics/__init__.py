"""
Metrics Module: Cost Accounting

Components:
    compute_cost: Apply a pricing shape to token counts
    CostCalculator: Registry-backed cost estimation for calls and previews
    CostBreakdown: Input/output split of an estimated cost
"""

from archmen_llm.metrics.cost import CostBreakdown, CostCalculator, compute_cost

__all__ = [
    "compute_cost",
    "CostCalculator",
    "CostBreakdown",
]
