"""
Cost Estimate Models — Ethereum vs Solana cost projections.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class CostBreakdownItem(BaseModel):
    """One labelled line of a cost breakdown or comparison table."""

    label: str
    eth_value: str | None = None
    sol_value: str | None = None
    eth_usd: float | None = None
    sol_usd: float | None = None


class ChainCost(BaseModel):
    """Projected costs on one chain, USD unless suffixed _native."""

    chain: Literal["Ethereum", "Solana"]
    deployment_gas: int | None = None
    deployment_cost: float
    deployment_native: str
    per_tx_cost: float
    per_tx_native: str
    storage_per_slot: float
    annual_maintenance_usd: float
    details: list[CostBreakdownItem] = Field(default_factory=list)


class CostEstimate(BaseModel):
    """Full comparison produced by estimate_costs()."""

    ethereum: ChainCost
    solana: ChainCost
    savings_percent: int
    savings_usd: float
    comparison: list[CostBreakdownItem] = Field(default_factory=list)
    assumptions: list[str] = Field(default_factory=list)
