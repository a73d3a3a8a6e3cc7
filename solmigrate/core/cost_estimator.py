"""
Cost Estimator — Deterministic Ethereum vs Solana cost projections.

Two fixed-formula models driven by the source length and the analysed
structure. All prices are compiled-in constants; no pricing feed is queried.

Ethereum:
    deploy_gas = 21000 + bytecode × 200 + functions × 15000 + state_vars × 5000
    per_tx_gas = 21000 + 30000 + functions × 2000

Solana:
    deploy_sol = min(bytecode × 1.5, 200 KB) × rent_per_byte / 1e9 + 0.01
    per_tx_sol = 5000 lamports + functions × 5000 CU × cu_price
"""

from __future__ import annotations

from solmigrate.models.analysis_models import AnalysisResult
from solmigrate.models.cost_models import ChainCost, CostBreakdownItem, CostEstimate

ETH_PRICE_USD = 2800
SOL_PRICE_USD = 160
ETH_GAS_GWEI = 18
SOL_CU_PRICE = 0.000001  # SOL per compute unit (default priority)
SOL_LAMPORTS_PER_SOL = 1e9
SOL_RENT_EXEMPT_PER_BYTE = 6960  # lamports / byte
SOL_SIGNATURE_FEE_LAMPORTS = 5000

EVM_BYTECODE_LIMIT = 24_576
SOLANA_PROGRAM_LIMIT = 200 * 1024
SSTORE_GAS = 20_000
ANNUAL_TX_COUNT = 1000


def _round(value: float) -> float:
    return round(value * 100) / 100


def _gwei_to_eth(gas: float) -> float:
    return gas * ETH_GAS_GWEI * 1e-9


def estimate_costs(source: str, analysis: AnalysisResult) -> CostEstimate:
    """
    Project deployment, per-transaction, storage and yearly costs on both chains.

    Args:
        source: Raw Solidity source (its line count sizes the bytecode estimate).
        analysis: Output of analyze() for the same source.

    Returns:
        CostEstimate with per-chain details, comparison rows and assumptions.
    """
    lines = len(source.split("\n"))
    fn_count = sum(len(c.functions) for c in analysis.contracts)
    state_var_count = sum(len(c.state_variables) for c in analysis.contracts)
    mapping_count = len(analysis.mapping_variables)

    # ── Ethereum ──
    estimated_bytecode = min(lines * 200, EVM_BYTECODE_LIMIT)
    deploy_gas = 21000 + estimated_bytecode * 200 + fn_count * 15000 + state_var_count * 5000
    deploy_eth = _gwei_to_eth(deploy_gas)
    deploy_eth_usd = deploy_eth * ETH_PRICE_USD

    per_tx_gas = 21000 + 30000 + fn_count * 2000
    per_tx_eth = _gwei_to_eth(per_tx_gas)
    per_tx_eth_usd = per_tx_eth * ETH_PRICE_USD

    storage_slot_usd = _gwei_to_eth(SSTORE_GAS) * ETH_PRICE_USD
    annual_eth = per_tx_eth_usd * ANNUAL_TX_COUNT + storage_slot_usd * state_var_count * 5

    # ── Solana ──
    program_bytes = min(estimated_bytecode * 1.5, SOLANA_PROGRAM_LIMIT)
    deploy_sol = program_bytes * SOL_RENT_EXEMPT_PER_BYTE / SOL_LAMPORTS_PER_SOL + 0.01
    deploy_sol_usd = deploy_sol * SOL_PRICE_USD

    per_tx_cu = fn_count * 5000
    per_tx_sol = (
        SOL_SIGNATURE_FEE_LAMPORTS / SOL_LAMPORTS_PER_SOL
        + per_tx_cu * SOL_CU_PRICE / SOL_LAMPORTS_PER_SOL
    )
    per_tx_sol_usd = per_tx_sol * SOL_PRICE_USD
    per_tx_lamports = round(per_tx_sol * SOL_LAMPORTS_PER_SOL)

    account_bytes = state_var_count * 32 + 64
    account_rent_sol = account_bytes * SOL_RENT_EXEMPT_PER_BYTE / SOL_LAMPORTS_PER_SOL
    account_rent_usd = account_rent_sol * SOL_PRICE_USD
    annual_sol = per_tx_sol_usd * ANNUAL_TX_COUNT + account_rent_usd * 2
    # One PDA account per mapping entry type
    pda_cost = mapping_count * account_rent_usd

    ethereum = ChainCost(
        chain="Ethereum",
        deployment_gas=deploy_gas,
        deployment_cost=_round(deploy_eth_usd),
        deployment_native=f"{deploy_eth:.4f} ETH",
        per_tx_cost=_round(per_tx_eth_usd),
        per_tx_native=f"{per_tx_eth:.5f} ETH",
        storage_per_slot=_round(storage_slot_usd),
        annual_maintenance_usd=_round(annual_eth),
        details=[
            CostBreakdownItem(label="Estimated bytecode size", eth_value=f"~{round(estimated_bytecode / 1024)} KB"),
            CostBreakdownItem(label="Estimated deploy gas", eth_value=f"{deploy_gas:,}"),
            CostBreakdownItem(label="Gas price assumption", eth_value=f"{ETH_GAS_GWEI} gwei"),
            CostBreakdownItem(label="ETH price assumption", eth_value=f"${ETH_PRICE_USD}"),
            CostBreakdownItem(label="SSTORE cost (1 slot)", eth_value=f"{SSTORE_GAS:,} gas"),
            CostBreakdownItem(label="Per-tx gas (avg)", eth_value=f"{per_tx_gas:,}"),
        ],
    )

    solana = ChainCost(
        chain="Solana",
        deployment_cost=_round(deploy_sol_usd),
        deployment_native=f"{deploy_sol:.4f} SOL",
        per_tx_cost=_round(per_tx_sol_usd * 100) / 100,
        per_tx_native=f"~{per_tx_lamports:,} lamports",
        storage_per_slot=_round(account_rent_usd),
        annual_maintenance_usd=_round(annual_sol + pda_cost),
        details=[
            CostBreakdownItem(label="Program binary size", sol_value=f"~{round(program_bytes / 1024)} KB"),
            CostBreakdownItem(label="Rent-exempt deposit", sol_value=f"{deploy_sol:.4f} SOL (refundable)"),
            CostBreakdownItem(label="Base signature fee", sol_value=f"{SOL_SIGNATURE_FEE_LAMPORTS:,} lamports (~$0.0008)"),
            CostBreakdownItem(label="SOL price assumption", sol_value=f"${SOL_PRICE_USD}"),
            CostBreakdownItem(label="PDA accounts for mappings", sol_value=f"{mapping_count} × ~{account_bytes}B"),
            CostBreakdownItem(label="Compute budget (estimated)", sol_value=f"{per_tx_cu:,} CUs/tx"),
        ],
    )

    savings_usd = _round(deploy_eth_usd - deploy_sol_usd)
    savings_percent = round(savings_usd / deploy_eth_usd * 100) if deploy_eth_usd else 0

    comparison = [
        CostBreakdownItem(
            label="Deployment",
            eth_value=ethereum.deployment_native,
            eth_usd=ethereum.deployment_cost,
            sol_value=solana.deployment_native,
            sol_usd=solana.deployment_cost,
        ),
        CostBreakdownItem(
            label="Per Transaction",
            eth_value=f"{per_tx_gas:,} gas",
            eth_usd=ethereum.per_tx_cost,
            sol_value=f"~{per_tx_lamports:,} lamports",
            sol_usd=solana.per_tx_cost,
        ),
        CostBreakdownItem(
            label="Storage (1 entry)",
            eth_value=f"{SSTORE_GAS:,} gas (permanent)",
            eth_usd=ethereum.storage_per_slot,
            sol_value=f"~{account_bytes}B rent",
            sol_usd=_round(account_rent_usd),
        ),
        CostBreakdownItem(
            label=f"Est. Annual ({ANNUAL_TX_COUNT // 1000}k txs)",
            eth_usd=ethereum.annual_maintenance_usd,
            sol_usd=solana.annual_maintenance_usd,
        ),
    ]

    return CostEstimate(
        ethereum=ethereum,
        solana=solana,
        savings_percent=savings_percent,
        savings_usd=savings_usd,
        comparison=comparison,
        assumptions=[
            f"ETH price: ${ETH_PRICE_USD}",
            f"SOL price: ${SOL_PRICE_USD}",
            f"Gas price: {ETH_GAS_GWEI} gwei (Ethereum)",
            f"Solana base fee: {SOL_SIGNATURE_FEE_LAMPORTS:,} lamports per signature",
            f"Rent exemption: {SOL_RENT_EXEMPT_PER_BYTE:,} lamports/byte",
            "Solana rent is refundable when accounts are closed",
            "Estimates based on static analysis — actual costs depend on implementation",
        ],
    )
