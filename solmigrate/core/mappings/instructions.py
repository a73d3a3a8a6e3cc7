"""
Instruction Rule — Each public/external function of the main contract becomes an Anchor instruction.
"""

from __future__ import annotations

from solmigrate.core.type_mapping import solidity_type_to_rust, to_snake_case, unique_handler_names
from solmigrate.models.analysis_models import AnalysisResult, Complexity, FunctionDef
from solmigrate.models.mapping_models import MappingCategory, MappingRule

RULE_ID = "instructions"


def _handler_snippet(func: FunctionDef, handler: str, context: str) -> str:
    args = "".join(
        f", {to_snake_case(p.name) if p.name else f'arg{i}'}: {solidity_type_to_rust(p.type_name)}"
        for i, p in enumerate(func.parameters)
    )
    return (
        f"pub fn {handler}(ctx: Context<{context}>{args}) -> Result<()> {{\n"
        f"    // TODO: migrate {func.name} logic\n    Ok(())\n}}"
    )


def apply(analysis: AnalysisResult, emitted: list[MappingRule]) -> list[MappingRule]:
    contract = analysis.main_contract
    if contract is None:
        return []

    entrypoints = [f for f in contract.functions if f.is_entrypoint]
    names = unique_handler_names([f.name for f in entrypoints])
    rules: list[MappingRule] = []
    for func, (handler, context) in zip(entrypoints, names):
        signature = ", ".join(p.type_name for p in func.parameters)
        rules.append(
            MappingRule(
                category=MappingCategory.PATTERN,
                evm_concept=f"function {func.name}({signature})",
                evm_detail=f"{func.visibility} {func.state_mutability} function",
                solana_concept="Anchor instruction",
                solana_detail=f"#[program] handler `{handler}` with its own Context struct",
                rationale=(
                    "Each public or external Solidity function becomes one instruction handler "
                    "in lib.rs. Every account it reads or writes must be listed in the Context."
                ),
                complexity=Complexity.MEDIUM if func.state_mutability == "payable" else Complexity.LOW,
                anchor_snippet=_handler_snippet(func, handler, context),
            )
        )
    return rules
