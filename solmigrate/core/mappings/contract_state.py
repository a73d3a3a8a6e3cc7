"""
Contract State Rule — The main contract's storage becomes one program state account.
"""

from __future__ import annotations

from solmigrate.core.mappings.catalogue import CONTRACT_STORAGE, template
from solmigrate.models.analysis_models import AnalysisResult
from solmigrate.models.mapping_models import MappingRule

RULE_ID = "contract_state"


def apply(analysis: AnalysisResult, emitted: list[MappingRule]) -> list[MappingRule]:
    contract = analysis.main_contract
    if contract is None:
        return []

    snippet = (
        f"#[account]\n#[derive(Default)]\npub struct {contract.name}State {{\n"
        "    pub authority: Pubkey,\n    pub bump: u8,\n    pub is_initialized: bool,\n"
        "    // migrated fields below\n}"
    )
    return [
        template(CONTRACT_STORAGE).model_copy(
            update={
                "evm_concept": f"contract {contract.name} storage",
                "anchor_snippet": snippet,
            }
        )
    ]
