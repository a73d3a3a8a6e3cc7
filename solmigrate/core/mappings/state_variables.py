"""
State Variable Rule — One mapping record per state variable of every contract.

Mappings become PDA-per-key designs (exactly one storage record per mapping
variable), owner addresses become the authority pattern, everything else
becomes a field of the program state account.
"""

from __future__ import annotations

from solmigrate.core.mappings.catalogue import MAPPING, OWNABLE, template
from solmigrate.core.type_mapping import (
    mapping_value_type,
    solidity_type_to_rust,
    to_pascal_case,
    to_snake_case,
)
from solmigrate.models.analysis_models import AnalysisResult, Complexity, StateVariable
from solmigrate.models.mapping_models import MappingCategory, MappingRule

RULE_ID = "state_variables"

_ADDRESS_TYPES = {"address", "address payable"}


def _mapping_rule(var: StateVariable) -> MappingRule:
    entry = f"{to_pascal_case(var.name)}Entry"
    field = to_snake_case(var.name)
    value_type = solidity_type_to_rust(mapping_value_type(var.type_name))
    snippet = (
        f"// PDA for {var.name} entry\n#[account(\n    init_if_needed,\n    payer = payer,\n"
        f"    space = 8 + {entry}::LEN,\n    seeds = [b\"{var.name}\", key.as_ref()],\n    bump\n)]\n"
        f"pub {field}_entry: Account<'info, {entry}>,\n\n"
        f"#[account]\npub struct {entry} {{\n    pub key: Pubkey,\n"
        f"    pub value: {value_type},\n    pub bump: u8,\n}}"
    )
    return template(MAPPING).model_copy(
        update={
            "evm_concept": f"mapping: {var.name}",
            "evm_detail": var.type_name,
            "anchor_snippet": snippet,
        }
    )


def _field_rule(var: StateVariable) -> MappingRule:
    field = to_snake_case(var.name)
    rust_type = solidity_type_to_rust(var.type_name)
    qualifiers = [var.visibility]
    if var.constant:
        qualifiers.append("constant")
    if var.immutable:
        qualifiers.append("immutable")
    return MappingRule(
        category=MappingCategory.STATE,
        evm_concept=f"{var.type_name} {var.name}",
        evm_detail=f"State variable ({', '.join(qualifiers)})",
        solana_concept="Account field",
        solana_detail=f"pub {field}: {rust_type},",
        rationale=(
            "Primitive and fixed-size Solidity types map directly to Borsh-serialized "
            "fields in a Solana account struct."
        ),
        complexity=Complexity.LOW,
        anchor_snippet=f"// Inside your #[account] struct:\npub {field}: {rust_type}, // {var.type_name}",
    )


def apply(analysis: AnalysisResult, emitted: list[MappingRule]) -> list[MappingRule]:
    rules: list[MappingRule] = []
    for contract in analysis.contracts:
        for var in contract.state_variables:
            if var.is_mapping:
                rules.append(_mapping_rule(var))
            elif "owner" in var.name.lower() and var.type_name in _ADDRESS_TYPES:
                rules.append(
                    template(OWNABLE).model_copy(
                        update={"evm_detail": f"address {var.name} — owner/admin"}
                    )
                )
            else:
                rules.append(_field_rule(var))
    return rules
