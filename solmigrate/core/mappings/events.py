"""
Event Rule — Each event of the main contract becomes an Anchor #[event] struct.
"""

from __future__ import annotations

from solmigrate.core.mappings.catalogue import EVENT, template
from solmigrate.core.type_mapping import solidity_type_to_rust, to_snake_case
from solmigrate.models.analysis_models import AnalysisResult, EventDef
from solmigrate.models.mapping_models import MappingRule

RULE_ID = "events"


def _event_struct(event: EventDef) -> str:
    fields = "\n".join(
        f"    pub {to_snake_case(p.name) or f'value{i}'}: {solidity_type_to_rust(p.type_name)},"
        for i, p in enumerate(event.parameters)
    )
    return f"#[event]\npub struct {event.name} {{\n{fields}\n}}"


def apply(analysis: AnalysisResult, emitted: list[MappingRule]) -> list[MappingRule]:
    contract = analysis.main_contract
    if contract is None:
        return []

    rules: list[MappingRule] = []
    for event in contract.events:
        signature = ", ".join(
            f"{p.type_name}{' indexed' if p.indexed else ''}" for p in event.parameters
        )
        rules.append(
            template(EVENT).model_copy(
                update={
                    "evm_concept": f"event {event.name}",
                    "evm_detail": f"{event.name}({signature})",
                    "anchor_snippet": _event_struct(event),
                }
            )
        )
    return rules
