"""
Mapping Engine — Orchestrates all EVM → Solana mapping rules.

Runs every registered rule module against one AnalysisResult, in registry
order, and numbers the emitted records. Pure: no I/O, no randomness.
"""

from __future__ import annotations

import logging
from typing import Callable

from solmigrate.core.mappings import (
    access_control,
    contract_state,
    events,
    instructions,
    patterns,
    state_variables,
    token_standards,
)
from solmigrate.models.analysis_models import AnalysisResult
from solmigrate.models.mapping_models import MappingReport, MappingRule

logger = logging.getLogger("solmigrate.mapping_engine")

# Type for a rule apply function: (analysis, rules emitted so far) -> new rules
MappingRuleFn = Callable[[AnalysisResult, list[MappingRule]], list[MappingRule]]

# Order matters: later rules deduplicate against earlier output
RULE_REGISTRY: dict[str, MappingRuleFn] = {
    contract_state.RULE_ID: contract_state.apply,
    state_variables.RULE_ID: state_variables.apply,
    instructions.RULE_ID: instructions.apply,
    events.RULE_ID: events.apply,
    token_standards.RULE_ID: token_standards.apply,
    access_control.RULE_ID: access_control.apply,
    patterns.RULE_ID: patterns.apply,
}


class MappingEngine:
    """
    Deterministic mapping-rule engine.

    A rule module that raises is logged and skipped; the remaining rules
    still run.
    """

    def __init__(self, rules: dict[str, MappingRuleFn] | None = None) -> None:
        self.rules = rules or RULE_REGISTRY

    def run(self, analysis: AnalysisResult) -> MappingReport:
        emitted: list[MappingRule] = []
        rules_executed: list[str] = []
        rules_failed: list[str] = []

        for rule_id, apply_fn in self.rules.items():
            rules_executed.append(rule_id)
            try:
                new_rules = apply_fn(analysis, list(emitted))
            except Exception as e:
                logger.error(f"Mapping rule '{rule_id}' failed: {type(e).__name__}: {e}")
                rules_failed.append(rule_id)
                continue
            emitted.extend(new_rules)

        numbered = [
            rule.model_copy(update={"id": f"rule-{i}"})
            for i, rule in enumerate(emitted, start=1)
        ]
        return MappingReport(
            rules=numbered,
            rules_executed=rules_executed,
            rules_failed=rules_failed,
        )


def apply_mapping_rules(analysis: AnalysisResult) -> list[MappingRule]:
    """Convenience wrapper: run the default registry and return just the rules."""
    return MappingEngine().run(analysis).rules
