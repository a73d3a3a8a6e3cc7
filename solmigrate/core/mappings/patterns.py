"""
Common Pattern Rule — constructor, require, block.timestamp, reentrancy, payable.

Always emitted, once each.
"""

from __future__ import annotations

from solmigrate.core.mappings.catalogue import pattern_rules
from solmigrate.models.analysis_models import AnalysisResult
from solmigrate.models.mapping_models import MappingRule

RULE_ID = "patterns"


def apply(analysis: AnalysisResult, emitted: list[MappingRule]) -> list[MappingRule]:
    seen = {r.evm_concept for r in emitted}
    return [rule for rule in pattern_rules() if rule.evm_concept not in seen]
