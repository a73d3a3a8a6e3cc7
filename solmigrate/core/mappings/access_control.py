"""
Access Control Rule — Ownable and role-based access patterns.
"""

from __future__ import annotations

from solmigrate.core.mappings.catalogue import ACCESS_CONTROL, OWNABLE, template
from solmigrate.models.analysis_models import AnalysisResult
from solmigrate.models.mapping_models import MappingRule

RULE_ID = "access_control"


def apply(analysis: AnalysisResult, emitted: list[MappingRule]) -> list[MappingRule]:
    rules: list[MappingRule] = []
    # An owner state variable already produced the authority record
    if analysis.has_ownable and not any("owner" in r.evm_concept for r in emitted):
        rules.append(template(OWNABLE))
    if analysis.has_access_control:
        rules.append(template(ACCESS_CONTROL))
    return rules
