"""
Token Standard Rule — ERC-20 maps to SPL Token, ERC-721 to Metaplex.
"""

from __future__ import annotations

from solmigrate.core.mappings.catalogue import ERC20, ERC721, template
from solmigrate.models.analysis_models import AnalysisResult
from solmigrate.models.mapping_models import MappingRule

RULE_ID = "token_standards"


def apply(analysis: AnalysisResult, emitted: list[MappingRule]) -> list[MappingRule]:
    rules: list[MappingRule] = []
    if analysis.is_erc20:
        rules.append(template(ERC20))
    if analysis.is_erc721:
        rules.append(template(ERC721))
    return rules
