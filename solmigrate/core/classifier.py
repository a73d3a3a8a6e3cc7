"""
Contract Classifier — Derives token-standard, access-control and complexity facts.

Pure computation over extracted declarations plus whole-file substring checks.
Cannot fail; it can only be fed imperfect structure by the extractor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from solmigrate.models.analysis_models import Complexity, ContractDef

ERC20_REQUIRED_FUNCTIONS = frozenset({"transfer", "approve", "transferfrom"})

HIGH_FUNCTION_THRESHOLD = 15
HIGH_VARIABLE_THRESHOLD = 10
MEDIUM_FUNCTION_THRESHOLD = 6


@dataclass(frozen=True)
class Classification:
    is_erc20: bool
    is_erc721: bool
    has_ownable: bool
    has_access_control: bool
    has_mappings: bool
    has_events: bool
    complexity: Complexity
    line_count: int


def count_functions(contracts: Sequence[ContractDef]) -> int:
    """Functions across all contracts, constructors included, modifiers excluded."""
    return sum(
        1 for c in contracts for f in c.functions if not f.is_modifier
    )


def count_state_variables(contracts: Sequence[ContractDef]) -> int:
    return sum(len(c.state_variables) for c in contracts)


def classify_complexity(total_functions: int, total_variables: int) -> Complexity:
    """Either high trigger alone is sufficient."""
    if total_functions > HIGH_FUNCTION_THRESHOLD or total_variables > HIGH_VARIABLE_THRESHOLD:
        return Complexity.HIGH
    if total_functions > MEDIUM_FUNCTION_THRESHOLD:
        return Complexity.MEDIUM
    return Complexity.LOW


def classify(contracts: Sequence[ContractDef], source: str) -> Classification:
    """
    Classify the analysed file.

    Args:
        contracts: Every extracted contract, interface and library.
        source: The raw source text (not masked) for substring checks.

    Returns:
        Classification with all flags, the complexity tier and the line count.
    """
    function_names = {f.name.lower() for c in contracts for f in c.functions}
    base_names = [b.lower() for c in contracts for b in c.base_contracts]
    source_lower = source.lower()

    # Substring checks: a variable literally named `roles` also trips access control
    return Classification(
        is_erc20=ERC20_REQUIRED_FUNCTIONS <= function_names,
        is_erc721="safetransferfrom" in function_names or "erc721" in source_lower,
        has_ownable=any("ownable" in b for b in base_names) or "ownable" in source_lower,
        has_access_control="accesscontrol" in source_lower or "roles" in source_lower,
        has_mappings="mapping(" in source,
        has_events=any(c.events for c in contracts),
        complexity=classify_complexity(
            count_functions(contracts), count_state_variables(contracts)
        ),
        line_count=len(source.split("\n")),
    )
