"""
Solidity Analyzer — Scanner + extractor + classifier, assembled into one result.

    analyze(source) -> AnalysisResult

Never raises. Structural failures (an unterminated body, an extraction error
in one contract) become entries in ``AnalysisResult.errors`` and everything
recovered up to that point is still returned.
"""

from __future__ import annotations

import logging

from solmigrate.core.classifier import Classification, classify
from solmigrate.core.extractor import extract_contract
from solmigrate.core.scanner import (
    ScanError,
    extract_imports,
    extract_pragma,
    mask_source,
    scan_declarations,
)
from solmigrate.models.analysis_models import AnalysisResult, Complexity, ContractDef

logger = logging.getLogger("solmigrate.analyzer")


def _scan_contracts(source: str, masked: str, errors: list[str]) -> list[ContractDef]:
    contracts: list[ContractDef] = []
    spans = scan_declarations(source, masked)
    while True:
        try:
            span = next(spans)
        except StopIteration:
            break
        except ScanError as e:
            errors.append(f"Structural error: {e}")
            break
        except Exception as e:
            errors.append(f"Scanner failure: {type(e).__name__}: {e}")
            break

        try:
            contracts.append(extract_contract(span))
        except Exception as e:
            errors.append(
                f"Extraction failed for {span.kind.value} '{span.name}': "
                f"{type(e).__name__}: {e}"
            )
    return contracts


def _fallback_classification(contracts: list[ContractDef], source: object) -> Classification:
    """Classify what was recovered; if even that fails, report nothing detected."""
    text = source if isinstance(source, str) else ""
    try:
        return classify(contracts, text)
    except Exception:
        logger.exception("Classifier failed on recovered data")
        return Classification(
            is_erc20=False,
            is_erc721=False,
            has_ownable=False,
            has_access_control=False,
            has_mappings=False,
            has_events=False,
            complexity=Complexity.LOW,
            line_count=text.count("\n") + 1,
        )


def analyze(source: str) -> AnalysisResult:
    """
    Analyze Solidity source text.

    Args:
        source: Full contents of a .sol file.

    Returns:
        AnalysisResult — best-effort when ``errors`` is non-empty.
    """
    errors: list[str] = []
    contracts: list[ContractDef] = []
    pragma_version = "unknown"
    imports: list[str] = []

    try:
        masked = mask_source(source)
        pragma_version = extract_pragma(source, masked)
        imports = extract_imports(source, masked)
        contracts = _scan_contracts(source, masked, errors)
        facts = classify(contracts, source)
    except Exception as e:
        logger.exception("Analyzer failed unexpectedly")
        errors.append(f"Analysis aborted: {type(e).__name__}: {e}")
        facts = _fallback_classification(contracts, source)

    if errors:
        logger.warning(f"Analysis recovered with {len(errors)} error(s): {errors[0]}")

    return AnalysisResult(
        contracts=tuple(contracts),
        pragma_version=pragma_version,
        imports=tuple(imports),
        is_erc20=facts.is_erc20,
        is_erc721=facts.is_erc721,
        has_ownable=facts.has_ownable,
        has_access_control=facts.has_access_control,
        has_mappings=facts.has_mappings,
        has_events=facts.has_events,
        complexity=facts.complexity,
        line_count=facts.line_count,
        errors=tuple(errors),
    )
