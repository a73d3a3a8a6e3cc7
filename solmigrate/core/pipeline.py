"""
Migration Pipeline — Main orchestrator for one uploaded Solidity file.

Full pipeline:
1. Analyze source (cached by content hash)
2. Apply EVM → Solana mapping rules
3. Generate Anchor skeleton
4. Estimate Ethereum vs Solana costs
5. Build the migration checklist
6. Write an audit entry
"""

from __future__ import annotations

import logging
import time
import uuid

from solmigrate.audit.logger import AuditLogger
from solmigrate.cache.analysis_cache import AnalysisCache
from solmigrate.core.analyzer import analyze
from solmigrate.core.anchor_generator import generate_anchor_skeleton
from solmigrate.core.checklist import build_checklist
from solmigrate.core.cost_estimator import estimate_costs
from solmigrate.core.mapping_engine import MappingEngine
from solmigrate.models.analysis_models import AnalysisResult
from solmigrate.models.api_models import AuditEntry, MigrationReport

logger = logging.getLogger("solmigrate.pipeline")


class MigrationPipeline:
    """Ties together: analyzer → mapping engine → skeleton → costs → checklist."""

    def __init__(
        self,
        cache: AnalysisCache | None = None,
        audit_logger: AuditLogger | None = None,
        mapping_engine: MappingEngine | None = None,
    ) -> None:
        self.cache = cache or AnalysisCache()
        self.audit_logger = audit_logger
        self.mapping_engine = mapping_engine or MappingEngine()

    def analyze(self, source: str, filename: str = "") -> tuple[AnalysisResult, AuditEntry]:
        """Analyze one source, reusing a cached result for identical text."""
        start = time.monotonic()
        analysis = self.cache.get(source)
        cache_hit = analysis is not None
        if analysis is None:
            analysis = analyze(source)
            self.cache.put(source, analysis)

        entry = AuditEntry(
            analysis_id=uuid.uuid4().hex[:12],
            filename=filename,
            contracts_found=len(analysis.contracts),
            complexity=analysis.complexity.value,
            token_standard=analysis.token_standard,
            errors_found=len(analysis.errors),
            cache_hit=cache_hit,
            duration_ms=round((time.monotonic() - start) * 1000, 2),
        )
        logger.info(
            f"Analysis {entry.analysis_id}: {entry.contracts_found} contract(s), "
            f"complexity {entry.complexity}, {entry.errors_found} error(s), cache_hit={cache_hit}"
        )
        if self.audit_logger is not None:
            self.audit_logger.log(entry)
        return analysis, entry

    def migrate(self, source: str, filename: str = "") -> MigrationReport:
        """Run every downstream step and return the combined report."""
        analysis, entry = self.analyze(source, filename)

        mapping_report = self.mapping_engine.run(analysis)
        if mapping_report.rules_failed:
            logger.warning(f"Mapping rules skipped: {mapping_report.rules_failed}")

        skeleton = generate_anchor_skeleton(analysis)
        costs = estimate_costs(source, analysis)
        checklist = build_checklist(analysis, skeleton)

        return MigrationReport(
            analysis=analysis,
            mappings=mapping_report.rules,
            skeleton=skeleton,
            costs=costs,
            checklist=checklist,
            audit=entry,
        )
