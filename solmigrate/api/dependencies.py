"""
FastAPI Dependencies — Shared singletons injected via Depends().
"""

from __future__ import annotations

from functools import lru_cache

from solmigrate.audit.logger import AuditLogger
from solmigrate.cache.analysis_cache import AnalysisCache
from solmigrate.core.pipeline import MigrationPipeline


@lru_cache
def get_analysis_cache() -> AnalysisCache:
    """Shared analysis cache singleton."""
    return AnalysisCache()


@lru_cache
def get_audit_logger() -> AuditLogger:
    """Shared audit logger singleton."""
    return AuditLogger()


@lru_cache
def get_pipeline() -> MigrationPipeline:
    """Shared migration pipeline singleton."""
    return MigrationPipeline(
        cache=get_analysis_cache(),
        audit_logger=get_audit_logger(),
    )
