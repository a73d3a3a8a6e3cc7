"""
API Request/Response Models — HTTP contract schemas.

These are the public-facing Pydantic models used by the FastAPI endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from solmigrate.models.analysis_models import AnalysisResult
from solmigrate.models.anchor_models import AnchorSkeleton
from solmigrate.models.checklist_models import Checklist
from solmigrate.models.cost_models import CostEstimate
from solmigrate.models.mapping_models import MappingRule


class AnalyzeRequest(BaseModel):
    """Request body for /analyze and /migrate."""

    source: str = Field(..., description="Full Solidity source text; may be empty")
    filename: str = Field(default="Contract.sol", description="Original file name, informational")


class AuditEntry(BaseModel):
    """Audit metadata for one analysis."""

    analysis_id: str
    filename: str = ""
    contracts_found: int
    complexity: str
    token_standard: str
    errors_found: int = 0
    cache_hit: bool = False
    duration_ms: float = 0.0


class AnalyzeResponse(BaseModel):
    message: str = "analysis_complete"
    analysis_id: str = ""
    analysis: AnalysisResult | None = None


class MigrationReport(BaseModel):
    """Everything the downstream steps produce for one source file."""

    analysis: AnalysisResult
    mappings: list[MappingRule] = Field(default_factory=list)
    skeleton: AnchorSkeleton | None = None
    costs: CostEstimate | None = None
    checklist: Checklist | None = None
    audit: AuditEntry | None = None


class MigrateResponse(BaseModel):
    """Top-level response for /migrate."""

    message: str = "migration_complete"
    analysis_id: str = ""
    report: MigrationReport | None = None
    error: str | None = None
