"""
Analysis Routes — POST /analyze and POST /migrate.

/analyze returns the structural analysis only; /migrate runs the full
pipeline (mapping rules, Anchor skeleton, cost estimate, checklist).
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from solmigrate.api.dependencies import get_pipeline
from solmigrate.config import settings
from solmigrate.core.pipeline import MigrationPipeline
from solmigrate.models.api_models import AnalyzeRequest, AnalyzeResponse, MigrateResponse

logger = logging.getLogger("solmigrate.api.analyze")
router = APIRouter()


def _check_size(req: AnalyzeRequest) -> None:
    size = len(req.source.encode("utf-8"))
    if size > settings.max_source_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"Source exceeds maximum size of {settings.max_source_bytes} bytes",
        )


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_source(
    req: AnalyzeRequest,
    pipeline: MigrationPipeline = Depends(get_pipeline),
):
    """Analyze one Solidity source file."""
    _check_size(req)
    analysis, entry = pipeline.analyze(req.source, req.filename)
    return AnalyzeResponse(analysis_id=entry.analysis_id, analysis=analysis)


@router.post("/migrate", response_model=MigrateResponse)
async def migrate_source(
    req: AnalyzeRequest,
    pipeline: MigrationPipeline = Depends(get_pipeline),
):
    """Produce the full migration report for one Solidity source file."""
    _check_size(req)
    try:
        report = pipeline.migrate(req.source, req.filename)
    except Exception as e:
        logger.exception("Unexpected migration error")
        return MigrateResponse(message="error", error=f"{type(e).__name__}: {e}")

    return MigrateResponse(
        analysis_id=report.audit.analysis_id if report.audit else "",
        report=report,
    )
