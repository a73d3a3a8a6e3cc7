"""
Health Check Route — GET /health
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from solmigrate.api.dependencies import get_analysis_cache
from solmigrate.cache.analysis_cache import AnalysisCache

router = APIRouter()

VERSION = "1.0.0"


@router.get("/health")
async def health(cache: AnalysisCache = Depends(get_analysis_cache)):
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": VERSION,
        "engine": "heuristic-source-analyzer",
        "cache": cache.stats(),
    }
