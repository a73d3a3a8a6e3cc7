"""
Catalogue & Audit Routes — GET /rules, GET /audit
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from solmigrate.api.dependencies import get_audit_logger
from solmigrate.audit.logger import AuditLogger
from solmigrate.core.mappings.catalogue import STATIC_RULES
from solmigrate.models.mapping_models import MappingRule

router = APIRouter()


@router.get("/rules", response_model=list[MappingRule])
async def list_rules():
    """The static EVM → Solana mapping catalogue."""
    return list(STATIC_RULES)


@router.get("/audit")
async def recent_audit(
    count: int = Query(default=50, ge=1, le=1000),
    audit_logger: AuditLogger = Depends(get_audit_logger),
):
    """Most recent audit entries, oldest first."""
    return {"entries": audit_logger.read_recent(count)}
