"""
Mapping Rule Models — EVM concept → Solana concept records.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from solmigrate.models.analysis_models import Complexity


class MappingCategory(str, Enum):
    STATE = "state"
    TOKEN = "token"
    ACCESS = "access"
    EVENT = "event"
    PATTERN = "pattern"
    STORAGE = "storage"


class MappingRule(BaseModel):
    """A single EVM → Solana concept mapping with rationale and optional snippet."""

    model_config = {"frozen": True}

    id: str = Field(default="", description="Sequential id assigned by the engine, e.g. 'rule-3'")
    category: MappingCategory
    # ── EVM side ──
    evm_concept: str
    evm_detail: str
    evm_type: str | None = None
    # ── Solana side ──
    solana_concept: str
    solana_detail: str
    solana_type: str | None = None
    # ── Metadata ──
    rationale: str
    complexity: Complexity = Complexity.LOW
    anchor_snippet: str | None = None
    docs_link: str | None = None


class MappingReport(BaseModel):
    """Output of MappingEngine.run()."""

    rules: list[MappingRule] = Field(default_factory=list)
    rules_executed: list[str] = Field(default_factory=list)
    rules_failed: list[str] = Field(
        default_factory=list, description="Rule modules that raised and were skipped"
    )
