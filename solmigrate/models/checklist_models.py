"""
Checklist Models — Migration checklist items and the exportable checklist.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class Priority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ChecklistItem(BaseModel):
    id: str
    section: str
    text: str
    priority: Priority
    detail: str | None = None
    automated: bool = False
    checked: bool = Field(default=False, description="Automated items start checked")


class SectionProgress(BaseModel):
    section: str
    done: int
    total: int


class Checklist(BaseModel):
    """The migration checklist plus its export metadata."""

    contract: str = "Unknown"
    token_standard: str = "Custom"
    complexity: str = "low"
    generated_at: str = Field(..., description="ISO-8601 UTC timestamp")
    items: list[ChecklistItem] = Field(default_factory=list)
    sections: list[SectionProgress] = Field(default_factory=list)
    progress: int = Field(default=0, ge=0, le=100, description="Percent of items checked")
