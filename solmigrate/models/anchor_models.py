"""
Anchor Skeleton Models — Generated Solana program files.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class AnchorFile(BaseModel):
    """One generated file of the Anchor workspace."""

    filename: str = Field(..., description="Path relative to the workspace root")
    language: Literal["rust", "toml", "typescript"]
    content: str


class AnchorSkeleton(BaseModel):
    """A complete generated Anchor workspace plus migration warnings."""

    program_name: str
    files: list[AnchorFile] = Field(default_factory=list)
    instructions: list[str] = Field(
        default_factory=list, description="snake_case instruction handler names"
    )
    account_structs: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    def get_file(self, filename: str) -> AnchorFile | None:
        return next((f for f in self.files if f.filename == filename), None)
