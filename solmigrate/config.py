"""
Migration Copilot Configuration — pydantic-settings based.

All settings are read from environment variables or .env file.
Nothing is required: the analyzer runs fully offline with compiled-in defaults.
"""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application-wide settings sourced from environment variables."""

    # ── Analysis ──
    max_source_bytes: int = Field(
        default=500_000, description="Max Solidity source size to accept (bytes)"
    )

    # ── Cache ──
    cache_ttl_seconds: int = Field(
        default=3600, description="Time-to-live for cached analyses"
    )
    cache_max_entries: int = Field(
        default=256, description="Cached analyses kept before the oldest are evicted"
    )

    # ── Server ──
    port: int = Field(default=5001, description="Server port")
    host: str = Field(default="0.0.0.0", description="Server bind host")
    cors_origins: list[str] = Field(
        default=["*"], description="Allowed CORS origins"
    )
    log_level: str = Field(default="INFO", description="Root logging level")

    # ── Audit ──
    audit_enabled: bool = Field(
        default=True, description="Feature flag: write one audit line per analysis"
    )
    audit_log_path: str = Field(
        default="audit.jsonl", description="Path to JSON-lines audit log file"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Singleton instance, imported by other modules
settings = Settings()
