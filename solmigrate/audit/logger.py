"""
Audit Logger — Structured JSON-lines audit trail.

Records every analysis with: timestamp, analysis_id, contracts found,
complexity, token standard, error count, cache hit and duration.
"""

from __future__ import annotations

import json
import logging
import time
from collections import deque
from pathlib import Path

from solmigrate.config import settings
from solmigrate.models.api_models import AuditEntry

logger = logging.getLogger("solmigrate.audit")


class AuditLogger:
    """Writes structured audit entries to a JSON-lines file."""

    def __init__(self, log_path: str | None = None, enabled: bool | None = None) -> None:
        self.log_path = Path(log_path or settings.audit_log_path)
        self.enabled = settings.audit_enabled if enabled is None else enabled

    def log(self, entry: AuditEntry) -> None:
        """Append an audit entry to the log file."""
        if not self.enabled:
            return

        record = {
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            **entry.model_dump(),
        }

        try:
            with open(self.log_path, "a") as f:
                f.write(json.dumps(record) + "\n")
        except OSError as e:
            logger.error(f"Failed to write audit log: {e}")

    def read_recent(self, count: int = 50) -> list[dict]:
        """Read the most recent N audit entries, oldest first."""
        if count <= 0 or not self.log_path.exists():
            return []

        try:
            with open(self.log_path) as f:
                tail = deque((line for line in f if line.strip()), maxlen=count)
        except OSError as e:
            logger.error(f"Failed to read audit log: {e}")
            return []

        entries: list[dict] = []
        for line in tail:
            try:
                entries.append(json.loads(line))
            except json.JSONDecodeError:
                logger.debug("Skipping malformed audit line")
        return entries
