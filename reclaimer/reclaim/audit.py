"""Audit storage for reclamation runs.

Stores and retrieves reclamation audit logs in YAML format for compliance and troubleshooting.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import yaml

from ..models.reclamation_result import ReclamationResult


class AuditStorage:
    """Reclamation audit log storage and retrieval.

    Stores one YAML file per finalize run, organized by year/month.

    Storage structure:
        ~/.reclaimer/audit-logs/
            2025/
                11/
                    reclamation-my-claim-20251111T153000.yaml

    Attributes:
        storage_dir: Base directory for audit logs
    """

    def __init__(self, storage_dir: Optional[str] = None) -> None:
        """Initialize audit storage.

        Args:
            storage_dir: Base directory for audit logs (default: ~/.reclaimer/audit-logs)
        """
        if storage_dir is None:
            storage_dir = str(Path.home() / ".reclaimer" / "audit-logs")

        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def log_reclamation(self, result: ReclamationResult) -> Path:
        """Write a reclamation result to the audit log.

        Args:
            result: Reclamation result to record

        Returns:
            Path of the written audit file
        """
        year_month_dir = self.storage_dir / str(result.timestamp.year) / f"{result.timestamp.month:02d}"
        year_month_dir.mkdir(parents=True, exist_ok=True)

        audit_data = {
            "metadata": {
                "version": "1.0",
                "log_type": "account_reclamation",
                "created_at": datetime.now(timezone.utc).isoformat(),
            },
            "reclamation": result.to_dict(),
        }

        stamp = result.timestamp.strftime("%Y%m%dT%H%M%S%f")
        audit_file = year_month_dir / f"reclamation-{result.claim_name}-{stamp}.yaml"
        with open(audit_file, "w") as f:
            yaml.dump(audit_data, f, default_flow_style=False, sort_keys=False)

        return audit_file

    def query_reclamations(self, since: Optional[datetime] = None, until: Optional[datetime] = None) -> list[dict]:
        """Query reclamations within a date range.

        Args:
            since: Start time (inclusive, timezone-aware), None for all
            until: End time (inclusive, timezone-aware), None for all

        Returns:
            List of audit logs matching criteria, oldest first
        """
        results = []

        for audit_file in sorted(self.storage_dir.glob("*/*/reclamation-*.yaml")):
            with open(audit_file, "r") as f:
                audit_data = yaml.safe_load(f)

            timestamp = datetime.fromisoformat(audit_data["reclamation"]["timestamp"])

            if since and timestamp < since:
                continue
            if until and timestamp > until:
                continue

            results.append(audit_data)

        results.sort(key=lambda data: data["reclamation"]["timestamp"])
        return results
