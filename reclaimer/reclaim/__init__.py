"""Account reclamation.

Classes:
    AccountReclaimer: Main orchestrator for finalizing released claims
    AuditStorage: Audit log storage and retrieval

Functions:
    run_cleanup: Concurrent cleanup fan-out and aggregation
    teardown_iam_users: Tag-based IAM user removal for BYOC accounts
"""

from __future__ import annotations

from .aggregator import run_cleanup
from .audit import AuditStorage
from .finalizer import AccountReclaimer
from .iam import IAMTeardownError, teardown_iam_users

__all__ = [
    "AccountReclaimer",
    "AuditStorage",
    "IAMTeardownError",
    "run_cleanup",
    "teardown_iam_users",
]
