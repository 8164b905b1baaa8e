"""Reclamation result model.

Summary of one finalize run, returned to the caller and written to the audit trail.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .account import AccountState


@dataclass
class ReclamationResult:
    """Outcome of reclaiming one account.

    Attributes:
        claim_name: Released claim
        claim_namespace: Namespace of the released claim
        account_name: Account the claim was bound to
        byoc: True if the account was customer-owned
        state: Final account state (None for BYOC accounts, which are deleted)
        cleanup_succeeded: Aggregate outcome of the cleanup tasks (None if none ran)
        account_deleted: True if the Account entity was deleted
        timestamp: When the reclamation finished (UTC)
    """

    claim_name: str
    claim_namespace: str
    account_name: str
    byoc: bool
    state: Optional[AccountState] = None
    cleanup_succeeded: Optional[bool] = None
    account_deleted: bool = False
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "claim_name": self.claim_name,
            "claim_namespace": self.claim_namespace,
            "account_name": self.account_name,
            "byoc": self.byoc,
            "state": self.state.value if self.state else None,
            "cleanup_succeeded": self.cleanup_succeeded,
            "account_deleted": self.account_deleted,
            "timestamp": self.timestamp.isoformat(),
        }
