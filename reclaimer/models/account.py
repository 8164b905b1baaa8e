"""Account model.

A pooled AWS account tracked by the operator. Accounts persist across reuse
cycles and are mutated in place; only BYOC accounts are ever deleted here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

# Label set on accounts that have an operator-provisioned IAM user
IAM_USER_ID_LABEL = "iamUserId"

# Condition type recorded when an account is reclaimed for reuse
ACCOUNT_REUSED_CONDITION = "Reused"


class AccountState(Enum):
    """Account lifecycle state."""

    CREATING = "Creating"
    PENDING_VERIFICATION = "PendingVerification"
    READY = "Ready"
    FAILED = "Failed"


@dataclass
class LegalEntity:
    """Organization owning an account."""

    id: str = ""
    name: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "LegalEntity":
        data = data or {}
        return cls(id=data.get("id", ""), name=data.get("name", ""))


@dataclass
class AccountSpec:
    """Desired account configuration.

    Attributes:
        claim_link: Name of the claim currently bound to the account
        claim_link_namespace: Namespace of the bound claim
        legal_entity: Organization that owns the account
        iam_user_secret: Name of the Secret holding the account's IAM credentials
        byoc: True for customer-owned accounts, never returned to the pool
    """

    claim_link: str = ""
    claim_link_namespace: str = ""
    legal_entity: LegalEntity = field(default_factory=LegalEntity)
    iam_user_secret: str = ""
    byoc: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "claim_link": self.claim_link,
            "claim_link_namespace": self.claim_link_namespace,
            "legal_entity": self.legal_entity.to_dict(),
            "iam_user_secret": self.iam_user_secret,
            "byoc": self.byoc,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "AccountSpec":
        data = data or {}
        return cls(
            claim_link=data.get("claim_link", ""),
            claim_link_namespace=data.get("claim_link_namespace", ""),
            legal_entity=LegalEntity.from_dict(data.get("legal_entity")),
            iam_user_secret=data.get("iam_user_secret", ""),
            byoc=data.get("byoc", False),
        )


@dataclass
class AccountCondition:
    """Single status condition on an account."""

    type: str
    status: str
    reason: str = ""
    message: str = ""
    last_probe_time: Optional[datetime] = None
    last_transition_time: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "status": self.status,
            "reason": self.reason,
            "message": self.message,
            "last_probe_time": self.last_probe_time.isoformat() if self.last_probe_time else None,
            "last_transition_time": self.last_transition_time.isoformat() if self.last_transition_time else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccountCondition":
        probe = data.get("last_probe_time")
        transition = data.get("last_transition_time")
        return cls(
            type=data["type"],
            status=data["status"],
            reason=data.get("reason", ""),
            message=data.get("message", ""),
            last_probe_time=datetime.fromisoformat(probe) if probe else None,
            last_transition_time=datetime.fromisoformat(transition) if transition else None,
        )


@dataclass
class AccountStatus:
    """Observed account state."""

    state: Optional[AccountState] = None
    claimed: bool = False
    reused: bool = False
    conditions: List[AccountCondition] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value if self.state else None,
            "claimed": self.claimed,
            "reused": self.reused,
            "conditions": [c.to_dict() for c in self.conditions],
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "AccountStatus":
        data = data or {}
        state = data.get("state")
        return cls(
            state=AccountState(state) if state else None,
            claimed=data.get("claimed", False),
            reused=data.get("reused", False),
            conditions=[AccountCondition.from_dict(c) for c in data.get("conditions", [])],
        )


@dataclass
class Account:
    """Account entity.

    Attributes:
        name: Account entity name
        namespace: Namespace the account lives in
        labels: Entity labels (e.g. iamUserId)
        spec: Desired configuration
        status: Observed state
    """

    name: str
    namespace: str
    labels: Dict[str, str] = field(default_factory=dict)
    spec: AccountSpec = field(default_factory=AccountSpec)
    status: AccountStatus = field(default_factory=AccountStatus)

    def has_iam_user_id_label(self) -> bool:
        """Return True if the account carries an IAM user id label."""
        return IAM_USER_ID_LABEL in self.labels

    def set_condition(self, condition_type: str, status: str, reason: str, message: str) -> AccountCondition:
        """Set a status condition, replacing any existing condition of the same type.

        The transition time only moves when the condition status changes.

        Args:
            condition_type: Condition type (e.g. "Reused")
            status: Condition status ("True"/"False")
            reason: Short machine-readable reason
            message: Human-readable message

        Returns:
            The condition now stored on the account
        """
        now = datetime.now(timezone.utc)

        for condition in self.status.conditions:
            if condition.type != condition_type:
                continue
            if condition.status != status:
                condition.last_transition_time = now
            condition.status = status
            condition.reason = reason
            condition.message = message
            condition.last_probe_time = now
            return condition

        condition = AccountCondition(
            type=condition_type,
            status=status,
            reason=reason,
            message=message,
            last_probe_time=now,
            last_transition_time=now,
        )
        self.status.conditions.append(condition)
        return condition

    def to_dict(self) -> Dict[str, Any]:
        """Convert account to dictionary for serialization."""
        return {
            "name": self.name,
            "namespace": self.namespace,
            "labels": dict(self.labels),
            "spec": self.spec.to_dict(),
            "status": self.status.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Account":
        """Create account from dictionary."""
        return cls(
            name=data["name"],
            namespace=data["namespace"],
            labels=dict(data.get("labels") or {}),
            spec=AccountSpec.from_dict(data.get("spec")),
            status=AccountStatus.from_dict(data.get("status")),
        )
