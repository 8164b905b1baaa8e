"""AccountClaim model.

Binds a consumer to a leased account. Released claims trigger reclamation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .account import LegalEntity


@dataclass
class SecretRef:
    """Reference to a Secret by name (namespace is the claim's)."""

    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name}


@dataclass
class AccountClaimSpec:
    """Claim configuration.

    Attributes:
        account_link: Name of the account the claim is bound to
        regions: AWS regions requested by the claim; the first one is authoritative
        legal_entity: Organization making the claim
        byoc: True when the claimed account is customer-owned
        byoc_secret_ref: Admin credential Secret for BYOC accounts
    """

    account_link: str
    regions: List[str] = field(default_factory=list)
    legal_entity: LegalEntity = field(default_factory=LegalEntity)
    byoc: bool = False
    byoc_secret_ref: Optional[SecretRef] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "account_link": self.account_link,
            "regions": list(self.regions),
            "legal_entity": self.legal_entity.to_dict(),
            "byoc": self.byoc,
            "byoc_secret_ref": self.byoc_secret_ref.to_dict() if self.byoc_secret_ref else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccountClaimSpec":
        secret_ref = data.get("byoc_secret_ref")
        return cls(
            account_link=data["account_link"],
            regions=list(data.get("regions") or []),
            legal_entity=LegalEntity.from_dict(data.get("legal_entity")),
            byoc=data.get("byoc", False),
            byoc_secret_ref=SecretRef(name=secret_ref["name"]) if secret_ref else None,
        )


@dataclass
class AccountClaim:
    """AccountClaim entity."""

    name: str
    namespace: str
    spec: AccountClaimSpec

    @property
    def region(self) -> str:
        """Authoritative region for the claim.

        Raises:
            ValueError: If the claim lists no regions
        """
        if not self.spec.regions:
            raise ValueError(f"AccountClaim '{self.name}' has no regions")
        return self.spec.regions[0]

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "namespace": self.namespace, "spec": self.spec.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccountClaim":
        return cls(
            name=data["name"],
            namespace=data["namespace"],
            spec=AccountClaimSpec.from_dict(data["spec"]),
        )
