"""Data models for accounts, claims, secrets and cleanup results."""

from __future__ import annotations

from .account import Account, AccountCondition, AccountSpec, AccountState, AccountStatus, LegalEntity
from .account_claim import AccountClaim, AccountClaimSpec, SecretRef
from .cleanup_outcome import CleanupOutcome
from .reclamation_result import ReclamationResult
from .secret import Secret

__all__ = [
    "Account",
    "AccountClaim",
    "AccountClaimSpec",
    "AccountCondition",
    "AccountSpec",
    "AccountState",
    "AccountStatus",
    "CleanupOutcome",
    "LegalEntity",
    "ReclamationResult",
    "Secret",
    "SecretRef",
]
