"""Account, claim and secret stores.

Classes:
    AccountStore: Interface for Account/AccountClaim entities
    SecretStore: Interface for credential Secrets
    FileAccountStore: YAML file-backed AccountStore
    FileSecretStore: YAML file-backed SecretStore
"""

from __future__ import annotations

from .base import AccountStore, EntityNotFoundError, SecretStore, StoreError
from .file_store import FileAccountStore, FileSecretStore

__all__ = [
    "AccountStore",
    "EntityNotFoundError",
    "FileAccountStore",
    "FileSecretStore",
    "SecretStore",
    "StoreError",
]
