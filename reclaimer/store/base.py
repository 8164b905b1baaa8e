"""Store interfaces for entities consumed during reclamation."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..models.account import Account
from ..models.account_claim import AccountClaim
from ..models.secret import Secret


class StoreError(Exception):
    """Raised when a store operation fails."""


class EntityNotFoundError(StoreError):
    """Raised when a requested entity does not exist."""

    def __init__(self, kind: str, name: str, namespace: str) -> None:
        super().__init__(f"{kind} {namespace}/{name} not found")
        self.kind = kind
        self.name = name
        self.namespace = namespace


class AccountStore(ABC):
    """Get/update operations on Account and AccountClaim entities."""

    @abstractmethod
    def get_account(self, name: str, namespace: str) -> Account:
        """Fetch an account.

        Raises:
            EntityNotFoundError: If the account does not exist
        """

    @abstractmethod
    def get_claim(self, name: str, namespace: str) -> AccountClaim:
        """Fetch an account claim.

        Raises:
            EntityNotFoundError: If the claim does not exist
        """

    @abstractmethod
    def update(self, account: Account) -> None:
        """Persist the account's labels and spec. Status is left untouched."""

    @abstractmethod
    def update_status(self, account: Account) -> None:
        """Persist the account's status only."""

    @abstractmethod
    def delete(self, account: Account) -> None:
        """Delete the account entity."""


class SecretStore(ABC):
    """Get/update operations on credential Secrets."""

    @abstractmethod
    def get(self, name: str, namespace: str) -> Secret:
        """Fetch a secret.

        Raises:
            EntityNotFoundError: If the secret does not exist
        """

    @abstractmethod
    def update(self, secret: Secret) -> None:
        """Persist the secret's data."""
