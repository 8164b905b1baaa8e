"""YAML file-backed stores.

Stores Account, AccountClaim and Secret entities as YAML documents so the
reclaimer can run from the command line without a cluster.

Storage structure:
    <root>/
        accounts/<namespace>/<name>.yaml
        accountclaims/<namespace>/<name>.yaml
        secrets/<namespace>/<name>.yaml
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..models.account import Account
from ..models.account_claim import AccountClaim
from ..models.secret import Secret
from .base import AccountStore, EntityNotFoundError, SecretStore, StoreError

logger = logging.getLogger(__name__)

ACCOUNTS_DIR = "accounts"
CLAIMS_DIR = "accountclaims"
SECRETS_DIR = "secrets"


def _default_root() -> Path:
    return Path.home() / ".reclaimer" / "store"


class _YamlDocuments:
    """Namespaced YAML documents under a single root directory."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def path(self, kind: str, name: str, namespace: str) -> Path:
        return self.root / kind / namespace / f"{name}.yaml"

    def load(self, kind: str, name: str, namespace: str, label: str) -> Dict[str, Any]:
        path = self.path(kind, name, namespace)
        if not path.exists():
            raise EntityNotFoundError(label, name, namespace)

        with open(path, "r") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise StoreError(f"Malformed {label} document: {path}")
        return data

    def save(self, kind: str, name: str, namespace: str, data: Dict[str, Any]) -> None:
        path = self.path(kind, name, namespace)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def remove(self, kind: str, name: str, namespace: str, label: str) -> None:
        path = self.path(kind, name, namespace)
        if not path.exists():
            raise EntityNotFoundError(label, name, namespace)
        path.unlink()


class FileAccountStore(AccountStore):
    """AccountStore backed by YAML files.

    Spec and status are written by separate calls: update() keeps the status
    found on disk and update_status() keeps the spec found on disk.

    Attributes:
        root: Base directory of the store
    """

    def __init__(self, root: Optional[str] = None) -> None:
        """Initialize file account store.

        Args:
            root: Base directory (default: ~/.reclaimer/store)
        """
        self.root = Path(root) if root else _default_root()
        self._docs = _YamlDocuments(self.root)

    def get_account(self, name: str, namespace: str) -> Account:
        return Account.from_dict(self._docs.load(ACCOUNTS_DIR, name, namespace, "Account"))

    def get_claim(self, name: str, namespace: str) -> AccountClaim:
        return AccountClaim.from_dict(self._docs.load(CLAIMS_DIR, name, namespace, "AccountClaim"))

    def save_account(self, account: Account) -> None:
        """Write the whole account, creating it if needed."""
        self._docs.save(ACCOUNTS_DIR, account.name, account.namespace, account.to_dict())

    def save_claim(self, claim: AccountClaim) -> None:
        """Write the whole claim, creating it if needed."""
        self._docs.save(CLAIMS_DIR, claim.name, claim.namespace, claim.to_dict())

    def update(self, account: Account) -> None:
        stored = self._docs.load(ACCOUNTS_DIR, account.name, account.namespace, "Account")
        stored["labels"] = dict(account.labels)
        stored["spec"] = account.spec.to_dict()
        self._docs.save(ACCOUNTS_DIR, account.name, account.namespace, stored)
        logger.debug(f"Updated spec of account {account.namespace}/{account.name}")

    def update_status(self, account: Account) -> None:
        stored = self._docs.load(ACCOUNTS_DIR, account.name, account.namespace, "Account")
        stored["status"] = account.status.to_dict()
        self._docs.save(ACCOUNTS_DIR, account.name, account.namespace, stored)
        logger.debug(f"Updated status of account {account.namespace}/{account.name}")

    def delete(self, account: Account) -> None:
        self._docs.remove(ACCOUNTS_DIR, account.name, account.namespace, "Account")
        logger.debug(f"Deleted account {account.namespace}/{account.name}")


class FileSecretStore(SecretStore):
    """SecretStore backed by YAML files with base64 encoded values."""

    def __init__(self, root: Optional[str] = None) -> None:
        self.root = Path(root) if root else _default_root()
        self._docs = _YamlDocuments(self.root)

    def get(self, name: str, namespace: str) -> Secret:
        return Secret.from_dict(self._docs.load(SECRETS_DIR, name, namespace, "Secret"))

    def save(self, secret: Secret) -> None:
        """Write the secret, creating it if needed."""
        self._docs.save(SECRETS_DIR, secret.name, secret.namespace, secret.to_dict())

    def update(self, secret: Secret) -> None:
        # Secrets must already exist; rotation never creates them
        self._docs.load(SECRETS_DIR, secret.name, secret.namespace, "Secret")
        self._docs.save(SECRETS_DIR, secret.name, secret.namespace, secret.to_dict())
        logger.debug(f"Updated secret {secret.namespace}/{secret.name}")
