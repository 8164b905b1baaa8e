"""Account reclamation orchestrator.

Finalizes a released AccountClaim: tears down the claimed account's
resources and credentials and returns it to the pool, or deletes it when
it is customer-owned (BYOC).
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from ..aws.client import AwsClient, get_aws_client
from ..models.account import ACCOUNT_REUSED_CONDITION, Account, AccountState
from ..models.account_claim import AccountClaim
from ..models.reclamation_result import ReclamationResult
from ..store.base import AccountStore, SecretStore
from .aggregator import run_cleanup
from .audit import AuditStorage
from .cleanup import CleanupTask, default_cleanup_tasks
from .iam import IAMTeardownError, teardown_iam_users

logger = logging.getLogger(__name__)

# Namespace holding Account entities and their credential Secrets
ACCOUNT_NAMESPACE = "aws-account-operator"

ClientFactory = Callable[[SecretStore, str, str, str], AwsClient]


def reset_account_spec(account: Account, claim: AccountClaim) -> None:
    """Unlink the account from its claim.

    The claim's legal entity is carried over only when the account has none,
    which covers accounts claimed before reuse existed.
    """
    account.spec.claim_link = ""
    account.spec.claim_link_namespace = ""

    if account.spec.legal_entity.id == "":
        account.spec.legal_entity.id = claim.spec.legal_entity.id
        account.spec.legal_entity.name = claim.spec.legal_entity.name


def reset_account_status(account: Account, state: AccountState) -> None:
    """Mark the account as unclaimed and reused, in the given state."""
    account.status.state = state
    account.status.claimed = False
    account.status.reused = True
    account.set_condition(
        ACCOUNT_REUSED_CONDITION,
        status="True",
        reason=state.value,
        message=f"Account Reuse - {state.value}",
    )


class AccountReclaimer:
    """Reclamation orchestrator.

    Attributes:
        account_store: Store for Account and AccountClaim entities
        secret_store: Store for credential Secrets
        account_namespace: Namespace holding Accounts and their Secrets
        client_factory: Builds a region-scoped AWS client from a Secret
        tasks: Cleanup tasks run for pooled accounts
        audit_storage: Optional audit log for reclamation results
    """

    def __init__(
        self,
        account_store: AccountStore,
        secret_store: SecretStore,
        account_namespace: str = ACCOUNT_NAMESPACE,
        client_factory: ClientFactory = get_aws_client,
        tasks: Optional[Sequence[CleanupTask]] = None,
        audit_storage: Optional[AuditStorage] = None,
    ) -> None:
        self.account_store = account_store
        self.secret_store = secret_store
        self.account_namespace = account_namespace
        self.client_factory = client_factory
        self.tasks = list(tasks) if tasks is not None else default_cleanup_tasks(secret_store, account_namespace)
        self.audit_storage = audit_storage

    def finalize(self, claim: AccountClaim) -> ReclamationResult:
        """Reclaim the account bound to a released claim.

        Safe to re-run: the caller retries the whole operation on any raised error.

        Args:
            claim: Released account claim

        Returns:
            ReclamationResult describing the outcome

        Raises:
            EntityNotFoundError: If the claimed account does not exist
            AwsClientError: If the AWS client cannot be built
            StoreError: If the account spec or status cannot be written
        """
        account = self.account_store.get_account(claim.spec.account_link, self.account_namespace)
        client = self._build_client(account, claim)

        if account.has_iam_user_id_label() and account.spec.byoc:
            try:
                teardown_iam_users(client, account)
            except IAMTeardownError as e:
                logger.error(f"Failed to delete IAM user during finalizer cleanup: {e}")
            except Exception as e:
                logger.exception(f"Unexpected error during IAM user cleanup: {e}")
        else:
            logger.info(f"Account: {account.name} has no label")

        if account.spec.byoc:
            result = self._finalize_byoc(account, claim)
        else:
            result = self._finalize_pooled(account, claim, client)

        if self.audit_storage is not None:
            self.audit_storage.log_reclamation(result)
        return result

    def _build_client(self, account: Account, claim: AccountClaim) -> AwsClient:
        region = claim.region

        # BYOC cleanup must not run as the managed user it is about to delete
        if account.spec.byoc:
            if claim.spec.byoc_secret_ref is None:
                raise ValueError(f"BYOC AccountClaim '{claim.name}' has no BYOC secret reference")
            secret_name, namespace = claim.spec.byoc_secret_ref.name, claim.namespace
        else:
            secret_name, namespace = account.spec.iam_user_secret, self.account_namespace

        try:
            return self.client_factory(self.secret_store, secret_name, namespace, region)
        except Exception:
            logger.error(f"Unable to create aws client for region {region}")
            raise

    def _finalize_byoc(self, account: Account, claim: AccountClaim) -> ReclamationResult:
        deleted = True
        try:
            self.account_store.delete(account)
        except Exception as e:
            # Reported as finalized anyway; the account entity is left behind
            logger.error(f"Failed to delete BYOC account from accountclaim cleanup: {e}")
            deleted = False

        return ReclamationResult(
            claim_name=claim.name,
            claim_namespace=claim.namespace,
            account_name=account.name,
            byoc=True,
            account_deleted=deleted,
        )

    def _finalize_pooled(self, account: Account, claim: AccountClaim, client: AwsClient) -> ReclamationResult:
        cleanup_succeeded = run_cleanup(client, claim, self.tasks)
        state = AccountState.READY if cleanup_succeeded else AccountState.FAILED

        reset_account_spec(account, claim)
        try:
            self.account_store.update(account)
        except Exception:
            logger.error("Failed to update account spec for reuse")
            raise

        reset_account_status(account, state)
        try:
            self.account_store.update_status(account)
        except Exception:
            logger.error(f"Status update for {account.name} failed")
            raise

        if cleanup_succeeded:
            logger.info("Successfully finalized AccountClaim")
        else:
            logger.error(f"AccountClaim finalized with cleanup failures; account {account.name} marked {state.value}")

        return ReclamationResult(
            claim_name=claim.name,
            claim_namespace=claim.namespace,
            account_name=account.name,
            byoc=False,
            state=state,
            cleanup_succeeded=cleanup_succeeded,
        )
