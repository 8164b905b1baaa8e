"""Integration tests for the reclamation workflow.

Runs AccountReclaimer with the real cleanup tasks and file stores against a
mocked AWS client.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, Mock, patch

import pytest

from reclaimer.models.account import AccountState, LegalEntity
from reclaimer.reclaim.finalizer import AccountReclaimer
from reclaimer.store.base import EntityNotFoundError
from reclaimer.store.file_store import FileAccountStore, FileSecretStore
from tests.fixtures.accounts import (
    ACCOUNT_NAMESPACE,
    client_error,
    create_account,
    create_claim,
    create_mock_aws_client,
    create_secret,
)

ACCOUNT_NAME = "osd-creds-mgmt-abc123"


class TestReclaimWorkflowIntegration:
    """End-to-end reclamation scenarios."""

    @pytest.fixture
    def account_store(self, tmp_path: Path) -> FileAccountStore:
        return FileAccountStore(str(tmp_path))

    @pytest.fixture
    def secret_store(self, tmp_path: Path) -> FileSecretStore:
        store = FileSecretStore(str(tmp_path))
        store.save(create_secret(f"{ACCOUNT_NAME}-secret"))
        store.save(create_secret(f"{ACCOUNT_NAME}-osdmanagedadminsre-secret"))
        return store

    @pytest.fixture
    def aws_client(self) -> MagicMock:
        return create_mock_aws_client()

    def _reclaimer(
        self, account_store: FileAccountStore, secret_store: FileSecretStore, aws_client: MagicMock
    ) -> AccountReclaimer:
        return AccountReclaimer(
            account_store=account_store,
            secret_store=secret_store,
            client_factory=Mock(return_value=aws_client),
        )

    def test_pooled_success_returns_account_ready(
        self, account_store: FileAccountStore, secret_store: FileSecretStore, aws_client: MagicMock
    ) -> None:
        """Test all tasks succeeding leaves the account Ready, unclaimed, reused and backfilled."""
        account_store.save_account(create_account(name=ACCOUNT_NAME, legal_entity_id=""))
        claim = create_claim(account_link=ACCOUNT_NAME, legal_entity_id="L9", legal_entity_name="N")

        result = self._reclaimer(account_store, secret_store, aws_client).finalize(claim)

        stored = account_store.get_account(ACCOUNT_NAME, ACCOUNT_NAMESPACE)
        assert result.state == AccountState.READY
        assert stored.status.state == AccountState.READY
        assert stored.status.claimed is False
        assert stored.status.reused is True
        assert stored.spec.legal_entity == LegalEntity(id="L9", name="N")
        assert stored.spec.claim_link == ""
        assert stored.status.conditions[-1].message == "Account Reuse - Ready"

        rotated = secret_store.get(f"{ACCOUNT_NAME}-secret", ACCOUNT_NAMESPACE)
        assert rotated.data["aws_access_key_id"] == b"AKIAOSDMANAGEDADMIN"

    def test_pooled_dns_failure_marks_account_failed(
        self, account_store: FileAccountStore, secret_store: FileSecretStore, aws_client: MagicMock
    ) -> None:
        """Test a failing Route53 cleanup only changes the final state to Failed."""
        account_store.save_account(create_account(name=ACCOUNT_NAME, legal_entity_id=""))
        claim = create_claim(account_link=ACCOUNT_NAME, legal_entity_id="L9", legal_entity_name="N")
        aws_client.route53.list_hosted_zones.side_effect = client_error("Throttling", "ListHostedZones")

        result = self._reclaimer(account_store, secret_store, aws_client).finalize(claim)

        stored = account_store.get_account(ACCOUNT_NAME, ACCOUNT_NAMESPACE)
        assert result.state == AccountState.FAILED
        assert result.cleanup_succeeded is False
        assert stored.status.state == AccountState.FAILED
        assert stored.status.claimed is False
        assert stored.status.reused is True
        assert stored.spec.legal_entity == LegalEntity(id="L9", name="N")
        assert stored.status.conditions[-1].message == "Account Reuse - Failed"

    def test_rerun_is_idempotent(
        self, account_store: FileAccountStore, secret_store: FileSecretStore, aws_client: MagicMock
    ) -> None:
        """Test finalizing twice leaves a single Reused condition and the same state."""
        account_store.save_account(create_account(name=ACCOUNT_NAME, legal_entity_id="L0", legal_entity_name="Old"))
        claim = create_claim(account_link=ACCOUNT_NAME)
        reclaimer = self._reclaimer(account_store, secret_store, aws_client)

        reclaimer.finalize(claim)
        reclaimer.finalize(claim)

        stored = account_store.get_account(ACCOUNT_NAME, ACCOUNT_NAMESPACE)
        assert stored.status.state == AccountState.READY
        assert len(stored.status.conditions) == 1
        assert stored.spec.legal_entity == LegalEntity(id="L0", name="Old")

    @patch("reclaimer.reclaim.finalizer.teardown_iam_users")
    def test_byoc_deletes_account_without_cleanup(
        self,
        mock_teardown: Mock,
        account_store: FileAccountStore,
        secret_store: FileSecretStore,
        aws_client: MagicMock,
    ) -> None:
        """Test BYOC runs teardown once, dispatches no cleanup and deletes the account."""
        account_store.save_account(create_account(name=ACCOUNT_NAME, byoc=True, labels={"iamUserId": "abc"}))
        reclaimer = self._reclaimer(account_store, secret_store, aws_client)
        reclaimer.tasks = [Mock() for _ in range(5)]

        result = reclaimer.finalize(create_claim(account_link=ACCOUNT_NAME, byoc=True))

        mock_teardown.assert_called_once()
        for task in reclaimer.tasks:
            task.run.assert_not_called()
        assert result.account_deleted is True
        with pytest.raises(EntityNotFoundError):
            account_store.get_account(ACCOUNT_NAME, ACCOUNT_NAMESPACE)

    def test_byoc_teardown_failure_still_succeeds(
        self, account_store: FileAccountStore, secret_store: FileSecretStore, aws_client: MagicMock
    ) -> None:
        """Test a real IAM teardown failure does not stop the BYOC account deletion."""
        account_store.save_account(create_account(name=ACCOUNT_NAME, byoc=True, labels={"iamUserId": "abc"}))
        aws_client.iam.get_paginator.return_value.paginate.side_effect = client_error("AccessDenied", "ListUsers")

        result = self._reclaimer(account_store, secret_store, aws_client).finalize(
            create_claim(account_link=ACCOUNT_NAME, byoc=True)
        )

        assert result.byoc is True
        assert result.account_deleted is True
        aws_client.s3.list_buckets.assert_not_called()
        aws_client.ec2.get_paginator.assert_not_called()
