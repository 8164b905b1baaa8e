"""Integration tests for the finalize and audit CLI commands."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock, patch

import pytest
from typer.testing import CliRunner

from reclaimer.cli.main import app
from reclaimer.models.account import AccountState
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


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def store_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a populated file store and point the audit log into tmp_path."""
    store = tmp_path / "store"
    monkeypatch.setenv("RECLAIMER_AUDIT_PATH", str(tmp_path / "audit"))
    monkeypatch.delenv("RECLAIMER_STORE_PATH", raising=False)
    monkeypatch.delenv("RECLAIMER_ACCOUNT_NAMESPACE", raising=False)

    accounts = FileAccountStore(str(store))
    accounts.save_account(create_account(name=ACCOUNT_NAME))
    accounts.save_claim(create_claim(account_link=ACCOUNT_NAME))

    secrets = FileSecretStore(str(store))
    secrets.save(create_secret(f"{ACCOUNT_NAME}-secret"))
    secrets.save(create_secret(f"{ACCOUNT_NAME}-osdmanagedadminsre-secret"))
    return store


class TestFinalizeCommand:
    """Tests for `reclaimer finalize`."""

    @patch("reclaimer.aws.client.AwsClient")
    def test_finalize_returns_account_to_pool(self, mock_client_class: Mock, runner: CliRunner, store_dir: Path) -> None:
        """Test a successful finalize marks the account Ready and audits it."""
        mock_client_class.return_value = create_mock_aws_client()

        result = runner.invoke(app, ["--store-path", str(store_dir), "finalize", "my-claim", "-n", "customer-ns"])

        assert result.exit_code == 0, result.output
        assert "returned to the pool" in result.output
        mock_client_class.assert_called_once_with(
            region="us-east-1", access_key_id="AKIAOLD", secret_access_key="old-secret-key"
        )
        account = FileAccountStore(str(store_dir)).get_account(ACCOUNT_NAME, ACCOUNT_NAMESPACE)
        assert account.status.state == AccountState.READY

        listing = runner.invoke(app, ["--store-path", str(store_dir), "audit", "list"])
        assert listing.exit_code == 0, listing.output
        assert "Reclamations" in listing.output

    @patch("reclaimer.aws.client.AwsClient")
    def test_finalize_reports_failed_cleanup(self, mock_client_class: Mock, runner: CliRunner, store_dir: Path) -> None:
        """Test a cleanup failure is reported and the command still exits 0."""
        client = create_mock_aws_client()
        client.s3.list_buckets.side_effect = client_error("AccessDenied", "ListBuckets")
        mock_client_class.return_value = client

        result = runner.invoke(app, ["--store-path", str(store_dir), "finalize", "my-claim", "-n", "customer-ns"])

        assert result.exit_code == 0, result.output
        assert "cleanup failed" in result.output
        account = FileAccountStore(str(store_dir)).get_account(ACCOUNT_NAME, ACCOUNT_NAMESPACE)
        assert account.status.state == AccountState.FAILED

    def test_unknown_claim_exits_1(self, runner: CliRunner, store_dir: Path) -> None:
        """Test a missing claim exits with code 1."""
        result = runner.invoke(app, ["--store-path", str(store_dir), "finalize", "nope", "-n", "customer-ns"])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_missing_credentials_exits_1(self, runner: CliRunner, store_dir: Path) -> None:
        """Test a missing IAM user secret exits with code 1 and leaves the account claimed."""
        (store_dir / "secrets" / ACCOUNT_NAMESPACE / f"{ACCOUNT_NAME}-secret.yaml").unlink()

        result = runner.invoke(app, ["--store-path", str(store_dir), "finalize", "my-claim", "-n", "customer-ns"])

        assert result.exit_code == 1
        assert "Unable to create AWS client" in result.output
        account = FileAccountStore(str(store_dir)).get_account(ACCOUNT_NAME, ACCOUNT_NAMESPACE)
        assert account.status.claimed is True


class TestAuditListCommand:
    """Tests for `reclaimer audit list`."""

    def test_empty_audit_log(self, runner: CliRunner, store_dir: Path) -> None:
        result = runner.invoke(app, ["audit", "list"])

        assert result.exit_code == 0
        assert "No reclamations recorded." in result.output

    def test_invalid_since(self, runner: CliRunner, store_dir: Path) -> None:
        result = runner.invoke(app, ["audit", "list", "--since", "yesterday"])

        assert result.exit_code == 1
        assert "Invalid date format" in result.output


def test_version(runner: CliRunner) -> None:
    """Test version command prints package and boto3 versions."""
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "aws-account-reclaimer version" in result.output
    assert "boto3" in result.output
