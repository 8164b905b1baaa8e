"""Base class for cleanup tasks."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from botocore.exceptions import ClientError

from ...aws.client import AwsClient
from ...models.account_claim import AccountClaim
from ...models.cleanup_outcome import CleanupOutcome

logger = logging.getLogger(__name__)


class CleanupError(Exception):
    """Raised by a cleanup task to stop with a failure message."""


def error_code(error: ClientError) -> str:
    """Return the AWS error code carried by a ClientError."""
    return error.response.get("Error", {}).get("Code", "Unknown")


class CleanupTask(ABC):
    """Abstract base class for all resource cleanup tasks.

    Each cleanup task should:
    1. Have a unique name
    2. Implement execute() to clean one resource domain, raising CleanupError on failure
    3. Return a human-readable success message from execute()

    run() wraps execute() and always yields exactly one CleanupOutcome.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this task (e.g. "s3")."""

    @abstractmethod
    def execute(self, client: AwsClient, claim: AccountClaim) -> str:
        """Clean the task's resource domain.

        Args:
            client: Region-scoped AWS client
            claim: Released account claim

        Returns:
            Success message

        Raises:
            CleanupError: On the first error; remaining work in this task is skipped
        """

    def run(self, client: AwsClient, claim: AccountClaim) -> CleanupOutcome:
        """Run the task and report its single terminal outcome."""
        try:
            message = self.execute(client, claim)
        except CleanupError as e:
            cause = e.__cause__
            if cause is not None:
                logger.debug(f"Cleanup task {self.name} failed: {cause}")
            return CleanupOutcome.failed(self.name, str(e))
        except Exception as e:
            logger.exception(f"Unexpected error in cleanup task {self.name}")
            return CleanupOutcome.failed(self.name, f"Unexpected error in {self.name} cleanup: {e}")

        return CleanupOutcome.succeeded(self.name, message)
