"""Concurrent cleanup fan-out and outcome aggregation."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Dict, Sequence

from ..aws.client import AwsClient
from ..models.account_claim import AccountClaim
from ..models.cleanup_outcome import CleanupOutcome
from .cleanup.base import CleanupTask

logger = logging.getLogger(__name__)


def run_cleanup(client: AwsClient, claim: AccountClaim, tasks: Sequence[CleanupTask]) -> bool:
    """Run all cleanup tasks concurrently and wait for every outcome.

    Every task runs to completion; a failing task never cancels its siblings
    and no timeout bounds the wait. Exactly one outcome is received per task.

    Args:
        client: Region-scoped AWS client shared by all tasks
        claim: Released account claim
        tasks: Cleanup tasks to dispatch

    Returns:
        True if every task succeeded, False if any failed
    """
    if not tasks:
        return True

    cleanup_failed = False

    with ThreadPoolExecutor(max_workers=len(tasks), thread_name_prefix="cleanup") as executor:
        futures: Dict[Future[CleanupOutcome], CleanupTask] = {
            executor.submit(task.run, client, claim): task for task in tasks
        }

        for future in as_completed(futures):
            task = futures[future]
            try:
                outcome = future.result()
            except Exception as e:
                # run() reports its own errors; this only covers a broken task implementation
                outcome = CleanupOutcome.failed(task.name, f"Cleanup task {task.name} crashed: {e}")

            if outcome.success:
                logger.info(outcome.message)
            else:
                logger.error(outcome.message)
                cleanup_failed = True

    if cleanup_failed:
        logger.error("Failed to clean up AWS account")

    logger.info("AWS account cleanup completed")
    return not cleanup_failed
