"""Cleanup outcome model.

Terminal result of a single cleanup task run.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CleanupOutcome:
    """Result of one cleanup task.

    Exactly one outcome is produced per dispatched task.

    Attributes:
        worker_name: Name of the task that produced the outcome
        success: True if the task finished without error
        message: Human-readable notification or error message
    """

    worker_name: str
    success: bool
    message: str

    @classmethod
    def succeeded(cls, worker_name: str, message: str) -> "CleanupOutcome":
        return cls(worker_name=worker_name, success=True, message=message)

    @classmethod
    def failed(cls, worker_name: str, message: str) -> "CleanupOutcome":
        return cls(worker_name=worker_name, success=False, message=message)
