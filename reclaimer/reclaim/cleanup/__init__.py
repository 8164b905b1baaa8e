"""Resource cleanup tasks run concurrently during reclamation."""

from __future__ import annotations

from typing import List

from ...store.base import SecretStore
from .base import CleanupError, CleanupTask
from .credentials import MANAGED_PRINCIPALS, CredentialRotation, ManagedPrincipal
from .ec2 import SnapshotCleanup, VolumeCleanup
from .route53 import HostedZoneCleanup
from .s3 import BucketCleanup


def default_cleanup_tasks(secret_store: SecretStore, secret_namespace: str) -> List[CleanupTask]:
    """Return the fixed set of cleanup tasks run for a pooled account."""
    return [
        SnapshotCleanup(),
        VolumeCleanup(),
        BucketCleanup(),
        HostedZoneCleanup(),
        CredentialRotation(secret_store, secret_namespace),
    ]


__all__ = [
    "MANAGED_PRINCIPALS",
    "BucketCleanup",
    "CleanupError",
    "CleanupTask",
    "CredentialRotation",
    "HostedZoneCleanup",
    "ManagedPrincipal",
    "SnapshotCleanup",
    "VolumeCleanup",
    "default_cleanup_tasks",
]
