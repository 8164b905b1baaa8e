"""EC2 snapshot and volume cleanup."""

from __future__ import annotations

import logging

from botocore.exceptions import ClientError

from ...aws.client import AwsClient
from ...models.account_claim import AccountClaim
from .base import CleanupError, CleanupTask

logger = logging.getLogger(__name__)

# Only snapshots owned by the account itself, never shared or public ones
SELF_OWNER_FILTER = {"Name": "owner-alias", "Values": ["self"]}


class SnapshotCleanup(CleanupTask):
    """Delete every EBS snapshot owned by the account."""

    @property
    def name(self) -> str:
        return "snapshots"

    def execute(self, client: AwsClient, claim: AccountClaim) -> str:
        ec2 = client.ec2

        try:
            paginator = ec2.get_paginator("describe_snapshots")
            snapshot_ids = [
                snapshot["SnapshotId"]
                for page in paginator.paginate(Filters=[SELF_OWNER_FILTER])
                for snapshot in page.get("Snapshots", [])
            ]
        except ClientError as e:
            raise CleanupError("Failed describing EBS snapshots") from e

        for snapshot_id in snapshot_ids:
            try:
                ec2.delete_snapshot(SnapshotId=snapshot_id)
            except ClientError as e:
                raise CleanupError(f"Failed deleting EBS snapshot: {snapshot_id}") from e
            logger.debug(f"Deleted EBS snapshot {snapshot_id}")

        return "Snapshot cleanup finished successfully"


class VolumeCleanup(CleanupTask):
    """Delete every EBS volume in the region."""

    @property
    def name(self) -> str:
        return "volumes"

    def execute(self, client: AwsClient, claim: AccountClaim) -> str:
        ec2 = client.ec2

        try:
            paginator = ec2.get_paginator("describe_volumes")
            volume_ids = [volume["VolumeId"] for page in paginator.paginate() for volume in page.get("Volumes", [])]
        except ClientError as e:
            raise CleanupError("Failed describing EBS volumes") from e

        for volume_id in volume_ids:
            try:
                ec2.delete_volume(VolumeId=volume_id)
            except ClientError as e:
                raise CleanupError(f"Failed deleting EBS volume: {volume_id}") from e
            logger.debug(f"Deleted EBS volume {volume_id}")

        return "EBS Volume cleanup finished successfully"
