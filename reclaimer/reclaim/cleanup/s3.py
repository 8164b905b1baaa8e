"""S3 bucket cleanup."""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import ClientError

from ...aws.client import AwsClient
from ...models.account_claim import AccountClaim
from .base import CleanupError, CleanupTask, error_code

logger = logging.getLogger(__name__)

# Error codes meaning the bucket is already gone
BUCKET_GONE_CODES = {"NoSuchBucket"}


def empty_bucket(s3: Any, bucket_name: str) -> int:
    """Delete every object in a bucket, one delete_objects batch per listing page.

    Args:
        s3: boto3 S3 client
        bucket_name: Bucket to empty

    Returns:
        Number of objects submitted for deletion

    Raises:
        ClientError: On any listing or deletion error
    """
    deleted = 0
    paginator = s3.get_paginator("list_objects_v2")

    # Listing pages hold at most 1000 keys, the delete_objects batch limit
    for page in paginator.paginate(Bucket=bucket_name):
        objects = [{"Key": obj["Key"]} for obj in page.get("Contents", [])]
        if not objects:
            continue

        response = s3.delete_objects(Bucket=bucket_name, Delete={"Objects": objects, "Quiet": True})
        for error in response.get("Errors", []):
            logger.warning(f"Could not delete s3://{bucket_name}/{error.get('Key')}: {error.get('Code')}")
        deleted += len(objects)

    return deleted


class BucketCleanup(CleanupTask):
    """Empty and delete every S3 bucket.

    Buckets that disappear while being processed are treated as deleted, so
    re-running the cleanup is safe.
    """

    @property
    def name(self) -> str:
        return "s3"

    def execute(self, client: AwsClient, claim: AccountClaim) -> str:
        s3 = client.s3

        try:
            buckets = s3.list_buckets().get("Buckets", [])
        except ClientError as e:
            raise CleanupError("Failed listing S3 buckets") from e

        for bucket in buckets:
            bucket_name = bucket["Name"]

            try:
                count = empty_bucket(s3, bucket_name)
                logger.debug(f"Deleted {count} objects from bucket {bucket_name}")
            except ClientError as e:
                if error_code(e) not in BUCKET_GONE_CODES:
                    raise CleanupError(f"Failed to delete bucket content: {bucket_name}") from e

            try:
                s3.delete_bucket(Bucket=bucket_name)
            except ClientError as e:
                if error_code(e) not in BUCKET_GONE_CODES:
                    raise CleanupError(f"Failed deleting S3 bucket: {bucket_name}") from e
                logger.info(f"S3 bucket {bucket_name} already deleted")
                continue

            logger.debug(f"Deleted S3 bucket {bucket_name}")

        return "S3 cleanup finished successfully"
