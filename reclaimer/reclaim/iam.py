"""IAM user teardown for BYOC accounts.

Removes the IAM users the operator created in a customer-owned account.
Ownership is decided by tags only: a user is removed when it carries both
the account-name tag and the account-namespace tag of the account.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from ..aws.client import AwsClient
from ..models.account import Account

logger = logging.getLogger(__name__)

CLUSTER_ACCOUNT_NAME_TAG_KEY = "clusterAccountName"
CLUSTER_NAMESPACE_TAG_KEY = "clusterNamespace"

# Service errors and connection, credential or timeout failures
AWS_ERRORS = (ClientError, BotoCoreError)


class IAMTeardownError(Exception):
    """Raised when IAM teardown stops on an AWS error."""


def is_owned_by(tags: Optional[List[Dict[str, str]]], account_name: str, account_namespace: str) -> bool:
    """Check whether a user's tags mark it as belonging to an account.

    Args:
        tags: IAM tags as returned by get_user (list of Key/Value dicts)
        account_name: Account entity name
        account_namespace: Account entity namespace

    Returns:
        True only if both the name tag and the namespace tag match
    """
    tag_map = {tag["Key"]: tag["Value"] for tag in tags or []}
    return (
        tag_map.get(CLUSTER_ACCOUNT_NAME_TAG_KEY) == account_name
        and tag_map.get(CLUSTER_NAMESPACE_TAG_KEY) == account_namespace
    )


def list_iam_users(iam: Any) -> List[Dict[str, Any]]:
    """List every IAM user in the account."""
    paginator = iam.get_paginator("list_users")
    return [user for page in paginator.paginate() for user in page.get("Users", [])]


def delete_iam_user(iam: Any, user_name: str) -> None:
    """Detach policies, delete access keys, then delete the user.

    IAM rejects deleting a user that still has attached policies or access
    keys, so the order is fixed.

    Raises:
        IAMTeardownError: On the first failing step
    """
    try:
        policies = iam.list_attached_user_policies(UserName=user_name).get("AttachedPolicies", [])
    except AWS_ERRORS as e:
        raise IAMTeardownError(f"Unable to list IAM user policies from user {user_name}: {e}") from e

    for policy in policies:
        try:
            iam.detach_user_policy(UserName=user_name, PolicyArn=policy["PolicyArn"])
        except AWS_ERRORS as e:
            raise IAMTeardownError(f"Unable to detach IAM user policy from user {user_name}: {e}") from e

    try:
        keys = iam.list_access_keys(UserName=user_name).get("AccessKeyMetadata", [])
    except AWS_ERRORS as e:
        raise IAMTeardownError(f"Unable to list IAM user access keys for user {user_name}: {e}") from e

    for key in keys:
        try:
            iam.delete_access_key(UserName=user_name, AccessKeyId=key["AccessKeyId"])
        except AWS_ERRORS as e:
            raise IAMTeardownError(
                f"Unable to delete IAM user access key {key['AccessKeyId']} for user {user_name}: {e}"
            ) from e

    logger.info(f"Deleting IAM user: {user_name}")
    try:
        iam.delete_user(UserName=user_name)
    except AWS_ERRORS as e:
        raise IAMTeardownError(f"Unable to delete IAM user {user_name}: {e}") from e


def teardown_iam_users(client: AwsClient, account: Account) -> List[str]:
    """Delete every IAM user tagged as belonging to the account.

    The first error stops the pass; users not yet processed are left untouched.

    Args:
        client: AWS client with IAM access to the account
        account: Account whose users should be removed

    Returns:
        Names of the deleted users

    Raises:
        IAMTeardownError: On the first AWS error
    """
    logger.info("Cleaning up IAM users")
    iam = client.iam

    try:
        users = list_iam_users(iam)
    except AWS_ERRORS as e:
        raise IAMTeardownError(f"Unable to list IAM users: {e}") from e

    deleted: List[str] = []
    for listed_user in users:
        user_name = listed_user["UserName"]

        # list_users does not return tags
        try:
            user = iam.get_user(UserName=user_name)["User"]
        except AWS_ERRORS as e:
            raise IAMTeardownError(f"Unable to get IAM user {user_name}: {e}") from e

        if not is_owned_by(user.get("Tags"), account.name, account.namespace):
            logger.info(f"Not deleting user: {user_name}")
            continue

        delete_iam_user(iam, user_name)
        deleted.append(user_name)

    return deleted
