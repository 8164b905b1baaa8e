"""IAM credential rotation for the operator-managed users.

Every access key of each managed user is deleted and replaced with a fresh
one, and the new key is written into the user's credential Secret.

Key creation and the Secret write are not transactional: if the Secret
write fails the new key stays in IAM unrecorded. It is removed on the next
rotation, which deletes all existing keys first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from botocore.exceptions import ClientError

from ...aws.client import AwsClient
from ...models.account_claim import AccountClaim
from ...models.secret import ACCESS_KEY_ID_FIELD, SECRET_ACCESS_KEY_FIELD
from ...store.base import SecretStore
from .base import CleanupError, CleanupTask

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManagedPrincipal:
    """IAM user managed by the operator.

    Attributes:
        user_name: IAM user name
        sre: True for the SRE admin user, whose Secret name embeds the user name
    """

    user_name: str
    sre: bool = False

    def secret_name(self, account_link: str) -> str:
        """Name of the Secret holding this user's credentials for an account."""
        if self.sre:
            return f"{account_link}-{self.user_name.lower()}-secret"
        return f"{account_link}-secret"


OSD_MANAGED_ADMIN = ManagedPrincipal("osdManagedAdmin")
OSD_MANAGED_ADMIN_SRE = ManagedPrincipal("osdManagedAdminSRE", sre=True)

MANAGED_PRINCIPALS = (OSD_MANAGED_ADMIN, OSD_MANAGED_ADMIN_SRE)


def delete_all_access_keys(iam: Any, user_name: str) -> int:
    """Delete every access key of an IAM user.

    Returns:
        Number of keys deleted

    Raises:
        ClientError: On the first listing or deletion error
    """
    keys = iam.list_access_keys(UserName=user_name).get("AccessKeyMetadata", [])
    for key in keys:
        iam.delete_access_key(UserName=user_name, AccessKeyId=key["AccessKeyId"])
    return len(keys)


class CredentialRotation(CleanupTask):
    """Rotate the access keys of the managed IAM users.

    Attributes:
        secret_store: Store holding the credential Secrets
        secret_namespace: Namespace of the credential Secrets
        principals: Users to rotate, in order
    """

    def __init__(
        self,
        secret_store: SecretStore,
        secret_namespace: str,
        principals: tuple[ManagedPrincipal, ...] = MANAGED_PRINCIPALS,
    ) -> None:
        self.secret_store = secret_store
        self.secret_namespace = secret_namespace
        self.principals = principals

    @property
    def name(self) -> str:
        return "iam-credentials"

    def execute(self, client: AwsClient, claim: AccountClaim) -> str:
        iam = client.iam

        for principal in self.principals:
            user_name = principal.user_name

            try:
                iam.get_user(UserName=user_name)
            except ClientError as e:
                raise CleanupError(f"Could not find IAM user: {user_name}") from e

            try:
                deleted = delete_all_access_keys(iam, user_name)
            except ClientError as e:
                raise CleanupError(f"Failed deleting Access Keys for IAM user: {user_name}") from e
            logger.debug(f"Deleted {deleted} access keys of IAM user {user_name}")

            try:
                access_key = iam.create_access_key(UserName=user_name)["AccessKey"]
            except ClientError as e:
                raise CleanupError(f"Failed creating Access Key for IAM user: {user_name}") from e

            secret_name = principal.secret_name(claim.spec.account_link)
            try:
                secret = self.secret_store.get(secret_name, self.secret_namespace)
                secret.data[ACCESS_KEY_ID_FIELD] = access_key["AccessKeyId"].encode("utf-8")
                secret.data[SECRET_ACCESS_KEY_FIELD] = access_key["SecretAccessKey"].encode("utf-8")
                self.secret_store.update(secret)
            except Exception as e:
                logger.error(
                    f"Access key {access_key['AccessKeyId']} of IAM user {user_name} "
                    f"was created but not stored in secret {self.secret_namespace}/{secret_name}"
                )
                raise CleanupError(f"Failed updating credentials secret {secret_name} for IAM user: {user_name}") from e

        return "IAM Credentials rotation finished successfully"
