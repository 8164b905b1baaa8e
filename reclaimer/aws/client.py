"""Region-scoped boto3 client construction.

Builds boto3 clients from credentials stored in a Secret so cleanup runs
with the account's own (or the BYOC admin's) credentials.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

import boto3
from botocore.config import Config as BotoConfig

from ..models.secret import ACCESS_KEY_ID_FIELD, SECRET_ACCESS_KEY_FIELD
from ..store.base import EntityNotFoundError, SecretStore

logger = logging.getLogger(__name__)

# Standard retry mode; deletion errors are not retried beyond botocore's own throttling retries
BOTO_CONFIG = BotoConfig(retries={"mode": "standard", "max_attempts": 5})


class AwsClientError(Exception):
    """Raised when an AWS client cannot be constructed."""


def create_boto_client(
    service_name: str,
    region_name: Optional[str] = None,
    profile_name: Optional[str] = None,
    session: Optional[boto3.Session] = None,
) -> Any:
    """Create a boto3 client.

    Args:
        service_name: AWS service name (e.g. "ec2")
        region_name: AWS region (optional)
        profile_name: AWS profile name, ignored when a session is given (optional)
        session: Pre-built boto3 session carrying explicit credentials (optional)

    Returns:
        boto3 client for the service
    """
    if session is None:
        session = boto3.Session(profile_name=profile_name)
    return session.client(service_name, region_name=region_name, config=BOTO_CONFIG)


class AwsClient:
    """Region-scoped bundle of the boto3 clients used during reclamation.

    Service clients are created lazily from a single session. Cleanup tasks
    share one instance across threads, so creation is serialized.

    Attributes:
        region: AWS region all regional calls go to
    """

    def __init__(self, region: str, access_key_id: str, secret_access_key: str) -> None:
        self.region = region
        self._session = boto3.Session(
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            region_name=region,
        )
        self._clients: dict[str, Any] = {}
        self._lock = threading.Lock()

    def _client(self, service_name: str) -> Any:
        # boto3 sessions are not thread-safe
        with self._lock:
            if service_name not in self._clients:
                self._clients[service_name] = create_boto_client(
                    service_name=service_name,
                    region_name=self.region,
                    session=self._session,
                )
            return self._clients[service_name]

    @property
    def ec2(self) -> Any:
        return self._client("ec2")

    @property
    def s3(self) -> Any:
        return self._client("s3")

    @property
    def route53(self) -> Any:
        return self._client("route53")

    @property
    def iam(self) -> Any:
        return self._client("iam")


def get_aws_client(secret_store: SecretStore, secret_name: str, namespace: str, region: str) -> AwsClient:
    """Build an AwsClient from the credentials held in a Secret.

    Args:
        secret_store: Store holding the credential Secret
        secret_name: Secret name
        namespace: Secret namespace
        region: AWS region the client is scoped to

    Returns:
        AwsClient scoped to the region

    Raises:
        AwsClientError: If the Secret is missing or lacks credential fields
    """
    try:
        secret = secret_store.get(secret_name, namespace)
    except EntityNotFoundError as e:
        raise AwsClientError(f"Credential secret {namespace}/{secret_name} not found") from e

    try:
        access_key_id = secret.data[ACCESS_KEY_ID_FIELD].decode("utf-8")
        secret_access_key = secret.data[SECRET_ACCESS_KEY_FIELD].decode("utf-8")
    except KeyError as e:
        raise AwsClientError(f"Credential secret {namespace}/{secret_name} is missing field {e.args[0]}") from e

    logger.debug(f"Creating AWS client for region {region} from secret {namespace}/{secret_name}")
    return AwsClient(region=region, access_key_id=access_key_id, secret_access_key=secret_access_key)
