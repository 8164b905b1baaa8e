"""AWS client construction."""

from __future__ import annotations

from .client import AwsClient, AwsClientError, create_boto_client, get_aws_client

__all__ = ["AwsClient", "AwsClientError", "create_boto_client", "get_aws_client"]
