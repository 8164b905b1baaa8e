"""Route53 hosted zone cleanup.

Walks hosted zones page by page and, per zone, record sets page by page.
Each record page is cleared with a single change batch before the next page
is requested. The zone itself is deleted once all its pages are processed.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from botocore.exceptions import ClientError

from ...aws.client import AwsClient
from ...models.account_claim import AccountClaim
from .base import CleanupError, CleanupTask

logger = logging.getLogger(__name__)

# Zone apex records owned by Route53; they can never be deleted
PROTECTED_RECORD_TYPES = frozenset({"NS", "SOA"})


def build_delete_changes(record_sets: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Build DELETE changes for every record set that is not NS or SOA.

    Args:
        record_sets: ResourceRecordSets from one listing page

    Returns:
        Route53 change list (empty if only protected records were given)
    """
    return [
        {"Action": "DELETE", "ResourceRecordSet": record}
        for record in record_sets
        if record["Type"] not in PROTECTED_RECORD_TYPES
    ]


class HostedZoneCleanup(CleanupTask):
    """Delete all record sets and then every hosted zone."""

    @property
    def name(self) -> str:
        return "route53"

    def execute(self, client: AwsClient, claim: AccountClaim) -> str:
        route53 = client.route53
        zone_marker: Optional[str] = None

        while True:
            params: Dict[str, Any] = {}
            if zone_marker:
                params["Marker"] = zone_marker

            try:
                zones_page = route53.list_hosted_zones(**params)
            except ClientError as e:
                raise CleanupError("Failed to list Hosted Zones") from e

            for zone in zones_page.get("HostedZones", []):
                self._clear_zone(route53, zone)

                try:
                    route53.delete_hosted_zone(Id=zone["Id"])
                except ClientError as e:
                    raise CleanupError(f"Failed to delete hosted zone: {zone['Name']}") from e
                logger.debug(f"Deleted hosted zone {zone['Name']}")

            if not zones_page.get("IsTruncated"):
                break
            zone_marker = zones_page["NextMarker"]

        return "Route53 cleanup finished successfully"

    def _clear_zone(self, route53: Any, zone: Dict[str, Any]) -> None:
        """Delete every deletable record set in a zone, one change batch per page."""
        zone_id = zone["Id"]
        start: Dict[str, str] = {}

        while True:
            try:
                records_page = route53.list_resource_record_sets(HostedZoneId=zone_id, **start)
            except ClientError as e:
                raise CleanupError(f"Failed to list Record sets for hosted zone {zone['Name']}") from e

            changes = build_delete_changes(records_page.get("ResourceRecordSets", []))
            if changes:
                try:
                    route53.change_resource_record_sets(HostedZoneId=zone_id, ChangeBatch={"Changes": changes})
                except ClientError as e:
                    raise CleanupError(f"Failed to delete record sets for hosted zone {zone['Name']}") from e
                logger.debug(f"Deleted {len(changes)} record sets from hosted zone {zone['Name']}")

            if not records_page.get("IsTruncated"):
                return

            start = {"StartRecordName": records_page["NextRecordName"]}
            if records_page.get("NextRecordType"):
                start["StartRecordType"] = records_page["NextRecordType"]
            if records_page.get("NextRecordIdentifier"):
                start["StartRecordIdentifier"] = records_page["NextRecordIdentifier"]
