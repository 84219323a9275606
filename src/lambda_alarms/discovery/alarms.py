"""CloudWatch alarm discovery."""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import DiscoveryError

logger = logging.getLogger(__name__)

ALARM_TYPES = ("MetricAlarm", "CompositeAlarm")
"""Requested explicitly; DescribeAlarms returns only metric alarms by default."""


class AlarmDiscovery:
    """
    Loads the names of every CloudWatch alarm in a region.

    No filtering is applied: alarms created by other tools are included,
    and the derived alarm naming keeps them from colliding.

    Attributes:
        client: aioboto3 CloudWatch client
    """

    def __init__(self, client: Any) -> None:
        self.client = client

    async def list_all_alarms(self) -> set[str]:
        """
        List all alarm names, following ``NextToken`` to the last page.

        Returns:
            Set of alarm names (metric and composite)

        Raises:
            DiscoveryError: If any page fails
        """
        names: set[str] = set()
        next_token: str | None = None
        pages = 0

        while True:
            kwargs: dict[str, Any] = {"AlarmTypes": list(ALARM_TYPES)}
            if next_token:
                kwargs["NextToken"] = next_token

            try:
                response = await self.client.describe_alarms(**kwargs)
            except (ClientError, BotoCoreError) as e:
                raise DiscoveryError("DescribeAlarms", e) from e
            pages += 1

            for alarm in response.get("MetricAlarms", []):
                names.add(alarm["AlarmName"])
            for alarm in response.get("CompositeAlarms", []):
                names.add(alarm["AlarmName"])

            next_token = response.get("NextToken")
            if not next_token:
                break

        logger.debug("Loaded %d alarms from %d page(s)", len(names), pages)
        return names
