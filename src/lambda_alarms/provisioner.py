"""Creates CloudWatch alarms."""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import ProvisionError
from .models import DesiredAlarmSpec

logger = logging.getLogger(__name__)


class AlarmProvisioner:
    """
    Issues ``PutMetricAlarm`` for a single alarm spec.

    ``PutMetricAlarm`` creates or overwrites by alarm name, so calling
    ``create`` again with the same spec is safe. No pre-check and no
    retries happen here; the reconciler decides what to create.

    Attributes:
        client: aioboto3 CloudWatch client
    """

    def __init__(self, client: Any) -> None:
        self.client = client

    async def create(self, spec: DesiredAlarmSpec) -> None:
        """
        Create (or overwrite) the alarm described by ``spec``.

        Raises:
            ProvisionError: If the call fails for any reason
        """
        try:
            await self.client.put_metric_alarm(**spec.to_put_metric_alarm_kwargs())
        except (ClientError, BotoCoreError) as e:
            raise ProvisionError(spec.alarm_name, e) from e
        logger.debug("PutMetricAlarm succeeded for %s", spec.alarm_name)
