"""Reconciles Lambda functions against their CloudWatch error alarms.

A pass has three phases, each finishing before the next starts:

1. Discover tagged functions and existing alarms (concurrently).
2. Compute the delta: functions whose derived alarm name is absent.
3. Build and create an alarm for each delta member.

A discovery failure aborts the pass. A creation failure is recorded
for that function and the remaining functions are still processed.
"""

from __future__ import annotations

import asyncio
import logging

from .builder import AlarmSpecBuilder
from .discovery import AlarmDiscovery, FunctionDiscovery
from .exceptions import ProvisionError
from .models import (
    DEFAULT_TAG_KEY,
    FunctionRecord,
    OutcomeStatus,
    ReconciliationOutcome,
    TagFilter,
)
from .provisioner import AlarmProvisioner

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 10


class Reconciler:
    """
    Ensures every function in an environment has an error alarm.

    Example:
        reconciler = Reconciler(
            functions=FunctionDiscovery(lambda_client),
            alarms=AlarmDiscovery(cloudwatch_client),
            builder=AlarmSpecBuilder(),
            provisioner=AlarmProvisioner(cloudwatch_client),
        )
        outcomes = await reconciler.reconcile("dev", topic_arn)

    Attributes:
        functions: Function inventory source
        alarms: Alarm inventory source
        builder: Derives alarm specs and names
        provisioner: Creates alarms
        max_concurrency: Maximum in-flight alarm creations
    """

    def __init__(
        self,
        functions: FunctionDiscovery,
        alarms: AlarmDiscovery,
        builder: AlarmSpecBuilder,
        provisioner: AlarmProvisioner,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.functions = functions
        self.alarms = alarms
        self.builder = builder
        self.provisioner = provisioner
        self.max_concurrency = max_concurrency

    async def reconcile(
        self,
        env: str,
        notification_target: str,
        *,
        dry_run: bool = False,
        tag_key: str = DEFAULT_TAG_KEY,
    ) -> list[ReconciliationOutcome]:
        """
        Run one reconciliation pass.

        Args:
            env: Environment name, matched against the function tag
            notification_target: SNS topic ARN used as the alarm action
            dry_run: Report missing alarms as PLANNED without creating them
            tag_key: Function tag holding the environment name

        Returns:
            One outcome per tagged function, in function name order

        Raises:
            DiscoveryError: If either inventory cannot be fully listed
        """
        tag_filter = TagFilter.for_environment(env, key=tag_key)
        try:
            async with asyncio.TaskGroup() as tg:
                functions_task = tg.create_task(self.functions.list_tagged_functions(tag_filter))
                alarms_task = tg.create_task(self.alarms.list_all_alarms())
        except ExceptionGroup as eg:
            # A failed inventory cancels the other; surface it unwrapped
            raise eg.exceptions[0]
        functions = functions_task.result()
        existing = alarms_task.result()
        logger.info("Found %d Lambda functions tagged %s=%s", len(functions), tag_key, env)
        logger.info("Found %d CloudWatch alarms", len(existing))

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _reconcile_one(fn: FunctionRecord) -> ReconciliationOutcome:
            alarm_name = self.builder.alarm_name(fn)
            if alarm_name in existing:
                logger.debug("Function %s already has alarm %s, skipping", fn.name, alarm_name)
                return ReconciliationOutcome(fn.name, alarm_name, OutcomeStatus.ALREADY_COVERED)

            if dry_run:
                logger.info("Function %s has no alarm, would create %s", fn.name, alarm_name)
                return ReconciliationOutcome(fn.name, alarm_name, OutcomeStatus.PLANNED)

            spec = self.builder.build(fn, env, notification_target)
            async with semaphore:
                try:
                    await self.provisioner.create(spec)
                except ProvisionError as e:
                    logger.warning("Failed to create alarm for %s: %s", fn.name, e.cause)
                    return ReconciliationOutcome(
                        fn.name, alarm_name, OutcomeStatus.FAILED, reason=str(e.cause)
                    )
            logger.info("Created alarm %s for function %s", alarm_name, fn.name)
            return ReconciliationOutcome(fn.name, alarm_name, OutcomeStatus.CREATED)

        return list(await asyncio.gather(*(_reconcile_one(fn) for fn in functions)))
