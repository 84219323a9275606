"""Wires a ReconcileConfig to AWS clients and runs one pass."""

from __future__ import annotations

import logging

from .builder import AlarmSpecBuilder
from .config import ReconcileConfig
from .discovery import AlarmDiscovery, FunctionDiscovery
from .models import ReconciliationOutcome
from .naming import notification_topic_arn
from .provisioner import AlarmProvisioner
from .reconciler import Reconciler
from .session import AwsSession

logger = logging.getLogger(__name__)


async def run_reconcile(config: ReconcileConfig) -> list[ReconciliationOutcome]:
    """
    Run one reconciliation pass for ``config``.

    Raises:
        ConfigError: If the config is invalid (before any remote call)
        AuthError: If the session or caller identity cannot be established
        DiscoveryError: If either inventory cannot be fully listed
    """
    config.validate()

    async with AwsSession(config.profile, config.region, config.endpoint_url) as aws:
        logger.info("Using AWS profile %s in %s", config.profile, config.region)
        identity = await aws.caller_identity()
        topic_arn = notification_topic_arn(
            identity.partition,
            config.region,
            identity.account_id,
            config.environment,
            config.policy.topic_suffix,
        )
        logger.debug("Alarm notifications go to %s", topic_arn)

        lambda_client = await aws.lambda_client()
        cloudwatch_client = await aws.cloudwatch_client()

        reconciler = Reconciler(
            functions=FunctionDiscovery(lambda_client, config.max_concurrency),
            alarms=AlarmDiscovery(cloudwatch_client),
            builder=AlarmSpecBuilder(config.policy),
            provisioner=AlarmProvisioner(cloudwatch_client),
            max_concurrency=config.max_concurrency,
        )
        return await reconciler.reconcile(
            config.environment,
            topic_arn,
            dry_run=config.dry_run,
            tag_key=config.policy.tag_key,
        )
