"""Derives the desired error alarm for a Lambda function."""

from __future__ import annotations

from .models import (
    CREATED_BY_TAG_KEY,
    ENVIRONMENT_TAG_KEY,
    AlarmPolicy,
    DesiredAlarmSpec,
    FunctionRecord,
)
from .naming import alarm_name_for


class AlarmSpecBuilder:
    """
    Builds DesiredAlarmSpec objects from function records.

    Pure: no I/O, and the same function always yields the same spec
    for a given environment, topic, and policy.

    Example:
        builder = AlarmSpecBuilder()
        spec = builder.build(fn, "dev", "arn:aws:sns:ap-southeast-2:123456789012:dev-alarms")
    """

    def __init__(self, policy: AlarmPolicy | None = None) -> None:
        self.policy = policy or AlarmPolicy()

    def alarm_name(self, fn: FunctionRecord) -> str:
        """Alarm name for ``fn`` under this builder's policy."""
        return alarm_name_for(fn.name, self.policy.alarm_suffix)

    def build(
        self,
        fn: FunctionRecord,
        env: str,
        notification_target: str,
    ) -> DesiredAlarmSpec:
        return DesiredAlarmSpec(
            alarm_name=self.alarm_name(fn),
            function_name=fn.name,
            threshold=self.policy.threshold,
            period_seconds=self.policy.period_seconds,
            evaluation_periods=self.policy.evaluation_periods,
            description=f"Automatically generated alarm for {fn.name} function errors",
            notification_targets=(notification_target,),
            tags=(
                (ENVIRONMENT_TAG_KEY, env),
                (CREATED_BY_TAG_KEY, self.policy.created_by),
            ),
        )
