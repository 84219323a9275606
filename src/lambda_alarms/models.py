"""Core models for lambda-alarms."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any

from .exceptions import ConfigError
from .naming import (
    DEFAULT_ALARM_SUFFIX,
    DEFAULT_TOPIC_SUFFIX,
    HASH_LENGTH,
    MAX_ALARM_NAME_LENGTH,
)

DEFAULT_TAG_KEY = "STAGE"
DEFAULT_THRESHOLD = 1.0
DEFAULT_PERIOD_SECONDS = 60
DEFAULT_EVALUATION_PERIODS = 1
DEFAULT_CREATED_BY = "lambda-add-alarms"

ENVIRONMENT_TAG_KEY = "Environment"
CREATED_BY_TAG_KEY = "CreatedBy"

# Fixed by the alarm type this tool manages
COMPARISON_OPERATOR = "GreaterThanOrEqualToThreshold"
STATISTIC = "Sum"
METRIC_NAME = "Errors"
METRIC_NAMESPACE = "AWS/Lambda"
FUNCTION_NAME_DIMENSION = "FunctionName"


@dataclass(frozen=True)
class FunctionRecord:
    """
    A deployed Lambda function and its tags.

    Attributes:
        name: Function name
        arn: Function ARN (identity)
        tags: Tag key/value mapping
    """

    name: str
    arn: str
    tags: Mapping[str, str] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class TagFilter:
    """A single required tag key/value pair."""

    key: str
    value: str

    @classmethod
    def for_environment(cls, environment: str, key: str = DEFAULT_TAG_KEY) -> TagFilter:
        """Create the filter selecting functions deployed to ``environment``."""
        return cls(key=key, value=environment)

    def matches(self, tags: Mapping[str, str]) -> bool:
        """True only when ``tags`` carries exactly this key with this value."""
        return self.key in tags and tags[self.key] == self.value


@dataclass(frozen=True)
class AlarmPolicy:
    """
    Policy constants for generated alarms.

    Attributes:
        alarm_suffix: Appended to the function name to form the alarm name
        threshold: Error count that triggers the alarm
        period_seconds: Metric period (10, 30, or a multiple of 60)
        evaluation_periods: Number of periods evaluated
        topic_suffix: Appended to the environment name to form the SNS topic name
        created_by: Value of the ``CreatedBy`` provenance tag
        tag_key: Function tag holding the environment name
    """

    alarm_suffix: str = DEFAULT_ALARM_SUFFIX
    threshold: float = DEFAULT_THRESHOLD
    period_seconds: int = DEFAULT_PERIOD_SECONDS
    evaluation_periods: int = DEFAULT_EVALUATION_PERIODS
    topic_suffix: str = DEFAULT_TOPIC_SUFFIX
    created_by: str = DEFAULT_CREATED_BY
    tag_key: str = DEFAULT_TAG_KEY

    def __post_init__(self) -> None:
        if not self.alarm_suffix:
            raise ConfigError("alarm_suffix cannot be empty")
        if len(self.alarm_suffix) + HASH_LENGTH + 2 > MAX_ALARM_NAME_LENGTH:
            raise ConfigError(
                f"alarm_suffix is too long: {len(self.alarm_suffix)} characters leaves no room "
                f"for a function name in a {MAX_ALARM_NAME_LENGTH}-character alarm name"
            )
        if self.threshold < 0:
            raise ConfigError("threshold must be non-negative")
        if self.period_seconds <= 0:
            raise ConfigError("period_seconds must be positive")
        if self.period_seconds not in (10, 30) and self.period_seconds % 60 != 0:
            raise ConfigError("period_seconds must be 10, 30, or a multiple of 60")
        if self.evaluation_periods <= 0:
            raise ConfigError("evaluation_periods must be positive")
        if not self.created_by:
            raise ConfigError("created_by cannot be empty")
        if not self.tag_key:
            raise ConfigError("tag_key cannot be empty")

    @property
    def evaluation_window_seconds(self) -> int:
        return self.period_seconds * self.evaluation_periods

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AlarmPolicy:
        """
        Build a policy from a mapping, e.g. a parsed policy file.

        Missing keys keep their defaults.

        Raises:
            ConfigError: On unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown policy keys: {', '.join(unknown)}")
        try:
            kwargs: dict[str, Any] = dict(data)
            if "threshold" in kwargs:
                kwargs["threshold"] = float(kwargs["threshold"])
            for name in ("period_seconds", "evaluation_periods"):
                if name in kwargs:
                    kwargs[name] = int(kwargs[name])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid policy value: {e}") from e
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class DesiredAlarmSpec:
    """
    The error alarm a function should have.

    Derived from a FunctionRecord; never persisted locally.
    """

    alarm_name: str
    function_name: str
    threshold: float
    period_seconds: int
    evaluation_periods: int
    description: str
    notification_targets: tuple[str, ...]
    tags: tuple[tuple[str, str], ...]
    comparison_operator: str = COMPARISON_OPERATOR
    statistic: str = STATISTIC
    metric_name: str = METRIC_NAME
    namespace: str = METRIC_NAMESPACE

    @property
    def dimensions(self) -> tuple[tuple[str, str], ...]:
        return ((FUNCTION_NAME_DIMENSION, self.function_name),)

    @property
    def evaluation_window_seconds(self) -> int:
        return self.period_seconds * self.evaluation_periods

    def to_put_metric_alarm_kwargs(self) -> dict[str, Any]:
        """Render the CloudWatch ``PutMetricAlarm`` request parameters."""
        return {
            "AlarmName": self.alarm_name,
            "AlarmDescription": self.description,
            "AlarmActions": list(self.notification_targets),
            "ComparisonOperator": self.comparison_operator,
            "EvaluationPeriods": self.evaluation_periods,
            "MetricName": self.metric_name,
            "Namespace": self.namespace,
            "Period": self.period_seconds,
            "Statistic": self.statistic,
            "Threshold": self.threshold,
            "Dimensions": [{"Name": name, "Value": value} for name, value in self.dimensions],
            "Tags": [{"Key": key, "Value": value} for key, value in self.tags],
        }


class OutcomeStatus(str, Enum):
    """Result of reconciling one function."""

    ALREADY_COVERED = "already_covered"
    CREATED = "created"
    FAILED = "failed"
    PLANNED = "planned"


@dataclass(frozen=True)
class ReconciliationOutcome:
    """Per-function reconciliation result."""

    function_name: str
    alarm_name: str
    status: OutcomeStatus
    reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "function_name": self.function_name,
            "alarm_name": self.alarm_name,
            "status": self.status.value,
        }
        if self.reason is not None:
            result["reason"] = self.reason
        return result


@dataclass
class ReconcileSummary:
    """Outcomes of one pass grouped by status, for reporting."""

    created: list[ReconciliationOutcome] = field(default_factory=list)
    already_covered: list[ReconciliationOutcome] = field(default_factory=list)
    failed: list[ReconciliationOutcome] = field(default_factory=list)
    planned: list[ReconciliationOutcome] = field(default_factory=list)

    @classmethod
    def from_outcomes(cls, outcomes: list[ReconciliationOutcome]) -> ReconcileSummary:
        summary = cls()
        buckets = {
            OutcomeStatus.CREATED: summary.created,
            OutcomeStatus.ALREADY_COVERED: summary.already_covered,
            OutcomeStatus.FAILED: summary.failed,
            OutcomeStatus.PLANNED: summary.planned,
        }
        for outcome in outcomes:
            buckets[outcome.status].append(outcome)
        return summary

    @property
    def total(self) -> int:
        return len(self.created) + len(self.already_covered) + len(self.failed) + len(self.planned)

    @property
    def ok(self) -> bool:
        """False when any alarm could not be created."""
        return not self.failed

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "created": [o.to_dict() for o in self.created],
            "already_covered": [o.to_dict() for o in self.already_covered],
            "failed": [o.to_dict() for o in self.failed],
            "planned": [o.to_dict() for o in self.planned],
        }
