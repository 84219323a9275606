"""
lambda-alarms: CloudWatch error alarms for every Lambda function.

Lists the Lambda functions tagged with an environment, lists the
existing CloudWatch alarms, and creates an ``Errors`` alarm for each
function that lacks one. Runs are safe to repeat: alarm names are
derived from function names, and existing alarms are never modified.

Example:
    from lambda_alarms import ReconcileConfig, run_reconcile

    outcomes = asyncio.run(run_reconcile(ReconcileConfig(profile="dev-admin")))
"""

from .builder import AlarmSpecBuilder
from .config import ReconcileConfig, load_policy
from .discovery import AlarmDiscovery, FunctionDiscovery
from .exceptions import (
    AuthError,
    ConfigError,
    DiscoveryError,
    LambdaAlarmsError,
    ProvisionError,
)
from .models import (
    AlarmPolicy,
    DesiredAlarmSpec,
    FunctionRecord,
    OutcomeStatus,
    ReconcileSummary,
    ReconciliationOutcome,
    TagFilter,
)
from .naming import alarm_name_for, notification_topic_arn
from .provisioner import AlarmProvisioner
from .reconciler import Reconciler
from .runner import run_reconcile
from .session import AwsSession, CallerIdentity

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Components
    "AlarmDiscovery",
    "AlarmProvisioner",
    "AlarmSpecBuilder",
    "AwsSession",
    "FunctionDiscovery",
    "Reconciler",
    "run_reconcile",
    # Models
    "AlarmPolicy",
    "CallerIdentity",
    "DesiredAlarmSpec",
    "FunctionRecord",
    "OutcomeStatus",
    "ReconcileConfig",
    "ReconcileSummary",
    "ReconciliationOutcome",
    "TagFilter",
    # Naming / config
    "alarm_name_for",
    "load_policy",
    "notification_topic_arn",
    # Exceptions
    "AuthError",
    "ConfigError",
    "DiscoveryError",
    "LambdaAlarmsError",
    "ProvisionError",
]
