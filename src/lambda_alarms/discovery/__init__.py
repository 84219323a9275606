"""Read-only discovery of Lambda functions and CloudWatch alarms."""

from .alarms import AlarmDiscovery
from .functions import FunctionDiscovery

__all__ = ["AlarmDiscovery", "FunctionDiscovery"]
