"""Exceptions for lambda-alarms."""


# ---------------------------------------------------------------------------
# Base Exception
# ---------------------------------------------------------------------------


class LambdaAlarmsError(Exception):
    """
    Base exception for all lambda-alarms errors.

    All exceptions raised by this package inherit from this class,
    allowing callers to catch all tool-specific errors with a single
    except clause.
    """

    pass


# ---------------------------------------------------------------------------
# Fatal Exceptions
# ---------------------------------------------------------------------------


class ConfigError(LambdaAlarmsError):
    """
    Raised when required input is missing or invalid.

    Raised before any remote call is made, e.g. when no AWS profile
    was given or a policy file cannot be parsed.
    """

    pass


class AuthError(LambdaAlarmsError):
    """
    Raised when an AWS session or caller identity cannot be established.

    Attributes:
        cause: The underlying exception from botocore
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.cause = cause
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class DiscoveryError(LambdaAlarmsError):
    """
    Raised when a function or alarm inventory cannot be fully listed.

    A reconciliation pass never computes a delta from a partial inventory,
    so this error aborts the whole pass.

    Attributes:
        operation: The AWS API operation that failed (e.g. "ListFunctions")
        resource: The resource being inspected, if any (e.g. a function ARN)
        cause: The underlying exception
    """

    def __init__(
        self,
        operation: str,
        cause: Exception,
        *,
        resource: str | None = None,
    ) -> None:
        self.operation = operation
        self.resource = resource
        self.cause = cause
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"{self.operation} failed"
        if self.resource:
            msg += f" for {self.resource}"
        return f"{msg}: {self.cause}"


# ---------------------------------------------------------------------------
# Per-entry Exceptions
# ---------------------------------------------------------------------------


class ProvisionError(LambdaAlarmsError):
    """
    Raised when a single alarm cannot be created.

    Recorded as a failed outcome by the reconciler; never aborts a pass.

    Attributes:
        alarm_name: The alarm that could not be created
        cause: The underlying exception
    """

    def __init__(self, alarm_name: str, cause: Exception) -> None:
        self.alarm_name = alarm_name
        self.cause = cause
        super().__init__(f"Unable to create alarm {alarm_name}: {cause}")
