"""Run configuration and policy file loading.

Values resolve in the order: explicit argument, environment variable,
built-in default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .exceptions import ConfigError
from .models import AlarmPolicy

DEFAULT_ENVIRONMENT = "dev"
"""Environment selected when none is specified."""

ENVIRONMENT_ENV_VAR = "LAMBDA_ALARMS_ENV"
"""Environment variable for overriding the default environment."""

DEFAULT_REGION = "ap-southeast-2"
"""Region searched when none is specified."""

REGION_ENV_VAR = "LAMBDA_ALARMS_REGION"
"""Environment variable for overriding the default region."""

DEFAULT_MAX_CONCURRENCY = 10


def resolve_environment(environment: str | None) -> str:
    """Resolve environment name from explicit arg, ``LAMBDA_ALARMS_ENV``, or ``"dev"``."""
    if environment is not None:
        return environment
    return os.environ.get(ENVIRONMENT_ENV_VAR) or DEFAULT_ENVIRONMENT


def resolve_region(region: str | None) -> str:
    """Resolve region from explicit arg, ``LAMBDA_ALARMS_REGION``, or ``"ap-southeast-2"``."""
    if region is not None:
        return region
    return os.environ.get(REGION_ENV_VAR) or DEFAULT_REGION


def load_policy(path: str | Path) -> AlarmPolicy:
    """
    Load an AlarmPolicy from a YAML file.

    Example file:
        alarm_suffix: -errors-alarm
        threshold: 5
        period_seconds: 120

    Args:
        path: Path to the YAML policy file

    Returns:
        Policy with file values over the defaults

    Raises:
        ConfigError: If the file is unreadable, not a mapping, or invalid
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Unable to read policy file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in policy file {path}: {e}") from e

    if data is None:
        return AlarmPolicy()
    if not isinstance(data, dict):
        raise ConfigError(f"Policy file {path} must contain a mapping")
    return AlarmPolicy.from_dict(data)


@dataclass(frozen=True)
class ReconcileConfig:
    """
    Inputs for one reconciliation run.

    Attributes:
        profile: AWS shared config profile (required)
        environment: Environment name used for the tag filter, alarm tags and topic
        region: AWS region to search
        endpoint_url: Optional endpoint override (for LocalStack)
        max_concurrency: Bounded fan-out for tag lookups and alarm creation
        dry_run: Report missing alarms without creating them
        policy: Alarm policy constants
    """

    profile: str
    environment: str = DEFAULT_ENVIRONMENT
    region: str = DEFAULT_REGION
    endpoint_url: str | None = None
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    dry_run: bool = False
    policy: AlarmPolicy = field(default_factory=AlarmPolicy)

    def validate(self) -> None:
        """
        Check required inputs before any remote call is made.

        Raises:
            ConfigError: On a missing profile, environment, or region,
                or a concurrency below 1
        """
        if not self.profile or not self.profile.strip():
            raise ConfigError("AWS profile needs to be set using the '--profile' option")
        if not self.environment or not self.environment.strip():
            raise ConfigError("Environment name cannot be empty")
        if not self.region:
            raise ConfigError("AWS region cannot be empty")
        if self.max_concurrency < 1:
            raise ConfigError("Concurrency must be at least 1")
