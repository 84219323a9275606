"""Alarm and topic naming utilities.

Alarm names are derived from function names so that the same function
always maps to the same alarm across runs. CloudWatch limits alarm names
to 255 characters; names that would exceed it are shortened with a
hash of the full function name so distinct functions never collide.
"""

import hashlib

MAX_ALARM_NAME_LENGTH = 255
"""CloudWatch ``AlarmName`` length limit."""

MAX_FUNCTION_NAME_LENGTH = 64
"""Lambda function name length limit (unqualified name)."""

DEFAULT_ALARM_SUFFIX = "-errors-alarm"
"""Suffix appended to a function name to form its alarm name."""

DEFAULT_TOPIC_SUFFIX = "-alarms"
"""Suffix appended to the environment name to form the SNS topic name."""

HASH_LENGTH = 8


def alarm_name_for(
    function_name: str,
    suffix: str = DEFAULT_ALARM_SUFFIX,
    max_length: int = MAX_ALARM_NAME_LENGTH,
) -> str:
    """
    Derive the alarm name for a function.

    Args:
        function_name: Lambda function name
        suffix: Alarm name suffix
        max_length: Maximum alarm name length

    Returns:
        ``function_name + suffix`` when it fits, otherwise a truncated
        function name followed by ``-<hash>`` and the suffix, exactly
        ``max_length`` characters long.

    Raises:
        ValueError: If the suffix leaves no room for the hash
    """
    name = f"{function_name}{suffix}"
    if len(name) <= max_length:
        return name

    digest = hashlib.sha256(function_name.encode("utf-8")).hexdigest()[:HASH_LENGTH]
    keep = max_length - len(suffix) - HASH_LENGTH - 1
    if keep < 1:
        raise ValueError(
            f"Alarm suffix '{suffix}' is too long for a {max_length} character alarm name"
        )
    return f"{function_name[:keep]}-{digest}{suffix}"


def notification_topic_arn(
    partition: str,
    region: str,
    account_id: str,
    environment: str,
    topic_suffix: str = DEFAULT_TOPIC_SUFFIX,
) -> str:
    """Build the SNS topic ARN alarms notify, e.g. ``arn:aws:sns:...:dev-alarms``."""
    return f"arn:{partition}:sns:{region}:{account_id}:{environment}{topic_suffix}"


def partition_from_arn(arn: str) -> str:
    """
    Extract the partition from an ARN.

    Args:
        arn: Any ARN, typically the caller identity ARN

    Returns:
        The partition (``aws``, ``aws-cn``, ``aws-us-gov``, ...)

    Raises:
        ValueError: If the string is not an ARN
    """
    parts = arn.split(":", 2)
    if len(parts) < 3 or parts[0] != "arn" or not parts[1]:
        raise ValueError(f"Not an ARN: {arn!r}")
    return parts[1]
