"""Unit test fixtures."""

import pytest
from fakes import make_function

from lambda_alarms.models import FunctionRecord


@pytest.fixture
def dev_functions() -> list[FunctionRecord]:
    """Three dev functions and one prod function."""
    return [
        make_function("billing-worker"),
        make_function("orders-api"),
        make_function("reports-cron"),
        make_function("orders-api-prod", stage="prod"),
    ]


@pytest.fixture
def topic_arn() -> str:
    return "arn:aws:sns:ap-southeast-2:123456789012:dev-alarms"
