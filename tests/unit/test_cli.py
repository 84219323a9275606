"""Tests for CLI commands."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from lambda_alarms.cli import cli
from lambda_alarms.config import ReconcileConfig
from lambda_alarms.exceptions import AuthError, DiscoveryError
from lambda_alarms.models import OutcomeStatus, ReconciliationOutcome

OUTCOMES = [
    ReconciliationOutcome("billing-worker", "billing-worker-errors-alarm", OutcomeStatus.CREATED),
    ReconciliationOutcome("orders-api", "orders-api-errors-alarm", OutcomeStatus.ALREADY_COVERED),
]


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CLI runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LAMBDA_ALARMS_ENV", raising=False)
    monkeypatch.delenv("LAMBDA_ALARMS_REGION", raising=False)


def _config(mock_run: AsyncMock) -> ReconcileConfig:
    return mock_run.call_args.args[0]


class TestCLI:
    """Test CLI commands."""

    def test_cli_help(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "CloudWatch error alarm" in result.output
        assert "reconcile" in result.output
        assert "plan" in result.output

    def test_reconcile_help(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["reconcile", "--help"])
        assert result.exit_code == 0
        assert "--profile" in result.output
        assert "--devenv" in result.output
        assert "--region" in result.output
        assert "--dry-run" in result.output
        assert "--policy-file" in result.output

    def test_profile_required(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["reconcile"])
        assert result.exit_code != 0
        assert "--profile" in result.output

    def test_empty_profile_fails(self, runner: CliRunner) -> None:
        with patch("lambda_alarms.cli.run_reconcile", new_callable=AsyncMock) as mock_run:
            result = runner.invoke(cli, ["reconcile", "--profile", ""])
        assert result.exit_code == 1
        assert "--profile" in result.output
        mock_run.assert_not_called()

    def test_empty_devenv_fails(self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LAMBDA_ALARMS_ENV", "staging")
        with patch("lambda_alarms.cli.run_reconcile", new_callable=AsyncMock) as mock_run:
            result = runner.invoke(cli, ["reconcile", "--profile", "p", "--devenv", ""])
        assert result.exit_code == 1
        assert "Environment name cannot be empty" in result.output
        mock_run.assert_not_called()

    def test_reconcile_defaults(self, runner: CliRunner) -> None:
        with patch(
            "lambda_alarms.cli.run_reconcile", new_callable=AsyncMock, return_value=OUTCOMES
        ) as mock_run:
            result = runner.invoke(cli, ["reconcile", "--profile", "dev-admin"])

        assert result.exit_code == 0, result.output
        config = _config(mock_run)
        assert config.profile == "dev-admin"
        assert config.environment == "dev"
        assert config.region == "ap-southeast-2"
        assert config.max_concurrency == 10
        assert not config.dry_run
        assert "Created 1 alarm(s)" in result.output
        assert "billing-worker -> billing-worker-errors-alarm" in result.output
        assert "Already covered: 1" in result.output

    def test_reconcile_options(self, runner: CliRunner) -> None:
        with patch(
            "lambda_alarms.cli.run_reconcile", new_callable=AsyncMock, return_value=[]
        ) as mock_run:
            result = runner.invoke(
                cli,
                [
                    "reconcile",
                    "--profile",
                    "prod-admin",
                    "--devenv",
                    "prod",
                    "--region",
                    "us-east-1",
                    "--endpoint-url",
                    "http://localhost:4566",
                    "--concurrency",
                    "4",
                    "--dry-run",
                ],
            )

        assert result.exit_code == 0, result.output
        config = _config(mock_run)
        assert config.environment == "prod"
        assert config.region == "us-east-1"
        assert config.endpoint_url == "http://localhost:4566"
        assert config.max_concurrency == 4
        assert config.dry_run

    def test_devenv_from_env_var(self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LAMBDA_ALARMS_ENV", "staging")
        with patch(
            "lambda_alarms.cli.run_reconcile", new_callable=AsyncMock, return_value=[]
        ) as mock_run:
            result = runner.invoke(cli, ["reconcile", "--profile", "p"])
        assert result.exit_code == 0, result.output
        assert _config(mock_run).environment == "staging"

    def test_plan_is_dry_run(self, runner: CliRunner) -> None:
        planned = [
            ReconciliationOutcome(
                "billing-worker", "billing-worker-errors-alarm", OutcomeStatus.PLANNED
            )
        ]
        with patch(
            "lambda_alarms.cli.run_reconcile", new_callable=AsyncMock, return_value=planned
        ) as mock_run:
            result = runner.invoke(cli, ["plan", "--profile", "dev-admin"])

        assert result.exit_code == 0, result.output
        assert _config(mock_run).dry_run
        assert "Would create 1 alarm(s)" in result.output

    def test_policy_file(self, runner: CliRunner, tmp_path: Path) -> None:
        policy = tmp_path / "policy.yaml"
        policy.write_text("threshold: 5\nperiod_seconds: 120\nalarm_suffix: -alarm\n")
        with patch(
            "lambda_alarms.cli.run_reconcile", new_callable=AsyncMock, return_value=[]
        ) as mock_run:
            result = runner.invoke(
                cli, ["reconcile", "--profile", "p", "--policy-file", str(policy)]
            )

        assert result.exit_code == 0, result.output
        config = _config(mock_run)
        assert config.policy.threshold == 5.0
        assert config.policy.period_seconds == 120
        assert config.policy.alarm_suffix == "-alarm"

    def test_invalid_policy_file(self, runner: CliRunner, tmp_path: Path) -> None:
        policy = tmp_path / "policy.yaml"
        policy.write_text("bogus: 1\n")
        with patch("lambda_alarms.cli.run_reconcile", new_callable=AsyncMock) as mock_run:
            result = runner.invoke(
                cli, ["reconcile", "--profile", "p", "--policy-file", str(policy)]
            )
        assert result.exit_code == 1
        assert "Unknown policy keys: bogus" in result.output
        mock_run.assert_not_called()

    def test_failures_reported_and_exit_nonzero(self, runner: CliRunner) -> None:
        outcomes = OUTCOMES + [
            ReconciliationOutcome(
                "reports-cron",
                "reports-cron-errors-alarm",
                OutcomeStatus.FAILED,
                reason="AccessDenied",
            )
        ]
        with patch(
            "lambda_alarms.cli.run_reconcile", new_callable=AsyncMock, return_value=outcomes
        ):
            result = runner.invoke(cli, ["reconcile", "--profile", "p"])

        assert result.exit_code == 1
        assert "Failed to create 1 alarm(s)" in result.output
        assert "reports-cron -> reports-cron-errors-alarm: AccessDenied" in result.output
        assert "Created 1 alarm(s)" in result.output

    def test_json_output(self, runner: CliRunner) -> None:
        with patch(
            "lambda_alarms.cli.run_reconcile", new_callable=AsyncMock, return_value=OUTCOMES
        ):
            result = runner.invoke(cli, ["reconcile", "--profile", "p", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["total"] == 2
        assert data["created"][0]["alarm_name"] == "billing-worker-errors-alarm"
        assert data["already_covered"][0]["function_name"] == "orders-api"

    @pytest.mark.parametrize(
        "error",
        [
            AuthError("Unable to get the AWS account ID"),
            DiscoveryError("ListFunctions", RuntimeError("boom")),
        ],
    )
    def test_fatal_errors_exit_nonzero(self, runner: CliRunner, error: Exception) -> None:
        with patch("lambda_alarms.cli.run_reconcile", new_callable=AsyncMock, side_effect=error):
            result = runner.invoke(cli, ["reconcile", "--profile", "p"])

        assert result.exit_code == 1
        assert f"✗ {error}" in result.output
