"""Command-line interface for lambda-alarms."""

import asyncio
import json
import logging
import sys
from collections.abc import Callable
from typing import Any

import click

from .config import (
    DEFAULT_MAX_CONCURRENCY,
    ReconcileConfig,
    load_policy,
    resolve_environment,
    resolve_region,
)
from .exceptions import LambdaAlarmsError
from .models import AlarmPolicy, ReconcileSummary
from .runner import run_reconcile


def _common_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by ``reconcile`` and ``plan``."""
    options = [
        click.option(
            "--profile",
            required=True,
            help="AWS profile to use when querying Lambdas and creating CloudWatch alarms",
        ),
        click.option(
            "--devenv",
            default=None,
            help=(
                "Environment name used for the STAGE tag, alarm tags and SNS topic "
                "(default: $LAMBDA_ALARMS_ENV or 'dev')"
            ),
        ),
        click.option(
            "--region",
            default=None,
            help="AWS region to search (default: $LAMBDA_ALARMS_REGION or 'ap-southeast-2')",
        ),
        click.option(
            "--endpoint-url",
            help=(
                "AWS endpoint URL "
                "(e.g., http://localhost:4566 for LocalStack, or other AWS-compatible services)"
            ),
        ),
        click.option(
            "--concurrency",
            type=click.IntRange(1, 50),
            default=DEFAULT_MAX_CONCURRENCY,
            help=f"Maximum concurrent AWS calls (1-50, default: {DEFAULT_MAX_CONCURRENCY})",
        ),
        click.option(
            "--policy-file",
            type=click.Path(exists=True, dir_okay=False),
            help="YAML file overriding alarm policy (threshold, period_seconds, ...)",
        ),
        click.option(
            "--json",
            "as_json",
            is_flag=True,
            help="Print the summary as JSON",
        ),
        click.option(
            "--verbose",
            "-v",
            is_flag=True,
            help="Enable debug logging",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    # botocore is chatty at DEBUG
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("aiobotocore").setLevel(logging.WARNING)


def _echo_summary(summary: ReconcileSummary, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(summary.to_dict(), indent=2))
        return

    click.echo()
    click.echo(f"Functions checked: {summary.total}")
    if summary.created:
        click.echo(f"✓ Created {len(summary.created)} alarm(s):")
        for o in summary.created:
            click.echo(f"  {o.function_name} -> {o.alarm_name}")
    if summary.planned:
        click.echo(f"Would create {len(summary.planned)} alarm(s):")
        for o in summary.planned:
            click.echo(f"  {o.function_name} -> {o.alarm_name}")
    if summary.already_covered:
        click.echo(f"Already covered: {len(summary.already_covered)}")
        for o in summary.already_covered:
            click.echo(f"  {o.function_name}")
    if summary.failed:
        click.echo(f"✗ Failed to create {len(summary.failed)} alarm(s):", err=True)
        for o in summary.failed:
            click.echo(f"  {o.function_name} -> {o.alarm_name}: {o.reason}", err=True)


def _run(
    profile: str,
    devenv: str | None,
    region: str | None,
    endpoint_url: str | None,
    concurrency: int,
    policy_file: str | None,
    as_json: bool,
    verbose: bool,
    dry_run: bool,
) -> None:
    _configure_logging(verbose)

    try:
        policy = load_policy(policy_file) if policy_file else AlarmPolicy()
        config = ReconcileConfig(
            profile=profile,
            environment=resolve_environment(devenv),
            region=resolve_region(region),
            endpoint_url=endpoint_url,
            max_concurrency=concurrency,
            dry_run=dry_run,
            policy=policy,
        )
        config.validate()
        if not as_json:
            click.echo(f"Reconciling Lambda error alarms using profile {config.profile}")
            click.echo(f"  Environment: {config.environment}")
            click.echo(f"  Region: {config.region}")
            if dry_run:
                click.echo("  Dry run: no alarms will be created")
        outcomes = asyncio.run(run_reconcile(config))
    except LambdaAlarmsError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    summary = ReconcileSummary.from_outcomes(outcomes)
    _echo_summary(summary, as_json)
    if not summary.ok:
        sys.exit(1)


@click.group()
@click.version_option(package_name="lambda-alarms")
def cli() -> None:
    """Ensure every Lambda function in an environment has a CloudWatch error alarm."""
    pass


@cli.command()
@_common_options
@click.option(
    "--dry-run",
    is_flag=True,
    help="Report missing alarms without creating them",
)
def reconcile(
    profile: str,
    devenv: str | None,
    region: str | None,
    endpoint_url: str | None,
    concurrency: int,
    policy_file: str | None,
    as_json: bool,
    verbose: bool,
    dry_run: bool,
) -> None:
    """Create error alarms for tagged Lambda functions that lack one."""
    _run(
        profile,
        devenv,
        region,
        endpoint_url,
        concurrency,
        policy_file,
        as_json,
        verbose,
        dry_run,
    )


@cli.command()
@_common_options
def plan(
    profile: str,
    devenv: str | None,
    region: str | None,
    endpoint_url: str | None,
    concurrency: int,
    policy_file: str | None,
    as_json: bool,
    verbose: bool,
) -> None:
    """Show which tagged Lambda functions lack an error alarm."""
    _run(
        profile,
        devenv,
        region,
        endpoint_url,
        concurrency,
        policy_file,
        as_json,
        verbose,
        dry_run=True,
    )


if __name__ == "__main__":
    cli()
