"""CLI commands for the issue tracker adapter."""

import asyncio
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

import click
import structlog
from pydantic import ValidationError

from src.observability.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
)
from src.settings import get_settings
from src.tracker import (
    ConfigurationError,
    EnvironmentCredentialProvider,
    IssueTrackerClient,
    TrackerConfig,
    TrackerError,
)
from src.tracker.constants import DEFAULT_HOST


logger = structlog.get_logger()

COMPONENT_CLI = "cli"


@dataclass
class CliOptions:
    """Options shared by all commands."""

    root_path: Path
    cache_dir: str | None
    host: str | None
    json_logs: bool
    verbose: bool


def build_client(options: CliOptions, repository: str) -> IssueTrackerClient:
    """Build a client from CLI options and environment settings.

    Raises:
        ConfigurationError: If AUTH_TOKEN is not set or an option is invalid.
    """
    settings = get_settings()
    try:
        config = TrackerConfig(
            repository=repository,
            root_path=options.root_path,
            cache_dir=options.cache_dir,
            host=options.host or settings.tracker_host or DEFAULT_HOST,
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
    return IssueTrackerClient(
        config, credentials=EnvironmentCredentialProvider(settings)
    )


def _setup_logging(options: CliOptions, command: str) -> None:
    log_level = logging.DEBUG if options.verbose else logging.WARNING
    configure_logging(level=log_level, json_format=options.json_logs)
    clear_request_context()
    bind_request_context(component=COMPONENT_CLI, command=command)


def _fail(error: TrackerError) -> NoReturn:
    logger.error("command_failed", **error.to_dict())
    click.echo(f"Error: {error.message}", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version="0.1.0")
@click.option(
    "--root-path",
    default=Path.cwd,
    type=click.Path(file_okay=False, path_type=Path),
    help="Root directory the cache directory is relative to (default: cwd).",
)
@click.option(
    "--cache-dir",
    default=None,
    type=str,
    help="Cache directory relative to --root-path. Caching is off when unset.",
)
@click.option(
    "--host",
    default=None,
    type=str,
    help="Tracker base URL (default: $TRACKER_HOST or https://gitlab.com).",
)
@click.option(
    "--json-logs/--console-logs",
    default=True,
    help="Use JSON format for logs (default: true).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
@click.pass_context
def cli(  # noqa: PLR0913
    ctx: click.Context,
    root_path: Path,
    cache_dir: str | None,
    host: str | None,
    json_logs: bool,
    verbose: bool,
) -> None:
    """Issue tracker adapter CLI."""
    ctx.obj = CliOptions(
        root_path=root_path,
        cache_dir=cache_dir,
        host=host,
        json_logs=json_logs,
        verbose=verbose,
    )


@cli.command()
@click.argument("repository")
@click.argument("number", type=int)
@click.pass_obj
def issue(options: CliOptions, repository: str, number: int) -> None:
    """Print issue NUMBER of REPOSITORY as normalized JSON."""
    _setup_logging(options, "issue")
    try:
        client = build_client(options, repository)
        result = asyncio.run(client.get_issue_data(repository, number))
    except TrackerError as e:
        _fail(e)
    click.echo(result.model_dump_json(indent=2))


@cli.command()
@click.argument("login")
@click.option(
    "--repository",
    default="-",
    help="Repository recorded in the client config (unused by the lookup).",
)
@click.pass_obj
def user(options: CliOptions, login: str, repository: str) -> None:
    """Print user LOGIN as normalized JSON."""
    _setup_logging(options, "user")
    try:
        client = build_client(options, repository)
        result = asyncio.run(client.get_user_data(login))
    except TrackerError as e:
        _fail(e)
    click.echo(result.model_dump_json(indent=2))


@cli.command("issue-url")
@click.argument("repository")
@click.pass_obj
def issue_url(options: CliOptions, repository: str) -> None:
    """Print the web URL prefix for issues of REPOSITORY."""
    _setup_logging(options, "issue-url")
    try:
        client = build_client(options, repository)
    except ConfigurationError as e:
        _fail(e)
    click.echo(client.get_issue_url_prefix(repository))


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
