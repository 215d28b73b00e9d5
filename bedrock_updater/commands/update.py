"""Update commands for the Bedrock dedicated server."""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any

import click
import structlog
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from bedrock_updater.core.client import ServerPageClient
from bedrock_updater.core.config import UpdaterConfig
from bedrock_updater.core.errors import UpdaterError
from bedrock_updater.core.pipeline import CycleReport, UpdatePipeline
from bedrock_updater.core.resolver import ResolvedVersions
from bedrock_updater.core.types import DownloadReference, PipelineState
from bedrock_updater.core.version import Ordering

logger = structlog.get_logger()

_OUTCOME_MESSAGES = {
    PipelineState.UP_TO_DATE: "[green]Server is up to date[/green]",
    PipelineState.AHEAD_OF_REMOTE: "[yellow]Server is ahead of the download page (preview build?)[/yellow]",
    PipelineState.UPDATING: "[green]✓[/green] Server updated",
}

_STATUS_LABELS = {
    Ordering.LESS: "update available",
    Ordering.EQUAL: "up to date",
    Ordering.GREATER: "ahead of download page",
}


def _get_context_objects(ctx: click.Context) -> tuple[UpdaterConfig, Console, bool]:
    """Extract common context objects."""
    config: UpdaterConfig = ctx.obj["config"]
    console: Console = ctx.obj["console"]
    verbose: bool = ctx.obj["verbose"]
    return config, console, verbose


def _effective_config(config: UpdaterConfig, **overrides: Any) -> UpdaterConfig:
    """Apply CLI options on top of the loaded configuration."""
    data = config.model_dump()
    data.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return UpdaterConfig.model_validate(data)
    except ValidationError as e:
        raise click.BadParameter(str(e)) from e


def _server_dir(config: UpdaterConfig) -> Path:
    if config.server_dir is None:
        raise click.UsageError("No server directory given; use --server-dir or set server_dir in the config")
    return config.server_dir


def _log_failure(error: UpdaterError) -> None:
    # Operator-fixable conditions are not errors of the updater itself
    if error.recoverable:
        logger.warning("update_cycle_skipped", kind=error.kind.value, error=str(error))
    else:
        logger.error("update_cycle_failed", kind=error.kind.value, error=str(error))


def _versions_payload(reference: DownloadReference, versions: ResolvedVersions) -> dict[str, Any]:
    return {
        "current": str(versions.current),
        "latest": str(versions.latest),
        "url": reference.url,
        "file": reference.file_name,
    }


def _print_report(report: CycleReport, config: UpdaterConfig, console: Console) -> None:
    if config.output_format == "json":
        payload = _versions_payload(report.reference, report.versions)
        payload["outcome"] = report.outcome.value
        print(json.dumps(payload))
        return

    message = _OUTCOME_MESSAGES[report.outcome]
    console.print(f"{message} (installed {report.versions.current}, latest {report.versions.latest})")


@click.command(name="run")
@click.option(
    "--server-dir",
    "-s",
    type=click.Path(file_okay=False, path_type=Path),
    help="Use this server directory",
)
@click.option("--update-dir", "-u", help="Update directory relative to the server directory")
@click.option("--version-file", "-f", help="Version path relative to the server directory")
@click.option(
    "--set-first-version",
    "first_version",
    metavar="VERSION",
    help="Set the version of the server, generally used for setting the initial version",
)
@click.option("--once", is_flag=True, help="Run a single update cycle and exit")
@click.option("--interval", type=float, help="Seconds to wait between update cycles")
@click.pass_context
def run(
    ctx: click.Context,
    server_dir: Path | None,
    update_dir: str | None,
    version_file: str | None,
    first_version: str | None,
    once: bool,
    interval: float | None,
) -> None:
    """Update a Bedrock server continuously."""
    config, console, _ = _get_context_objects(ctx)
    config = _effective_config(
        config,
        server_dir=server_dir,
        update_dir=update_dir,
        version_file=version_file,
        poll_interval=interval,
    )
    directory = _server_dir(config)
    override = first_version

    with ServerPageClient(config) as client:
        pipeline = UpdatePipeline(config, directory, client)

        while True:
            try:
                report = pipeline.run_cycle(override)
                _print_report(report, config, console)
            except UpdaterError as e:
                _log_failure(e)
                if once:
                    raise click.ClickException(str(e)) from e
            finally:
                # The override seeds the record once; reapplying it later
                # would roll the record back after an update.
                if pipeline.versions_resolved:
                    override = None

            if once:
                return

            logger.debug("sleeping", seconds=config.poll_interval)
            time.sleep(config.poll_interval)


@click.command(name="check")
@click.option(
    "--server-dir",
    "-s",
    type=click.Path(file_okay=False, path_type=Path),
    help="Use this server directory",
)
@click.option("--version-file", "-f", help="Version path relative to the server directory")
@click.pass_context
def check(ctx: click.Context, server_dir: Path | None, version_file: str | None) -> None:
    """Show the installed and latest server versions without installing."""
    config, console, verbose = _get_context_objects(ctx)
    config = _effective_config(config, server_dir=server_dir, version_file=version_file)
    directory = _server_dir(config)

    with ServerPageClient(config) as client:
        pipeline = UpdatePipeline(config, directory, client)
        try:
            reference, versions = pipeline.check()
        except UpdaterError as e:
            _log_failure(e)
            raise click.ClickException(str(e)) from e

    if config.output_format == "json":
        print(json.dumps(_versions_payload(reference, versions), indent=2))
        return

    table = Table(title="Bedrock Server Versions")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("Installed", str(versions.current))
    table.add_row("Latest", str(versions.latest))
    table.add_row("Status", _STATUS_LABELS[versions.ordering])
    if verbose:
        table.add_row("Archive", reference.file_name)
        table.add_row("URL", reference.url)

    console.print(table)
