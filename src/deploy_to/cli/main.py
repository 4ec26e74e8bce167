"""Typer CLI.

Commands:
- `servers`: list the deployment targets of the project.
- `changes`: show the files that changed since the cutoff.
- `generate`: render the deployment script (stdout or `--output`).
- `doctor`: environment diagnostics.

The generated script is written with `typer.echo`, never through Rich, so its
`[[`/`]]` text is not read as console markup. Everything else goes to stderr.
"""

from __future__ import annotations

import logging
import stat
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from deploy_to.adapters.deploy_config import load_deploy_config
from deploy_to.adapters.deploy_state import record_deploy
from deploy_to.cli.doctor import app as doctor_app
from deploy_to.cli.ui_components import (
    build_changes_table,
    build_servers_table,
    build_summary_panel,
    print_banner,
)
from deploy_to.core.config import AppSettings
from deploy_to.core.domain.errors import DeployToError
from deploy_to.core.domain.models import DeployConfig
from deploy_to.core.services.deploy_pipeline import (
    DeployRequest,
    build_deploy_plan,
    collect_changes,
)

app = typer.Typer(no_args_is_help=True, help="Generate deployment scripts for files changed since the last deploy.")
app.add_typer(doctor_app, name="doctor")

_console = Console(stderr=True)


@dataclass
class _State:
    settings: AppSettings
    config_path: Path


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=_console, show_path=False)],
        force=True,
    )


def _fail(exc: Exception) -> NoReturn:
    _console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
    raise typer.Exit(code=2)


def _parse_since(value: str | None) -> datetime | None:
    """Accept epoch seconds or an ISO-8601 datetime."""

    if value is None:
        return None
    text = value.strip()
    try:
        return datetime.fromtimestamp(float(text), tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        pass
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise typer.BadParameter(f"expected epoch seconds or ISO-8601 datetime, got {value!r}") from exc


def _load_config(state: _State) -> DeployConfig:
    try:
        return load_deploy_config(state.config_path)
    except DeployToError as exc:
        _fail(exc)


@app.callback()
def main(
    ctx: typer.Context,
    base_dir: Optional[Path] = typer.Option(
        None,
        "--base-dir",
        "-C",
        help="Project root (defaults to DEPLOY_TO_BASE_DIR or the current directory).",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Deploy config file (defaults to <base-dir>/deploy-to.json).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every scanner decision."),
) -> None:
    overrides = {"base_dir": base_dir} if base_dir is not None else {}
    settings = AppSettings(**overrides)
    _configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = _State(settings=settings, config_path=config or settings.config_path())


@app.command()
def servers(ctx: typer.Context) -> None:
    """List the deployment targets of the project."""

    state: _State = ctx.obj
    config = _load_config(state)
    _console.print(build_servers_table(config.servers))


@app.command()
def changes(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Server name or alias."),
    since: Optional[str] = typer.Option(None, "--since", help="Cutoff (epoch seconds or ISO-8601)."),
    source: Optional[list[str]] = typer.Option(None, "--source", "-s", help="Path to scan (repeatable)."),
) -> None:
    """Show the files changed since the cutoff, without rendering a script."""

    state: _State = ctx.obj
    config = _load_config(state)
    request = DeployRequest(target=target, since=_parse_since(since), sources=source or None)
    try:
        server, cutoff, entries = collect_changes(request, config, state.settings)
    except DeployToError as exc:
        _fail(exc)

    title = f"Changed for {server.name} since {cutoff.isoformat(timespec='seconds')}"
    _console.print(build_changes_table(entries, title=escape(title)))


@app.command()
def generate(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Server name or alias."),
    since: Optional[str] = typer.Option(None, "--since", help="Cutoff (epoch seconds or ISO-8601)."),
    source: Optional[list[str]] = typer.Option(None, "--source", "-s", help="Path to scan (repeatable)."),
    template: Optional[Path] = typer.Option(None, "--template", "-t", help="Bash script template."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the script here instead of stdout."),
    record: bool = typer.Option(
        False,
        "--record/--no-record",
        help="Record the scan start as the last deployment to this server.",
    ),
) -> None:
    """Render the deployment script for TARGET."""

    state: _State = ctx.obj
    config = _load_config(state)
    request = DeployRequest(
        target=target,
        since=_parse_since(since),
        sources=source or None,
        template_path=template,
    )
    try:
        plan = build_deploy_plan(request, config, state.settings)
    except DeployToError as exc:
        _fail(exc)

    if output is None:
        typer.echo(plan.script, nl=False)
    else:
        print_banner(_console)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(plan.script, encoding="utf-8")
        output.chmod(output.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        _console.print(build_changes_table(plan.entries))
        _console.print(
            build_summary_panel(
                server=plan.server,
                count=len(plan.entries),
                since=plan.since.isoformat(timespec="seconds"),
                destination=str(output),
            )
        )

    if record:
        record_deploy(state.settings.state_path(), plan.server.name, when=plan.scanned_at)


def run() -> None:
    app()
