"""Doctor command for environment diagnostics."""

from __future__ import annotations

import shutil
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from deploy_to.adapters.deploy_config import load_deploy_config
from deploy_to.adapters.deploy_state import read_last_deploy
from deploy_to.core.config import AppSettings, write_user_env_vars
from deploy_to.core.domain.errors import DeployToError
from deploy_to.core.domain.models import DeployConfig
from deploy_to.core.services.deploy_pipeline import DeployRequest, known_placeholders, resolve_template
from deploy_to.core.services.script_template import placeholders_in

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console(stderr=True)


def _check_template(path: Path, config: DeployConfig) -> tuple[bool, str]:
    if not path.is_file():
        return False, f"Missing: {path}"
    text = path.read_text(encoding="utf-8")
    filled = known_placeholders()
    for server in config.servers:
        filled |= known_placeholders(server)
    unfilled = sorted(placeholders_in(text) - filled)
    if unfilled:
        return True, f"{path} (left verbatim: {', '.join(unfilled)})"
    return True, str(path)


@app.command()
def run(ctx: typer.Context) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    state = ctx.obj
    settings: AppSettings = state.settings if state is not None else AppSettings()
    config_path: Path = state.config_path if state is not None else settings.config_path()

    table = Table(title="deploy-to Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("Base dir", "OK" if settings.base_dir.is_dir() else "FAIL", escape(str(settings.base_dir)))

    config = DeployConfig()
    try:
        config = load_deploy_config(config_path)
        names = ", ".join(s.name for s in config.servers) or "no servers"
        table.add_row("Deploy config", "OK", escape(f"{config_path} ({names})"))
    except DeployToError as exc:
        table.add_row("Deploy config", "FAIL", escape(str(exc)))

    ok_tmpl, detail_tmpl = _check_template(resolve_template(DeployRequest(target=""), config, settings), config)
    table.add_row("Script template", "OK" if ok_tmpl else "FAIL", escape(detail_tmpl))

    for server in config.servers:
        last = read_last_deploy(settings.state_path(), server.name)
        table.add_row(f"Last deploy: {escape(server.name)}", "OK" if last is not None else "NEVER", "-" if last is None else str(last))

    for tool in ("ssh", "scp"):
        found = shutil.which(tool)
        table.add_row(tool, "OK" if found else "MISSING", found or "required to run the generated script")

    _console.print(table)


@app.command(name="set-template")
def set_template(path: Path = typer.Argument(..., help="Default bash script template.")) -> None:
    """Store a default template path in the user config .env."""

    resolved = path.expanduser().resolve()
    if not resolved.is_file():
        raise typer.BadParameter(f"not a file: {resolved}")

    env_path = write_user_env_vars({"DEPLOY_TO_TEMPLATE_PATH": str(resolved)})
    _console.print(f"[green]Saved template path to:[/green] {escape(str(env_path))}")
