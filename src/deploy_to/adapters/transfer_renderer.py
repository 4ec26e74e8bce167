"""Rendering of the per-file transfer commands (Jinja2).

Why it lives in adapters:
- Jinja2 is an infrastructure detail; the core only knows `DeployableEntry`.
- The commands are rendered to text first and then dropped into the
  `[[FILES]]` placeholder of the bash template.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from deploy_to.core.domain.models import DeployableEntry
from deploy_to.core.services.paths import to_unix_path

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
DEFAULT_SCRIPT_TEMPLATE = TEMPLATES_DIR / "deploy.sh.tmpl"


def _remote_dir(value: str) -> str:
    return to_unix_path(value) or "./"


def _get_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=False,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["shell_path"] = to_unix_path
    env.filters["remote_dir"] = _remote_dir
    return env


def render_transfer_block(entries: Sequence[DeployableEntry]) -> str:
    """One `deploy_file <local> <remote dir>` line per entry."""

    template = _get_env().get_template("transfer_block.sh.j2")
    return template.render(entries=list(entries)).rstrip("\n")
