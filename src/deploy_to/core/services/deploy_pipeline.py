"""Deployment script orchestration.

This module chains the pieces the CLI would otherwise glue together: pick the
server record, scan the sources for changes, render the transfer commands and
populate the bash template. Printing and file writing stay in the CLI, so the
pipeline is usable from tests or other entry-points.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from deploy_to.adapters.deploy_config import resolve_template_path
from deploy_to.adapters.deploy_state import read_last_deploy
from deploy_to.adapters.transfer_renderer import DEFAULT_SCRIPT_TEMPLATE, render_transfer_block
from deploy_to.core.config import AppSettings
from deploy_to.core.domain.errors import UnknownServerError
from deploy_to.core.domain.models import DeployableEntry, DeployConfig, ServerRecord
from deploy_to.core.services.change_set import scan_sources
from deploy_to.core.services.paths import to_unix_path
from deploy_to.core.services.script_template import populate_script
from deploy_to.core.services.server_matcher import find_server

logger = logging.getLogger(__name__)


@dataclass
class DeployRequest:
    """Parameters of one script generation."""

    target: str
    since: datetime | None = None
    sources: list[str] | None = None
    template_path: Path | None = None


@dataclass
class DeployPlan:
    """Output of the pipeline."""

    server: ServerRecord
    since: datetime
    entries: list[DeployableEntry]
    template_path: Path
    script: str
    scanned_at: datetime
    data: dict[str, str] = field(default_factory=dict)


def select_server(config: DeployConfig, target: str) -> ServerRecord:
    server = find_server(config.servers, target)
    if server is None:
        raise UnknownServerError(target, [s.name for s in config.servers])
    return server


def resolve_cutoff(
    request: DeployRequest,
    server: ServerRecord,
    settings: AppSettings,
) -> datetime:
    """Explicit `since`, else the last recorded deployment, else a default window."""

    if request.since is not None:
        return request.since
    last = read_last_deploy(settings.state_path(), server.name)
    if last is not None:
        return datetime.fromtimestamp(last, tz=timezone.utc)
    logger.info(
        "No recorded deployment to %s; using the last %s hours",
        server.name,
        settings.default_since_hours,
    )
    return datetime.now(timezone.utc) - timedelta(hours=settings.default_since_hours)


def resolve_template(request: DeployRequest, config: DeployConfig, settings: AppSettings) -> Path:
    """CLI flag, then project config, then settings, then the bundled template."""

    if request.template_path is not None:
        return request.template_path
    from_config = resolve_template_path(config, settings.base_dir)
    if from_config is not None:
        return from_config
    if settings.template_path is not None:
        return settings.template_path
    return DEFAULT_SCRIPT_TEMPLATE


def build_template_data(
    *,
    server: ServerRecord,
    entries: list[DeployableEntry],
    since: datetime,
    base_dir: Path,
) -> dict[str, str]:
    data: dict[str, str] = {}
    # Extra fields first so declared fields always win.
    for key, value in server.extra_fields().items():
        if isinstance(value, (str, int, float, bool)):
            data[key] = str(value)

    host = server.host or ""
    target = f"{server.user}@{host}" if server.user else host
    data.update(
        {
            "server": server.name,
            "host": host,
            "user": server.user or "",
            "target": target,
            "port": str(server.port or 22),
            "remote_root": server.remote_root or "",
            "base_dir": to_unix_path(str(base_dir)),
            "files": render_transfer_block(entries),
            "file_count": str(len(entries)),
            "since": since.isoformat(timespec="seconds"),
            "generated_at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        }
    )
    return data


def collect_changes(
    request: DeployRequest,
    config: DeployConfig,
    settings: AppSettings,
) -> tuple[ServerRecord, datetime, list[DeployableEntry]]:
    server = select_server(config, request.target)
    since = resolve_cutoff(request, server, settings)
    sources = request.sources or config.sources
    entries = scan_sources(sources, since, base_dir=settings.base_dir)
    logger.info("%d file(s) changed since %s", len(entries), since.isoformat())
    return server, since, entries


def build_deploy_plan(
    request: DeployRequest,
    config: DeployConfig,
    settings: AppSettings | None = None,
) -> DeployPlan:
    """Run the whole pipeline and return the rendered script."""

    settings = settings or AppSettings()
    # The recorded deploy time must not be later than the scan start.
    scanned_at = datetime.now(timezone.utc)
    server, since, entries = collect_changes(request, config, settings)
    template_path = resolve_template(request, config, settings)
    data = build_template_data(
        server=server,
        entries=entries,
        since=since,
        base_dir=settings.base_dir,
    )
    script = populate_script(data, template_path)
    return DeployPlan(
        server=server,
        since=since,
        entries=entries,
        template_path=template_path,
        script=script,
        scanned_at=scanned_at,
        data=data,
    )


def known_placeholders(server: ServerRecord | None = None) -> set[str]:
    """Placeholder names the pipeline fills for `server`."""

    names = {
        "SERVER",
        "HOST",
        "USER",
        "TARGET",
        "PORT",
        "REMOTE_ROOT",
        "BASE_DIR",
        "FILES",
        "FILE_COUNT",
        "SINCE",
        "GENERATED_AT",
    }
    if server is not None:
        extras: dict[str, Any] = server.extra_fields()
        names.update(key.upper() for key in extras)
    return names
