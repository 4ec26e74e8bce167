"""Loading of `deploy-to.json`.

Supported shape:
    {
      "sources": ["index.php", "css", "js/*.js"],
      "template": "deploy.sh.tmpl",
      "servers": [
        {"name": "prod", "aliases": ["live"], "host": "example.org",
         "user": "deploy", "remote_root": "/var/www/site"}
      ]
    }

Unknown top-level keys are ignored; unknown server keys are kept as extra
deployment fields.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from deploy_to.core.domain.errors import ConfigError
from deploy_to.core.domain.models import DeployConfig


def load_deploy_config(path: Path) -> DeployConfig:
    if not path.is_file():
        raise ConfigError(f'Could not find deploy config at "{path}"')
    raw = path.read_text(encoding="utf-8")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path}: invalid JSON ({exc})") from exc
    # Older configs are a bare list of servers.
    if isinstance(data, list):
        data = {"servers": data}
    try:
        return DeployConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"{path}: {exc}") from exc


def resolve_template_path(config: DeployConfig, base_dir: Path) -> Path | None:
    """Template declared by the project config, resolved against `base_dir`."""

    if config.template is None:
        return None
    if config.template.is_absolute():
        return config.template
    return base_dir / config.template
