"""Settings of the application.

Why here:
- Centralises environment variables (pydantic-settings) without polluting the CLI.
- Lets the pipeline and adapters read configuration consistently.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "deploy-to"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "deploy-to"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "deploy-to"
    return Path.home() / ".config" / "deploy-to"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str]) -> Path:
    """Write/update variables in the user's global .env."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# deploy-to user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central configuration.

    Why pydantic-settings:
    - Typed and validated at the edge (env vars) without leaking into the core.
    - A single configuration contract for CLI, pipeline and adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="DEPLOY_TO_",
        extra="ignore",
        case_sensitive=False,
        # Project first, then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    base_dir: Path = Field(
        default_factory=Path.cwd,
        description="Project root; remote paths are computed relative to it.",
    )
    config_file: str = Field(
        default="deploy-to.json",
        min_length=1,
        description="Deploy config file name (relative to base_dir).",
    )
    state_file: str = Field(
        default=".deploy-to-state.json",
        min_length=1,
        description="File recording the last deployment time per server.",
    )
    template_path: Path | None = Field(
        default=None,
        description="Bash script template. Defaults to the bundled template.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Default logging level (DEBUG, INFO, WARNING, ERROR).",
    )
    default_since_hours: float = Field(
        default=24.0,
        gt=0,
        description="Cutoff window when a server has never been deployed to.",
    )

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {value}")
        return level

    def config_path(self) -> Path:
        return self.base_dir / self.config_file

    def state_path(self) -> Path:
        return self.base_dir / self.state_file
