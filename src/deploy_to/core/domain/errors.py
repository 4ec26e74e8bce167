"""Error taxonomy.

All errors the CLI is expected to report to the user derive from
`DeployToError`. Anything else is a bug and propagates.
"""

from __future__ import annotations

from pathlib import Path


class DeployToError(Exception):
    """Base class for user-facing deploy-to errors."""


class TemplateNotFoundError(DeployToError, FileNotFoundError):
    """The script template cannot be used."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(f'Could not find bash script template file at "{path}"')


class UnknownServerError(DeployToError):
    """No server record matches the requested deployment target."""

    def __init__(self, target: str, known: list[str] | None = None) -> None:
        self.target = target
        self.known = known or []
        message = f'No server named "{target}" in the deploy config'
        if self.known:
            message += f" (known: {', '.join(self.known)})"
        super().__init__(message)


class ConfigError(DeployToError):
    """The deploy config file is missing or invalid."""
