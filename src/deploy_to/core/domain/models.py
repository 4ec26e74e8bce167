"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation at the edge (the JSON deploy config) with self-documenting
  fields, without coupling the core to any I/O library.
- Server records carry deployment-specific fields we do not know in advance;
  `extra="allow"` keeps them available to the script template.

Note:
- These models describe *what* a deployment is, not *how* it is produced.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


class ServerRecord(BaseModel):
    """One deployment target listed in `deploy-to.json`.

    Why frozen:
    - Records are read from configuration and never mutated by the pipeline.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    name: str = Field(
        ...,
        min_length=1,
        description="Canonical name of the deployment target.",
    )
    aliases: list[str] | None = Field(
        default=None,
        description="Alternative names accepted as the deployment target.",
    )
    host: str | None = Field(
        default=None,
        description="Hostname or IP address of the remote server.",
    )
    user: str | None = Field(
        default=None,
        description="Remote login user.",
    )
    port: int | None = Field(
        default=None,
        ge=1,
        le=65535,
        description="SSH port of the remote server.",
    )
    remote_root: str | None = Field(
        default=None,
        description="Directory on the server that mirrors the local base directory.",
    )

    @field_validator("aliases", mode="before")
    @classmethod
    def _aliases_must_be_list(cls, value: Any) -> Any:
        # Anything that is not a list means "no aliases"; non-string items never match.
        if not isinstance(value, list):
            return None
        return [v for v in value if isinstance(v, str)]

    def extra_fields(self) -> dict[str, Any]:
        """Deployment fields present in the config but not declared on the model."""

        return dict(self.model_extra or {})


class DeployableEntry(BaseModel):
    """A changed file that has to be shipped to the server."""

    model_config = ConfigDict(frozen=True)

    local: str = Field(
        ...,
        description="Local path of the file, with any drive letter cleaned for the shell.",
    )
    remote: str = Field(
        ...,
        description="Remote directory (relative to the base directory) the file goes into.",
    )


class DeployConfig(BaseModel):
    """Contents of a `deploy-to.json` file."""

    model_config = ConfigDict(extra="ignore")

    servers: list[ServerRecord] = Field(
        default_factory=list,
        description="Deployment targets.",
    )
    sources: list[str] = Field(
        default_factory=lambda: ["."],
        description="Files, directories or `*.ext` patterns scanned for changes.",
    )
    template: Path | None = Field(
        default=None,
        description="Script template for this project (relative to the base directory).",
    )
