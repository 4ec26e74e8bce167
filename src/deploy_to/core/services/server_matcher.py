"""Selection of the deployment target among the configured servers."""

from __future__ import annotations

from typing import Iterable

from deploy_to.core.domain.models import ServerRecord


def is_right_server(server: ServerRecord, target: str) -> bool:
    """Whether `server` is the deployment target named `target`.

    A direct name match wins; otherwise `target` must be one of the aliases.
    Missing or malformed aliases count as no aliases.
    """

    if server.name == target:
        return True
    aliases = getattr(server, "aliases", None)
    if isinstance(aliases, list):
        return target in aliases
    return False


def find_server(servers: Iterable[ServerRecord], target: str) -> ServerRecord | None:
    """First server matching `target`, in config order."""

    for server in servers:
        if is_right_server(server, target):
            return server
    return None
