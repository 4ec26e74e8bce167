"""Change-set scanner: which files changed since the last deployment.

A source can be a regular file, a directory (walked recursively) or a
`*.ext` wildcard. Directories and wildcards go through the same primitive:
list a directory and keep the children accepted by a predicate.

Rules:
- Relative paths are resolved against an explicit base directory, never the
  process working directory.
- A path that does not exist yields no entries; it is not an error.
- A directory whose real path is already being walked (symlink cycle) is
  skipped.
"""

from __future__ import annotations

import logging
import os
import re
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable

from deploy_to.core.domain.models import DeployableEntry
from deploy_to.core.services.paths import clean_drive_letter, remote_dir_for

logger = logging.getLogger(__name__)

_WILDCARD = re.compile(r"\*\.[a-z]+$", re.IGNORECASE)
_BEFORE_STAR = re.compile(r"^[^*]*\*")

Cutoff = int | float | datetime


def _to_timestamp(cutoff: Cutoff) -> float:
    if isinstance(cutoff, datetime):
        return cutoff.timestamp()
    return float(cutoff)


class ChangeSetScanner:
    """Walks sources below `base_dir` collecting files newer than `cutoff`."""

    def __init__(self, *, base_dir: Path | str, cutoff: Cutoff) -> None:
        self._base_dir = Path(base_dir)
        self._cutoff = _to_timestamp(cutoff)
        self._walking: set[str] = set()

    def scan(self, path: str) -> list[DeployableEntry]:
        real = self._resolve(path)

        if real.is_file():
            entry = self._file_entry(path, real)
            return [entry] if entry else []

        if real.is_dir():
            prefix = "" if path in ("", ".") else path.rstrip("/") + "/"
            return self._scan_children(real, prefix, lambda _name: True)

        if _WILDCARD.search(path):
            ext = _BEFORE_STAR.sub("", path)
            if "/" in path:
                prefix = path[: path.rindex("/") + 1]
                directory = self._resolve(prefix)
            else:
                prefix = ""
                directory = self._base_dir
            if not directory.is_dir():
                logger.debug("Wildcard %s: no directory %s", path, directory)
                return []
            return self._scan_children(directory, prefix, lambda name: name.endswith(ext))

        logger.debug("Skipping %s: not a file, directory or wildcard", path)
        return []

    def _resolve(self, path: str) -> Path:
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self._base_dir / candidate

    def _file_entry(self, path: str, real: Path) -> DeployableEntry | None:
        mtime = real.stat().st_mtime
        if mtime <= self._cutoff:
            logger.debug("Unchanged: %s", path)
            return None
        logger.debug("Changed: %s", path)
        return DeployableEntry(
            local=clean_drive_letter(path.strip()),
            remote=remote_dir_for(path, self._base_dir),
        )

    def _scan_children(
        self,
        directory: Path,
        prefix: str,
        keep: Callable[[str], bool],
    ) -> list[DeployableEntry]:
        real = os.path.realpath(directory)
        if real in self._walking:
            logger.warning("Skipping %s: symbolic link cycle back to %s", directory, real)
            return []

        try:
            children = sorted(os.listdir(directory))
        except OSError as exc:
            logger.warning("Cannot list %s: %s", directory, exc)
            return []

        self._walking.add(real)
        try:
            output: list[DeployableEntry] = []
            for name in children:
                if name in (".", "..") or not keep(name):
                    continue
                output.extend(self.scan(prefix + name))
            return output
        finally:
            self._walking.discard(real)


def get_deployable(path: str, cutoff: Cutoff, *, base_dir: Path | str) -> list[DeployableEntry]:
    """Files below `path` modified strictly after `cutoff`."""

    return ChangeSetScanner(base_dir=base_dir, cutoff=cutoff).scan(path)


def scan_sources(
    sources: Iterable[str],
    cutoff: Cutoff,
    *,
    base_dir: Path | str,
) -> list[DeployableEntry]:
    """Scan several sources, keeping the first entry produced for each local path."""

    scanner = ChangeSetScanner(base_dir=base_dir, cutoff=cutoff)
    seen: set[str] = set()
    entries: list[DeployableEntry] = []
    for source in sources:
        for entry in scanner.scan(source):
            if entry.local in seen:
                continue
            seen.add(entry.local)
            entries.append(entry)
    return entries
