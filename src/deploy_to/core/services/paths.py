"""Path normalisation for the generated shell script.

The script runs in a POSIX shell (Git Bash/MinTTY on Windows, a plain shell
elsewhere), so Windows-style paths have to be rewritten before they are
embedded in a command line.
"""

from __future__ import annotations

import re
from pathlib import Path

# Single pass: each token is replaced independently, inserted text is never re-scanned.
_UNIX_TOKENS = re.compile(r"^C:| |\\")
_UNIX_REPLACEMENTS = {
    " ": "\\ ",
    "C:": "/c",
    "\\": "/",
}

_DRIVE_LETTER = re.compile(r"^([a-z]):(?=/)", re.IGNORECASE)

_DIRECTORY_PART = re.compile(r"^(.*?/)?[^/]*$", re.DOTALL)


def to_unix_path(path: str) -> str:
    """Convert a Windows path to a shell-escaped Unix path.

    `C:\\Users\\a b` becomes `/c/Users/a\\ b`.
    """

    return _UNIX_TOKENS.sub(lambda m: _UNIX_REPLACEMENTS[m.group(0)], path.strip())


def clean_drive_letter(path: str) -> str:
    """Rewrite a leading `X:/` drive prefix to `/x/` (MinTTY style)."""

    return _DRIVE_LETTER.sub(lambda m: "/" + m.group(1).lower(), path, count=1)


def _relative_to_base(path: str, base_dir: Path) -> str | None:
    candidate = Path(path)
    for base in (base_dir.absolute(), base_dir.resolve()):
        if candidate.is_relative_to(base):
            return "/" + candidate.relative_to(base).as_posix()
    return None


def remote_dir_for(path: str, base_dir: Path | str) -> str:
    """Directory portion of `path` relative to `base_dir`, with trailing slash.

    Relative paths are already relative to the base directory. Absolute paths
    lose the base directory only when they sit below it (whole components).
    A relative file at the top of the base directory yields an empty string.
    """

    relative = path
    if Path(path).is_absolute():
        relative = _relative_to_base(path, Path(base_dir)) or path
    match = _DIRECTORY_PART.match(relative)
    directory = (match.group(1) if match else None) or ""
    return directory.strip()
