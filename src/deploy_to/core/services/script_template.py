"""Population of the bash script template.

Placeholders look like `[[KEY]]`. Substitution is a single pass: values are
inserted verbatim and never re-scanned, placeholders without a value are left
in place.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Mapping

from deploy_to.core.domain.errors import TemplateNotFoundError

_PLACEHOLDER = re.compile(r"\[\[([A-Z0-9_]+)\]\]")


def placeholder_token(key: str) -> str:
    return f"[[{key.upper()}]]"


def substitute(text: str, data: Mapping[str, object]) -> str:
    """Replace every `[[KEY]]` token of `data` in `text` in one pass."""

    replacements = {placeholder_token(key): str(value) for key, value in data.items()}
    if not replacements:
        return text
    # Longest first so a token never loses to one of its prefixes.
    tokens = sorted(replacements, key=len, reverse=True)
    pattern = re.compile("|".join(re.escape(token) for token in tokens))
    return pattern.sub(lambda m: replacements[m.group(0)], text)


def populate_script(data: Mapping[str, object], template_path: Path | str) -> str:
    """Render the template at `template_path` with `data`.

    Raises `TemplateNotFoundError` when the template is not an existing file.
    """

    path = Path(template_path)
    if not path.is_file():
        raise TemplateNotFoundError(template_path)
    return substitute(path.read_text(encoding="utf-8"), data)


def placeholders_in(text: str) -> set[str]:
    """Names of the `[[KEY]]` placeholders present in `text`."""

    return set(_PLACEHOLDER.findall(text))
