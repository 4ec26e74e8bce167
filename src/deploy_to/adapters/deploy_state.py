"""Persistence of the last deployment time per server.

Format: a JSON object `{"<server name>": <epoch seconds>}` stored in the
project (see `AppSettings.state_file`). It only provides the default cutoff;
a missing or unreadable file means "never deployed".
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)


def _read_state(state_path: Path) -> dict[str, float]:
    if not state_path.exists():
        return {}
    try:
        data = json.loads(state_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable state file %s: %s", state_path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring state file %s: not a JSON object", state_path)
        return {}
    return {
        str(k): float(v)
        for k, v in data.items()
        if isinstance(v, (int, float)) and not isinstance(v, bool)
    }


def read_last_deploy(state_path: Path, server_name: str) -> float | None:
    """Epoch seconds of the last recorded deployment to `server_name`."""

    return _read_state(state_path).get(server_name)


def record_deploy(state_path: Path, server_name: str, when: datetime | None = None) -> Path:
    """Record a deployment to `server_name` (now, unless `when` is given)."""

    when = when or datetime.now(timezone.utc)
    state = _read_state(state_path)
    state[server_name] = when.timestamp()
    state_path.parent.mkdir(parents=True, exist_ok=True)
    state_path.write_text(
        json.dumps(state, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    logger.info("Recorded deployment to %s at %s", server_name, when.isoformat())
    return state_path
