from __future__ import annotations

import os
import time
from pathlib import Path

import pytest


@pytest.fixture
def cutoff() -> float:
    return time.time() - 1000


@pytest.fixture
def touch(cutoff: float):
    """Create a file whose mtime is `cutoff + offset` seconds."""

    def _touch(path: Path, offset: float, content: str = "x") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        stamp = cutoff + offset
        os.utime(path, (stamp, stamp))
        return path

    return _touch
