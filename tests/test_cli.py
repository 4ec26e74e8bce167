"""Tests for the Typer CLI."""

from __future__ import annotations

import json
import os
import sys
import time
from pathlib import Path

import pytest
from typer.testing import CliRunner

from deploy_to.cli.main import app
from deploy_to.core.services import deploy_pipeline

runner = CliRunner()


@pytest.fixture
def project(tmp_path: Path, touch) -> Path:
    (tmp_path / "deploy-to.json").write_text(
        json.dumps(
            {
                "sources": ["index.php", "css"],
                "servers": [
                    {"name": "prod", "aliases": ["live"], "host": "example.org", "remote_root": "/srv/site"}
                ],
            }
        ),
        encoding="utf-8",
    )
    touch(tmp_path / "index.php", 5)
    touch(tmp_path / "css" / "site.css", -5)
    return tmp_path


def test_generate_prints_script_to_stdout(project: Path, cutoff: float) -> None:
    result = runner.invoke(app, ["-C", str(project), "generate", "live", "--since", str(cutoff)])

    assert result.exit_code == 0, result.output
    assert result.stdout.startswith("#!/usr/bin/env bash")
    assert "deploy_file index.php ./" in result.stdout
    assert "site.css" not in result.stdout


def test_generate_writes_executable_file_and_records(project: Path, cutoff: float) -> None:
    out = project / "build" / "deploy.sh"

    result = runner.invoke(
        app,
        ["-C", str(project), "generate", "prod", "--since", str(cutoff), "-o", str(out), "--record"],
    )

    assert result.exit_code == 0, result.output
    assert "deploy_file index.php ./" in out.read_text(encoding="utf-8")
    assert os.access(out, os.X_OK)
    state = json.loads((project / ".deploy-to-state.json").read_text(encoding="utf-8"))
    assert "prod" in state


def test_generate_unknown_server_exits_with_message(project: Path) -> None:
    result = runner.invoke(app, ["-C", str(project), "generate", "staging"])

    assert result.exit_code == 2
    assert "staging" in result.output


def test_generate_missing_template(project: Path) -> None:
    result = runner.invoke(
        app,
        ["-C", str(project), "generate", "prod", "--template", str(project / "nope.tmpl")],
    )

    assert result.exit_code == 2
    assert "template" in result.output


def test_missing_config(tmp_path: Path) -> None:
    result = runner.invoke(app, ["-C", str(tmp_path), "servers"])

    assert result.exit_code == 2


def test_invalid_since(project: Path) -> None:
    result = runner.invoke(app, ["-C", str(project), "generate", "prod", "--since", "yesterday"])

    assert result.exit_code != 0


def test_since_accepts_iso_datetime(project: Path) -> None:
    result = runner.invoke(app, ["-C", str(project), "generate", "prod", "--since", "2000-01-01T00:00:00+00:00"])

    assert result.exit_code == 0, result.output
    assert "site.css" in result.stdout


def test_servers_and_changes(project: Path, cutoff: float) -> None:
    servers = runner.invoke(app, ["-C", str(project), "servers"])
    assert servers.exit_code == 0, servers.output
    assert "prod" in servers.output

    changes = runner.invoke(app, ["-C", str(project), "changes", "prod", "--since", str(cutoff)])
    assert changes.exit_code == 0, changes.output
    assert "index.php" in changes.output


def test_doctor_runs(project: Path) -> None:
    result = runner.invoke(app, ["-C", str(project), "doctor", "run"])

    assert result.exit_code == 0, result.output
    assert "Deploy config" in result.output


@pytest.mark.parametrize("since", ["inf", "1e300"])
def test_out_of_range_since_is_a_usage_error(project: Path, since: str) -> None:
    result = runner.invoke(app, ["-C", str(project), "changes", "prod", "--since", since])

    assert result.exit_code == 2
    assert not isinstance(result.exception, OverflowError)


def test_record_uses_time_before_scan(project: Path, cutoff: float, monkeypatch) -> None:
    scan_started: list[float] = []
    real_scan = deploy_pipeline.scan_sources

    def _timed_scan(*args, **kwargs):
        scan_started.append(time.time())
        return real_scan(*args, **kwargs)

    monkeypatch.setattr(deploy_pipeline, "scan_sources", _timed_scan)

    result = runner.invoke(app, ["-C", str(project), "generate", "prod", "--since", str(cutoff), "--record"])

    assert result.exit_code == 0, result.output
    state = json.loads((project / ".deploy-to-state.json").read_text(encoding="utf-8"))
    assert state["prod"] <= scan_started[0]


@pytest.mark.skipif(sys.platform in ("win32", "darwin"), reason="uses XDG_CONFIG_HOME")
def test_set_template_writes_user_env(project: Path, tmp_path: Path, monkeypatch) -> None:
    config_home = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    template = project / "custom.tmpl"
    template.write_text("[[FILES]]", encoding="utf-8")

    result = runner.invoke(app, ["-C", str(project), "doctor", "set-template", str(template)])

    assert result.exit_code == 0, result.output
    env_text = (config_home / "deploy-to" / ".env").read_text(encoding="utf-8")
    assert f"DEPLOY_TO_TEMPLATE_PATH={template.resolve()}" in env_text
