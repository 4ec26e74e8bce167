"""Tests for shell path normalisation."""

from __future__ import annotations

import pytest

from deploy_to.core.services.paths import clean_drive_letter, remote_dir_for, to_unix_path


def test_to_unix_path_converts_windows_path() -> None:
    assert to_unix_path("C:\\Users\\a b") == "/c/Users/a\\ b"


def test_to_unix_path_trims_whitespace() -> None:
    assert to_unix_path("  css/site.css \n") == "css/site.css"


def test_to_unix_path_does_not_rescan_inserted_text() -> None:
    # The escaped space introduces a backslash that must not become a slash.
    assert to_unix_path("a b\\c") == "a\\ b/c"


def test_to_unix_path_only_rewrites_leading_drive() -> None:
    assert to_unix_path("docs/C:notes") == "docs/C:notes"


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("D:/foo", "/d/foo"),
        ("c:/Users/me", "/c/Users/me"),
        ("/already/unix", "/already/unix"),
        ("D:foo", "D:foo"),
        ("relative/D:/x", "relative/D:/x"),
    ],
)
def test_clean_drive_letter(path: str, expected: str) -> None:
    assert clean_drive_letter(path) == expected


def test_remote_dir_strips_base_and_keeps_directory() -> None:
    assert remote_dir_for("/work/site/css/a.css", "/work/site") == "/css/"


def test_remote_dir_for_relative_paths() -> None:
    assert remote_dir_for("css/img/a.png", "/work/site") == "css/img/"
    assert remote_dir_for("index.php", "/work/site") == ""


def test_remote_dir_only_strips_whole_base_components() -> None:
    assert remote_dir_for("/work/site2/a.css", "/work/site") == "/work/site2/"
    assert remote_dir_for("/work/site/a.css", "/work/site") == "/"


def test_remote_dir_leaves_relative_paths_alone() -> None:
    assert remote_dir_for(".well-known/security.txt", ".") == ".well-known/"
    assert remote_dir_for("site-assets/logo.png", "site") == "site-assets/"
