"""Tests for the server matcher."""

from __future__ import annotations

from deploy_to.core.domain.models import ServerRecord
from deploy_to.core.services.server_matcher import find_server, is_right_server


def test_direct_name_match_ignores_aliases() -> None:
    assert is_right_server(ServerRecord(name="prod"), "prod")
    assert is_right_server(ServerRecord(name="prod", aliases=["live"]), "prod")
    assert is_right_server(ServerRecord(name="prod", aliases="garbage"), "prod")


def test_alias_match() -> None:
    server = ServerRecord(name="prod", aliases=["live", "www"])
    assert is_right_server(server, "www")
    assert not is_right_server(server, "staging")


def test_missing_or_malformed_aliases_never_match() -> None:
    assert not is_right_server(ServerRecord(name="prod"), "live")
    assert not is_right_server(ServerRecord(name="prod", aliases="live"), "live")
    assert not is_right_server(ServerRecord(name="prod", aliases={"live": True}), "live")


def test_malformed_aliases_are_normalised_to_none() -> None:
    assert ServerRecord(name="prod", aliases=42).aliases is None


def test_find_server_returns_first_match_in_order() -> None:
    servers = [
        ServerRecord(name="staging", aliases=["test"]),
        ServerRecord(name="prod", aliases=["test"]),
    ]
    assert find_server(servers, "test").name == "staging"
    assert find_server(servers, "prod").name == "prod"
    assert find_server(servers, "nope") is None


def test_non_string_aliases_are_dropped() -> None:
    server = ServerRecord(name="prod", aliases=[None, 7, "live"])

    assert server.aliases == ["live"]
    assert not is_right_server(server, "None")
    assert not is_right_server(server, "7")
    assert is_right_server(server, "live")
