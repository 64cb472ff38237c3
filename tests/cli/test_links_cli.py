"""Tests for the assistant-bridge CLI commands."""
# pylint: disable=missing-function-docstring

from __future__ import annotations

import pytest
import uvicorn
from typer.testing import CliRunner

from assistant_bridge.cli import links as links_cli
from assistant_bridge.cli import main_app
from assistant_bridge.services.identity_store import IdentityStore

runner = CliRunner()


@pytest.fixture(autouse=True)
def _store(monkeypatch: pytest.MonkeyPatch, identity_store: IdentityStore) -> IdentityStore:
    monkeypatch.setattr(links_cli, "_get_store", lambda: identity_store)
    return identity_store


def test_connect_and_show(identity_store: IdentityStore) -> None:
    result = runner.invoke(main_app, ["links", "connect", "alice", "uid-1"])

    assert result.exit_code == 0
    assert identity_store.resolve("alice") == "uid-1"

    shown = runner.invoke(main_app, ["links", "show", "alice"])
    assert shown.exit_code == 0
    assert "uid-1" in shown.output


def test_connect_taken_username_fails(identity_store: IdentityStore) -> None:
    identity_store.link("alice", "uid-1")

    result = runner.invoke(main_app, ["links", "connect", "alice", "uid-2"])

    assert result.exit_code == 1
    assert identity_store.resolve("alice") == "uid-1"


def test_disconnect_by_account_id(identity_store: IdentityStore) -> None:
    identity_store.link("alice", "uid-1")

    result = runner.invoke(main_app, ["links", "disconnect", "--account-id", "uid-1"])

    assert result.exit_code == 0
    assert identity_store.list_links() == []


def test_disconnect_requires_a_selector() -> None:
    result = runner.invoke(main_app, ["links", "disconnect"])

    assert result.exit_code == 2


def test_disconnect_unknown_username_fails() -> None:
    result = runner.invoke(main_app, ["links", "disconnect", "-u", "ghost"])

    assert result.exit_code == 1


def test_show_unlinked_username_fails() -> None:
    assert runner.invoke(main_app, ["links", "show", "ghost"]).exit_code == 1


def test_list_renders_table(identity_store: IdentityStore) -> None:
    identity_store.link("alice", "uid-1")
    identity_store.link("bob", "uid-2")

    result = runner.invoke(main_app, ["links", "list"])

    assert result.exit_code == 0
    assert "alice" in result.output
    assert "bob" in result.output


def test_list_empty() -> None:
    result = runner.invoke(main_app, ["links", "list"])

    assert result.exit_code == 0
    assert "No account links found" in result.output


def test_serve_runs_app_factory(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple] = []
    monkeypatch.setattr(uvicorn, "run", lambda *args, **kwargs: calls.append((args, kwargs)))

    result = runner.invoke(main_app, ["serve", "--port", "9000"])

    assert result.exit_code == 0
    assert calls == [
        (
            ("assistant_bridge.api_factory:create_app",),
            {"factory": True, "host": "0.0.0.0", "port": 9000},
        )
    ]
