"""Tests for the /commands/assistant slash command endpoint."""
# pylint: disable=missing-function-docstring

from __future__ import annotations

from http import HTTPStatus
from urllib.parse import urlencode

from fastapi.testclient import TestClient

FORM = {"Content-Type": "application/x-www-form-urlencoded"}


def _post(client: TestClient, **fields: str):
    fields.setdefault("token", "command-token")
    fields.setdefault("user_id", "uid-1")
    return client.post("/commands/assistant", content=urlencode(fields), headers=FORM)


def test_connect_then_disconnect(client: TestClient, identity_store) -> None:
    resp = _post(client, text="connect alice", command="/assistant")

    assert resp.status_code == HTTPStatus.OK
    assert resp.json() == {"response_type": "ephemeral", "text": "Connected!"}
    assert identity_store.resolve("alice") == "uid-1"

    resp = _post(client, text="disconnect", command="/assistant")
    assert resp.json()["text"] == "Disconnected!"


def test_falls_back_to_full_command(client: TestClient, identity_store) -> None:
    resp = _post(client, command="/assistant connect bob")

    assert resp.json()["text"] == "Connected!"
    assert identity_store.resolve("bob") == "uid-1"


def test_unsupported_action_returns_help(client: TestClient) -> None:
    resp = _post(client, text="dance")

    assert resp.json()["text"] == "Only connect/disconnect commands are supported!"


def test_invalid_token_is_unauthorized(client: TestClient, identity_store) -> None:
    resp = _post(client, token="wrong", text="connect alice")

    assert resp.status_code == HTTPStatus.UNAUTHORIZED
    assert identity_store.list_links() == []


def test_missing_user_id_is_bad_request(client: TestClient) -> None:
    resp = _post(client, user_id="", text="connect alice")

    assert resp.status_code == HTTPStatus.BAD_REQUEST


def test_missing_token_field_is_unauthorized(client: TestClient) -> None:
    resp = client.post(
        "/commands/assistant", data={"user_id": "uid-1", "text": "connect alice"}
    )

    assert resp.status_code == HTTPStatus.UNAUTHORIZED


def test_blank_text_falls_back_to_command_field(client: TestClient) -> None:
    resp = client.post(
        "/commands/assistant",
        data={"token": "command-token", "user_id": "uid-1", "text": "", "command": "/assistant"},
    )

    assert resp.status_code == HTTPStatus.OK
    assert resp.json()["text"] == "Only connect/disconnect commands are supported!"
