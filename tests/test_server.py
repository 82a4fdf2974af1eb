from __future__ import annotations

import asyncio
from pathlib import Path
from types import SimpleNamespace

from diagnav import server
from diagnav.model import NAVIGATION_COMMANDS
from diagnav.workspace import (
    CLOSE_MARKERS_METHOD,
    REVEAL_RANGE_METHOD,
    SET_SELECTION_METHOD,
    SHOW_DOCUMENT_METHOD,
    SHOW_HOVER_METHOD,
)

ACTIVE = "file:///active.py"
OTHER = "file:///b.py"


class _DummyLanguageServer:
    def __init__(self, root: Path | None = None, *, open_ok: bool = True) -> None:
        self.workspace = SimpleNamespace(root_path=str(root) if root else None)
        self.sent: list[tuple[str, dict]] = []
        self.shown: list[str] = []
        self.protocol = SimpleNamespace(notify=self._notify)
        self._open_ok = open_ok

    def _notify(self, method: str, params: dict) -> None:
        self.sent.append((method, params))

    async def window_show_document_async(self, params):
        self.shown.append(params.uri)
        return SimpleNamespace(success=self._open_ok)

    @property
    def methods(self) -> list[str]:
        return [method for method, _ in self.sent]


def _run(ls, command_id: str, payload: object, session=None) -> dict:
    session = session if session is not None else server.NavigationSession()
    return asyncio.run(server.execute_navigation(ls, session, command_id, payload))


def test_in_file_navigation_notifies_client(tmp_path: Path, snapshot_payload) -> None:
    ls = _DummyLanguageServer(tmp_path)
    payload = snapshot_payload(
        active_uri=ACTIVE,
        diagnostics={ACTIVE: [(5, 2, 1)]},
        visible=(0, 40),
    )
    response = _run(ls, "diagnav.next.error", payload)
    assert response["found"] is True
    assert response["errors"] == []
    assert response["selection"] == {"line": 5, "character": 2}
    assert response["state"] == {"uri": ACTIVE, "position": {"line": 5, "character": 2}}
    assert ls.methods == [SET_SELECTION_METHOD, CLOSE_MARKERS_METHOD, SHOW_HOVER_METHOD]
    assert [entry["method"] for entry in response["requests"]] == ls.methods


def test_session_state_persists_between_commands(tmp_path: Path, snapshot_payload) -> None:
    ls = _DummyLanguageServer(tmp_path)
    session = server.NavigationSession()
    payload = snapshot_payload(
        active_uri=ACTIVE,
        cursor=(5, 0),
        diagnostics={ACTIVE: [(5, 0, 1), (9, 0, 1)]},
        visible=(0, 40),
    )
    first = _run(ls, "diagnav.next.error", payload, session)
    second = _run(ls, "diagnav.next.error", payload, session)
    assert first["selection"] == {"line": 5, "character": 0}
    assert second["selection"] == {"line": 9, "character": 0}
    assert session.state.position.line == 9


def test_cross_file_navigation_opens_document(tmp_path: Path, snapshot_payload) -> None:
    ls = _DummyLanguageServer(tmp_path)
    payload = snapshot_payload(
        active_uri=ACTIVE,
        cursor=(20, 0),
        diagnostics={ACTIVE: [(2, 0, 1)], OTHER: [(7, 0, 1), (3, 0, 1)]},
        visible=(0, 40),
    )
    response = _run(ls, "diagnav.nextInFiles.error", payload)
    assert response["found"] is True
    assert response["active_uri"] == OTHER
    assert response["selection"] == {"line": 3, "character": 0}
    assert ls.shown == [OTHER]
    assert response["requests"][0]["method"] == SHOW_DOCUMENT_METHOD
    # The freshly opened editor reports no viewport, so the marker is revealed.
    assert REVEAL_RANGE_METHOD in ls.methods


def test_rejected_open_reports_error_and_keeps_state(tmp_path: Path, snapshot_payload) -> None:
    ls = _DummyLanguageServer(tmp_path, open_ok=False)
    session = server.NavigationSession()
    payload = snapshot_payload(
        active_uri=ACTIVE,
        cursor=(20, 0),
        diagnostics={ACTIVE: [(2, 0, 1)], OTHER: [(7, 0, 1)]},
    )
    response = _run(ls, "diagnav.nextInFiles.error", payload, session)
    assert response["found"] is False
    assert response["errors"] and OTHER in response["errors"][0]
    assert response["state"] is None
    assert ls.sent == []
    assert session.state.is_empty()


def test_invalid_payload_is_reported() -> None:
    ls = _DummyLanguageServer()
    response = _run(ls, "diagnav.next.error", {"cursor": {"line": "top"}})
    assert response["found"] is False
    assert response["errors"]
    assert ls.sent == []


def test_missing_payload_means_no_editor() -> None:
    ls = _DummyLanguageServer()
    response = _run(ls, "diagnav.prev.warning", None)
    assert response == {
        "command": "diagnav.prev.warning",
        "found": False,
        "active_uri": None,
        "selection": None,
        "state": None,
        "requests": [],
        "errors": [],
    }


def test_workspace_config_controls_looping(tmp_path: Path, snapshot_payload) -> None:
    (tmp_path / "diagnav.toml").write_text("[navigation]\nloop_in_file = false\n")
    ls = _DummyLanguageServer(tmp_path)
    payload = snapshot_payload(
        active_uri=ACTIVE,
        cursor=(9, 0),
        diagnostics={ACTIVE: [(1, 0, 1)]},
    )
    assert _run(ls, "diagnav.next.error", payload)["found"] is False
    payload["loop_in_file"] = True
    assert _run(ls, "diagnav.next.error", payload)["found"] is True


def test_registered_handlers_cover_every_command(tmp_path: Path, snapshot_payload) -> None:
    assert sorted(server.COMMAND_HANDLERS) == sorted(
        command.command_id for command in NAVIGATION_COMMANDS
    )
    ls = _DummyLanguageServer(tmp_path)
    payload = snapshot_payload(
        active_uri=ACTIVE,
        diagnostics={ACTIVE: [(1, 0, 1), (4, 0, 2)]},
        visible=(0, 40),
    )
    session = server.NavigationSession()
    handler = server.navigation_handlers(session)["diagnav.next.warning"]
    response = asyncio.run(handler(ls, payload))
    assert response["selection"] == {"line": 4, "character": 0}
    assert session.state.uri == ACTIVE


def test_each_server_owns_its_session(tmp_path: Path, snapshot_payload) -> None:
    session = server.NavigationSession()
    _first_server, handlers = server.create_server(session)
    _second_server, other_handlers = server.create_server()
    payload = snapshot_payload(
        active_uri=ACTIVE,
        cursor=(5, 0),
        diagnostics={ACTIVE: [(5, 0, 1), (9, 0, 1)]},
        visible=(0, 40),
    )
    ls = _DummyLanguageServer(tmp_path)
    asyncio.run(handlers["diagnav.next.error"](ls, payload))
    assert session.state.position.line == 5
    # A server with a fresh session has no duplicate guard to honour.
    response = asyncio.run(other_handlers["diagnav.next.error"](ls, payload))
    assert response["selection"] == {"line": 5, "character": 0}
    second = asyncio.run(handlers["diagnav.next.error"](ls, payload))
    assert second["selection"] == {"line": 9, "character": 0}


def test_start_uses_injected_callable() -> None:
    called = {"value": False}

    def _start() -> None:
        called["value"] = True

    server.start(_start)
    assert called["value"] is True
