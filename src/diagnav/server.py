from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Callable

from lsprotocol.types import ShowDocumentParams
from pydantic import ValidationError
from pygls.lsp.server import LanguageServer

from diagnav import __version__
from diagnav.config import (
    NavigationSettings,
    merge_payload,
    navigation_defaults,
    navigation_settings,
)
from diagnav.exceptions import DocumentOpenError
from diagnav.logger import get_logger
from diagnav.model import NAVIGATION_COMMANDS, NavigationState
from diagnav.navigation import NavigationController
from diagnav.schema import (
    NavigationRequest,
    NavigationResponse,
    PositionDTO,
    SelectionDTO,
)
from diagnav.workspace import (
    SHOW_DOCUMENT_METHOD,
    RecordingPresentation,
    RequestLog,
    SnapshotWorkspace,
)

_log = get_logger(__name__)

CommandHandler = Callable[..., Awaitable[dict]]


@dataclass
class NavigationSession:
    """Navigation state shared by the commands of one client connection."""

    state: NavigationState = field(default_factory=NavigationState)


def _notify(ls: Any, method: str, params: dict[str, Any]) -> None:
    ls.protocol.notify(method, params)


class LspWorkspace(SnapshotWorkspace):
    """Snapshot host whose effects are forwarded to the language client."""

    def __init__(self, *, ls: Any, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._ls = ls

    async def open_document(self, uri: str) -> None:
        result = await self._ls.window_show_document_async(
            ShowDocumentParams(uri=uri, take_focus=True)
        )
        if result is None or not result.success:
            raise DocumentOpenError(uri, "client rejected window/showDocument")
        self._record(SHOW_DOCUMENT_METHOD, {"uri": uri, "takeFocus": True})
        self._focus(uri)

    def _emit(self, method: str, params: dict[str, Any]) -> None:
        super()._emit(method, params)
        _notify(self._ls, method, params)


class LspPresentation(RecordingPresentation):
    def __init__(self, ls: Any, log: RequestLog | None = None) -> None:
        super().__init__(log)
        self._ls = ls

    def _emit(self, method: str, params: dict[str, Any]) -> None:
        super()._emit(method, params)
        _notify(self._ls, method, params)


def _settings_for(ls: Any, request: NavigationRequest) -> NavigationSettings:
    root_path = getattr(ls.workspace, "root_path", None)
    root = Path(root_path) if root_path else None
    defaults = navigation_defaults(root)
    return navigation_settings(merge_payload(request.setting_overrides(), defaults))


def _parse_request(payload: object) -> NavigationRequest:
    if payload is None:
        return NavigationRequest()
    return NavigationRequest.model_validate(payload)


async def execute_navigation(
    ls: Any, session: NavigationSession, command_id: str, payload: object = None
) -> dict:
    try:
        request = _parse_request(payload)
    except ValidationError as exc:
        return NavigationResponse(command=command_id, errors=[str(exc)]).model_dump()
    log: RequestLog = []
    workspace = LspWorkspace.from_request(request, log=log, ls=ls)
    controller = NavigationController(
        workspace,
        workspace,
        LspPresentation(ls, log),
        state=session.state,
        settings=_settings_for(ls, request),
    )
    try:
        found = await controller.run(command_id)
    except DocumentOpenError as exc:
        _log.warning("%s", exc)
        return NavigationResponse(
            command=command_id,
            active_uri=workspace.active_uri(),
            state=SelectionDTO.from_state(controller.state),
            requests=log,
            errors=[str(exc)],
        ).model_dump()
    return NavigationResponse(
        command=command_id,
        found=found,
        active_uri=workspace.active_uri(),
        selection=PositionDTO.from_lsp(workspace.cursor()) if found else None,
        state=SelectionDTO.from_state(controller.state),
        requests=log,
    ).model_dump()


def _handler(command_id: str, session: NavigationSession) -> CommandHandler:
    async def handler(ls: LanguageServer, payload: dict | None = None) -> dict:
        return await execute_navigation(ls, session, command_id, payload)

    handler.__name__ = "execute_" + command_id.replace(".", "_")
    return handler


def navigation_handlers(session: NavigationSession) -> dict[str, CommandHandler]:
    return {
        command.command_id: _handler(command.command_id, session)
        for command in NAVIGATION_COMMANDS
    }


def create_server(
    session: NavigationSession | None = None,
) -> tuple[LanguageServer, dict[str, CommandHandler]]:
    """Build a language server whose commands share one navigation session."""
    ls = LanguageServer("diagnav", __version__)
    handlers = navigation_handlers(session if session is not None else NavigationSession())
    for command_id, handler in handlers.items():
        ls.command(command_id)(handler)
    return ls, handlers


server, COMMAND_HANDLERS = create_server()


def start(start_fn: Callable[[], None] | None = None) -> None:
    """Start the language server on stdio."""
    (start_fn or server.start_io)()


if __name__ == "__main__":  # pragma: no cover
    start()  # pragma: no cover
