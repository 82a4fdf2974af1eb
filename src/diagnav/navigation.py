"""Navigation controller: entry points, state and editor side effects.

``NavigationController`` owns the session's ``NavigationState`` and applies
the selections computed by ``diagnav.locator`` through the host interfaces.
It is built per session (or per request, sharing one state object) and is
not safe for overlapping invocations on the same state.
"""

from __future__ import annotations

import asyncio
from functools import partial
from typing import Awaitable, Callable

from lsprotocol.types import Diagnostic, Position

from diagnav.config import NavigationSettings
from diagnav.host import DiagnosticProvider, EditorHost, PresentationBridge
from diagnav.invariants import never
from diagnav.locator import (
    documents_with_markers,
    edge_marker,
    next_document,
    select_in_document,
)
from diagnav.logger import get_logger
from diagnav.model import (
    COMMANDS_BY_ID,
    NAVIGATION_COMMANDS,
    Direction,
    NavigationCommand,
    NavigationState,
    Scope,
    SeverityPolicy,
)
from diagnav.positions import range_contains
from diagnav.severity import (
    ERRORS,
    SeverityFilter,
    active_severities,
    filter_by_severity,
    scope_diagnostics,
)

_log = get_logger(__name__)

Sleep = Callable[[float], Awaitable[None]]
EntryPoint = Callable[[], Awaitable[bool]]


def _describe(uri: str, position: Position) -> str:
    return f"{uri}:{position.line + 1}:{position.character + 1}"


class NavigationController:
    def __init__(
        self,
        provider: DiagnosticProvider,
        editor: EditorHost,
        presentation: PresentationBridge,
        *,
        state: NavigationState | None = None,
        settings: NavigationSettings | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.provider = provider
        self.editor = editor
        self.presentation = presentation
        self.state = state if state is not None else NavigationState()
        self.settings = settings if settings is not None else NavigationSettings()
        self._sleep = sleep

    async def goto_marker_in_file(
        self,
        severities: SeverityFilter,
        direction: Direction,
        loop: bool | None = None,
    ) -> bool:
        """Select the next/previous marker of ``severities`` in the active document.

        With ``loop`` the search wraps to the first (or last) marker. Returns
        True when a marker was selected, including a wrap that lands on the
        marker the cursor already sits on.
        """
        if loop is None:
            loop = self.settings.loop_in_file
        uri = self.editor.active_uri()
        if uri is None:
            _log.debug("no active editor; nothing to navigate")
            return False
        diagnostics = filter_by_severity(self.provider.get_diagnostics(uri), severities)
        if self.state.uri != uri:
            self.state.clear()
        if not diagnostics:
            return False
        selection = select_in_document(
            diagnostics,
            self.editor.cursor(),
            direction,
            loop=loop,
            last_position=self.state.position_for(uri),
        )
        if selection is None:
            return False
        if selection.unchanged:
            _log.debug("single marker already selected at %s", _describe(uri, selection.position))
            return True
        await self._select(uri, selection.diagnostic)
        return True

    async def goto_marker_in_files(
        self, severities: SeverityFilter, direction: Direction
    ) -> bool:
        """Select a marker in the active document, else in the next document by URI."""
        active = self.editor.active_uri()
        if active is None:
            _log.debug("no active editor; nothing to navigate")
            return False
        if await self.goto_marker_in_file(severities, direction, loop=False):
            return True
        document_set = documents_with_markers(self.provider.all_diagnostics(), severities)
        if not document_set:
            return False
        if len(document_set) == 1 and document_set[0][0] == active:
            return await self.goto_marker_in_file(severities, direction, loop=True)
        uri, diagnostics = next_document(document_set, active)
        target = edge_marker(diagnostics, direction)
        _log.debug("falling back from %s to %s", active, uri)
        await self.editor.open_document(uri)
        await self._select(uri, target)
        return True

    async def goto_warning_then_error_in_file(self, direction: Direction) -> bool:
        uri = self.editor.active_uri()
        if uri is None:
            return False
        severities = active_severities(scope_diagnostics(self.provider, Scope.FILE, uri))
        return await self.goto_marker_in_file(severities, direction)

    async def goto_warning_then_error_in_files(self, direction: Direction) -> bool:
        severities = active_severities(
            scope_diagnostics(self.provider, Scope.FILES, self.editor.active_uri())
        )
        return await self.goto_marker_in_files(severities, direction)

    async def run(self, command: NavigationCommand | str) -> bool:
        if isinstance(command, str):
            resolved = COMMANDS_BY_ID.get(command)
            if resolved is None:
                never("unknown navigation command", command=command)
            command = resolved
        if command.policy is SeverityPolicy.ERROR:
            if command.scope is Scope.FILE:
                return await self.goto_marker_in_file(ERRORS, command.direction)
            return await self.goto_marker_in_files(ERRORS, command.direction)
        if command.scope is Scope.FILE:
            return await self.goto_warning_then_error_in_file(command.direction)
        return await self.goto_warning_then_error_in_files(command.direction)

    def entry_points(self) -> dict[str, EntryPoint]:
        return {
            command.command_id: partial(self.run, command)
            for command in NAVIGATION_COMMANDS
        }

    async def _select(self, uri: str, diagnostic: Diagnostic) -> None:
        position = diagnostic.range.start
        self.state.remember(uri, position)
        self.editor.set_selection(position)
        _log.debug("selected marker at %s", _describe(uri, position))
        await self.presentation.close_marker_navigation()
        if not self._is_visible(position):
            self.editor.reveal(diagnostic.range)
            await self._settle()
        await self.presentation.show_detail()

    def _is_visible(self, position: Position) -> bool:
        return any(range_contains(view, position) for view in self.editor.visible_ranges())

    async def _settle(self) -> None:
        if not self.editor.smooth_scrolling():
            return
        if self.settings.settle_delay_ms <= 0:
            return
        await self._sleep(self.settings.settle_delay_seconds)
