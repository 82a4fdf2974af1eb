"""Collaborator interfaces the navigation core drives.

The core never talks to an editor directly. It reads diagnostics from a
``DiagnosticProvider``, reads and moves the cursor through an ``EditorHost``
and issues fire-and-forget UI requests through a ``PresentationBridge``.
"""

from __future__ import annotations

from typing import Protocol, Sequence

from lsprotocol.types import Diagnostic, Position, Range


class DiagnosticProvider(Protocol):
    def get_diagnostics(self, uri: str) -> list[Diagnostic]:
        """Diagnostics currently reported for one document."""

    def all_diagnostics(self) -> list[tuple[str, list[Diagnostic]]]:
        """Diagnostics currently reported for every tracked document."""


class EditorHost(Protocol):
    def active_uri(self) -> str | None:
        """URI of the focused document, or None when no editor is active."""

    def cursor(self) -> Position:
        """Start of the current selection in the active editor."""

    def set_selection(self, position: Position) -> None:
        """Collapse the selection of the active editor to ``position``."""

    def visible_ranges(self) -> Sequence[Range]:
        ...

    def reveal(self, target: Range) -> None:
        ...

    async def open_document(self, uri: str) -> None:
        """Open and focus ``uri``; raises DocumentOpenError on failure."""

    def smooth_scrolling(self) -> bool:
        ...


class PresentationBridge(Protocol):
    async def close_marker_navigation(self) -> None:
        ...

    async def show_detail(self) -> None:
        ...
