"""In-memory host built from a navigation snapshot.

``SnapshotWorkspace`` answers the provider and editor queries from a fixed
snapshot and records every effect it is asked to perform, in order, on a
shared request log. ``RecordingPresentation`` writes the presentation
requests to the same log. The language server subclasses both to forward the
effects to the client.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from lsprotocol.types import Diagnostic, Position, Range

from diagnav.exceptions import DocumentOpenError
from diagnav.schema import NavigationRequest, PositionDTO, PresentationRequestDTO, RangeDTO

SHOW_DOCUMENT_METHOD = "window/showDocument"
SET_SELECTION_METHOD = "diagnav/setSelection"
REVEAL_RANGE_METHOD = "diagnav/revealRange"
CLOSE_MARKERS_METHOD = "diagnav/closeMarkersNavigation"
SHOW_HOVER_METHOD = "diagnav/showHover"

RequestLog = list[PresentationRequestDTO]


class SnapshotWorkspace:
    def __init__(
        self,
        diagnostics: Mapping[str, Sequence[Diagnostic]],
        *,
        active_uri: str | None = None,
        cursor: Position | None = None,
        visible_ranges: Sequence[Range] = (),
        smooth_scrolling: bool = False,
        documents: Sequence[str] = (),
        log: RequestLog | None = None,
    ) -> None:
        self._diagnostics = {uri: list(items) for uri, items in diagnostics.items()}
        self._documents = set(self._diagnostics) | set(documents)
        if active_uri is not None:
            self._documents.add(active_uri)
        self._active_uri = active_uri
        self._cursor = cursor if cursor is not None else Position(line=0, character=0)
        self._visible_ranges = list(visible_ranges)
        self._smooth_scrolling = smooth_scrolling
        self.log: RequestLog = log if log is not None else []

    @classmethod
    def from_request(
        cls, request: NavigationRequest, *, log: RequestLog | None = None, **extra: Any
    ) -> "SnapshotWorkspace":
        return cls(
            **extra,
            diagnostics={
                uri: [item.to_lsp() for item in items]
                for uri, items in request.diagnostics.items()
            },
            active_uri=request.active_uri,
            cursor=request.cursor.to_lsp() if request.cursor is not None else None,
            visible_ranges=[item.to_lsp() for item in request.visible_ranges],
            smooth_scrolling=request.smooth_scrolling,
            log=log,
        )

    def get_diagnostics(self, uri: str) -> list[Diagnostic]:
        return list(self._diagnostics.get(uri, []))

    def all_diagnostics(self) -> list[tuple[str, list[Diagnostic]]]:
        return [(uri, list(items)) for uri, items in self._diagnostics.items()]

    def active_uri(self) -> str | None:
        return self._active_uri

    def cursor(self) -> Position:
        return self._cursor

    def set_selection(self, position: Position) -> None:
        self._cursor = position
        self._emit(
            SET_SELECTION_METHOD,
            {"uri": self._active_uri, "position": PositionDTO.from_lsp(position).model_dump()},
        )

    def visible_ranges(self) -> list[Range]:
        return list(self._visible_ranges)

    def reveal(self, target: Range) -> None:
        self._emit(
            REVEAL_RANGE_METHOD,
            {"uri": self._active_uri, "range": RangeDTO.from_lsp(target).model_dump()},
        )

    async def open_document(self, uri: str) -> None:
        if uri not in self._documents:
            raise DocumentOpenError(uri, "unknown document")
        self._record(SHOW_DOCUMENT_METHOD, {"uri": uri, "takeFocus": True})
        self._focus(uri)

    def smooth_scrolling(self) -> bool:
        return self._smooth_scrolling

    def _focus(self, uri: str) -> None:
        # A freshly focused editor has no known viewport.
        self._active_uri = uri
        self._cursor = Position(line=0, character=0)
        self._visible_ranges = []

    def _record(self, method: str, params: dict[str, Any]) -> None:
        self.log.append(PresentationRequestDTO(method=method, params=params))

    def _emit(self, method: str, params: dict[str, Any]) -> None:
        self._record(method, params)


class RecordingPresentation:
    def __init__(self, log: RequestLog | None = None) -> None:
        self.log: RequestLog = log if log is not None else []

    async def close_marker_navigation(self) -> None:
        self._emit(CLOSE_MARKERS_METHOD, {})

    async def show_detail(self) -> None:
        self._emit(SHOW_HOVER_METHOD, {})

    @property
    def methods(self) -> list[str]:
        return [entry.method for entry in self.log]

    def _emit(self, method: str, params: dict[str, Any]) -> None:
        self.log.append(PresentationRequestDTO(method=method, params=params))
