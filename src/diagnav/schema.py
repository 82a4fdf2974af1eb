from __future__ import annotations

from typing import Any, Dict, List, Optional

from lsprotocol.types import Diagnostic, DiagnosticSeverity, Position, Range
from pydantic import BaseModel, Field

from diagnav.model import NavigationState


class PositionDTO(BaseModel):
    line: int = Field(ge=0)
    character: int = Field(ge=0)

    def to_lsp(self) -> Position:
        return Position(line=self.line, character=self.character)

    @classmethod
    def from_lsp(cls, position: Position) -> "PositionDTO":
        return cls(line=position.line, character=position.character)


class RangeDTO(BaseModel):
    start: PositionDTO
    end: PositionDTO

    def to_lsp(self) -> Range:
        return Range(start=self.start.to_lsp(), end=self.end.to_lsp())

    @classmethod
    def from_lsp(cls, value: Range) -> "RangeDTO":
        return cls(start=PositionDTO.from_lsp(value.start), end=PositionDTO.from_lsp(value.end))


class DiagnosticDTO(BaseModel):
    range: RangeDTO
    severity: Optional[int] = Field(default=None, ge=1, le=4)
    message: str = ""
    source: Optional[str] = None

    def to_lsp(self) -> Diagnostic:
        return Diagnostic(
            range=self.range.to_lsp(),
            message=self.message,
            severity=DiagnosticSeverity(self.severity) if self.severity is not None else None,
            source=self.source,
        )


class SelectionDTO(BaseModel):
    uri: str
    position: PositionDTO

    @classmethod
    def from_state(cls, state: NavigationState) -> Optional["SelectionDTO"]:
        if state.uri is None or state.position is None:
            return None
        return cls(uri=state.uri, position=PositionDTO.from_lsp(state.position))


class NavigationRequest(BaseModel):
    active_uri: Optional[str] = None
    cursor: Optional[PositionDTO] = None
    visible_ranges: List[RangeDTO] = []
    diagnostics: Dict[str, List[DiagnosticDTO]] = {}
    smooth_scrolling: bool = False
    last_selection: Optional[SelectionDTO] = None
    settle_delay_ms: Optional[int] = Field(default=None, ge=0)
    loop_in_file: Optional[bool] = None

    def setting_overrides(self) -> Dict[str, Any]:
        return {
            "settle_delay_ms": self.settle_delay_ms,
            "loop_in_file": self.loop_in_file,
        }

    def seed_state(self) -> NavigationState:
        if self.last_selection is None:
            return NavigationState()
        return NavigationState(
            uri=self.last_selection.uri,
            position=self.last_selection.position.to_lsp(),
        )


class PresentationRequestDTO(BaseModel):
    method: str
    params: Dict[str, Any] = {}


class NavigationResponse(BaseModel):
    command: str
    found: bool = False
    active_uri: Optional[str] = None
    selection: Optional[PositionDTO] = None
    state: Optional[SelectionDTO] = None
    requests: List[PresentationRequestDTO] = []
    errors: List[str] = []
