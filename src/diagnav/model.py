from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from lsprotocol.types import Diagnostic, Position


class Direction(str, Enum):
    NEXT = "next"
    PREV = "prev"

    @property
    def sign(self) -> int:
        return 1 if self is Direction.NEXT else -1


class Scope(str, Enum):
    FILE = "file"
    FILES = "files"


class SeverityPolicy(str, Enum):
    """Which markers an entry point targets."""

    ERROR = "error"
    WARNING_THEN_ERROR = "warning"


@dataclass
class NavigationState:
    """Last marker selected by navigation in this session.

    Only successful navigation writes it. ``uri`` and ``position`` are either
    both set or both ``None``.
    """

    uri: str | None = None
    position: Position | None = None

    def is_empty(self) -> bool:
        return self.uri is None

    def remember(self, uri: str, position: Position) -> None:
        self.uri = uri
        self.position = position

    def clear(self) -> None:
        self.uri = None
        self.position = None

    def position_for(self, uri: str) -> Position | None:
        if self.uri != uri:
            return None
        return self.position


@dataclass(frozen=True)
class InFileSelection:
    diagnostic: Diagnostic
    # True when a looped selection landed back on the marker the cursor
    # already sits on; nothing is moved or re-announced.
    unchanged: bool = False

    @property
    def position(self) -> Position:
        return self.diagnostic.range.start


@dataclass(frozen=True)
class NavigationCommand:
    command_id: str
    policy: SeverityPolicy
    scope: Scope
    direction: Direction


def _command_id(policy: SeverityPolicy, scope: Scope, direction: Direction) -> str:
    suffix = "InFiles" if scope is Scope.FILES else ""
    return f"diagnav.{direction.value}{suffix}.{policy.value}"


NAVIGATION_COMMANDS: tuple[NavigationCommand, ...] = tuple(
    NavigationCommand(
        command_id=_command_id(policy, scope, direction),
        policy=policy,
        scope=scope,
        direction=direction,
    )
    for policy in (SeverityPolicy.ERROR, SeverityPolicy.WARNING_THEN_ERROR)
    for scope in (Scope.FILE, Scope.FILES)
    for direction in (Direction.NEXT, Direction.PREV)
)

COMMANDS_BY_ID: dict[str, NavigationCommand] = {
    command.command_id: command for command in NAVIGATION_COMMANDS
}
