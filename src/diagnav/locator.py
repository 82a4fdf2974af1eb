"""Marker selection: pure functions over diagnostics and positions.

Nothing here touches the editor. ``diagnav.navigation`` applies the results.
Among markers sharing one position, the first in provider order wins; the
provider decides that order, so it can differ between providers.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from lsprotocol.types import Diagnostic, Position

from diagnav.invariants import never
from diagnav.model import Direction, InFileSelection
from diagnav.order_contract import ordered_or_sorted
from diagnav.positions import directional_key, is_equal, position_key
from diagnav.severity import SeverityFilter, filter_by_severity

DocumentMarkers = tuple[str, list[Diagnostic]]


def sort_markers(diagnostics: Iterable[Diagnostic]) -> list[Diagnostic]:
    return ordered_or_sorted(
        diagnostics,
        key=lambda diag: position_key(diag.range.start),
    )


def edge_marker(diagnostics: Sequence[Diagnostic], direction: Direction) -> Diagnostic:
    """First marker by position for NEXT, last for PREV."""
    ordered = sort_markers(diagnostics)
    if not ordered:
        never("edge marker requested from an empty set", direction=direction.value)
    return ordered[0] if direction is Direction.NEXT else ordered[-1]


def nearest_marker(
    diagnostics: Iterable[Diagnostic],
    cursor: Position,
    direction: Direction,
    last_position: Position | None = None,
) -> Diagnostic | None:
    """Closest marker at or beyond ``cursor`` in ``direction``.

    When the cursor has not left ``last_position``, markers at that position
    are skipped so repeated invocations advance instead of stalling.
    """
    cursor_key = directional_key(cursor, direction)
    stalled = last_position is not None and is_equal(cursor, last_position)
    closest: Diagnostic | None = None
    closest_key: tuple[int, int] | None = None
    for diag in diagnostics:
        start = diag.range.start
        if stalled and is_equal(start, last_position):
            continue
        key = directional_key(start, direction)
        if key < cursor_key:
            continue
        # Strict comparison keeps the earliest provider entry on ties.
        if closest_key is None or key < closest_key:
            closest = diag
            closest_key = key
    return closest


def select_in_document(
    diagnostics: Sequence[Diagnostic],
    cursor: Position,
    direction: Direction,
    *,
    loop: bool,
    last_position: Position | None = None,
) -> InFileSelection | None:
    if not diagnostics:
        return None
    found = nearest_marker(diagnostics, cursor, direction, last_position)
    if found is not None:
        return InFileSelection(found)
    if not loop:
        return None
    wrapped = edge_marker(diagnostics, direction)
    start = wrapped.range.start
    if (
        last_position is not None
        and is_equal(last_position, start)
        and is_equal(cursor, start)
    ):
        # A lone marker the cursor already sits on: report success in place.
        return InFileSelection(wrapped, unchanged=True)
    return InFileSelection(wrapped)


def documents_with_markers(
    all_diagnostics: Iterable[DocumentMarkers],
    severities: SeverityFilter,
) -> list[DocumentMarkers]:
    """Documents with at least one matching marker, ordered by URI."""
    tracked: list[DocumentMarkers] = []
    for uri, diagnostics in all_diagnostics:
        matching = filter_by_severity(diagnostics, severities)
        if matching:
            tracked.append((uri, matching))
    return ordered_or_sorted(
        tracked,
        key=lambda entry: entry[0],
    )


def next_document(
    document_set: Sequence[DocumentMarkers], active_uri: str | None
) -> DocumentMarkers:
    if not document_set:
        never("next document requested from an empty set")
    index = -1
    for position, (uri, _diagnostics) in enumerate(document_set):
        if uri == active_uri:
            index = position
            break
    return document_set[(index + 1) % len(document_set)]
