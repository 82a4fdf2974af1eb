"""Total order over document positions.

Positions compare by line, then by character. There is no locale or Unicode
handling here: the host reports positions and they are compared numerically.
"""

from __future__ import annotations

from lsprotocol.types import Position, Range

from diagnav.model import Direction


def position_key(position: Position) -> tuple[int, int]:
    return (position.line, position.character)


def directional_key(position: Position, direction: Direction) -> tuple[int, int]:
    """Sort key under which "further along ``direction``" is "greater".

    For ``Direction.NEXT`` this is the natural order; for ``Direction.PREV``
    both components are negated, so the same min/compare logic walks
    backwards.
    """
    return (direction.sign * position.line, direction.sign * position.character)


def compare_positions(left: Position, right: Position) -> int:
    left_key = position_key(left)
    right_key = position_key(right)
    if left_key < right_key:
        return -1
    if left_key > right_key:
        return 1
    return 0


def is_before(left: Position, right: Position) -> bool:
    return compare_positions(left, right) < 0


def is_equal(left: Position, right: Position) -> bool:
    return compare_positions(left, right) == 0


def is_after(left: Position, right: Position) -> bool:
    return compare_positions(left, right) > 0


def is_before_or_equal(left: Position, right: Position) -> bool:
    return compare_positions(left, right) <= 0


def is_after_or_equal(left: Position, right: Position) -> bool:
    return compare_positions(left, right) >= 0


def range_contains(container: Range, position: Position) -> bool:
    return is_before_or_equal(container.start, position) and is_before_or_equal(
        position, container.end
    )
