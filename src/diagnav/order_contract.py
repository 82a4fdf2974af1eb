from __future__ import annotations

from typing import Any, Callable, Iterable, TypeVar

T = TypeVar("T")


def ordered_or_sorted(
    values: Iterable[T],
    *,
    key: Callable[[T], Any] | None = None,
) -> list[T]:
    """Return ``values`` in deterministic ascending order.

    Caller order is never trusted: markers and documents arrive in whatever
    order the provider reports them. Sorting is stable, so items with equal
    keys keep their incoming order.
    """
    return sorted(values, key=key)
