from __future__ import annotations

from diagnav.order_contract import ordered_or_sorted


def test_ordered_or_sorted_sorts_caller_order() -> None:
    assert ordered_or_sorted(["b", "a", "c"]) == ["a", "b", "c"]


def test_ordered_or_sorted_is_stable_for_equal_keys() -> None:
    values = [("x", 2), ("y", 1), ("z", 2)]
    ordered = ordered_or_sorted(values, key=lambda item: item[1])
    assert ordered == [("y", 1), ("x", 2), ("z", 2)]


def test_ordered_or_sorted_ignores_environment(monkeypatch) -> None:
    monkeypatch.setenv("DIAGNAV_ORDER_POLICY", "trust")
    assert ordered_or_sorted([3, 1, 2]) == [1, 2, 3]
