from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT, ROOT / "src"):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))


import pytest


@pytest.fixture
def snapshot_payload():
    def _make(
        *,
        active_uri: str | None = "file:///active.py",
        cursor: tuple[int, int] = (0, 0),
        diagnostics: dict[str, list[tuple[int, int, int]]] | None = None,
        visible: tuple[int, int] | None = None,
        **extra: object,
    ) -> dict[str, object]:
        payload: dict[str, object] = {
            "active_uri": active_uri,
            "cursor": {"line": cursor[0], "character": cursor[1]},
            "diagnostics": {
                uri: [
                    {
                        "range": {
                            "start": {"line": line, "character": column},
                            "end": {"line": line, "character": column + 1},
                        },
                        "severity": severity,
                        "message": f"marker at {line}:{column}",
                    }
                    for line, column, severity in entries
                ]
                for uri, entries in (diagnostics or {}).items()
            },
        }
        if visible is not None:
            payload["visible_ranges"] = [
                {
                    "start": {"line": visible[0], "character": 0},
                    "end": {"line": visible[1], "character": 0},
                }
            ]
        payload.update(extra)
        return payload

    return _make
