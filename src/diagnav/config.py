from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

DEFAULT_CONFIG_NAME = "diagnav.toml"
DEFAULT_SETTLE_DELAY_MS = 150

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


@dataclass(frozen=True)
class NavigationSettings:
    # Wait after a reveal while smooth scrolling runs; a scroll in flight
    # dismisses the detail popup.
    settle_delay_ms: int = DEFAULT_SETTLE_DELAY_MS
    loop_in_file: bool = True

    @property
    def settle_delay_seconds(self) -> float:
        return self.settle_delay_ms / 1000


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def navigation_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("navigation", {})
    return section if isinstance(section, dict) else {}


def _as_bool(value: TomlValue, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
    return default


def _as_delay_ms(value: TomlValue) -> int:
    if isinstance(value, bool):
        return DEFAULT_SETTLE_DELAY_MS
    try:
        delay = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return DEFAULT_SETTLE_DELAY_MS
    return delay if delay >= 0 else DEFAULT_SETTLE_DELAY_MS


def navigation_settings(section: TomlTable | None) -> NavigationSettings:
    if not isinstance(section, dict):
        return NavigationSettings()
    return NavigationSettings(
        settle_delay_ms=_as_delay_ms(
            section.get("settle_delay_ms", DEFAULT_SETTLE_DELAY_MS)
        ),
        loop_in_file=_as_bool(section.get("loop_in_file"), True),
    )


def load_navigation_settings(
    root: Path | None = None, config_path: Path | None = None
) -> NavigationSettings:
    return navigation_settings(navigation_defaults(root=root, config_path=config_path))


def merge_payload(payload: TomlTable, defaults: TomlTable) -> TomlTable:
    merged = dict(defaults)
    for key, value in payload.items():
        if value is None:
            continue
        merged[key] = value
    return merged
