"""Configuration loading for loadgraph.

Loads settings from TOML config files with sensible defaults.
Search order: explicit --config path → ~/.config/loadgraph/config.toml → defaults only.
"""

from __future__ import annotations

import sys
import tomllib
from pathlib import Path
from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "interval_ms": 250,
    "output_mode": "256",
    "graph": {"width": 50, "height": 10, "left": 10},
    "colors": {"bar": "green", "text": "white"},
}

_DEFAULT_PATH = Path.home() / ".config" / "loadgraph" / "config.toml"


def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Overlay user settings on *base*; TOML tables are merged key by key.

    Tables in the result are fresh dicts, so callers may mutate them freely.
    """
    return {
        key: {**base[key], **value}
        if isinstance(base.get(key), dict) and isinstance(value, dict)
        else value
        for key, value in {**base, **overlay}.items()
    }


def _read_toml(path: Path) -> dict[str, Any]:
    return tomllib.loads(path.read_text(encoding="utf-8"))


def table(config: dict[str, Any], key: str) -> dict[str, Any]:
    """Return the ``[key]`` table of *config*, falling back to the default.

    Raises:
        ValueError: If the user set *key* to something other than a table.
    """
    value = config.get(key, DEFAULT_CONFIG[key])
    if not isinstance(value, dict):
        raise ValueError(f"'{key}' must be a table, got {type(value).__name__}")
    return value


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load configuration, merging user TOML over defaults.

    Args:
        path: Explicit config file path (from --config). If None, tries the
              default location ~/.config/loadgraph/config.toml.

    Returns:
        Merged configuration dict.

    Raises:
        SystemExit: If an explicit path doesn't exist or can't be parsed.
    """
    if path is None:
        return _load_default()

    if not path.is_file():
        print(f"loadgraph: config file not found: {path}", file=sys.stderr)
        raise SystemExit(1)
    try:
        user_config = _read_toml(path)
    except tomllib.TOMLDecodeError as e:
        print(f"loadgraph: invalid TOML in {path}: {e}", file=sys.stderr)
        raise SystemExit(1) from e
    return _deep_merge(DEFAULT_CONFIG, user_config)


def _load_default() -> dict[str, Any]:
    """The default-location config if it parses, else the built-in defaults."""
    user_config: dict[str, Any] = {}
    if _DEFAULT_PATH.is_file():
        try:
            user_config = _read_toml(_DEFAULT_PATH)
        except tomllib.TOMLDecodeError:
            print(
                f"loadgraph: warning: ignoring invalid TOML in {_DEFAULT_PATH}",
                file=sys.stderr,
            )
    return _deep_merge(DEFAULT_CONFIG, user_config)


def dump_default_config() -> str:
    """Return the default configuration as a TOML string."""
    lines = [
        "# loadgraph configuration",
        "# Place this file at ~/.config/loadgraph/config.toml",
        "",
        f"interval_ms = {DEFAULT_CONFIG['interval_ms']}",
        f'output_mode = "{DEFAULT_CONFIG["output_mode"]}"',
        "",
        "[graph]",
    ]
    for key, value in DEFAULT_CONFIG["graph"].items():
        lines.append(f"{key} = {value}")
    lines.append("")

    lines.append("[colors]")
    for key, value in DEFAULT_CONFIG["colors"].items():
        lines.append(f'{key} = "{value}"')

    return "\n".join(lines) + "\n"
