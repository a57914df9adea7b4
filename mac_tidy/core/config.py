#!/usr/bin/env python3
"""Configuration for mac-tidy."""
from __future__ import annotations

import json
import os
from typing import Any

from .constants import HOME, HEARTBEAT_INTERVAL, ZOPFLI_MAX_BYTES

CONFIG_PATHS = [
    os.path.join(HOME, ".mactidyrc"),
    os.path.join(HOME, ".config", "mac-tidy", "config.json"),
]

DEFAULTS: dict[str, Any] = {
    "exclude_tasks": [],
    "heartbeat_interval": HEARTBEAT_INTERVAL,
    "zopfli_max_bytes": ZOPFLI_MAX_BYTES,
}

VALID_KEYS = frozenset(DEFAULTS.keys())


def config_path() -> str:
    """Preferred config file path."""
    return CONFIG_PATHS[0]


def config_exists() -> bool:
    """True if any known config file exists."""
    for p in CONFIG_PATHS:
        if os.path.isfile(p):
            return True
    return False


def _apply(out: dict[str, Any], raw: dict) -> None:
    for k, v in raw.items():
        if k not in VALID_KEYS:
            continue
        if k == "exclude_tasks" and isinstance(v, list):
            out[k] = [str(x) for x in v if isinstance(x, str)][:200]
        elif k == "heartbeat_interval" and isinstance(v, (int, float)) and not isinstance(v, bool):
            val = int(v)
            if 1 <= val <= 3600:
                out[k] = val
        elif k == "zopfli_max_bytes" and isinstance(v, (int, float)) and not isinstance(v, bool):
            val = int(v)
            if 1 <= val <= 100 * 1024**3:
                out[k] = val


def load(paths: list[str] | None = None) -> dict[str, Any]:
    """Load config from first readable file. Returns defaults + overrides."""
    out = dict(DEFAULTS)
    out["exclude_tasks"] = list(DEFAULTS["exclude_tasks"])
    for p in paths if paths is not None else CONFIG_PATHS:
        if not os.path.isfile(p):
            continue
        try:
            with open(p, "r", encoding="utf-8") as f:
                raw = json.load(f)
            if not isinstance(raw, dict):
                continue
            _apply(out, raw)
            return out
        except (OSError, json.JSONDecodeError):
            continue
    return out


def save(cfg: dict[str, Any], path: str | None = None) -> None:
    """Write config to path (default: config_path()). Creates parent dirs."""
    p = path or config_path()
    dirname = os.path.dirname(p)
    if dirname:
        os.makedirs(dirname, exist_ok=True)
    to_write = {k: cfg.get(k, DEFAULTS[k]) for k in sorted(VALID_KEYS)}
    with open(p, "w", encoding="utf-8") as f:
        json.dump(to_write, f, indent=2)


def init_config(path: str | None = None) -> str:
    """Create default config file. Returns path used."""
    p = path or config_path()
    save(DEFAULTS, p)
    return p
