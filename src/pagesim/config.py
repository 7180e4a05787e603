from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

import yaml


CONFIG_DIR_ENV = "PAGESIM_HOME"


def home_dir() -> Path:
    # Only use env if set and non-empty; otherwise fallback to $HOME/.pagesim
    env_home = os.environ.get(CONFIG_DIR_ENV)
    return Path(env_home) if env_home else (Path.home() / ".pagesim")


def config_path() -> Path:
    return home_dir() / "config.yaml"


def ensure_dirs() -> None:
    home_dir().mkdir(parents=True, exist_ok=True)


def default_config() -> Dict[str, Any]:
    return {
        "output": {
            "root": "output",
            "save_cleaned": False,
        },
        "fingerprint": {
            "hash": "fnv1a",
        },
        "logging": {
            "level": "WARNING",
        },
        "server": {
            "host": "127.0.0.1",
            "port": 8788,
        },
    }


def load_config() -> Dict[str, Any]:
    """Load config, filling in sections added since the file was written.

    - If the file doesn't exist, return defaults and persist them.
    - User values are never overwritten.
    - Persist back to disk when a section was added.
    """
    ensure_dirs()
    path = config_path()
    changed = False
    if path.exists():
        with path.open("r", encoding="utf-8") as f:
            data: Dict[str, Any] = yaml.safe_load(f) or {}
    else:
        data = default_config()
        changed = True

    defaults = default_config()
    for key, val in defaults.items():
        if key not in data:
            data[key] = val
            changed = True
        elif isinstance(val, dict) and isinstance(data[key], dict):
            for sub, sub_val in val.items():
                if sub not in data[key]:
                    data[key][sub] = sub_val
                    changed = True

    if changed:
        save_config(data)
    return data


def save_config(cfg: Dict[str, Any]) -> None:
    ensure_dirs()
    with config_path().open("w", encoding="utf-8") as f:
        yaml.safe_dump(cfg, f, sort_keys=False)
