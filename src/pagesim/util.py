from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


def now_local() -> datetime:
    return datetime.now().astimezone()


def timestamp_dirname(when: Optional[datetime] = None) -> str:
    return (when or now_local()).strftime("%Y-%m-%d-%H-%M-%S")


def safe_filename(label: str) -> str:
    # https://a.com/b/ -> https:__a.com_b_
    s = label.replace("/", "_").replace("\\", "_")
    if not s.strip("."):
        return "document"
    return s


def setup_logging(level: str | int = "WARNING", console: Optional[Console] = None) -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    root = logging.getLogger("pagesim")
    root.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        handler = RichHandler(console=console or Console(stderr=True), show_path=False, markup=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
        root.propagate = False
