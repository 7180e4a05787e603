from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Set, Union

from .util import safe_filename, timestamp_dirname

logger = logging.getLogger(__name__)


class CleanedOutput:
    """Writes normalized documents under <root>/<timestamp>/ for inspection."""

    def __init__(self, root: Union[str, Path], when: Optional[datetime] = None):
        self.root = Path(root)
        self.dir = self.root / timestamp_dirname(when)
        self._written: Set[str] = set()

    def prepare(self) -> Path:
        self.dir.mkdir(parents=True, exist_ok=True)
        return self.dir

    def write(self, label: str, cleaned: bytes) -> Path:
        self.prepare()
        name = safe_filename(label)
        base, n = name, 1
        while name in self._written:
            # same label twice in one run
            n += 1
            name = f"{base}-{n}"
        self._written.add(name)
        p = self.dir / name
        p.write_bytes(cleaned)
        logger.debug("wrote cleaned %s -> %s", label, p)
        return p
