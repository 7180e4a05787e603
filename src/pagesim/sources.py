from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from .errors import SourceUnavailable

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class Document:
    label: str
    content: bytes


def read_document(path: Union[str, Path], label: str | None = None) -> Document:
    p = Path(path)
    label = label or str(path)
    logger.info("Reading %s...", label)
    try:
        with p.open("rb") as f:
            body = f.read()
    except OSError as e:
        raise SourceUnavailable(label, e.strerror or str(e)) from e
    return Document(label=label, content=body)

def load_documents(paths: Iterable[Union[str, Path]]) -> Tuple[List[Document], List[Tuple[str, str]]]:
    """Read every path; unreadable ones are reported, not raised."""
    docs: List[Document] = []
    failures: List[Tuple[str, str]] = []
    for path in paths:
        try:
            docs.append(read_document(path))
        except SourceUnavailable as e:
            logger.warning("Error reading %s: %s", e.label, e.reason)
            failures.append((e.label, e.reason))
    return docs, failures
