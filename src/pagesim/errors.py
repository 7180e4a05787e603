from __future__ import annotations

from typing import List, Tuple


class ErrorCodes:
    ERR_SOURCE_UNAVAILABLE = "ERR_SOURCE_UNAVAILABLE"
    ERR_INSUFFICIENT_DOCUMENTS = "ERR_INSUFFICIENT_DOCUMENTS"
    ERR_OUTPUT_WRITE = "ERR_OUTPUT_WRITE"
    ERR_BAD_FINGERPRINT = "ERR_BAD_FINGERPRINT"


class PageSimError(Exception):
    code = "ERR_PAGESIM"


class SourceUnavailable(PageSimError):
    """A document could not be read; it is dropped from the run."""

    code = ErrorCodes.ERR_SOURCE_UNAVAILABLE

    def __init__(self, label: str, reason: str):
        super().__init__(f"{label}: {reason}")
        self.label = label
        self.reason = reason


class InsufficientDocuments(PageSimError):
    """Fewer than two usable documents; no comparison is produced."""

    code = ErrorCodes.ERR_INSUFFICIENT_DOCUMENTS

    def __init__(self, available: int, failures: List[Tuple[str, str]] | None = None):
        super().__init__(f"need at least 2 documents to compare, got {available}")
        self.available = available
        self.failures = list(failures or [])
