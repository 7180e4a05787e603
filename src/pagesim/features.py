from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

WORD_RE = re.compile(rb"\w+")


@dataclass(frozen=True)
class Feature:
    token: bytes
    weight: int = 1


def tokenize(text: bytes) -> List[bytes]:
    # maximal runs of [A-Za-z0-9_]; bytes patterns are ASCII-only for \w
    return WORD_RE.findall(text)


def extract_features(text: bytes) -> List[Feature]:
    """One weight-1 feature per token occurrence, in document order."""
    return [Feature(t) for t in tokenize(text)]
