from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Tuple

from .simhash import BITS, MASK64

# Closed, non-overlapping distance ranges covering 0..64.
RELATIONSHIPS: List[Tuple[int, int, str]] = [
    (0, 0, "Identical"),
    (1, 3, "Near duplicates"),
    (4, 10, "Minor variants"),
    (11, 25, "Somewhat related"),
    (26, 38, "Unrelated"),
    (39, 64, "Maximally different"),
]


@dataclass(frozen=True)
class ComparisonResult:
    distance: int
    similarity_percent: float
    relationship: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def hamming64(a: int, b: int) -> int:
    return ((a ^ b) & MASK64).bit_count()


def similarity_percent(distance: int) -> float:
    pct = (BITS - distance) / BITS * 100.0
    return min(100.0, max(0.0, pct))


def relationship_for(distance: int) -> str:
    for lo, hi, label in RELATIONSHIPS:
        if lo <= distance <= hi:
            return label
    raise ValueError(f"distance out of range: {distance}")


def compare(a: int, b: int) -> ComparisonResult:
    d = hamming64(a, b)
    return ComparisonResult(distance=d, similarity_percent=similarity_percent(d), relationship=relationship_for(d))
