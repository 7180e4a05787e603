from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor
from functools import partial
from dataclasses import dataclass, field
from itertools import combinations
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .compare import ComparisonResult, compare
from .errors import ErrorCodes, InsufficientDocuments
from .features import extract_features
from .normalize import normalize
from .output import CleanedOutput
from .simhash import build_fingerprint, format_fingerprint
from .sources import Document, load_documents

logger = logging.getLogger(__name__)


@dataclass
class FingerprintedDocument:
    label: str
    normalized: bytes
    fingerprint: int
    feature_count: int = 0

    @property
    def hex(self) -> str:
        return format_fingerprint(self.fingerprint)


@dataclass
class PairResult:
    left: int
    right: int
    result: ComparisonResult


@dataclass
class RunReport:
    documents: List[FingerprintedDocument]
    pairs: List[PairResult]
    failures: List[Tuple[str, str]] = field(default_factory=list)
    output_dir: Optional[Path] = None

    def to_dict(self) -> dict:
        return {
            "documents": [
                {"label": d.label, "fingerprint": d.hex, "features": d.feature_count}
                for d in self.documents
            ],
            "pairs": [
                {
                    "left": self.documents[p.left].label,
                    "right": self.documents[p.right].label,
                    **p.result.to_dict(),
                }
                for p in self.pairs
            ],
            "failures": [{"label": lbl, "reason": why} for lbl, why in self.failures],
            "output_dir": str(self.output_dir) if self.output_dir else None,
        }


def fingerprint_document(doc: Document, hash_name: str = "fnv1a") -> FingerprintedDocument:
    cleaned = normalize(doc.content)
    feats = extract_features(cleaned)
    fp = build_fingerprint(feats, hash_name=hash_name)
    logger.debug("%s: %d features, simhash %s", doc.label, len(feats), format_fingerprint(fp))
    return FingerprintedDocument(label=doc.label, normalized=cleaned, fingerprint=fp, feature_count=len(feats))


def fingerprint_all(docs: Sequence[Document], hash_name: str = "fnv1a", workers: int = 1) -> List[FingerprintedDocument]:
    if workers <= 1 or len(docs) <= 1:
        return [fingerprint_document(d, hash_name) for d in docs]
    # map preserves input order
    with ProcessPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(partial(fingerprint_document, hash_name=hash_name), docs))


def compare_all(fps: Sequence[FingerprintedDocument], failures: Sequence[Tuple[str, str]] = ()) -> List[PairResult]:
    if len(fps) < 2:
        raise InsufficientDocuments(len(fps), list(failures))
    pairs: List[PairResult] = []
    for i, j in combinations(range(len(fps)), 2):
        res = compare(fps[i].fingerprint, fps[j].fingerprint)
        logger.debug("%s vs %s: distance=%d", fps[i].label, fps[j].label, res.distance)
        pairs.append(PairResult(left=i, right=j, result=res))
    return pairs


def run_documents(
    docs: Sequence[Document],
    *,
    failures: Sequence[Tuple[str, str]] = (),
    sink: Optional[CleanedOutput] = None,
    hash_name: str = "fnv1a",
    workers: int = 1,
) -> RunReport:
    failures = list(failures)
    fps = fingerprint_all(docs, hash_name=hash_name, workers=workers)
    out_dir = None
    if sink is not None:
        for d in fps:
            try:
                sink.write(d.label, d.normalized)
                out_dir = sink.dir
            except OSError as e:
                # the sink is for inspection only; keep comparing
                logger.warning("%s: could not write cleaned %s: %s", ErrorCodes.ERR_OUTPUT_WRITE, d.label, e)
    pairs = compare_all(fps, failures)
    return RunReport(documents=fps, pairs=pairs, failures=failures, output_dir=out_dir)


def run(
    paths: Iterable[Union[str, Path]],
    *,
    sink: Optional[CleanedOutput] = None,
    hash_name: str = "fnv1a",
    workers: int = 1,
) -> RunReport:
    """Read, fingerprint and pairwise-compare files.

    Unreadable files are dropped and listed in ``RunReport.failures``.
    Raises InsufficientDocuments when fewer than two files remain.
    """
    docs, failures = load_documents(paths)
    return run_documents(docs, failures=failures, sink=sink, hash_name=hash_name, workers=workers)
