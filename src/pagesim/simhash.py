from __future__ import annotations

import hashlib
import re
from typing import Callable, Dict, Iterable, Union

from .features import Feature, extract_features
from .normalize import normalize

BITS = 64
MASK64 = (1 << BITS) - 1

_FNV64_OFFSET = 0xCBF29CE484222325
_FNV64_PRIME = 0x100000001B3

_HEX_RE = re.compile(r"[0-9a-f]{1,16}")
_DEC_RE = re.compile(r"[0-9]{1,20}")


def fnv1a64(data: bytes) -> int:
    h = _FNV64_OFFSET
    for b in data:
        h ^= b
        h = (h * _FNV64_PRIME) & MASK64
    return h


def sha1_64(data: bytes) -> int:
    # 64-bit hash from sha1
    return int(hashlib.sha1(data).hexdigest()[:16], 16)


HASHES: Dict[str, Callable[[bytes], int]] = {
    "fnv1a": fnv1a64,
    "sha1": sha1_64,
}


def get_hash(name: str) -> Callable[[bytes], int]:
    try:
        return HASHES[name]
    except KeyError:
        raise ValueError(f"unknown hash {name!r}; choose from {sorted(HASHES)}") from None


def build_fingerprint(features: Iterable[Union[Feature, bytes]], hash_name: str = "fnv1a") -> int:
    """Weighted simhash over a feature multiset.

    Bit i is set only when its accumulator is strictly positive, so a
    perfectly balanced position (and an empty input) yields 0.
    """
    hash64 = get_hash(hash_name)
    v = [0] * BITS
    for f in features:
        if isinstance(f, Feature):
            token, weight = f.token, f.weight
        else:
            token, weight = f, 1
        h = hash64(token)
        for i in range(BITS):
            if (h >> i) & 1:
                v[i] += weight
            else:
                v[i] -= weight
    out = 0
    for i in range(BITS):
        if v[i] > 0:
            out |= (1 << i)
    return out


def fingerprint_bytes(raw: bytes, hash_name: str = "fnv1a") -> int:
    return build_fingerprint(extract_features(normalize(raw)), hash_name=hash_name)


def format_fingerprint(fp: int) -> str:
    return format(fp & MASK64, "x")


def parse_fingerprint(s: str) -> int:
    """Accept hex (with or without 0x) or a decimal string prefixed by 'd:'."""
    s = s.strip().lower()
    if s.startswith("d:"):
        digits, base = s[2:], 10
        ok = _DEC_RE.fullmatch(digits)
    else:
        digits, base = (s[2:] if s.startswith("0x") else s), 16
        ok = _HEX_RE.fullmatch(digits)
    if not ok:
        raise ValueError(f"not a fingerprint: {s!r}")
    n = int(digits, base)
    if n > MASK64:
        raise ValueError(f"fingerprint out of 64-bit range: {s}")
    return n
