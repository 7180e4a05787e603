from __future__ import annotations

import re
from typing import List, Pattern

# Applied in order; each pass runs over the output of the previous one.
# The ad-banner div goes before header/footer so it is matched even when
# nested inside one of them.
STRIP_PATTERNS: List[Pattern[bytes]] = [
    re.compile(rb"<head[^>]*>.*?</head>", re.S),
    re.compile(rb"<script[^>]*>.*?</script>", re.S),
    re.compile(rb"<style[^>]*>.*?</style>", re.S),
    re.compile(rb'<div[^>]*id="ad-banner"[^>]*>.*?</div>', re.S),
    re.compile(rb"<header[^>]*>.*?</header>", re.S),
    re.compile(rb"<footer[^>]*>.*?</footer>", re.S),
]


def normalize(raw: bytes) -> bytes:
    """Strip non-content regions (head, script, style, ad banner, header, footer).

    Matching is literal and non-greedy against the nearest closing tag; this
    is not an HTML parser. Unterminated regions do not match and are kept.
    """
    out = bytes(raw)
    for pat in STRIP_PATTERNS:
        out = pat.sub(b"", out)
    return out
