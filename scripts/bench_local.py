#!/usr/bin/env python3
from __future__ import annotations

import json
import os
import statistics
import time

import httpx

URL = os.getenv("PAGESIM_URL", "http://127.0.0.1:8788")


def main():
    c = httpx.Client(base_url=URL, timeout=30.0)
    body = " ".join(f"word{i % 400}" for i in range(5000))
    docs = [
        {"label": "a", "text": f"<html><body>{body}</body></html>"},
        {"label": "b", "text": f"<html><header>nav</header><body>{body} extra</body></html>"},
    ]
    times = []
    for _ in range(200):
        t0 = time.perf_counter()
        r = c.post("/compare", json={"documents": docs})
        r.raise_for_status()
        times.append((time.perf_counter() - t0) * 1000.0)
    p50 = statistics.median(times)
    p95 = statistics.quantiles(times, n=100)[94]
    p99 = statistics.quantiles(times, n=100)[98]
    out = {"p50_ms": p50, "p95_ms": p95, "p99_ms": p99, "distance": r.json()["pairs"][0]["distance"]}
    print(json.dumps(out, indent=2))
    assert p95 < 1000.0, f"p95 too high: {p95:.2f} ms"


if __name__ == "__main__":
    main()
