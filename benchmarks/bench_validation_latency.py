"""Benchmark: Offer validation latency — per-call p50/p95/p99.

Measures the per-call latency of validate_offer() on a complete record
and on a record missing half of its required fields.
"""
from __future__ import annotations

import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from realty_access_policy.schemas.validators import OFFER_REQUIRED_FIELDS, validate_offer

_WARMUP: int = 100
_ITERATIONS: int = 5_000


def _make_records() -> list[dict[str, object]]:
    """A complete offer and one with every other required field dropped."""
    complete: dict[str, object] = {name: "x" for name in OFFER_REQUIRED_FIELDS}
    complete.update({"type": "buyer", "status": "submitted", "purchasePrice": 500_000})
    partial = {k: v for i, (k, v) in enumerate(complete.items()) if i % 2 == 0}
    return [complete, partial]


def bench_validation_latency() -> dict[str, object]:
    """Benchmark validate_offer() per-call latency.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p50_latency_ms, p95_latency_ms, p99_latency_ms,
    memory_peak_mb.
    """
    records = _make_records()

    for _ in range(_WARMUP):
        for record in records:
            validate_offer(record)

    latencies_ms: list[float] = []
    for i in range(_ITERATIONS):
        record = records[i % len(records)]
        t0 = time.perf_counter()
        validate_offer(record)
        latencies_ms.append((time.perf_counter() - t0) * 1000)

    sorted_lats = sorted(latencies_ms)
    n = len(sorted_lats)
    total = sum(latencies_ms) / 1000

    result: dict[str, object] = {
        "operation": "offer_validation_latency",
        "iterations": _ITERATIONS,
        "total_seconds": round(total, 4),
        "ops_per_second": round(_ITERATIONS / total, 1),
        "avg_latency_ms": round(sum(latencies_ms) / n, 4),
        "p50_latency_ms": round(sorted_lats[n // 2], 4),
        "p95_latency_ms": round(sorted_lats[min(int(n * 0.95), n - 1)], 4),
        "p99_latency_ms": round(sorted_lats[min(int(n * 0.99), n - 1)], 4),
        "memory_peak_mb": 0.0,
    }
    print(
        f"[bench_validation_latency] {result['operation']}: "
        f"p99={result['p99_latency_ms']:.4f}ms  "
        f"mean={result['avg_latency_ms']:.4f}ms"
    )
    return result


def run_benchmark() -> dict[str, object]:
    """Entry point returning the benchmark result dict."""
    return bench_validation_latency()


if __name__ == "__main__":
    result = run_benchmark()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "validation_latency_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
