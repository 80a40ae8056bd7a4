"""Benchmark: Policy evaluation throughput — decisions per second.

Measures how many evaluate() calls can be completed per second across a
mix of transactional, document and public-market requests, allowed and
denied.
"""
from __future__ import annotations

import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from realty_access_policy.identity.profile import Principal, Profile, Role
from realty_access_policy.policies.engine import evaluate

_ITERATIONS: int = 10_000

_OFFER: dict[str, object] = {
    "agentId": "A1",
    "clientId": "C1",
    "propertyId": "P1",
    "type": "buyer",
    "status": "draft",
    "purchasePrice": 450_000,
    "earnestMoney": 5_000,
    "downPayment": 90_000,
    "loanAmount": 360_000,
    "offerDate": "2024-05-01",
    "expirationDate": "2024-05-08",
    "closingDate": "2024-06-15",
}

_DOCUMENT: dict[str, object] = {
    "agentId": "A1",
    "clientId": "C1",
    "title": "Purchase agreement",
    "type": "contract",
    "category": "offer",
    "status": "draft",
    "permissions": {"canView": ["A1", "C1"], "canEdit": ["A1"], "canDelete": ["A1"]},
}


def _make_requests() -> list[tuple[str, str, Principal | None, dict | None, dict | None]]:
    """Build a fixed request mix for benchmarking."""
    agent = Principal("A1", Profile(Role.AGENT, client_ids={"C1": True}))
    buyer = Principal("C1", Profile(Role.BUYER, agent_id="A1"))
    stranger = Principal("X9", Profile(Role.SELLER, agent_id="A7"))
    return [
        ("offers", "read", buyer, _OFFER, None),
        ("offers", "create", agent, None, _OFFER),
        ("offers", "update", stranger, _OFFER, _OFFER),
        ("documents", "read", buyer, _DOCUMENT, None),
        ("documents", "update", agent, _DOCUMENT, _DOCUMENT),
        ("market_data", "read", stranger, {}, None),
        ("audit_logs", "read", None, {}, None),
    ]


def bench_evaluate_throughput() -> dict[str, object]:
    """Benchmark evaluate() throughput.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p99_latency_ms, memory_peak_mb.
    """
    requests = _make_requests()
    total_calls = _ITERATIONS * len(requests)

    start = time.perf_counter()
    for _ in range(_ITERATIONS):
        for collection, operation, principal, existing, proposed in requests:
            evaluate(collection, operation, principal, existing, proposed)
    total = time.perf_counter() - start

    result: dict[str, object] = {
        "operation": "policy_evaluate_throughput",
        "iterations": total_calls,
        "total_seconds": round(total, 4),
        "ops_per_second": round(total_calls / total, 1),
        "avg_latency_ms": round(total / total_calls * 1000, 4),
        "p99_latency_ms": 0.0,
        "memory_peak_mb": 0.0,
    }
    print(
        f"[bench_evaluate_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} ops/sec  "
        f"avg {result['avg_latency_ms']:.4f} ms"
    )
    return result


def run_benchmark() -> dict[str, object]:
    """Entry point returning the benchmark result dict."""
    return bench_evaluate_throughput()


if __name__ == "__main__":
    result = run_benchmark()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "throughput_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
