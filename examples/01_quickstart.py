#!/usr/bin/env python3
"""Example: Quickstart for realty-access-policy

Minimal working example: register a few users, evaluate requests against
the policy table, and inspect the decisions.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install realty-access-policy
"""
from __future__ import annotations

import realty_access_policy as rap


def main() -> None:
    print(f"realty-access-policy version: {rap.__version__}")

    # Step 1: Create a governor with an agent and two clients
    governor = rap.AccessGovernor(
        {
            "agent-ana": {"role": "agent", "clientIds": {"buyer-bo": True}},
            "buyer-bo": {"role": "buyer", "agentId": "agent-ana"},
            "seller-sy": {"role": "seller", "agentId": "agent-raj"},
        }
    )
    print(f"Governor ready: {governor!r}")

    # Step 2: Evaluate requests against a stored offer
    offer = {"agentId": "agent-ana", "clientId": "buyer-bo", "status": "submitted"}
    requests = [
        ("offers", "read", "buyer-bo"),
        ("offers", "read", "seller-sy"),
        ("offers", "delete", "buyer-bo"),
        ("offers", "delete", "agent-ana"),
        ("market_data", "read", None),
    ]

    print("\nPolicy evaluation:")
    for collection, operation, principal in requests:
        decision = governor.evaluate(collection, operation, principal, existing=offer)
        icon = "ALLOW" if decision.allowed else "DENY"
        print(f"  [{icon}] {principal or '<anonymous>'} {operation} {collection}")
        if not decision.allowed:
            print(f"    Failed condition: {decision.failed_condition}")
            print(f"    Shown to user:    {decision.public_message}")

    # Step 3: Enforce instead of evaluate
    try:
        governor.enforce("audit_logs", "read", "buyer-bo", existing={})
    except rap.AccessControlError as exc:
        print(f"\nEnforce raised {type(exc).__name__}: {exc}")


if __name__ == "__main__":
    main()
