#!/usr/bin/env python3
"""Example: Policy Engine, validation and application helpers

Demonstrates the PolicyEngine with a cached resolver and an audit log,
schema validation of proposed offers, ownership stamping, effective
permissions and list filtering.

Usage:
    python examples/02_policy_engine.py

Requirements:
    pip install realty-access-policy
"""
from __future__ import annotations

import tempfile
from pathlib import Path

import realty_access_policy as rap
from realty_access_policy import (
    CachedIdentityResolver,
    DecisionLogger,
    PolicyEngine,
    ProfileLoader,
    assign_ownership,
    permission_levels,
)

_PROFILES = """\
profiles:
  agent-ana:
    role: agent
    clientIds:
      buyer-bo: true
  buyer-bo:
    role: buyer
    agentId: agent-ana
"""


def main() -> None:
    print(f"realty-access-policy version: {rap.__version__}")

    # Step 1: Load profiles and wire an engine with a decision log
    resolver = CachedIdentityResolver(ProfileLoader().load_from_yaml_string(_PROFILES))
    log_path = Path(tempfile.mkdtemp()) / "decisions.jsonl"
    engine = PolicyEngine(resolver=resolver, decision_logger=DecisionLogger(log_path))

    # Step 2: An agent drafts an offer; ownership is stamped from the principal
    agent = engine.principal("agent-ana")
    draft = assign_ownership(
        agent,
        {
            "clientId": "buyer-bo",
            "propertyId": "prop-17",
            "type": "buyer",
            "status": "draft",
            "purchasePrice": 0,
            "earnestMoney": 2500,
            "downPayment": 50000,
            "loanAmount": 200000,
            "offerDate": "2024-04-02",
            "expirationDate": "2024-04-05",
            "closingDate": "2024-05-20",
        },
    )
    decision = engine.evaluate("offers", "create", agent, proposed=draft)
    print(f"\nCreate with price 0: allowed={decision.allowed}")
    for violation in decision.violations:
        print(f"  {violation.field}: {violation.code.value} ({violation.message})")

    offer = {**draft, "purchasePrice": 250000}
    print(f"Create with price 250000: allowed={engine.evaluate('offers', 'create', agent, proposed=offer).allowed}")

    # Step 3: What can each user do with the stored offer?
    print("\nEffective permissions:")
    for principal_id in ("agent-ana", "buyer-bo"):
        permissions = engine.effective_permissions("offers", principal_id, offer)
        print(f"  {principal_id}: {permissions.level.value}")

    # Step 4: Filter a listing down to what the buyer may read
    listing = [offer, {**offer, "clientId": "buyer-zed"}]
    visible = engine.filter_accessible("offers", "buyer-bo", listing)
    print(f"\nbuyer-bo sees {len(visible)} of {len(listing)} offers")

    # Step 5: Permission levels for the UI, and the audit trail
    print(f"\nUI levels: {sorted(permission_levels())}")
    print(f"Audit records written: {engine.decision_logger.count()}")


if __name__ == "__main__":
    main()
