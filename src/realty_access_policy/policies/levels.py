"""Permission-level descriptor for UI layers.

Groups collections into AGENT / CLIENT / PUBLIC tiers with the operations
each tier is offered.  UI code uses it to decide what to render; it is not
an enforcement mechanism, the policy table is.
"""
from __future__ import annotations

from dataclasses import dataclass

from realty_access_policy.policies.table import Operation


@dataclass(frozen=True)
class PermissionTier:
    name: str
    collections: tuple[str, ...]
    operations: tuple[Operation, ...]

    def allows(self, collection: str, operation: Operation | str) -> bool:
        return collection in self.collections and Operation(operation) in self.operations

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "collections": list(self.collections),
            "permissions": [op.value for op in self.operations],
        }


AGENT_TIER = PermissionTier(
    name="AGENT",
    collections=(
        "offers",
        "negotiations",
        "documents",
        "market_data",
        "offer_comparisons",
        "counter_offers",
        "offer_documents",
        "negotiation_strategies",
        "appraisal_scenarios",
    ),
    operations=(Operation.CREATE, Operation.READ, Operation.UPDATE, Operation.DELETE),
)

CLIENT_TIER = PermissionTier(
    name="CLIENT",
    collections=("offers", "negotiations", "documents"),
    operations=(Operation.READ, Operation.UPDATE),
)

PUBLIC_TIER = PermissionTier(
    name="PUBLIC",
    collections=("market_data", "comparables", "market_trends", "market_forecasts"),
    operations=(Operation.READ,),
)

PERMISSION_TIERS: tuple[PermissionTier, ...] = (AGENT_TIER, CLIENT_TIER, PUBLIC_TIER)


def permission_levels() -> dict[str, dict[str, list[str]]]:
    """Return the tier descriptor as plain data; a fresh copy on every call."""
    return {tier.name: tier.to_dict() for tier in PERMISSION_TIERS}


def tier(name: str) -> PermissionTier:
    """Look up a tier by name (case-sensitive).

    Raises
    ------
    KeyError
        If no tier has that name.
    """
    for candidate in PERMISSION_TIERS:
        if candidate.name == name:
            return candidate
    raise KeyError(name)
