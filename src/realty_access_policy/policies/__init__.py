"""Policy package: the collection policy table, the decision engine and helpers."""
from __future__ import annotations

from realty_access_policy.policies.engine import (
    AccessLevel,
    Decision,
    DenialKind,
    EffectivePermissions,
    PolicyEngine,
    evaluate,
)
from realty_access_policy.policies.guards import (
    assign_ownership,
    require_agent,
    require_agent_access,
    require_agent_or_client,
    require_client,
    require_role,
)
from realty_access_policy.policies.levels import (
    PERMISSION_TIERS,
    PermissionTier,
    permission_levels,
)
from realty_access_policy.policies.table import (
    GOVERNED_COLLECTIONS,
    POLICY_TABLE,
    CollectionFamily,
    CollectionPolicy,
    Operation,
    build_policy_table,
)

__all__ = [
    # Engine
    "AccessLevel",
    "Decision",
    "DenialKind",
    "EffectivePermissions",
    "PolicyEngine",
    "evaluate",
    # Guards
    "assign_ownership",
    "require_agent",
    "require_agent_access",
    "require_agent_or_client",
    "require_client",
    "require_role",
    # Levels
    "PERMISSION_TIERS",
    "PermissionTier",
    "permission_levels",
    # Table
    "GOVERNED_COLLECTIONS",
    "POLICY_TABLE",
    "CollectionFamily",
    "CollectionPolicy",
    "Operation",
    "build_policy_table",
]
