"""Predicate layer: role/relationship predicates, document ACLs and condition trees."""
from __future__ import annotations

from realty_access_policy.rules.conditions import (
    DENY_ALL,
    AllOf,
    AnyOf,
    Check,
    Condition,
    ConditionOutcome,
    RequestContext,
    all_of,
    any_of,
    check,
)
from realty_access_policy.rules.documents import (
    DocumentPermission,
    PermissionSet,
    check_permission,
    is_listed,
)
from realty_access_policy.rules.roles import (
    has_agent_client_access,
    has_agent_client_relationship,
    has_client_access,
    has_resource_access,
    has_role,
    is_agent,
    is_authenticated,
    is_buyer,
    is_client,
    is_client_role,
    is_owner,
    is_seller,
)

__all__ = [
    # Conditions
    "AllOf",
    "AnyOf",
    "Check",
    "Condition",
    "ConditionOutcome",
    "DENY_ALL",
    "RequestContext",
    "all_of",
    "any_of",
    "check",
    # Documents
    "DocumentPermission",
    "PermissionSet",
    "check_permission",
    "is_listed",
    # Roles
    "has_agent_client_access",
    "has_agent_client_relationship",
    "has_client_access",
    "has_resource_access",
    "has_role",
    "is_agent",
    "is_authenticated",
    "is_buyer",
    "is_client",
    "is_client_role",
    "is_owner",
    "is_seller",
]
