"""realty-access-policy — Role- and relationship-based access control for a real-estate transaction platform.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import realty_access_policy as rap
>>> rap.__version__
'0.1.0'
>>> agent = rap.Principal("A1", rap.Profile(rap.Role.AGENT, client_ids={"C1": True}))
>>> rap.evaluate("offers", "read", agent, existing={"agentId": "A2", "clientId": "C1"}).allowed
True
"""
from __future__ import annotations

__version__: str = "0.1.0"

from realty_access_policy.convenience import AccessGovernor

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
from realty_access_policy.errors import (
    GENERIC_DENIAL,
    AccessControlError,
    ForbiddenError,
    NotFoundError,
    ProfileNotFoundError,
    UnauthenticatedError,
    ValidationFailedError,
)

# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------
from realty_access_policy.identity.profile import Principal, Profile, Role, validate_user_role
from realty_access_policy.identity.resolver import (
    CachedIdentityResolver,
    IdentityResolver,
    InMemoryIdentityResolver,
    resolve_principal,
)
from realty_access_policy.identity.loader import ProfileConfigError, ProfileLoader

# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------
from realty_access_policy.rules.documents import DocumentPermission, check_permission
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
    is_owner,
    is_seller,
)

# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------
from realty_access_policy.schemas.validators import (
    FieldViolation,
    RecordKind,
    ValidationReport,
    ViolationCode,
    validate,
    validate_document,
    validate_negotiation,
    validate_offer,
)

# ---------------------------------------------------------------------------
# Policies
# ---------------------------------------------------------------------------
from realty_access_policy.policies.table import (
    GOVERNED_COLLECTIONS,
    POLICY_TABLE,
    CollectionFamily,
    Operation,
    build_policy_table,
)
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
from realty_access_policy.policies.levels import permission_levels

# ---------------------------------------------------------------------------
# Audit & config
# ---------------------------------------------------------------------------
from realty_access_policy.audit.logger import DecisionLogger
from realty_access_policy.config.loader import AccessConfig, ConfigLoader

__all__ = [
    "__version__",
    "AccessGovernor",
    # Errors
    "GENERIC_DENIAL",
    "AccessControlError",
    "ForbiddenError",
    "NotFoundError",
    "ProfileNotFoundError",
    "UnauthenticatedError",
    "ValidationFailedError",
    # Identity
    "CachedIdentityResolver",
    "IdentityResolver",
    "InMemoryIdentityResolver",
    "Principal",
    "Profile",
    "ProfileConfigError",
    "ProfileLoader",
    "Role",
    "resolve_principal",
    "validate_user_role",
    # Rules
    "DocumentPermission",
    "check_permission",
    "has_agent_client_access",
    "has_agent_client_relationship",
    "has_client_access",
    "has_resource_access",
    "has_role",
    "is_agent",
    "is_authenticated",
    "is_buyer",
    "is_client",
    "is_owner",
    "is_seller",
    # Schemas
    "FieldViolation",
    "RecordKind",
    "ValidationReport",
    "ViolationCode",
    "validate",
    "validate_document",
    "validate_negotiation",
    "validate_offer",
    # Policies
    "AccessLevel",
    "CollectionFamily",
    "Decision",
    "DenialKind",
    "EffectivePermissions",
    "GOVERNED_COLLECTIONS",
    "Operation",
    "POLICY_TABLE",
    "PolicyEngine",
    "assign_ownership",
    "build_policy_table",
    "evaluate",
    "permission_levels",
    "require_agent",
    "require_agent_access",
    "require_agent_or_client",
    "require_client",
    "require_role",
    # Audit & config
    "AccessConfig",
    "ConfigLoader",
    "DecisionLogger",
]
