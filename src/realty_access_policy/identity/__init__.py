"""Identity package: principals, profiles and the resolvers that produce them."""
from __future__ import annotations

from realty_access_policy.identity.loader import ProfileConfigError, ProfileLoader
from realty_access_policy.identity.profile import (
    CLIENT_ROLES,
    Principal,
    Profile,
    Role,
    validate_user_role,
)
from realty_access_policy.identity.resolver import (
    CachedIdentityResolver,
    IdentityResolver,
    InMemoryIdentityResolver,
    resolve_principal,
)

__all__ = [
    "CLIENT_ROLES",
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
]
