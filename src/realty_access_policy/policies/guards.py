"""Role guards and ownership helpers for application code.

Guards raise instead of returning a boolean, for use at the top of
service functions::

    def create_offer(principal, data):
        require_agent(principal)
        record = assign_ownership(principal, data)
        engine.enforce("offers", "create", principal, proposed=record)
"""
from __future__ import annotations

import logging
from collections.abc import Mapping

from realty_access_policy.errors import ForbiddenError, UnauthenticatedError
from realty_access_policy.identity.profile import CLIENT_ROLES, Principal, Role
from realty_access_policy.rules.roles import is_authenticated

logger = logging.getLogger(__name__)


def require_role(principal: Principal | None, *roles: Role | str) -> Principal:
    """Return *principal* when it holds one of *roles*.

    Raises
    ------
    UnauthenticatedError
        When the principal is missing or unresolved.
    ForbiddenError
        When its role is not among *roles*.
    """
    if not is_authenticated(principal):
        raise UnauthenticatedError("is_authenticated")
    role = principal.profile.role  # type: ignore[union-attr]
    if role not in {Role(r) for r in roles}:
        logger.info(
            "Role guard rejected principal=%s role=%s required=%s",
            principal.id,  # type: ignore[union-attr]
            role.value,
            sorted(Role(r).value for r in roles),
        )
        raise ForbiddenError("has_required_role")
    return principal


def require_agent(principal: Principal | None) -> Principal:
    return require_role(principal, Role.AGENT)


def require_client(principal: Principal | None) -> Principal:
    return require_role(principal, *CLIENT_ROLES)


def require_agent_or_client(principal: Principal | None) -> Principal:
    return require_role(principal, *Role)


def require_agent_access(principal: Principal | None, agent_id: str) -> Principal:
    """Only the agent *agent_id* itself passes."""
    principal = require_agent(principal)
    if principal.id != agent_id:
        raise ForbiddenError("owns_agent_data")
    return principal


def assign_ownership(
    principal: Principal | None,
    data: Mapping[str, object],
    explicit: Mapping[str, str] | None = None,
) -> dict[str, object]:
    """Return a copy of *data* stamped with ``agentId`` / ``clientId``.

    Agents become the ``agentId``.  Clients become the ``clientId`` and
    inherit the ``agentId`` of the agent they registered with.  Values in
    *explicit* are applied first and overridden by the principal's own
    identity.

    Raises
    ------
    UnauthenticatedError
        When the principal is missing or unresolved.
    ForbiddenError
        When a client has no associated agent.
    """
    if not is_authenticated(principal):
        raise UnauthenticatedError("is_authenticated")
    ownership: dict[str, object] = dict(explicit or {})
    profile = principal.profile  # type: ignore[union-attr]
    if profile.role is Role.AGENT:
        ownership["agentId"] = principal.id  # type: ignore[union-attr]
    else:
        if not profile.agent_id:
            raise ForbiddenError("client_has_agent")
        ownership["clientId"] = principal.id  # type: ignore[union-attr]
        ownership["agentId"] = profile.agent_id

    return {**data, **ownership}
