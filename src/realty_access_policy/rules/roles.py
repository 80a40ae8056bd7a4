"""Role and relationship predicates.

Pure functions over a resolved :class:`Principal`.  Every predicate fails
closed: ``None`` or an unresolved principal yields ``False``, including
for :func:`is_owner`.

Example
-------
>>> agent = Principal("A1", Profile(Role.AGENT, client_ids={"C1": True}))
>>> has_resource_access(agent, "A2", "C1")
True
>>> has_resource_access(agent, "A2", "C9")
False
"""
from __future__ import annotations

from realty_access_policy.identity.profile import CLIENT_ROLES, Principal, Profile, Role


def is_authenticated(principal: Principal | None) -> bool:
    """True iff the principal is present and its profile resolved."""
    return principal is not None and principal.profile is not None


def has_role(principal: Principal | None, role: Role | str) -> bool:
    """True iff the principal is authenticated and holds *role*.

    Parameters
    ----------
    principal:
        The requester, possibly ``None`` or unresolved.
    role:
        A :class:`Role` or its string value; both compare equal.
    """
    if not is_authenticated(principal):
        return False
    return principal.profile.role == role  # type: ignore[union-attr]


def is_agent(principal: Principal | None) -> bool:
    """True iff the principal holds the ``agent`` role."""
    return has_role(principal, Role.AGENT)


def is_buyer(principal: Principal | None) -> bool:
    """True iff the principal holds the ``buyer`` role."""
    return has_role(principal, Role.BUYER)


def is_seller(principal: Principal | None) -> bool:
    """True iff the principal holds the ``seller`` role."""
    return has_role(principal, Role.SELLER)


def is_client(principal: Principal | None) -> bool:
    """A client is a buyer or a seller."""
    return is_buyer(principal) or is_seller(principal)


def is_owner(principal: Principal | None, field_value: object) -> bool:
    """True iff the principal's id equals *field_value* exactly.

    No normalisation is applied; ``"a1"`` does not own ``"A1"``.
    """
    if not is_authenticated(principal):
        return False
    return isinstance(field_value, str) and principal.id == field_value  # type: ignore[union-attr]


def has_agent_client_access(principal: Principal | None, client_id: object) -> bool:
    """True iff an agent is the client itself or lists the client.

    The first branch lets an agent act as their own client.
    """
    if not is_agent(principal):
        return False
    return is_owner(principal, client_id) or principal.profile.has_client(client_id)  # type: ignore[union-attr]


def has_client_access(principal: Principal | None, client_id: object) -> bool:
    """True iff a buyer or seller is the designated client."""
    return is_client(principal) and is_owner(principal, client_id)


def has_resource_access(
    principal: Principal | None,
    agent_id: object,
    client_id: object,
) -> bool:
    """The shared read/update decision of every transactional collection."""
    return (
        is_owner(principal, agent_id)
        or is_owner(principal, client_id)
        or has_agent_client_access(principal, client_id)
    )


def has_agent_client_relationship(profile: Profile | None, client_id: object) -> bool:
    """True iff *profile* is an agent profile flagging *client_id* as a client."""
    return profile is not None and profile.has_client(client_id)


def is_client_role(role: object) -> bool:
    """True iff *role* is the string value of a client role."""
    return role in {r.value for r in CLIENT_ROLES}
