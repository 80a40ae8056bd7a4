"""Principal and profile types consumed by every access predicate.

A :class:`Principal` is the requester of an operation: an opaque identifier
issued by the identity provider plus the :class:`Profile` resolved from the
``users`` collection.  A principal whose profile could not be resolved
carries ``profile=None`` and is treated as unauthenticated everywhere.

Example
-------
>>> profile = Profile.from_record({"role": "agent", "clientIds": {"C1": True}})
>>> principal = Principal(id="A1", profile=profile)
>>> principal.role
<Role.AGENT: 'agent'>
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class Role(str, Enum):
    """The three roles a profile may hold."""

    AGENT = "agent"
    BUYER = "buyer"
    SELLER = "seller"


CLIENT_ROLES: frozenset[Role] = frozenset([Role.BUYER, Role.SELLER])


def validate_user_role(role: object) -> bool:
    """Return True when *role* is one of ``agent``, ``buyer`` or ``seller``."""
    return isinstance(role, str) and role in {r.value for r in Role}


@dataclass(frozen=True)
class Profile:
    """Resolved profile of a principal.

    Attributes
    ----------
    role:
        Exactly one of the :class:`Role` values.
    client_ids:
        Agent profiles only.  Maps client id to its membership flag; a
        client is associated only when the flag is exactly ``True``.
    agent_id:
        Client profiles only.  The agent the client registered with.
    """

    role: Role
    client_ids: Mapping[str, object] = field(default_factory=dict, hash=False)
    agent_id: str | None = None

    def __post_init__(self) -> None:
        # Coerce plain strings so records read from storage behave the same.
        if not isinstance(self.role, Role):
            if not validate_user_role(self.role):
                raise ValueError(
                    f"Profile role must be one of {[r.value for r in Role]}; "
                    f"got {self.role!r}."
                )
            object.__setattr__(self, "role", Role(self.role))
        object.__setattr__(
            self, "client_ids", MappingProxyType(dict(self.client_ids or {}))
        )

    @classmethod
    def from_record(cls, record: Mapping[str, object]) -> Profile:
        """Build a profile from a stored ``users`` record.

        Raises
        ------
        ValueError
            If the record has no valid ``role``.
        """
        raw_client_ids = record.get("clientIds") or {}
        if not isinstance(raw_client_ids, Mapping):
            raise ValueError(
                f"Profile clientIds must be a mapping; got {type(raw_client_ids).__name__}."
            )
        agent_id = record.get("agentId")
        return cls(
            role=record.get("role"),  # type: ignore[arg-type]
            client_ids=raw_client_ids,
            agent_id=str(agent_id) if agent_id is not None else None,
        )

    def has_client(self, client_id: object) -> bool:
        """Return True when *client_id* is flagged as one of this agent's clients."""
        if self.role is not Role.AGENT or not isinstance(client_id, str):
            return False
        return self.client_ids.get(client_id) is True


@dataclass(frozen=True)
class Principal:
    """The actor attempting an operation.

    Attributes
    ----------
    id:
        Opaque identifier issued by the identity provider.  Compared with
        exact, case-sensitive equality.
    profile:
        The resolved profile, or ``None`` when the resolver found none.
    """

    id: str
    profile: Profile | None = None

    @property
    def is_resolved(self) -> bool:
        return self.profile is not None

    @property
    def role(self) -> Role | None:
        return self.profile.role if self.profile is not None else None
