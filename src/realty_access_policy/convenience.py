"""Convenience API for realty-access-policy — 3-line quickstart.

Example
-------
::

    from realty_access_policy import AccessGovernor
    governor = AccessGovernor({"A1": {"role": "agent"}})
    decision = governor.evaluate("offers", "delete", "A1", existing={"agentId": "A1"})
    print(decision.allowed)

"""
from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any


class AccessGovernor:
    """Zero-config access control for the 80% use case.

    Wraps :class:`PolicyEngine` with an in-memory identity resolver.  No
    config file is required; the default policy table mirrors the
    enforcing database.

    Parameters
    ----------
    profiles:
        Optional mapping of principal id to ``users`` record (``role``,
        ``clientIds``, ``agentId``) or :class:`Profile`.
    strict_offers:
        Apply the extended Offer schema to offer writes.

    Example
    -------
    ::

        from realty_access_policy import AccessGovernor
        governor = AccessGovernor({"B1": {"role": "buyer", "agentId": "A1"}})
        decision = governor.evaluate("market_data", "read", "B1")
        print(decision.allowed)  # True
    """

    def __init__(
        self,
        profiles: Mapping[str, Any] | None = None,
        strict_offers: bool = False,
    ) -> None:
        from realty_access_policy.identity.resolver import InMemoryIdentityResolver
        from realty_access_policy.policies.engine import PolicyEngine

        self._resolver = InMemoryIdentityResolver(profiles)
        self._engine = PolicyEngine(resolver=self._resolver, strict_offers=strict_offers)

    @classmethod
    def from_config(cls, config_path: str | Path) -> AccessGovernor:
        """Build a governor from a ``realty_access.yaml`` file.

        Wires the profile seed file, the decision audit log, strict offer
        validation and the deny message from the config.

        Raises
        ------
        FileNotFoundError
            When the config file or the profiles file it names is missing.
        """
        from realty_access_policy.audit.logger import DecisionLogger
        from realty_access_policy.config.loader import ConfigLoader
        from realty_access_policy.identity.loader import ProfileLoader
        from realty_access_policy.identity.resolver import InMemoryIdentityResolver
        from realty_access_policy.policies.engine import PolicyEngine

        config = ConfigLoader().load(Path(config_path))
        governor = cls.__new__(cls)
        governor._resolver = (
            ProfileLoader().load(config.profiles_file)
            if config.profiles_file is not None
            else InMemoryIdentityResolver()
        )
        governor._engine = PolicyEngine(
            resolver=governor._resolver,
            decision_logger=(
                DecisionLogger(config.audit.log_path) if config.audit.enabled else None
            ),
            strict_offers=config.validation.strict_offers,
            deny_message=config.deny_message,
        )
        return governor

    def evaluate(
        self,
        collection: str,
        operation: str,
        principal: Any,
        existing: Mapping[str, Any] | None = None,
        proposed: Mapping[str, Any] | None = None,
        *,
        resource_id: str | None = None,
    ) -> Any:
        """Evaluate one request against the policy table.

        Parameters
        ----------
        collection:
            Collection name, e.g. ``"offers"``.
        operation:
            ``create``, ``read``, ``update`` or ``delete``.
        principal:
            A principal id known to the governor, a :class:`Principal`,
            or ``None`` for an unauthenticated request.

        Returns
        -------
        Decision
            Result with ``.allowed`` bool and ``.failed_condition``.
        """
        return self._engine.evaluate(
            collection, operation, principal, existing, proposed, resource_id=resource_id
        )

    def enforce(
        self,
        collection: str,
        operation: str,
        principal: Any,
        existing: Mapping[str, Any] | None = None,
        proposed: Mapping[str, Any] | None = None,
        *,
        resource_id: str | None = None,
    ) -> Any:
        """Like :meth:`evaluate` but raises :class:`AccessControlError` on deny."""
        return self._engine.enforce(
            collection, operation, principal, existing, proposed, resource_id=resource_id
        )

    def add_profile(self, principal_id: str, profile: Any) -> None:
        self._resolver.add(principal_id, profile)

    @property
    def engine(self) -> Any:
        """The underlying PolicyEngine instance."""
        return self._engine

    def __repr__(self) -> str:
        return f"AccessGovernor(engine=PolicyEngine, profiles={len(self._resolver)})"
