"""Policy engine: one allow/deny decision per (collection, operation, principal).

:func:`evaluate` is the pure decision procedure.  It looks up the
collection in the policy table, evaluates the operation's condition tree
against the principal and the record snapshots, and returns an immutable
:class:`Decision`.  It holds no state and never mutates its inputs, so it
is safe to call concurrently from any number of threads.

:class:`PolicyEngine` adds identity resolution, logging and the decision
audit trail on top, plus :meth:`PolicyEngine.enforce` which raises on
deny.

Example
-------
>>> agent = Principal("A1", Profile(Role.AGENT, client_ids={"C1": True}))
>>> decision = evaluate("offers", "read", agent, existing={"agentId": "A2", "clientId": "C1"})
>>> decision.allowed
True
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, TypeVar

from realty_access_policy.errors import (
    GENERIC_DENIAL,
    AccessControlError,
    ForbiddenError,
    NotFoundError,
    UnauthenticatedError,
    ValidationFailedError,
)
from realty_access_policy.identity.profile import Principal
from realty_access_policy.identity.resolver import IdentityResolver, resolve_principal
from realty_access_policy.policies.table import (
    POLICY_TABLE,
    CollectionPolicy,
    Operation,
    build_policy_table,
)
from realty_access_policy.rules.conditions import RequestContext
from realty_access_policy.rules.roles import is_authenticated

if TYPE_CHECKING:
    from realty_access_policy.audit.logger import DecisionLogger
    from realty_access_policy.schemas.validators import FieldViolation

logger = logging.getLogger(__name__)

Record = Mapping[str, object]
R = TypeVar("R", bound=Mapping[str, object])

UNKNOWN_COLLECTION: str = "known_collection"


class DenialKind(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    VALIDATION_FAILED = "validation_failed"
    NOT_FOUND = "not_found"


_ERRORS: dict[DenialKind, type[AccessControlError]] = {
    DenialKind.UNAUTHENTICATED: UnauthenticatedError,
    DenialKind.FORBIDDEN: ForbiddenError,
    DenialKind.NOT_FOUND: NotFoundError,
}


@dataclass(frozen=True)
class Decision:
    """Immutable outcome of one evaluation.  Truthy when allowed.

    Attributes
    ----------
    allowed:
        The decision.
    collection:
        Collection the request targeted.
    operation:
        The requested operation.
    principal_id:
        Id of the requester, ``None`` when unauthenticated.
    failed_condition:
        Name of the first condition that failed; for logs only.
    denial:
        Category of the denial, ``None`` when allowed.
    violations:
        Schema violations when ``denial`` is ``VALIDATION_FAILED``.
    """

    allowed: bool
    collection: str
    operation: Operation
    principal_id: str | None = None
    failed_condition: str | None = None
    denial: DenialKind | None = None
    violations: tuple[FieldViolation, ...] = ()

    def __bool__(self) -> bool:
        return self.allowed

    @property
    def public_message(self) -> str | None:
        """What an end user may be shown: never which condition failed."""
        return None if self.allowed else GENERIC_DENIAL

    def to_error(self, message: str = GENERIC_DENIAL) -> AccessControlError | None:
        """The exception matching this denial, or ``None`` when allowed."""
        if self.allowed or self.denial is None:
            return None
        if self.denial is DenialKind.VALIDATION_FAILED:
            return ValidationFailedError(self.failed_condition, list(self.violations), message)
        return _ERRORS[self.denial](self.failed_condition, message)

    def to_dict(self) -> dict[str, object]:
        return {
            "allowed": self.allowed,
            "collection": self.collection,
            "operation": self.operation.value,
            "principal_id": self.principal_id,
            "failed_condition": self.failed_condition,
            "denial": self.denial.value if self.denial is not None else None,
            "violations": [v.to_dict() for v in self.violations],
        }


def _as_record(value: object) -> Record | None:
    return value if isinstance(value, Mapping) else None


def _record_id(record: Record, id_field: str | None) -> str | None:
    if id_field is None:
        return None
    value = record.get(id_field)
    return value if isinstance(value, str) else None


def evaluate(
    collection: str,
    operation: Operation | str,
    principal: Principal | None,
    existing: Record | None = None,
    proposed: Record | None = None,
    *,
    resource_id: str | None = None,
    table: Mapping[str, CollectionPolicy] = POLICY_TABLE,
) -> Decision:
    """Decide whether *principal* may perform *operation* on *collection*.

    Parameters
    ----------
    collection:
        Collection name, case-sensitive.  Unknown names are denied.
    operation:
        ``create``, ``read``, ``update`` or ``delete``.
    principal:
        The requester; ``None`` or an unresolved principal is denied
        everywhere.
    existing:
        Snapshot of the stored record (read/update/delete).
    proposed:
        The data to be written (create/update).  Ignored on delete.
    resource_id:
        Document id of the record; required by ``users`` rules.
    table:
        Policy table to consult.

    Raises
    ------
    ValueError
        If *operation* is not one of the four operations.
    """
    operation = Operation(operation)
    principal_id = principal.id if principal is not None else None
    existing = _as_record(existing)
    proposed = None if operation is Operation.DELETE else _as_record(proposed)

    policy = table.get(collection)
    if policy is None:
        return Decision(
            allowed=False,
            collection=collection,
            operation=operation,
            principal_id=principal_id,
            failed_condition=UNKNOWN_COLLECTION,
            denial=(
                DenialKind.FORBIDDEN
                if is_authenticated(principal)
                else DenialKind.UNAUTHENTICATED
            ),
        )

    condition = policy.condition_for(operation)
    ctx = RequestContext(
        principal=principal,
        existing=existing,
        proposed=proposed,
        resource_id=resource_id,
    )
    outcome = condition.evaluate(ctx)
    if outcome.passed:
        return Decision(
            allowed=True,
            collection=collection,
            operation=operation,
            principal_id=principal_id,
        )

    if not is_authenticated(principal):
        denial = DenialKind.UNAUTHENTICATED
    elif outcome.violations:
        denial = DenialKind.VALIDATION_FAILED
    elif (
        existing is None
        and operation is not Operation.CREATE
        and "existing" in condition.reads
    ):
        denial = DenialKind.NOT_FOUND
    else:
        denial = DenialKind.FORBIDDEN

    return Decision(
        allowed=False,
        collection=collection,
        operation=operation,
        principal_id=principal_id,
        failed_condition=outcome.failed_condition,
        denial=denial,
        violations=outcome.violations,
    )


class AccessLevel(str, Enum):
    NONE = "none"
    READ = "read"
    WRITE = "write"
    ADMIN = "admin"


@dataclass(frozen=True)
class EffectivePermissions:
    can_read: bool
    can_write: bool
    can_delete: bool

    @property
    def level(self) -> AccessLevel:
        if self.can_delete:
            return AccessLevel.ADMIN
        if self.can_write:
            return AccessLevel.WRITE
        if self.can_read:
            return AccessLevel.READ
        return AccessLevel.NONE


class PolicyEngine:
    """Evaluates requests against the policy table.

    Parameters
    ----------
    resolver:
        Identity resolver used when a principal is passed as a plain id.
    decision_logger:
        Optional audit trail.  When provided, every decision is appended.
    strict_offers:
        Apply the extended Offer schema to offer writes.
    table:
        Explicit policy table; overrides ``strict_offers``.
    deny_message:
        Text carried by the errors :meth:`enforce` raises.
    """

    def __init__(
        self,
        resolver: IdentityResolver | None = None,
        decision_logger: DecisionLogger | None = None,
        strict_offers: bool = False,
        table: Mapping[str, CollectionPolicy] | None = None,
        deny_message: str = GENERIC_DENIAL,
    ) -> None:
        self._resolver = resolver
        self._deny_message = deny_message
        self._decision_logger = decision_logger
        if table is None:
            table = build_policy_table(strict_offers=True) if strict_offers else POLICY_TABLE
        self._table = table

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def principal(self, principal: Principal | str | None) -> Principal | None:
        """Resolve a plain principal id through the configured resolver.

        Raises
        ------
        ValueError
            If an id is given but no resolver is configured.
        """
        if principal is None or isinstance(principal, Principal):
            return principal
        if self._resolver is None:
            raise ValueError("PolicyEngine needs an identity resolver to resolve principal ids.")
        return resolve_principal(self._resolver, principal)

    def evaluate(
        self,
        collection: str,
        operation: Operation | str,
        principal: Principal | str | None,
        existing: Record | None = None,
        proposed: Record | None = None,
        *,
        resource_id: str | None = None,
    ) -> Decision:
        """Evaluate one request and record the decision.  Never raises on deny."""
        decision = evaluate(
            collection,
            operation,
            self.principal(principal),
            existing,
            proposed,
            resource_id=resource_id,
            table=self._table,
        )
        if decision.allowed:
            logger.debug(
                "ALLOW %s %s principal=%s",
                decision.operation.value,
                collection,
                decision.principal_id,
            )
        else:
            logger.info(
                "DENY %s %s principal=%s denial=%s condition=%s",
                decision.operation.value,
                collection,
                decision.principal_id,
                decision.denial.value if decision.denial else None,
                decision.failed_condition,
            )
        if self._decision_logger is not None:
            self._decision_logger.log_decision(decision)
        return decision

    def enforce(
        self,
        collection: str,
        operation: Operation | str,
        principal: Principal | str | None,
        existing: Record | None = None,
        proposed: Record | None = None,
        *,
        resource_id: str | None = None,
    ) -> Decision:
        """Evaluate and raise the matching :class:`AccessControlError` on deny.

        Raises
        ------
        UnauthenticatedError, ForbiddenError, ValidationFailedError, NotFoundError
            When the request is denied.  The message is always generic.
        """
        decision = self.evaluate(
            collection, operation, principal, existing, proposed, resource_id=resource_id
        )
        error = decision.to_error(self._deny_message)
        if error is not None:
            raise error
        return decision

    # ------------------------------------------------------------------
    # Application-layer helpers
    # ------------------------------------------------------------------

    def effective_permissions(
        self,
        collection: str,
        principal: Principal | str | None,
        existing: Record | None,
        *,
        resource_id: str | None = None,
    ) -> EffectivePermissions:
        """What *principal* may do with an existing record.

        Write access is judged by an update that re-submits the record
        unchanged, so schema-checked collections see valid proposed data.
        """
        resolved = self.principal(principal)
        return EffectivePermissions(
            can_read=self._allowed(collection, Operation.READ, resolved, existing, None, resource_id),
            can_write=self._allowed(
                collection, Operation.UPDATE, resolved, existing, existing, resource_id
            ),
            can_delete=self._allowed(collection, Operation.DELETE, resolved, existing, None, resource_id),
        )

    def filter_accessible(
        self,
        collection: str,
        principal: Principal | str | None,
        records: Iterable[R],
        id_field: str | None = None,
    ) -> list[R]:
        """Keep only the records *principal* may read, preserving order.

        *id_field* names the record key holding its document id, for
        collections whose rules compare against it (``users``).
        """
        resolved = self.principal(principal)
        return [
            record
            for record in records
            if self._allowed(
                collection,
                Operation.READ,
                resolved,
                record,
                None,
                _record_id(record, id_field),
            )
        ]

    def _allowed(
        self,
        collection: str,
        operation: Operation,
        principal: Principal | None,
        existing: Record | None,
        proposed: Record | None,
        resource_id: str | None,
    ) -> bool:
        return evaluate(
            collection,
            operation,
            principal,
            existing,
            proposed,
            resource_id=resource_id,
            table=self._table,
        ).allowed

    @property
    def table(self) -> Mapping[str, CollectionPolicy]:
        return self._table

    @property
    def decision_logger(self) -> DecisionLogger | None:
        return self._decision_logger
