"""Static policy table: collection name to its read/create/update/delete rules.

Every rule is a condition tree assembled from the role, relationship,
document-permission and schema predicates.  Collection names, field names
and enum values must match the stored data exactly; the enforcing database
evaluates the same predicates on every request.

Notation used in the comments below: ``E`` is the existing record snapshot,
``P`` the proposed data.

Example
-------
>>> policy = POLICY_TABLE["offers"]
>>> policy.condition_for(Operation.DELETE).evaluate(ctx).passed
True
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from realty_access_policy.identity.profile import CLIENT_ROLES
from realty_access_policy.rules.conditions import (
    DENY_ALL,
    Condition,
    ConditionOutcome,
    RequestContext,
    Source,
    all_of,
    any_of,
    check,
)
from realty_access_policy.rules.documents import (
    DocumentPermission,
    PermissionSet,
    is_listed,
)
from realty_access_policy.rules.roles import (
    has_resource_access,
    is_agent,
    is_authenticated,
    is_owner,
)
from realty_access_policy.schemas.validators import RecordKind, RecordSchema, schema_for


class Operation(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


class CollectionFamily(str, Enum):
    """Groups of collections that share a rule shape."""

    USER_PROFILE = "user_profile"
    TRANSACTIONAL = "transactional"
    AGENT_MANAGED = "agent_managed"
    COUNTER_OFFER = "counter_offer"
    DOCUMENT = "document"
    TEMPLATE = "template"
    AGENT_OWNED = "agent_owned"
    DOCUMENT_SHARE = "document_share"
    DOCUMENT_ANALYTICS = "document_analytics"
    PUBLIC_MARKET = "public_market"
    LEGACY = "legacy"
    ADMIN = "admin"


# ---------------------------------------------------------------------------
# Leaf conditions
# ---------------------------------------------------------------------------


AUTHENTICATED = check("is_authenticated", lambda ctx: is_authenticated(ctx.principal))
AGENT = check("is_agent", lambda ctx: is_agent(ctx.principal))


def owns(source: Source, field_name: str) -> Condition:
    """``isOwner(source.field_name)``."""
    return check(
        f"owns_{source}_{field_name}",
        lambda ctx: ctx.owns(source, field_name),
        reads={source},
    )


def resource_access(source: Source) -> Condition:
    """``hasResourceAccess(source.agentId, source.clientId)``."""
    return check(
        f"has_resource_access_{source}",
        lambda ctx: has_resource_access(
            ctx.principal, ctx.value(source, "agentId"), ctx.value(source, "clientId")
        ),
        reads={source},
    )


def listed(permission: DocumentPermission) -> Condition:
    """Principal id appears in ``E.permissions[permission]``."""
    return check(
        f"listed_in_{permission.value}",
        lambda ctx: is_listed(ctx.existing, ctx.principal_id, permission),
        reads={"existing"},
    )


PUBLIC_DOCUMENT = check(
    "document_is_public",
    lambda ctx: PermissionSet.from_document(ctx.existing).is_public,
    reads={"existing"},
)

OWNS_RESOURCE_ID = check(
    "owns_resource_id",
    lambda ctx: is_owner(ctx.principal, ctx.resource_id),
    reads={"resource_id"},
)


def _in_shared_with(ctx: RequestContext) -> bool:
    shared = ctx.value("existing", "sharedWith")
    return (
        ctx.principal_id is not None
        and isinstance(shared, (list, tuple, set, frozenset))
        and ctx.principal_id in shared
    )


LISTED_IN_SHARED_WITH = check("listed_in_shared_with", _in_shared_with, reads={"existing"})


def _is_agent_of_client_profile(ctx: RequestContext) -> bool:
    role = ctx.value("existing", "role")
    return role in {r.value for r in CLIENT_ROLES} and ctx.owns("existing", "agentId")


AGENT_OF_CLIENT_PROFILE = check(
    "is_agent_of_client_profile", _is_agent_of_client_profile, reads={"existing"}
)


@dataclass(frozen=True)
class ValidRecord(Condition):
    """Proposed data passes the schema of its record kind."""

    schema: RecordSchema

    @property
    def name(self) -> str:  # type: ignore[override]
        return f"valid_{self.schema.kind.value}"

    def evaluate(self, ctx: RequestContext) -> ConditionOutcome:
        report = self.schema.validate(ctx.proposed)
        if report.valid:
            return ConditionOutcome(passed=True)
        return ConditionOutcome(
            passed=False, failed_condition=self.name, violations=report.violations
        )

    @property
    def reads(self) -> frozenset[str]:
        return frozenset(["proposed"])


# ---------------------------------------------------------------------------
# Collection policies
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CollectionPolicy:
    """The four rules governing one collection."""

    collection: str
    family: CollectionFamily
    read: Condition
    create: Condition
    update: Condition
    delete: Condition

    def condition_for(self, operation: Operation | str) -> Condition:
        match Operation(operation):
            case Operation.READ:
                return self.read
            case Operation.CREATE:
                return self.create
            case Operation.UPDATE:
                return self.update
            case Operation.DELETE:
                return self.delete


def _policy(
    collection: str,
    family: CollectionFamily,
    read: Condition,
    create: Condition,
    update: Condition | None = None,
    delete: Condition | None = None,
) -> CollectionPolicy:
    return CollectionPolicy(
        collection=collection,
        family=family,
        read=read,
        create=create,
        update=update if update is not None else create,
        delete=delete if delete is not None else create,
    )


def _users() -> CollectionPolicy:
    own_profile = all_of(AUTHENTICATED, OWNS_RESOURCE_ID)
    return _policy(
        "users",
        CollectionFamily.USER_PROFILE,
        read=any_of(
            own_profile,
            all_of(AGENT, AGENT_OF_CLIENT_PROFILE),
            name="profile_read_access",
        ),
        create=own_profile,
    )


def _transactional(collection: str, schema: RecordSchema) -> CollectionPolicy:
    valid = ValidRecord(schema)
    return _policy(
        collection,
        CollectionFamily.TRANSACTIONAL,
        read=all_of(AUTHENTICATED, resource_access("existing")),
        create=all_of(AGENT, valid, owns("proposed", "agentId")),
        update=all_of(AUTHENTICATED, resource_access("existing"), valid),
        delete=all_of(AGENT, owns("existing", "agentId")),
    )


def _agent_managed(collection: str) -> CollectionPolicy:
    write = all_of(AGENT, owns("proposed", "agentId"))
    return _policy(
        collection,
        CollectionFamily.AGENT_MANAGED,
        read=all_of(AUTHENTICATED, resource_access("existing")),
        create=write,
        update=write,
        delete=all_of(AGENT, owns("existing", "agentId")),
    )


def _counter_offers() -> CollectionPolicy:
    # Either party may originate or revise a counter-offer.
    return _policy(
        "counter_offers",
        CollectionFamily.COUNTER_OFFER,
        read=all_of(AUTHENTICATED, resource_access("existing")),
        create=all_of(AUTHENTICATED, resource_access("proposed")),
        update=all_of(AUTHENTICATED, resource_access("existing")),
        delete=all_of(AGENT, owns("existing", "agentId")),
    )


def _documents(schema: RecordSchema) -> CollectionPolicy:
    valid = ValidRecord(schema)
    return _policy(
        "documents",
        CollectionFamily.DOCUMENT,
        read=all_of(
            AUTHENTICATED,
            any_of(
                listed(DocumentPermission.CAN_VIEW),
                PUBLIC_DOCUMENT,
                resource_access("existing"),
                name="document_view_access",
            ),
        ),
        create=all_of(
            AUTHENTICATED,
            valid,
            any_of(
                owns("proposed", "agentId"),
                owns("proposed", "clientId"),
                name="owns_proposed_document",
            ),
        ),
        update=all_of(AUTHENTICATED, listed(DocumentPermission.CAN_EDIT), valid),
        delete=all_of(AUTHENTICATED, listed(DocumentPermission.CAN_DELETE)),
    )


def _open_read(collection: str, family: CollectionFamily) -> CollectionPolicy:
    return _policy(collection, family, read=AUTHENTICATED, create=AGENT)


def _agent_owned(collection: str) -> CollectionPolicy:
    # Writes, delete included, are checked against P; a delete carries no P.
    return _policy(
        collection,
        CollectionFamily.AGENT_OWNED,
        read=all_of(AUTHENTICATED, owns("existing", "agentId")),
        create=all_of(AGENT, owns("proposed", "agentId")),
    )


def _document_shares() -> CollectionPolicy:
    return _policy(
        "document_shares",
        CollectionFamily.DOCUMENT_SHARE,
        read=all_of(
            AUTHENTICATED,
            any_of(
                owns("existing", "agentId"),
                LISTED_IN_SHARED_WITH,
                name="share_read_access",
            ),
        ),
        create=all_of(AGENT, owns("proposed", "agentId")),
        delete=all_of(AGENT, owns("existing", "agentId")),
    )


def _document_analytics() -> CollectionPolicy:
    return _policy(
        "document_analytics",
        CollectionFamily.DOCUMENT_ANALYTICS,
        read=all_of(AUTHENTICATED, owns("existing", "agentId")),
        create=all_of(AGENT, owns("proposed", "agentId")),
        delete=all_of(AGENT, owns("existing", "agentId")),
    )


def _repair_estimates() -> CollectionPolicy:
    owner_only = all_of(AUTHENTICATED, owns("existing", "userId"))
    return _policy("repair_estimates", CollectionFamily.LEGACY, read=owner_only, create=owner_only)


def _admin(collection: str, read: Condition) -> CollectionPolicy:
    # Writes happen server-side only.
    return _policy(collection, CollectionFamily.ADMIN, read=read, create=DENY_ALL)


_PUBLIC_MARKET_COLLECTIONS: tuple[str, ...] = (
    "market_data",
    "comparables",
    "market_trends",
    "market_forecasts",
)


def build_policy_table(strict_offers: bool = False) -> Mapping[str, CollectionPolicy]:
    """Build the read-only collection → policy mapping.

    Parameters
    ----------
    strict_offers:
        Use the extended Offer schema (non-negative deposits) for offer
        writes.  The enforcing database does not apply it, so leave this
        off when mirroring database behaviour.
    """
    policies: list[CollectionPolicy] = [
        _users(),
        _transactional("offers", schema_for(RecordKind.OFFER, strict=strict_offers)),
        _agent_managed("offer_comparisons"),
        _counter_offers(),
        _agent_managed("offer_documents"),
        _agent_managed("offer_workflows"),
        _transactional("negotiations", schema_for(RecordKind.NEGOTIATION)),
        _agent_managed("negotiation_strategies"),
        _agent_managed("appraisal_scenarios"),
        _agent_managed("negotiation_documents"),
        _agent_managed("market_analyses"),
        _agent_managed("risk_assessments"),
        _documents(schema_for(RecordKind.DOCUMENT)),
        _open_read("document_templates", CollectionFamily.TEMPLATE),
        _agent_owned("document_libraries"),
        _document_shares(),
        _document_analytics(),
        *(_open_read(name, CollectionFamily.PUBLIC_MARKET) for name in _PUBLIC_MARKET_COLLECTIONS),
        _agent_owned("market_alerts"),
        _agent_owned("market_reports"),
        _repair_estimates(),
        _admin("system_config", AUTHENTICATED),
        _admin("audit_logs", AGENT),
    ]
    return MappingProxyType({policy.collection: policy for policy in policies})


POLICY_TABLE: Mapping[str, CollectionPolicy] = build_policy_table()

GOVERNED_COLLECTIONS: tuple[str, ...] = tuple(POLICY_TABLE)
