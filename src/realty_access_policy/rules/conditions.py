"""Composable conditions evaluated against a request context.

A policy rule is a tree of :class:`Condition` objects.  Leaves wrap a
single named predicate; :class:`AllOf` and :class:`AnyOf` combine them
with short-circuit AND / OR semantics.  Evaluation returns a
:class:`ConditionOutcome` that names the first failing conjunct, which is
what the engine records for observability.

Example
-------
>>> rule = all_of(
...     check("is_agent", lambda ctx: is_agent(ctx.principal)),
...     check("owns_proposed_agent_id", lambda ctx: ctx.owns("proposed", "agentId"),
...           reads={"proposed"}),
... )
>>> rule.evaluate(ctx).failed_condition
'owns_proposed_agent_id'
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from realty_access_policy.rules.roles import is_owner

if TYPE_CHECKING:
    from realty_access_policy.identity.profile import Principal
    from realty_access_policy.schemas.validators import FieldViolation

Source = Literal["existing", "proposed"]


@dataclass(frozen=True)
class RequestContext:
    """Everything a condition may look at.

    Attributes
    ----------
    principal:
        The requester, or ``None`` for an unauthenticated request.
    existing:
        Snapshot of the stored record (read/update/delete).
    proposed:
        The data the request wants to write (create/update).
    resource_id:
        Document id of the record, used by the ``users`` collection.
    """

    principal: Principal | None
    existing: Mapping[str, object] | None = None
    proposed: Mapping[str, object] | None = None
    resource_id: str | None = None

    @property
    def principal_id(self) -> str | None:
        return self.principal.id if self.principal is not None else None

    def record(self, source: Source) -> Mapping[str, object] | None:
        return self.existing if source == "existing" else self.proposed

    def value(self, source: Source, name: str) -> object:
        """Return ``record[name]`` or ``None`` when the record or field is absent."""
        record = self.record(source)
        if not isinstance(record, Mapping):
            return None
        return record.get(name)

    def owns(self, source: Source, name: str) -> bool:
        return is_owner(self.principal, self.value(source, name))


@dataclass(frozen=True)
class ConditionOutcome:
    passed: bool
    failed_condition: str | None = None
    violations: tuple[FieldViolation, ...] = ()

    def __bool__(self) -> bool:
        return self.passed


_PASSED = ConditionOutcome(passed=True)


class Condition(ABC):
    """Abstract base for a named, side-effect-free check."""

    name: str

    @abstractmethod
    def evaluate(self, ctx: RequestContext) -> ConditionOutcome:
        """Evaluate against *ctx*."""

    @property
    @abstractmethod
    def reads(self) -> frozenset[str]:
        """The context sources (``existing``, ``proposed``, ``resource_id``) consulted."""

    def __call__(self, ctx: RequestContext) -> bool:
        return self.evaluate(ctx).passed


@dataclass(frozen=True)
class Check(Condition):
    """Leaf condition wrapping one predicate."""

    name: str
    predicate: Callable[[RequestContext], bool]
    sources: frozenset[str] = field(default_factory=frozenset)

    def evaluate(self, ctx: RequestContext) -> ConditionOutcome:
        if self.predicate(ctx):
            return _PASSED
        return ConditionOutcome(passed=False, failed_condition=self.name)

    @property
    def reads(self) -> frozenset[str]:
        return self.sources


@dataclass(frozen=True)
class AllOf(Condition):
    """Passes when every member passes; reports the first failure."""

    conditions: tuple[Condition, ...]
    name: str = "all_of"

    def evaluate(self, ctx: RequestContext) -> ConditionOutcome:
        for condition in self.conditions:
            outcome = condition.evaluate(ctx)
            if not outcome.passed:
                return outcome
        return _PASSED

    @property
    def reads(self) -> frozenset[str]:
        return frozenset().union(*(c.reads for c in self.conditions))


@dataclass(frozen=True)
class AnyOf(Condition):
    """Passes when any member passes; a failure is reported under this node's name."""

    conditions: tuple[Condition, ...]
    name: str = "any_of"

    def evaluate(self, ctx: RequestContext) -> ConditionOutcome:
        for condition in self.conditions:
            if condition.evaluate(ctx).passed:
                return _PASSED
        return ConditionOutcome(passed=False, failed_condition=self.name)

    @property
    def reads(self) -> frozenset[str]:
        return frozenset().union(*(c.reads for c in self.conditions))


def check(
    name: str,
    predicate: Callable[[RequestContext], bool],
    reads: set[str] | frozenset[str] | None = None,
) -> Check:
    return Check(name=name, predicate=predicate, sources=frozenset(reads or ()))


def all_of(*conditions: Condition, name: str = "all_of") -> AllOf:
    return AllOf(conditions=tuple(conditions), name=name)


def any_of(*conditions: Condition, name: str = "any_of") -> AnyOf:
    return AnyOf(conditions=tuple(conditions), name=name)



DENY_ALL: Check = check("no_client_write_path", lambda ctx: False)
