"""Tests for rules/conditions.py — condition trees and request context."""
from __future__ import annotations

import pytest

from realty_access_policy.identity.profile import Principal, Profile, Role
from realty_access_policy.rules.conditions import (
    DENY_ALL,
    RequestContext,
    all_of,
    any_of,
    check,
)

PASS = check("pass", lambda ctx: True)
FAIL_A = check("fail_a", lambda ctx: False, reads={"existing"})
FAIL_B = check("fail_b", lambda ctx: False, reads={"proposed"})


@pytest.fixture()
def ctx() -> RequestContext:
    return RequestContext(
        principal=Principal("A1", Profile(Role.AGENT)),
        existing={"agentId": "A1"},
        proposed={"agentId": "A2"},
    )


class TestRequestContext:
    def test_value(self, ctx: RequestContext) -> None:
        assert ctx.value("existing", "agentId") == "A1"
        assert ctx.value("proposed", "missing") is None

    def test_value_without_record(self) -> None:
        assert RequestContext(principal=None).value("existing", "agentId") is None

    def test_owns(self, ctx: RequestContext) -> None:
        assert ctx.owns("existing", "agentId")
        assert not ctx.owns("proposed", "agentId")

    def test_principal_id(self, ctx: RequestContext) -> None:
        assert ctx.principal_id == "A1"
        assert RequestContext(principal=None).principal_id is None


class TestAllOf:
    def test_passes(self, ctx: RequestContext) -> None:
        assert all_of(PASS, PASS).evaluate(ctx).passed

    def test_reports_first_failure(self, ctx: RequestContext) -> None:
        outcome = all_of(PASS, FAIL_A, FAIL_B).evaluate(ctx)
        assert not outcome
        assert outcome.failed_condition == "fail_a"

    def test_short_circuits(self, ctx: RequestContext) -> None:
        calls: list[str] = []

        def spy(ctx: RequestContext) -> bool:
            calls.append("spy")
            return True

        all_of(FAIL_A, check("spy", spy)).evaluate(ctx)
        assert calls == []

    def test_reads_union(self) -> None:
        assert all_of(FAIL_A, FAIL_B).reads == frozenset({"existing", "proposed"})


class TestAnyOf:
    def test_passes_when_one_passes(self, ctx: RequestContext) -> None:
        assert any_of(FAIL_A, PASS).evaluate(ctx).passed

    def test_failure_reported_under_own_name(self, ctx: RequestContext) -> None:
        outcome = any_of(FAIL_A, FAIL_B, name="either").evaluate(ctx)
        assert outcome.failed_condition == "either"

    def test_callable(self, ctx: RequestContext) -> None:
        assert any_of(PASS)(ctx) is True


def test_deny_all(ctx: RequestContext) -> None:
    outcome = DENY_ALL.evaluate(ctx)
    assert not outcome.passed
    assert outcome.failed_condition == "no_client_write_path"
