"""Tests for identity/profile.py and identity/resolver.py."""
from __future__ import annotations

import threading

import pytest

from realty_access_policy.errors import NotFoundError, ProfileNotFoundError
from realty_access_policy.identity.profile import (
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


class _FlakyResolver(IdentityResolver):
    """Fails the first *failures* calls, then delegates."""

    def __init__(self, inner: IdentityResolver, failures: int) -> None:
        self.inner = inner
        self.failures = failures
        self.calls = 0

    def resolve(self, principal_id: str) -> Profile:
        self.calls += 1
        if self.calls <= self.failures:
            raise ConnectionError("profile store unavailable")
        return self.inner.resolve(principal_id)


@pytest.fixture()
def store() -> InMemoryIdentityResolver:
    return InMemoryIdentityResolver(
        {
            "A1": {"role": "agent", "clientIds": {"C1": True}},
            "C1": Profile(Role.BUYER, agent_id="A1"),
        }
    )


# ---------------------------------------------------------------------------
# Profile / Principal
# ---------------------------------------------------------------------------


class TestProfile:
    def test_role_coerced_from_string(self) -> None:
        assert Profile("seller").role is Role.SELLER  # type: ignore[arg-type]

    def test_invalid_role(self) -> None:
        with pytest.raises(ValueError):
            Profile("admin")  # type: ignore[arg-type]

    def test_role_is_case_sensitive(self) -> None:
        with pytest.raises(ValueError):
            Profile("Agent")  # type: ignore[arg-type]

    def test_from_record(self) -> None:
        profile = Profile.from_record({"role": "agent", "clientIds": {"C1": True}, "name": "Ana"})
        assert profile.role is Role.AGENT
        assert profile.has_client("C1")
        assert profile.agent_id is None

    def test_from_record_client(self) -> None:
        profile = Profile.from_record({"role": "buyer", "agentId": "A1"})
        assert profile.agent_id == "A1"
        assert not profile.has_client("C1")

    def test_from_record_missing_role(self) -> None:
        with pytest.raises(ValueError):
            Profile.from_record({"agentId": "A1"})

    def test_from_record_bad_client_ids(self) -> None:
        with pytest.raises(ValueError):
            Profile.from_record({"role": "agent", "clientIds": ["C1"]})

    def test_client_ids_are_read_only(self) -> None:
        source = {"C1": True}
        profile = Profile(Role.AGENT, client_ids=source)
        source["C2"] = True
        assert not profile.has_client("C2")
        with pytest.raises(TypeError):
            profile.client_ids["C3"] = True  # type: ignore[index]

    def test_validate_user_role(self) -> None:
        assert validate_user_role("agent")
        assert validate_user_role("buyer")
        assert validate_user_role("seller")
        assert not validate_user_role("admin")
        assert not validate_user_role(None)


class TestPrincipal:
    def test_resolved(self) -> None:
        principal = Principal("A1", Profile(Role.AGENT))
        assert principal.is_resolved
        assert principal.role is Role.AGENT

    def test_unresolved(self) -> None:
        principal = Principal("ghost")
        assert not principal.is_resolved
        assert principal.role is None

    def test_hashable_with_clients(self) -> None:
        agent = Principal("A1", Profile(Role.AGENT, client_ids={"C1": True}))
        same = Principal("A1", Profile(Role.AGENT, client_ids={"C1": True}))
        assert hash(agent) == hash(same)
        assert len({agent, same, Principal("ghost")}) == 2

    def test_equality_still_compares_clients(self) -> None:
        with_client = Profile(Role.AGENT, client_ids={"C1": True})
        assert with_client != Profile(Role.AGENT)


# ---------------------------------------------------------------------------
# InMemoryIdentityResolver
# ---------------------------------------------------------------------------


class TestInMemoryResolver:
    def test_resolve(self, store: InMemoryIdentityResolver) -> None:
        assert store.resolve("A1").role is Role.AGENT
        assert store.resolve("C1").agent_id == "A1"

    def test_missing(self, store: InMemoryIdentityResolver) -> None:
        with pytest.raises(ProfileNotFoundError) as exc_info:
            store.resolve("ghost")
        assert exc_info.value.principal_id == "ghost"
        assert isinstance(exc_info.value, NotFoundError)

    def test_invalid_record_rejected_eagerly(self) -> None:
        with pytest.raises(ValueError):
            InMemoryIdentityResolver({"X": {"role": "landlord"}})

    def test_add_and_len(self, store: InMemoryIdentityResolver) -> None:
        store.add("S1", {"role": "seller", "agentId": "A1"})
        assert "S1" in store
        assert len(store) == 3


class TestResolvePrincipal:
    def test_none_id(self, store: InMemoryIdentityResolver) -> None:
        assert resolve_principal(store, None) is None

    def test_found(self, store: InMemoryIdentityResolver) -> None:
        principal = resolve_principal(store, "A1")
        assert principal is not None and principal.role is Role.AGENT

    def test_not_found_fails_closed(self, store: InMemoryIdentityResolver) -> None:
        principal = resolve_principal(store, "ghost")
        assert principal == Principal("ghost", None)


# ---------------------------------------------------------------------------
# CachedIdentityResolver
# ---------------------------------------------------------------------------


class TestCachedResolver:
    def test_caches_after_first_fetch(self, store: InMemoryIdentityResolver) -> None:
        cached = CachedIdentityResolver(store)
        first = cached.resolve("A1")
        store.add("A1", {"role": "buyer", "agentId": "A9"})
        assert cached.resolve("A1") is first
        assert cached.cached_ids == ["A1"]

    def test_refresh_refetches(self, store: InMemoryIdentityResolver) -> None:
        cached = CachedIdentityResolver(store)
        cached.resolve("A1")
        store.add("A1", {"role": "buyer", "agentId": "A9"})
        assert cached.refresh("A1").role is Role.BUYER
        assert cached.resolve("A1").role is Role.BUYER

    def test_invalidate_one(self, store: InMemoryIdentityResolver) -> None:
        cached = CachedIdentityResolver(store)
        cached.resolve("A1")
        cached.resolve("C1")
        cached.invalidate("A1")
        assert cached.cached_ids == ["C1"]

    def test_invalidate_all(self, store: InMemoryIdentityResolver) -> None:
        cached = CachedIdentityResolver(store)
        cached.resolve("A1")
        cached.invalidate()
        assert cached.cached_ids == []

    def test_not_found_propagates_and_is_recorded(self, store: InMemoryIdentityResolver) -> None:
        cached = CachedIdentityResolver(store)
        with pytest.raises(ProfileNotFoundError):
            cached.resolve("ghost")
        assert isinstance(cached.last_error, ProfileNotFoundError)
        assert resolve_principal(cached, "ghost") == Principal("ghost", None)

    def test_recovers_after_transient_failure(self, store: InMemoryIdentityResolver) -> None:
        cached = CachedIdentityResolver(_FlakyResolver(store, failures=1))
        with pytest.raises(ConnectionError):
            cached.resolve("A1")
        assert isinstance(cached.last_error, ConnectionError)
        assert cached.resolve("A1").role is Role.AGENT
        assert cached.last_error is None

    def test_concurrent_resolution(self, store: InMemoryIdentityResolver) -> None:
        cached = CachedIdentityResolver(store)
        results: list[Role] = []

        def worker() -> None:
            for _ in range(50):
                results.append(cached.resolve("A1").role)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert results == [Role.AGENT] * 400
