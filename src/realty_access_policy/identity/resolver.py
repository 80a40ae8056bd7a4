"""Identity resolution: principal identifier to :class:`Profile`.

Resolvers are read-only from the policy core's perspective.  A missing
profile is signalled with :class:`ProfileNotFoundError`;
:func:`resolve_principal` turns that into an unresolved principal so the
downstream predicates fail closed.

Example
-------
>>> resolver = InMemoryIdentityResolver({"A1": {"role": "agent"}})
>>> resolve_principal(resolver, "A1").role
<Role.AGENT: 'agent'>
>>> resolve_principal(resolver, "ghost").is_resolved
False
"""
from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Mapping

from realty_access_policy.errors import ProfileNotFoundError
from realty_access_policy.identity.profile import Principal, Profile

logger = logging.getLogger(__name__)


class IdentityResolver(ABC):
    """Abstract source of principal profiles."""

    @abstractmethod
    def resolve(self, principal_id: str) -> Profile:
        """Return the profile for *principal_id*.

        Raises
        ------
        ProfileNotFoundError
            When no profile exists for the identifier.
        """


class InMemoryIdentityResolver(IdentityResolver):
    """Dict-backed resolver, mostly for tests, the CLI and embedded use.

    Parameters
    ----------
    profiles:
        Mapping of principal id to either a :class:`Profile` or a raw
        ``users`` record accepted by :meth:`Profile.from_record`.  Records
        are validated eagerly.
    """

    def __init__(
        self,
        profiles: Mapping[str, Profile | Mapping[str, object]] | None = None,
    ) -> None:
        self._profiles: dict[str, Profile] = {}
        for principal_id, value in (profiles or {}).items():
            self.add(principal_id, value)

    def add(self, principal_id: str, profile: Profile | Mapping[str, object]) -> None:
        """Register or replace the profile for *principal_id*."""
        if not isinstance(profile, Profile):
            profile = Profile.from_record(profile)
        self._profiles[principal_id] = profile

    def resolve(self, principal_id: str) -> Profile:
        try:
            return self._profiles[principal_id]
        except KeyError:
            raise ProfileNotFoundError(principal_id) from None

    def __contains__(self, principal_id: object) -> bool:
        return principal_id in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)


class CachedIdentityResolver(IdentityResolver):
    """Caching wrapper around another resolver.

    Profiles are fetched on first use and served from the cache until
    :meth:`refresh` or :meth:`invalidate` is called.  Failures of the
    wrapped resolver are recorded on :attr:`last_error` instead of being
    swallowed; :class:`ProfileNotFoundError` is still re-raised so the
    caller can fail closed.

    Parameters
    ----------
    inner:
        The resolver that owns the backing store.
    """

    def __init__(self, inner: IdentityResolver) -> None:
        self._inner = inner
        self._cache: dict[str, Profile] = {}
        self._lock = threading.Lock()
        self._last_error: Exception | None = None

    def resolve(self, principal_id: str) -> Profile:
        with self._lock:
            cached = self._cache.get(principal_id)
        if cached is not None:
            return cached
        return self.refresh(principal_id)

    def refresh(self, principal_id: str) -> Profile:
        """Re-fetch *principal_id* from the wrapped resolver, bypassing the cache."""
        try:
            profile = self._inner.resolve(principal_id)
        except Exception as exc:
            with self._lock:
                self._cache.pop(principal_id, None)
                self._last_error = exc
            raise
        with self._lock:
            self._cache[principal_id] = profile
            self._last_error = None
        return profile

    def invalidate(self, principal_id: str | None = None) -> None:
        """Drop one cached profile, or all of them when *principal_id* is None."""
        with self._lock:
            if principal_id is None:
                self._cache.clear()
            else:
                self._cache.pop(principal_id, None)

    @property
    def last_error(self) -> Exception | None:
        """The most recent failure of the wrapped resolver, if any."""
        return self._last_error

    @property
    def cached_ids(self) -> list[str]:
        with self._lock:
            return sorted(self._cache)


def resolve_principal(
    resolver: IdentityResolver,
    principal_id: str | None,
) -> Principal | None:
    """Build a :class:`Principal` for *principal_id*.

    Returns ``None`` when no identifier was supplied (unauthenticated
    request) and a principal with ``profile=None`` when the resolver has
    no profile for it.
    """
    if principal_id is None:
        return None
    try:
        profile = resolver.resolve(principal_id)
    except ProfileNotFoundError:
        logger.debug("No profile for principal %s; treating as unauthenticated", principal_id)
        return Principal(id=principal_id, profile=None)
    return Principal(id=principal_id, profile=profile)
