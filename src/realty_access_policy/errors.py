"""Error taxonomy for access-control failures.

Every error renders as the same generic denial text so that callers can
surface ``str(exc)`` to end users without revealing which predicate
failed, whether a record exists, or who owns it.  The failing condition
is kept on :attr:`AccessControlError.failed_condition` for logs only.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from realty_access_policy.schemas.validators import FieldViolation

GENERIC_DENIAL: str = "Access denied."


class AccessControlError(Exception):
    """Base class for every denial raised by this package.

    Attributes
    ----------
    failed_condition:
        Name of the condition that failed, for internal observability.
    """

    def __init__(
        self,
        failed_condition: str | None = None,
        message: str = GENERIC_DENIAL,
    ) -> None:
        self.failed_condition = failed_condition
        super().__init__(message)


class UnauthenticatedError(AccessControlError):
    """No resolvable principal accompanied the request."""


class ForbiddenError(AccessControlError):
    """The principal is authenticated but a predicate evaluated false."""


class ValidationFailedError(AccessControlError):
    """Proposed data was rejected by a schema validator.

    Attributes
    ----------
    violations:
        The field violations reported by the validator.
    """

    def __init__(
        self,
        failed_condition: str | None = None,
        violations: list[FieldViolation] | None = None,
        message: str = GENERIC_DENIAL,
    ) -> None:
        self.violations: list[FieldViolation] = list(violations or [])
        super().__init__(failed_condition, message)


class NotFoundError(AccessControlError):
    """A profile or referenced record does not exist."""


class ProfileNotFoundError(NotFoundError):
    """Raised by identity resolvers when no profile exists for an identifier."""

    def __init__(self, principal_id: str) -> None:
        self.principal_id = principal_id
        super().__init__("profile_exists")
