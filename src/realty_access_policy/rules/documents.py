"""Per-document permission lists.

A Document record embeds a ``permissions`` map with four member lists and
an ``isPublic`` flag::

    {
        "isPublic": false,
        "canView": ["u1", "u2"],
        "canEdit": ["u1"],
        "canShare": [],
        "canDelete": ["u1"]
    }

These lists are independent of roles and ownership.  A principal may
appear in several lists at once; a missing list is treated as empty.

Example
-------
>>> doc = {"permissions": {"isPublic": True, "canView": [], "canEdit": ["u1"]}}
>>> check_permission(doc, "anyUser", DocumentPermission.CAN_VIEW)
True
>>> check_permission(doc, "u2", "canEdit")
False
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum


class DocumentPermission(str, Enum):
    """The four permission lists of a document."""

    CAN_VIEW = "canView"
    CAN_EDIT = "canEdit"
    CAN_SHARE = "canShare"
    CAN_DELETE = "canDelete"


@dataclass(frozen=True)
class PermissionSet:
    """Typed view of a document's ``permissions`` map."""

    can_view: frozenset[str] = field(default_factory=frozenset)
    can_edit: frozenset[str] = field(default_factory=frozenset)
    can_share: frozenset[str] = field(default_factory=frozenset)
    can_delete: frozenset[str] = field(default_factory=frozenset)
    is_public: bool = False

    @classmethod
    def from_document(cls, document: Mapping[str, object] | None) -> PermissionSet:
        """Read the ``permissions`` map of *document*; anything missing is empty."""
        raw = document.get("permissions") if isinstance(document, Mapping) else None
        if not isinstance(raw, Mapping):
            return cls()
        return cls(
            can_view=_members(raw.get("canView")),
            can_edit=_members(raw.get("canEdit")),
            can_share=_members(raw.get("canShare")),
            can_delete=_members(raw.get("canDelete")),
            is_public=raw.get("isPublic") is True,
        )

    def members(self, permission: DocumentPermission | str) -> frozenset[str]:
        match DocumentPermission(permission):
            case DocumentPermission.CAN_VIEW:
                return self.can_view
            case DocumentPermission.CAN_EDIT:
                return self.can_edit
            case DocumentPermission.CAN_SHARE:
                return self.can_share
            case DocumentPermission.CAN_DELETE:
                return self.can_delete

    def to_dict(self) -> dict[str, object]:
        return {
            "isPublic": self.is_public,
            "canView": sorted(self.can_view),
            "canEdit": sorted(self.can_edit),
            "canShare": sorted(self.can_share),
            "canDelete": sorted(self.can_delete),
        }


def _members(raw: object) -> frozenset[str]:
    if isinstance(raw, (list, tuple, set, frozenset)):
        return frozenset(item for item in raw if isinstance(item, str))
    return frozenset()


def is_listed(
    document: Mapping[str, object] | None,
    principal_id: str | None,
    permission: DocumentPermission | str,
) -> bool:
    """True iff *principal_id* appears in the named permission list."""
    if principal_id is None:
        return False
    return principal_id in PermissionSet.from_document(document).members(permission)


def check_permission(
    document: Mapping[str, object] | None,
    principal_id: str | None,
    permission: DocumentPermission | str,
) -> bool:
    """Decide a single document permission.

    Public documents grant ``canView`` to everyone.  Otherwise the
    principal must appear in the named list.

    Raises
    ------
    ValueError
        If *permission* is not one of the four permission names.
    """
    permission = DocumentPermission(permission)
    permissions = PermissionSet.from_document(document)
    if permission is DocumentPermission.CAN_VIEW and permissions.is_public:
        return True
    return principal_id is not None and principal_id in permissions.members(permission)
