"""Tests for the document permission evaluator."""
from __future__ import annotations

import pytest

from realty_access_policy.rules.documents import (
    DocumentPermission,
    PermissionSet,
    check_permission,
    is_listed,
)


@pytest.fixture()
def document() -> dict[str, object]:
    return {
        "title": "Disclosure",
        "permissions": {
            "canView": ["C1", "A1"],
            "canEdit": ["A1"],
            "canShare": ["A1"],
            "canDelete": [],
            "isPublic": False,
        },
    }


class TestCheckPermission:
    def test_listed_viewer(self, document: dict[str, object]) -> None:
        assert check_permission(document, "C1", "canView")

    def test_unlisted_viewer(self, document: dict[str, object]) -> None:
        assert not check_permission(document, "C9", DocumentPermission.CAN_VIEW)

    def test_edit_requires_listing(self, document: dict[str, object]) -> None:
        assert check_permission(document, "A1", "canEdit")
        assert not check_permission(document, "C1", "canEdit")

    def test_empty_delete_list(self, document: dict[str, object]) -> None:
        assert not check_permission(document, "A1", "canDelete")

    def test_public_grants_view_only(self, document: dict[str, object]) -> None:
        document["permissions"]["isPublic"] = True  # type: ignore[index]
        assert check_permission(document, "anyone", "canView")
        assert check_permission(document, None, "canView")
        assert not check_permission(document, "anyone", "canEdit")
        assert not check_permission(document, "anyone", "canShare")
        assert not check_permission(document, "anyone", "canDelete")

    def test_truthy_is_public_is_not_public(self, document: dict[str, object]) -> None:
        document["permissions"]["isPublic"] = "true"  # type: ignore[index]
        assert not check_permission(document, "anyone", "canView")

    def test_missing_permissions_map(self) -> None:
        assert not check_permission({"title": "x"}, "A1", "canView")

    def test_missing_list_is_empty(self) -> None:
        assert not check_permission({"permissions": {"canView": ["A1"]}}, "A1", "canEdit")

    def test_none_document(self) -> None:
        assert not check_permission(None, "A1", "canView")

    def test_invalid_permission_name(self, document: dict[str, object]) -> None:
        with pytest.raises(ValueError):
            check_permission(document, "A1", "canPrint")


class TestIsListed:
    def test_public_does_not_count_as_listed(self, document: dict[str, object]) -> None:
        document["permissions"]["isPublic"] = True  # type: ignore[index]
        assert not is_listed(document, "anyone", "canView")

    def test_listed(self, document: dict[str, object]) -> None:
        assert is_listed(document, "A1", DocumentPermission.CAN_SHARE)

    def test_none_principal(self, document: dict[str, object]) -> None:
        assert not is_listed(document, None, "canView")


class TestPermissionSet:
    def test_from_document(self, document: dict[str, object]) -> None:
        permissions = PermissionSet.from_document(document)
        assert permissions.can_view == frozenset({"A1", "C1"})
        assert permissions.can_delete == frozenset()
        assert permissions.is_public is False

    def test_non_string_members_ignored(self) -> None:
        permissions = PermissionSet.from_document({"permissions": {"canView": ["A1", 7, None]}})
        assert permissions.can_view == frozenset({"A1"})

    def test_to_dict_sorted(self, document: dict[str, object]) -> None:
        assert PermissionSet.from_document(document).to_dict()["canView"] == ["A1", "C1"]
