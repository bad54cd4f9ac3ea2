"""Tests for system role protection"""

import pytest

from wms.domain.exceptions import (RoleInUseException,
                                   SystemRoleModificationError)
from wms.infrastructure.persistence.models.permission import Permission
from wms.infrastructure.persistence.models.role import Role


def make_role(is_system_role: bool) -> Role:
    return Role(
        name="Admin" if is_system_role else "Auditor",
        description="original",
        is_system_role=is_system_role,
        tenant_id=None,
    )


def test_system_role_rejects_update_without_mutation():
    role = make_role(is_system_role=True)

    with pytest.raises(SystemRoleModificationError):
        role.update("someone", name="Renamed", description="changed")

    assert role.name == "Admin"
    assert role.description == "original"
    assert role.updated_at is None


def test_system_role_rejects_delete():
    role = make_role(is_system_role=True)

    with pytest.raises(SystemRoleModificationError):
        role.ensure_deletable(assigned_user_count=0)
    with pytest.raises(SystemRoleModificationError):
        role.mark_as_deleted("someone")

    assert not role.is_deleted


def test_system_role_rejects_permission_changes():
    role = make_role(is_system_role=True)
    permission = Permission(id="p1", name="Warehouses.View", resource="warehouse", action="read")

    with pytest.raises(SystemRoleModificationError):
        role.replace_permissions([permission], "someone")

    assert role.role_permissions == []


def test_custom_role_in_use_cannot_be_deleted():
    role = make_role(is_system_role=False)

    with pytest.raises(RoleInUseException) as exc_info:
        role.ensure_deletable(assigned_user_count=2)

    assert exc_info.value.details["user_count"] == 2


def test_custom_role_can_be_updated():
    role = make_role(is_system_role=False)

    role.update("admin", name="Inventory Auditor", description=None)

    assert role.name == "Inventory Auditor"
    assert role.updated_by == "admin"
