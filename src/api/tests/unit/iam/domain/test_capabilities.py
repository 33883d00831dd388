"""Golden-table tests for the static workspace capability table."""

import pytest

from iam.domain.capabilities import (
    ROLE_CAPABILITIES,
    capabilities_for,
    role_has_all,
    role_has_any,
    role_has_capability,
    role_satisfies_level,
)
from iam.domain.value_objects import Capability, PermissionLevel, WorkspaceRole

C = Capability

GOLDEN_TABLE: dict[WorkspaceRole, set[Capability]] = {
    WorkspaceRole.OWNER: {
        C.CREATE_RESOURCE,
        C.EDIT_RESOURCE,
        C.DELETE_RESOURCE,
        C.VIEW_RESOURCE,
        C.SHARE_RESOURCE,
        C.VIEW_SHARED_ONLY,
        C.MANAGE_MEMBERS,
        C.INVITE_MEMBERS,
        C.MANAGE_SETTINGS,
        C.DELETE_WORKSPACE,
    },
    WorkspaceRole.ADMIN: {
        C.CREATE_RESOURCE,
        C.EDIT_RESOURCE,
        C.DELETE_RESOURCE,
        C.VIEW_RESOURCE,
        C.SHARE_RESOURCE,
        C.VIEW_SHARED_ONLY,
        C.MANAGE_MEMBERS,
        C.INVITE_MEMBERS,
        C.MANAGE_SETTINGS,
    },
    WorkspaceRole.EDITOR: {
        C.CREATE_RESOURCE,
        C.EDIT_RESOURCE,
        C.DELETE_RESOURCE,
        C.VIEW_RESOURCE,
        C.SHARE_RESOURCE,
    },
    WorkspaceRole.VIEWER: {C.VIEW_RESOURCE},
    WorkspaceRole.GUEST: {C.VIEW_SHARED_ONLY},
}


class TestCapabilityTable:
    """Every (role, capability) cell must match the golden table."""

    @pytest.mark.parametrize("role", list(WorkspaceRole))
    @pytest.mark.parametrize("capability", list(Capability))
    def test_cell_matches_golden_table(self, role, capability):
        """role_has_capability agrees with the golden table for every cell."""
        expected = capability in GOLDEN_TABLE[role]
        assert role_has_capability(role, capability) is expected

    def test_every_role_has_an_entry(self):
        """The table covers all roles."""
        assert set(ROLE_CAPABILITIES) == set(WorkspaceRole)

    def test_capabilities_for_returns_frozenset(self):
        """Callers cannot mutate the table through the returned set."""
        assert isinstance(capabilities_for(WorkspaceRole.EDITOR), frozenset)

    def test_table_is_read_only(self):
        """The mapping itself cannot be modified."""
        with pytest.raises(TypeError):
            ROLE_CAPABILITIES[WorkspaceRole.GUEST] = frozenset()  # type: ignore[index]


class TestAnyAndAll:
    """Tests for multi-capability helpers."""

    def test_any_is_true_on_single_overlap(self):
        """VIEWER has VIEW_RESOURCE even if the other capability is missing."""
        assert role_has_any(WorkspaceRole.VIEWER, [C.EDIT_RESOURCE, C.VIEW_RESOURCE])

    def test_all_requires_every_capability(self):
        """VIEWER does not have both VIEW and EDIT."""
        assert not role_has_all(
            WorkspaceRole.VIEWER, [C.EDIT_RESOURCE, C.VIEW_RESOURCE]
        )

    def test_admin_lacks_delete_workspace(self):
        """ADMIN is everything but DELETE_WORKSPACE."""
        assert not role_has_all(WorkspaceRole.ADMIN, [C.DELETE_WORKSPACE])
        assert role_has_all(WorkspaceRole.OWNER, [C.DELETE_WORKSPACE])


class TestLevelMapping:
    """Tests for permission level to role coverage."""

    @pytest.mark.parametrize(
        ("role", "level", "expected"),
        [
            (WorkspaceRole.OWNER, PermissionLevel.OWNER, True),
            (WorkspaceRole.ADMIN, PermissionLevel.OWNER, True),
            (WorkspaceRole.EDITOR, PermissionLevel.OWNER, False),
            (WorkspaceRole.EDITOR, PermissionLevel.WRITE, True),
            (WorkspaceRole.VIEWER, PermissionLevel.WRITE, False),
            (WorkspaceRole.VIEWER, PermissionLevel.READ, True),
            (WorkspaceRole.GUEST, PermissionLevel.READ, False),
        ],
    )
    def test_role_satisfies_level(self, role, level, expected):
        """READ maps to VIEW, WRITE to EDIT, OWNER to delete plus member management."""
        assert role_satisfies_level(role, level) is expected
