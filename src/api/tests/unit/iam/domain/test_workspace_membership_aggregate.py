"""Unit tests for the WorkspaceMembership aggregate."""

import pytest

from iam.domain.aggregates import WorkspaceMembership
from iam.domain.value_objects import SubjectId, WorkspaceId, WorkspaceRole


@pytest.fixture
def membership() -> WorkspaceMembership:
    return WorkspaceMembership.create(
        subject_id=SubjectId.generate(),
        workspace_id=WorkspaceId.generate(),
        role=WorkspaceRole.VIEWER,
        invited_by=SubjectId.generate(),
    )


class TestCreate:
    """Tests for the create factory."""

    def test_creates_active_membership(self, membership):
        """New memberships are active with the requested role."""
        assert membership.is_active
        assert membership.role is WorkspaceRole.VIEWER


class TestChangeRole:
    """Tests for change_role."""

    def test_returns_previous_role(self, membership):
        """change_role reports the role it replaced."""
        previous = membership.change_role(WorkspaceRole.EDITOR)
        assert previous is WorkspaceRole.VIEWER
        assert membership.role is WorkspaceRole.EDITOR

    def test_inactive_membership_cannot_change_role(self, membership):
        """Role is mutable only while active."""
        membership.deactivate()
        with pytest.raises(ValueError):
            membership.change_role(WorkspaceRole.ADMIN)
        assert membership.role is WorkspaceRole.VIEWER


class TestDeactivateAndReactivate:
    """Tests for the soft-delete lifecycle."""

    def test_deactivate_keeps_row_data(self, membership):
        """Deactivation only flips the active flag."""
        membership.deactivate()
        assert not membership.is_active
        assert membership.role is WorkspaceRole.VIEWER

    def test_double_deactivate_fails(self, membership):
        """An inactive membership cannot be deactivated again."""
        membership.deactivate()
        with pytest.raises(ValueError):
            membership.deactivate()

    def test_reactivate_uses_new_role_not_stale_one(self, membership):
        """Reactivation takes the freshly specified role."""
        inviter = SubjectId.generate()
        membership.deactivate()

        membership.reactivate(role=WorkspaceRole.EDITOR, invited_by=inviter)

        assert membership.is_active
        assert membership.role is WorkspaceRole.EDITOR
        assert membership.invited_by == inviter

    def test_reactivate_active_membership_fails(self, membership):
        """Only inactive memberships can be reactivated."""
        with pytest.raises(ValueError):
            membership.reactivate(role=WorkspaceRole.EDITOR, invited_by=None)
