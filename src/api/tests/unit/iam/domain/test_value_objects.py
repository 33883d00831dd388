"""Unit tests for IAM domain value objects."""

import pytest

from iam.domain.value_objects import (
    GrantStatus,
    MembershipId,
    PermissionLevel,
    ResourceGrantId,
    ResourceId,
    SubjectId,
    WorkspaceId,
    WorkspaceRole,
)


class TestIdentifiers:
    """Tests for ULID-based identifiers."""

    @pytest.mark.parametrize(
        "id_class", [SubjectId, ResourceId, WorkspaceId, ResourceGrantId]
    )
    def test_generate_round_trips_through_from_string(self, id_class):
        """Generated ids should be accepted by from_string."""
        generated = id_class.generate()
        assert id_class.from_string(generated.value) == generated

    @pytest.mark.parametrize(
        "id_class", [SubjectId, ResourceId, WorkspaceId, ResourceGrantId]
    )
    def test_from_string_rejects_invalid_ulid(self, id_class):
        """Non-ULID strings should raise ValueError naming the id type."""
        with pytest.raises(ValueError, match=f"Invalid {id_class.__name__}"):
            id_class.from_string("not-a-ulid")

    def test_str_returns_value(self):
        """str() should return the raw value."""
        subject_id = SubjectId.generate()
        assert str(subject_id) == subject_id.value

    def test_generated_ids_are_unique(self):
        """Two generated ids should never collide."""
        assert MembershipId.generate() != MembershipId.generate()

    def test_ids_are_immutable(self):
        """Identifiers are frozen dataclasses."""
        resource_id = ResourceId.generate()
        with pytest.raises(AttributeError):
            resource_id.value = "other"  # type: ignore[misc]


class TestPermissionLevel:
    """Tests for PermissionLevel ordering."""

    def test_ordinals_follow_read_write_owner(self):
        """READ < WRITE < OWNER."""
        assert (
            PermissionLevel.READ.ordinal
            < PermissionLevel.WRITE.ordinal
            < PermissionLevel.OWNER.ordinal
        )

    @pytest.mark.parametrize(
        ("held", "required", "expected"),
        [
            (PermissionLevel.READ, PermissionLevel.READ, True),
            (PermissionLevel.READ, PermissionLevel.WRITE, False),
            (PermissionLevel.READ, PermissionLevel.OWNER, False),
            (PermissionLevel.WRITE, PermissionLevel.READ, True),
            (PermissionLevel.WRITE, PermissionLevel.OWNER, False),
            (PermissionLevel.OWNER, PermissionLevel.WRITE, True),
        ],
    )
    def test_satisfies(self, held, required, expected):
        """A held level satisfies any level at or below it."""
        assert held.satisfies(required) is expected


class TestWorkspaceRole:
    """Tests for WorkspaceRole ranking."""

    def test_ranks(self):
        """Roles rank OWNER(5) down to GUEST(1)."""
        assert [role.rank for role in WorkspaceRole] == [5, 4, 3, 2, 1]

    def test_outranks_is_strict(self):
        """A role does not outrank itself."""
        assert WorkspaceRole.OWNER.outranks(WorkspaceRole.ADMIN)
        assert not WorkspaceRole.EDITOR.outranks(WorkspaceRole.EDITOR)
        assert not WorkspaceRole.GUEST.outranks(WorkspaceRole.VIEWER)


class TestGrantStatus:
    """Tests for GrantStatus terminality."""

    def test_only_pending_is_non_terminal(self):
        """ACCEPTED and REJECTED are terminal."""
        assert not GrantStatus.PENDING.is_terminal
        assert GrantStatus.ACCEPTED.is_terminal
        assert GrantStatus.REJECTED.is_terminal
