"""WorkspaceMembership aggregate for IAM context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from iam.domain.value_objects import (
    MembershipId,
    SubjectId,
    WorkspaceId,
    WorkspaceRole,
)


@dataclass
class WorkspaceMembership:
    """A subject's role inside one workspace.

    There is at most one membership per (subject, workspace). Removal is a
    soft delete: the row is deactivated and kept so that a later invitation
    reactivates it instead of creating a duplicate.

        ACTIVE --deactivate--> INACTIVE
        INACTIVE --reactivate--> ACTIVE

    The role can only change while the membership is active.
    """

    id: MembershipId
    subject_id: SubjectId
    workspace_id: WorkspaceId
    role: WorkspaceRole
    is_active: bool
    invited_by: SubjectId | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def create(
        cls,
        subject_id: SubjectId,
        workspace_id: WorkspaceId,
        role: WorkspaceRole,
        invited_by: SubjectId | None = None,
    ) -> WorkspaceMembership:
        """Factory method for a new active membership.

        Args:
            subject_id: The member
            workspace_id: The workspace joined
            role: Role granted on creation
            invited_by: Subject who issued the invitation, None for the owner

        Returns:
            A new active WorkspaceMembership
        """
        now = datetime.now(UTC)
        return cls(
            id=MembershipId.generate(),
            subject_id=subject_id,
            workspace_id=workspace_id,
            role=role,
            is_active=True,
            invited_by=invited_by,
            created_at=now,
            updated_at=now,
        )

    def change_role(self, role: WorkspaceRole) -> WorkspaceRole:
        """Assign a new role, returning the previous one.

        Raises:
            ValueError: If the membership is inactive
        """
        if not self.is_active:
            raise ValueError("Cannot change the role of an inactive membership")
        previous = self.role
        self.role = role
        self.updated_at = datetime.now(UTC)
        return previous

    def deactivate(self) -> None:
        """Soft-delete the membership.

        Raises:
            ValueError: If the membership is already inactive
        """
        if not self.is_active:
            raise ValueError("Membership is already inactive")
        self.is_active = False
        self.updated_at = datetime.now(UTC)

    def reactivate(self, role: WorkspaceRole, invited_by: SubjectId | None) -> None:
        """Bring an inactive membership back with a freshly chosen role.

        The stale role from before deactivation is discarded.

        Raises:
            ValueError: If the membership is already active
        """
        if self.is_active:
            raise ValueError("Membership is already active")
        self.is_active = True
        self.role = role
        self.invited_by = invited_by
        self.updated_at = datetime.now(UTC)
