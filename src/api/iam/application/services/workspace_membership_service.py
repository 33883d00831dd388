"""Workspace membership application service for IAM bounded context.

Manages who belongs to a workspace and with which role. Memberships are
never hard-deleted; removal deactivates the row and a later invitation
reactivates it.
"""

from __future__ import annotations

from typing import NoReturn

from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    DefaultWorkspaceMembershipServiceProbe,
    WorkspaceMembershipServiceProbe,
)
from iam.domain.aggregates import Workspace, WorkspaceMembership
from iam.domain.value_objects import (
    Capability,
    SubjectId,
    WorkspaceId,
    WorkspaceRole,
)
from iam.ports.authorization import IAuthorizationResolver
from iam.ports.exceptions import (
    ForbiddenError,
    MemberAlreadyActiveError,
    MembershipInactiveError,
    MembershipNotFoundError,
    OwnerRoleAssignmentError,
    SelfModificationError,
    SubjectNotFoundError,
    WorkspaceNotFoundError,
)
from iam.ports.repositories import (
    ISubjectRepository,
    IWorkspaceMembershipRepository,
    IWorkspaceRepository,
)

_INVITE_CAPABILITIES = (Capability.MANAGE_MEMBERS, Capability.INVITE_MEMBERS)


class WorkspaceMembershipService:
    """Application service for workspace membership management.

    Business rules:
    - Inviting requires MANAGE_MEMBERS or INVITE_MEMBERS in the workspace
    - Changing roles and removing members requires an active OWNER membership
    - OWNER is never assigned through invite or role change; only the
      recorded workspace owner receives it, via ensure_owner_membership
    - Nobody can change their own role or remove themselves
    - Roles of inactive memberships cannot be changed
    """

    def __init__(
        self,
        session: AsyncSession,
        membership_repository: IWorkspaceMembershipRepository,
        workspace_repository: IWorkspaceRepository,
        subject_repository: ISubjectRepository,
        authz: IAuthorizationResolver,
        probe: WorkspaceMembershipServiceProbe | None = None,
    ):
        """Initialize WorkspaceMembershipService with dependencies.

        Args:
            session: Database session for transaction management
            membership_repository: Repository for membership persistence
            workspace_repository: Read access to workspaces
            subject_repository: Used to verify invitees exist
            authz: Authorization resolver for capability checks
            probe: Optional domain probe for observability
        """
        self._session = session
        self._membership_repository = membership_repository
        self._workspace_repository = workspace_repository
        self._subject_repository = subject_repository
        self._authz = authz
        self._probe = probe or DefaultWorkspaceMembershipServiceProbe()

    async def invite(
        self,
        inviter_id: SubjectId,
        workspace_id: WorkspaceId,
        subject_id: SubjectId,
        role: WorkspaceRole,
    ) -> WorkspaceMembership:
        """Add a subject to a workspace, or reactivate their old membership.

        A reactivated membership takes the role given here, not the one it
        had before removal.

        Args:
            inviter_id: The subject sending the invitation
            workspace_id: The workspace to join
            subject_id: The subject being invited
            role: Role to assign (anything but OWNER)

        Returns:
            The active membership

        Raises:
            WorkspaceNotFoundError: If the workspace does not exist
            SubjectNotFoundError: If the invitee does not exist
            ForbiddenError: If the inviter lacks invite capabilities
            OwnerRoleAssignmentError: If role is OWNER
            MemberAlreadyActiveError: If the invitee is already an active member
        """
        async with self._session.begin():
            await self._get_workspace(workspace_id)

            if await self._subject_repository.get_by_id(subject_id) is None:
                raise SubjectNotFoundError(f"Subject {subject_id} not found")

            allowed = await self._authz.has_any_capability(
                inviter_id, workspace_id, _INVITE_CAPABILITIES
            )
            if not allowed:
                self._deny("invite", inviter_id, workspace_id)

            if role is WorkspaceRole.OWNER:
                raise OwnerRoleAssignmentError("OWNER cannot be assigned by invitation")

            membership = await self._membership_repository.get(subject_id, workspace_id)
            reactivated = False

            if membership is None:
                membership = WorkspaceMembership.create(
                    subject_id=subject_id,
                    workspace_id=workspace_id,
                    role=role,
                    invited_by=inviter_id,
                )
            elif membership.is_active:
                raise MemberAlreadyActiveError(
                    f"Subject {subject_id} is already an active member of "
                    f"workspace {workspace_id}"
                )
            else:
                membership.reactivate(role=role, invited_by=inviter_id)
                reactivated = True

            await self._membership_repository.save(membership)

        if reactivated:
            self._probe.member_reactivated(
                workspace_id=workspace_id.value,
                subject_id=subject_id.value,
                role=role.value,
                inviter_id=inviter_id.value,
            )
        else:
            self._probe.member_invited(
                workspace_id=workspace_id.value,
                subject_id=subject_id.value,
                role=role.value,
                inviter_id=inviter_id.value,
            )

        return membership

    async def change_role(
        self,
        changer_id: SubjectId,
        workspace_id: WorkspaceId,
        subject_id: SubjectId,
        new_role: WorkspaceRole,
    ) -> WorkspaceMembership:
        """Change the role of an active member.

        Raises:
            WorkspaceNotFoundError: If the workspace does not exist
            ForbiddenError: If the changer is not an active OWNER
            SelfModificationError: If the changer targets themselves
            OwnerRoleAssignmentError: If new_role is OWNER
            MembershipNotFoundError: If the target has no membership
            MembershipInactiveError: If the target's membership is inactive
        """
        async with self._session.begin():
            await self._get_workspace(workspace_id)
            await self._require_owner(changer_id, workspace_id, "change_role")

            if subject_id == changer_id:
                raise SelfModificationError("Owners cannot change their own role")

            if new_role is WorkspaceRole.OWNER:
                raise OwnerRoleAssignmentError(
                    "OWNER cannot be assigned by role change; ownership transfer "
                    "is a separate operation"
                )

            membership = await self._get_membership(subject_id, workspace_id)
            if not membership.is_active:
                raise MembershipInactiveError(
                    f"Membership of subject {subject_id} is inactive"
                )

            old_role = membership.change_role(new_role)
            await self._membership_repository.save(membership)

        self._probe.member_role_changed(
            workspace_id=workspace_id.value,
            subject_id=subject_id.value,
            old_role=old_role.value,
            new_role=new_role.value,
            changer_id=changer_id.value,
        )

        return membership

    async def remove_member(
        self,
        remover_id: SubjectId,
        workspace_id: WorkspaceId,
        subject_id: SubjectId,
    ) -> WorkspaceMembership:
        """Deactivate a member's membership.

        Raises:
            WorkspaceNotFoundError: If the workspace does not exist
            ForbiddenError: If the remover is not an active OWNER
            SelfModificationError: If the remover targets themselves
            MembershipNotFoundError: If the target has no membership
            MembershipInactiveError: If the target was already removed
        """
        async with self._session.begin():
            await self._get_workspace(workspace_id)
            await self._require_owner(remover_id, workspace_id, "remove_member")

            if subject_id == remover_id:
                raise SelfModificationError("Owners cannot remove themselves")

            membership = await self._get_membership(subject_id, workspace_id)
            if not membership.is_active:
                raise MembershipInactiveError(
                    f"Subject {subject_id} is not an active member"
                )

            membership.deactivate()
            await self._membership_repository.save(membership)

        self._probe.member_removed(
            workspace_id=workspace_id.value,
            subject_id=subject_id.value,
            remover_id=remover_id.value,
        )

        return membership

    async def ensure_owner_membership(
        self, workspace_id: WorkspaceId
    ) -> WorkspaceMembership:
        """Give the recorded workspace owner an active OWNER membership.

        Idempotent: an owner who already holds an active OWNER membership is
        left untouched.

        Raises:
            WorkspaceNotFoundError: If the workspace does not exist
        """
        async with self._session.begin():
            workspace = await self._get_workspace(workspace_id)
            membership = await self._membership_repository.get(
                workspace.owner_id, workspace_id
            )
            created = membership is None

            if membership is None:
                membership = WorkspaceMembership.create(
                    subject_id=workspace.owner_id,
                    workspace_id=workspace_id,
                    role=WorkspaceRole.OWNER,
                )
                await self._membership_repository.save(membership)
            elif not membership.is_active:
                membership.reactivate(role=WorkspaceRole.OWNER, invited_by=None)
                await self._membership_repository.save(membership)
            elif membership.role is not WorkspaceRole.OWNER:
                membership.change_role(WorkspaceRole.OWNER)
                await self._membership_repository.save(membership)

        self._probe.owner_membership_ensured(
            workspace_id=workspace_id.value,
            subject_id=workspace.owner_id.value,
            created=created,
        )

        return membership

    async def list_members(
        self,
        requester_id: SubjectId,
        workspace_id: WorkspaceId,
    ) -> list[WorkspaceMembership]:
        """List active members; the requester must be one of them.

        Raises:
            WorkspaceNotFoundError: If the workspace does not exist
            ForbiddenError: If the requester is not an active member
        """
        await self._get_workspace(workspace_id)

        requester = await self._membership_repository.get(requester_id, workspace_id)
        if requester is None or not requester.is_active:
            self._deny("list_members", requester_id, workspace_id)

        return await self._membership_repository.list_active(workspace_id)

    async def _get_workspace(self, workspace_id: WorkspaceId) -> Workspace:
        workspace = await self._workspace_repository.get_by_id(workspace_id)
        if workspace is None:
            raise WorkspaceNotFoundError(f"Workspace {workspace_id} not found")
        return workspace

    async def _get_membership(
        self, subject_id: SubjectId, workspace_id: WorkspaceId
    ) -> WorkspaceMembership:
        membership = await self._membership_repository.get(subject_id, workspace_id)
        if membership is None:
            raise MembershipNotFoundError(
                f"Subject {subject_id} is not a member of workspace {workspace_id}"
            )
        return membership

    async def _require_owner(
        self,
        actor_id: SubjectId,
        workspace_id: WorkspaceId,
        operation: str,
    ) -> None:
        """Raise unless ``actor_id`` holds an active OWNER membership."""
        membership = await self._membership_repository.get(actor_id, workspace_id)
        if (
            membership is None
            or not membership.is_active
            or membership.role is not WorkspaceRole.OWNER
        ):
            self._deny(operation, actor_id, workspace_id)

    def _deny(
        self,
        operation: str,
        actor_id: SubjectId,
        workspace_id: WorkspaceId,
    ) -> NoReturn:
        self._probe.membership_operation_denied(
            operation=operation,
            actor_id=actor_id.value,
            workspace_id=workspace_id.value,
        )
        raise ForbiddenError(
            f"Subject {actor_id} may not {operation.replace('_', ' ')} "
            f"in workspace {workspace_id}"
        )
