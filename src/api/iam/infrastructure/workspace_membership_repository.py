"""PostgreSQL implementation of IWorkspaceMembershipRepository."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import WorkspaceMembership
from iam.domain.value_objects import (
    MembershipId,
    SubjectId,
    WorkspaceId,
    WorkspaceRole,
)
from iam.infrastructure.models import WorkspaceMembershipModel
from iam.infrastructure.observability import (
    DefaultWorkspaceMembershipRepositoryProbe,
    WorkspaceMembershipRepositoryProbe,
)
from iam.ports.repositories import IWorkspaceMembershipRepository


class WorkspaceMembershipRepository(IWorkspaceMembershipRepository):
    """PostgreSQL-backed repository for WorkspaceMembership aggregates.

    The (subject_id, workspace_id) unique constraint backs the one-row-per-pair
    rule; save() updates the existing row rather than inserting a second one.
    """

    def __init__(
        self,
        session: AsyncSession,
        probe: WorkspaceMembershipRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession owned by the calling service
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultWorkspaceMembershipRepositoryProbe()

    async def save(self, membership: WorkspaceMembership) -> None:
        """Persist a membership.

        Args:
            membership: The WorkspaceMembership to persist
        """
        model = await self._get_model(membership.subject_id, membership.workspace_id)
        invited_by = membership.invited_by.value if membership.invited_by else None

        if model:
            model.role = membership.role.value
            model.is_active = membership.is_active
            model.invited_by = invited_by
        else:
            model = WorkspaceMembershipModel(
                id=membership.id.value,
                subject_id=membership.subject_id.value,
                workspace_id=membership.workspace_id.value,
                role=membership.role.value,
                is_active=membership.is_active,
                invited_by=invited_by,
                created_at=membership.created_at,
                updated_at=membership.updated_at,
            )
            self._session.add(model)

        self._probe.membership_saved(
            subject_id=membership.subject_id.value,
            workspace_id=membership.workspace_id.value,
            role=membership.role.value,
            is_active=membership.is_active,
        )

    async def get(
        self, subject_id: SubjectId, workspace_id: WorkspaceId
    ) -> WorkspaceMembership | None:
        """Retrieve the membership row for a (subject, workspace) pair."""
        model = await self._get_model(subject_id, workspace_id)
        return self._to_domain(model) if model else None

    async def list_active(self, workspace_id: WorkspaceId) -> list[WorkspaceMembership]:
        """List active memberships of a workspace."""
        stmt = (
            select(WorkspaceMembershipModel)
            .where(
                WorkspaceMembershipModel.workspace_id == workspace_id.value,
                WorkspaceMembershipModel.is_active.is_(True),
            )
            .order_by(WorkspaceMembershipModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def count_active(self) -> int:
        """Count active memberships across all workspaces."""
        stmt = (
            select(func.count())
            .select_from(WorkspaceMembershipModel)
            .where(WorkspaceMembershipModel.is_active.is_(True))
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def _get_model(
        self, subject_id: SubjectId, workspace_id: WorkspaceId
    ) -> WorkspaceMembershipModel | None:
        stmt = select(WorkspaceMembershipModel).where(
            WorkspaceMembershipModel.subject_id == subject_id.value,
            WorkspaceMembershipModel.workspace_id == workspace_id.value,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _to_domain(model: WorkspaceMembershipModel) -> WorkspaceMembership:
        return WorkspaceMembership(
            id=MembershipId(value=model.id),
            subject_id=SubjectId(value=model.subject_id),
            workspace_id=WorkspaceId(value=model.workspace_id),
            role=WorkspaceRole(model.role),
            is_active=model.is_active,
            invited_by=SubjectId(value=model.invited_by) if model.invited_by else None,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
