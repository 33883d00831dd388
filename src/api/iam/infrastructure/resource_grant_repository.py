"""PostgreSQL implementation of IResourceGrantRepository."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import ResourceGrant
from iam.domain.value_objects import (
    GrantStatus,
    PermissionLevel,
    ResourceGrantId,
    ResourceId,
    SubjectId,
)
from iam.infrastructure.models import ResourceGrantModel
from iam.infrastructure.observability import (
    DefaultResourceGrantRepositoryProbe,
    ResourceGrantRepositoryProbe,
)
from iam.ports.repositories import IResourceGrantRepository

_LIVE_STATUSES = (GrantStatus.PENDING.value, GrantStatus.ACCEPTED.value)


class ResourceGrantRepository(IResourceGrantRepository):
    """PostgreSQL-backed repository for ResourceGrant aggregates."""

    def __init__(
        self,
        session: AsyncSession,
        probe: ResourceGrantRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession owned by the calling service
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultResourceGrantRepositoryProbe()

    async def save(self, grant: ResourceGrant) -> None:
        """Persist a resource grant.

        Only the status changes after creation, so updates touch nothing else.

        Args:
            grant: The ResourceGrant to persist
        """
        model = await self._get_model(grant.id.value)

        if model:
            model.status = grant.status.value
        else:
            model = ResourceGrantModel(
                id=grant.id.value,
                subject_id=grant.subject_id.value,
                resource_id=grant.resource_id.value,
                level=grant.level.value,
                status=grant.status.value,
                invited_by=grant.invited_by.value,
                created_at=grant.created_at,
                updated_at=grant.updated_at,
            )
            self._session.add(model)

        self._probe.grant_saved(grant.id.value, grant.status.value)

    async def get_by_id(self, grant_id: ResourceGrantId) -> ResourceGrant | None:
        """Retrieve a grant by its ID.

        Args:
            grant_id: The unique identifier of the grant

        Returns:
            The ResourceGrant, or None if not found
        """
        model = await self._get_model(grant_id.value)

        if model is None:
            self._probe.grant_not_found(grant_id.value)
            return None

        return self._to_domain(model)

    async def find_accepted(
        self, subject_id: SubjectId, resource_id: ResourceId
    ) -> ResourceGrant | None:
        """Find the ACCEPTED grant for a (subject, resource) pair."""
        stmt = select(ResourceGrantModel).where(
            ResourceGrantModel.subject_id == subject_id.value,
            ResourceGrantModel.resource_id == resource_id.value,
            ResourceGrantModel.status == GrantStatus.ACCEPTED.value,
        )
        result = await self._session.execute(stmt)
        model = result.scalars().first()
        return self._to_domain(model) if model else None

    async def find_live(
        self, subject_id: SubjectId, resource_id: ResourceId
    ) -> ResourceGrant | None:
        """Find a PENDING or ACCEPTED grant for a (subject, resource) pair."""
        stmt = select(ResourceGrantModel).where(
            ResourceGrantModel.subject_id == subject_id.value,
            ResourceGrantModel.resource_id == resource_id.value,
            ResourceGrantModel.status.in_(_LIVE_STATUSES),
        )
        result = await self._session.execute(stmt)
        model = result.scalars().first()
        return self._to_domain(model) if model else None

    async def list_pending_for_subject(
        self, subject_id: SubjectId
    ) -> list[ResourceGrant]:
        """List invitations still awaiting a response from a subject."""
        stmt = (
            select(ResourceGrantModel)
            .where(
                ResourceGrantModel.subject_id == subject_id.value,
                ResourceGrantModel.status == GrantStatus.PENDING.value,
            )
            .order_by(ResourceGrantModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def list_by_status(self, status: GrantStatus) -> list[ResourceGrant]:
        """List every grant with the given status."""
        stmt = (
            select(ResourceGrantModel)
            .where(ResourceGrantModel.status == status.value)
            .order_by(ResourceGrantModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def count_by_status(self) -> dict[GrantStatus, int]:
        """Count grants grouped by workflow status."""
        stmt = select(ResourceGrantModel.status, func.count()).group_by(
            ResourceGrantModel.status
        )
        result = await self._session.execute(stmt)

        counts = {status: 0 for status in GrantStatus}
        for status, count in result.all():
            counts[GrantStatus(status)] = count
        return counts

    async def delete(self, grant: ResourceGrant) -> bool:
        """Delete a grant row.

        Args:
            grant: The ResourceGrant to delete

        Returns:
            True if deleted, False if not found
        """
        model = await self._get_model(grant.id.value)

        if model is None:
            self._probe.grant_not_found(grant.id.value)
            return False

        await self._session.delete(model)
        self._probe.grant_deleted(grant.id.value)
        return True

    async def _get_model(self, grant_id: str) -> ResourceGrantModel | None:
        stmt = select(ResourceGrantModel).where(ResourceGrantModel.id == grant_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _to_domain(model: ResourceGrantModel) -> ResourceGrant:
        return ResourceGrant(
            id=ResourceGrantId(value=model.id),
            subject_id=SubjectId(value=model.subject_id),
            resource_id=ResourceId(value=model.resource_id),
            level=PermissionLevel(model.level),
            status=GrantStatus(model.status),
            invited_by=SubjectId(value=model.invited_by),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
