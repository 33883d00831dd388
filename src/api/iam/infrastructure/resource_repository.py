"""PostgreSQL implementations of IResourceRepository and IWorkspaceRepository.

Resources and workspaces are owned by the document side of the system.
IAM reads the attributes it needs for access decisions and only writes
parent links when resources are moved.
"""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import Resource, Workspace
from iam.domain.value_objects import ResourceId, SubjectId, WorkspaceId
from iam.infrastructure.models import ResourceModel, WorkspaceModel
from iam.infrastructure.observability import (
    DefaultResourceRepositoryProbe,
    ResourceRepositoryProbe,
)
from iam.ports.repositories import IResourceRepository, IWorkspaceRepository


class ResourceRepository(IResourceRepository):
    """PostgreSQL-backed repository for Resource lookups."""

    def __init__(
        self, session: AsyncSession, probe: ResourceRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession owned by the calling service
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultResourceRepositoryProbe()

    async def save(self, resource: Resource) -> None:
        """Persist a resource's authorization attributes.

        Args:
            resource: The Resource to persist
        """
        stmt = select(ResourceModel).where(ResourceModel.id == resource.id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        parent_id = resource.parent_id.value if resource.parent_id else None
        workspace_id = resource.workspace_id.value if resource.workspace_id else None

        if model:
            model.owner_id = resource.owner_id.value
            model.parent_id = parent_id
            model.workspace_id = workspace_id
        else:
            model = ResourceModel(
                id=resource.id.value,
                owner_id=resource.owner_id.value,
                parent_id=parent_id,
                workspace_id=workspace_id,
            )
            self._session.add(model)

        self._probe.resource_saved(resource.id.value)

    async def get_by_id(self, resource_id: ResourceId) -> Resource | None:
        """Retrieve a resource by its ID.

        Args:
            resource_id: The unique identifier of the resource

        Returns:
            The Resource, or None if not found
        """
        stmt = select(ResourceModel).where(ResourceModel.id == resource_id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.resource_not_found(resource_id.value)
            return None

        return Resource(
            id=ResourceId(value=model.id),
            owner_id=SubjectId(value=model.owner_id),
            parent_id=ResourceId(value=model.parent_id) if model.parent_id else None,
            workspace_id=(
                WorkspaceId(value=model.workspace_id) if model.workspace_id else None
            ),
        )

    async def update_parent(
        self, resource_id: ResourceId, parent_id: ResourceId | None
    ) -> None:
        """Point a resource at a new parent.

        Args:
            resource_id: The resource being moved
            parent_id: The new parent, or None to detach
        """
        new_parent = parent_id.value if parent_id else None
        stmt = (
            update(ResourceModel)
            .where(ResourceModel.id == resource_id.value)
            .values(parent_id=new_parent)
        )
        await self._session.execute(stmt)

        self._probe.resource_parent_updated(resource_id.value, new_parent)


class WorkspaceRepository(IWorkspaceRepository):
    """PostgreSQL-backed repository for Workspace lookups."""

    def __init__(
        self, session: AsyncSession, probe: ResourceRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession owned by the calling service
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultResourceRepositoryProbe()

    async def get_by_id(self, workspace_id: WorkspaceId) -> Workspace | None:
        """Retrieve a workspace by its ID.

        Args:
            workspace_id: The unique identifier of the workspace

        Returns:
            The Workspace, or None if not found
        """
        stmt = select(WorkspaceModel).where(WorkspaceModel.id == workspace_id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.workspace_not_found(workspace_id.value)
            return None

        return Workspace(
            id=WorkspaceId(value=model.id),
            owner_id=SubjectId(value=model.owner_id),
            parent_workspace_id=(
                WorkspaceId(value=model.parent_workspace_id)
                if model.parent_workspace_id
                else None
            ),
        )
