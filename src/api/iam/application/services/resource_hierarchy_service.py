"""Resource hierarchy application service for IAM bounded context.

Moves resources within the forest while keeping it acyclic. Since the
resolver walks parent links to the root, a cycle would make every check on
the affected resources fail, so moves that would create one are refused.
"""

from __future__ import annotations

from typing import NoReturn

from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    DefaultResourceHierarchyServiceProbe,
    ResourceHierarchyServiceProbe,
)
from iam.domain.aggregates import Resource
from iam.domain.value_objects import PermissionLevel, ResourceId, SubjectId
from iam.ports.authorization import IAuthorizationResolver
from iam.ports.exceptions import (
    ForbiddenError,
    InvalidHierarchyMoveError,
    ResourceHierarchyCorruptedError,
    ResourceNotFoundError,
)
from iam.ports.repositories import IResourceRepository


class ResourceHierarchyService:
    """Application service for re-parenting resources."""

    def __init__(
        self,
        session: AsyncSession,
        resource_repository: IResourceRepository,
        authz: IAuthorizationResolver,
        probe: ResourceHierarchyServiceProbe | None = None,
    ):
        """Initialize ResourceHierarchyService with dependencies.

        Args:
            session: Database session for transaction management
            resource_repository: Repository for resource lookups and updates
            authz: Authorization resolver for permission checks
            probe: Optional domain probe for observability
        """
        self._session = session
        self._resource_repository = resource_repository
        self._authz = authz
        self._probe = probe or DefaultResourceHierarchyServiceProbe()

    async def move(
        self,
        mover_id: SubjectId,
        resource_id: ResourceId,
        new_parent_id: ResourceId | None,
    ) -> Resource:
        """Attach a resource under a new parent, or detach it to a root.

        The mover needs OWNER on the resource and WRITE on the new parent.
        The new parent may be neither the resource itself nor one of its
        descendants.

        Args:
            mover_id: The subject performing the move
            resource_id: The resource to move
            new_parent_id: The destination parent, or None for a root

        Returns:
            The resource with its new parent

        Raises:
            ResourceNotFoundError: If the resource or new parent does not exist
            ForbiddenError: If the mover lacks the required access
            InvalidHierarchyMoveError: If the move would create a cycle
        """
        async with self._session.begin():
            resource = await self._get_resource(resource_id)

            await self._require(mover_id, resource_id, PermissionLevel.OWNER)

            if new_parent_id is not None:
                if new_parent_id == resource_id:
                    self._reject(resource_id, new_parent_id, "resource is its own parent")

                new_parent = await self._get_resource(new_parent_id)
                await self._require(mover_id, new_parent_id, PermissionLevel.WRITE)

                if await self._descends_from(new_parent, resource_id):
                    self._reject(
                        resource_id, new_parent_id, "new parent is a descendant"
                    )

            await self._resource_repository.update_parent(resource_id, new_parent_id)
            moved = resource.reparented(new_parent_id)

        self._probe.resource_moved(
            resource_id=resource_id.value,
            old_parent_id=resource.parent_id.value if resource.parent_id else None,
            new_parent_id=new_parent_id.value if new_parent_id else None,
            mover_id=mover_id.value,
        )

        return moved

    async def _get_resource(self, resource_id: ResourceId) -> Resource:
        resource = await self._resource_repository.get_by_id(resource_id)
        if resource is None:
            raise ResourceNotFoundError(f"Resource {resource_id} not found")
        return resource

    async def _require(
        self,
        subject_id: SubjectId,
        resource_id: ResourceId,
        level: PermissionLevel,
    ) -> None:
        decision = await self._authz.check(subject_id, resource_id, level)
        if not decision:
            raise ForbiddenError(
                f"Subject {subject_id} lacks {level} on resource {resource_id}"
            )

    async def _descends_from(self, candidate: Resource, ancestor_id: ResourceId) -> bool:
        """Walk up from ``candidate`` looking for ``ancestor_id``."""
        visited: set[ResourceId] = {candidate.id}
        parent_id = candidate.parent_id

        while parent_id is not None:
            if parent_id == ancestor_id:
                return True
            if parent_id in visited:
                raise ResourceHierarchyCorruptedError(
                    f"Parent chain of {candidate.id} loops back to {parent_id}"
                )
            visited.add(parent_id)

            parent = await self._resource_repository.get_by_id(parent_id)
            if parent is None:
                raise ResourceHierarchyCorruptedError(
                    f"Resource references missing parent {parent_id}"
                )
            parent_id = parent.parent_id

        return False

    def _reject(
        self,
        resource_id: ResourceId,
        new_parent_id: ResourceId,
        reason: str,
    ) -> NoReturn:
        self._probe.move_rejected(
            resource_id=resource_id.value,
            new_parent_id=new_parent_id.value,
            reason=reason,
        )
        raise InvalidHierarchyMoveError(
            f"Cannot move {resource_id} under {new_parent_id}: {reason}"
        )
