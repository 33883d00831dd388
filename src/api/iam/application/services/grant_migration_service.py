"""Grant migration application service for IAM bounded context.

Administrative batches that fold per-resource grants into workspace
memberships. Every batch is best-effort: each record runs in its own
transaction, and a failing record is reported and skipped without
affecting the others.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from types import MappingProxyType

from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    DefaultGrantMigrationProbe,
    GrantMigrationProbe,
)
from iam.application.value_objects import MigrationReport, MigrationStatus
from iam.domain.aggregates import ResourceGrant, WorkspaceMembership
from iam.domain.value_objects import GrantStatus, PermissionLevel, WorkspaceRole
from iam.ports.exceptions import ResourceNotFoundError
from iam.ports.repositories import (
    IResourceGrantRepository,
    IResourceRepository,
    IWorkspaceMembershipRepository,
)

# OWNER grants become ADMIN: a workspace keeps a single owner.
GRANT_LEVEL_ROLES: MappingProxyType[PermissionLevel, WorkspaceRole] = (
    MappingProxyType(
        {
            PermissionLevel.READ: WorkspaceRole.VIEWER,
            PermissionLevel.WRITE: WorkspaceRole.EDITOR,
            PermissionLevel.OWNER: WorkspaceRole.ADMIN,
        }
    )
)


class GrantMigrationService:
    """Application service for migrating resource grants to memberships."""

    def __init__(
        self,
        session: AsyncSession,
        grant_repository: IResourceGrantRepository,
        resource_repository: IResourceRepository,
        membership_repository: IWorkspaceMembershipRepository,
        probe: GrantMigrationProbe | None = None,
    ):
        """Initialize GrantMigrationService with dependencies.

        Args:
            session: Database session; one transaction is opened per record
            grant_repository: Repository for grant lookups and deletion
            resource_repository: Used to find each grant's workspace
            membership_repository: Repository for membership persistence
            probe: Optional domain probe for observability
        """
        self._session = session
        self._grant_repository = grant_repository
        self._resource_repository = resource_repository
        self._membership_repository = membership_repository
        self._probe = probe or DefaultGrantMigrationProbe()

    async def migrate_grants_to_memberships(self) -> MigrationReport:
        """Turn ACCEPTED grants on workspace resources into memberships.

        The membership role follows the grant level (READ to VIEWER, WRITE to
        EDITOR, OWNER to ADMIN). Subjects who are already active members are
        skipped; inactive memberships are reactivated with the mapped role.
        Grants on resources outside any workspace are skipped.

        Returns:
            Report of processed, skipped and failed grants
        """
        return await self._run("migrate_grants_to_memberships", self._migrate_one)

    async def cleanup_redundant_grants(self) -> MigrationReport:
        """Delete ACCEPTED grants already covered by an active membership.

        A grant is redundant when its holder is an active member of the
        workspace the granted resource belongs to.

        Returns:
            Report where processed counts deleted grants
        """
        return await self._run("cleanup_redundant_grants", self._cleanup_one)

    async def migration_status(self) -> MigrationStatus:
        """Count grants by status and active memberships."""
        async with self._session.begin():
            grants_by_status = await self._grant_repository.count_by_status()
            active_memberships = await self._membership_repository.count_active()

        return MigrationStatus(
            grants_by_status=grants_by_status,
            active_memberships=active_memberships,
        )

    async def _run(
        self,
        operation: str,
        handler: Callable[[ResourceGrant], Awaitable[bool]],
    ) -> MigrationReport:
        async with self._session.begin():
            grants = await self._grant_repository.list_by_status(GrantStatus.ACCEPTED)

        report = MigrationReport()
        self._probe.migration_started(operation=operation, total=len(grants))

        for grant in grants:
            report.examined += 1
            try:
                async with self._session.begin():
                    processed = await handler(grant)
            except Exception as e:
                report.record_failure(grant.id.value, e)
                self._probe.record_failed(
                    operation=operation,
                    record_id=grant.id.value,
                    error=str(e),
                )
                continue

            if processed:
                report.processed += 1
            else:
                report.skipped += 1

        self._probe.migration_completed(
            operation=operation,
            processed=report.processed,
            skipped=report.skipped,
            failed=report.failed,
        )
        return report

    async def _migrate_one(self, grant: ResourceGrant) -> bool:
        resource = await self._resource_repository.get_by_id(grant.resource_id)
        if resource is None:
            raise ResourceNotFoundError(f"Resource {grant.resource_id} not found")
        if resource.workspace_id is None:
            return False

        role = GRANT_LEVEL_ROLES[grant.level]
        membership = await self._membership_repository.get(
            grant.subject_id, resource.workspace_id
        )

        if membership is None:
            membership = WorkspaceMembership.create(
                subject_id=grant.subject_id,
                workspace_id=resource.workspace_id,
                role=role,
                invited_by=grant.invited_by,
            )
        elif membership.is_active:
            return False
        else:
            membership.reactivate(role=role, invited_by=grant.invited_by)

        await self._membership_repository.save(membership)
        return True

    async def _cleanup_one(self, grant: ResourceGrant) -> bool:
        resource = await self._resource_repository.get_by_id(grant.resource_id)
        if resource is None:
            raise ResourceNotFoundError(f"Resource {grant.resource_id} not found")
        if resource.workspace_id is None:
            return False

        membership = await self._membership_repository.get(
            grant.subject_id, resource.workspace_id
        )
        if membership is None or not membership.is_active:
            return False

        return await self._grant_repository.delete(grant)
