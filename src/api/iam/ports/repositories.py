"""Repository protocols (ports) for IAM bounded context.

Repository protocols define the interface for persisting and retrieving
aggregates. Implementations reconstitute aggregates from PostgreSQL.
Repositories never open transactions; the calling service owns the unit of
work.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from iam.domain.aggregates import (
    Resource,
    ResourceGrant,
    Subject,
    Workspace,
    WorkspaceMembership,
)
from iam.domain.value_objects import (
    GrantStatus,
    ResourceGrantId,
    ResourceId,
    SubjectId,
    WorkspaceId,
)


@runtime_checkable
class ISubjectRepository(Protocol):
    """Repository for Subject aggregate persistence.

    The stored session id is the single source of truth for which
    credential is currently valid for a subject.
    """

    async def save(self, subject: Subject) -> None:
        """Persist a subject aggregate.

        Creates a new subject or updates an existing one.

        Args:
            subject: The Subject aggregate to persist
        """
        ...

    async def get_by_id(self, subject_id: SubjectId) -> Subject | None:
        """Retrieve a subject by its ID.

        Args:
            subject_id: The unique identifier of the subject

        Returns:
            The Subject aggregate, or None if not found
        """
        ...

    async def get_by_identity(self, identity: str) -> Subject | None:
        """Retrieve a subject by its stable identity (email or username).

        Args:
            identity: The identity embedded in session credentials

        Returns:
            The Subject aggregate, or None if not found
        """
        ...

    async def replace_session_id(self, subject_id: SubjectId, session_id: str) -> bool:
        """Overwrite the stored session id in a single atomic write.

        Concurrent calls for the same subject are unordered; the last write
        to land is the one that stays.

        Args:
            subject_id: The subject whose session is being replaced
            session_id: The new session id

        Returns:
            True if a row was updated, False if the subject does not exist
        """
        ...


@runtime_checkable
class IResourceRepository(Protocol):
    """Read access to the resource forest, plus re-parenting."""

    async def save(self, resource: Resource) -> None:
        """Persist a resource's authorization attributes.

        Args:
            resource: The Resource to persist
        """
        ...

    async def get_by_id(self, resource_id: ResourceId) -> Resource | None:
        """Retrieve a resource by its ID.

        Args:
            resource_id: The unique identifier of the resource

        Returns:
            The Resource, or None if not found
        """
        ...

    async def update_parent(
        self, resource_id: ResourceId, parent_id: ResourceId | None
    ) -> None:
        """Attach a resource under a new parent (or make it a root).

        Args:
            resource_id: The resource being moved
            parent_id: The new parent, or None to detach
        """
        ...


@runtime_checkable
class IWorkspaceRepository(Protocol):
    """Read access to workspaces."""

    async def get_by_id(self, workspace_id: WorkspaceId) -> Workspace | None:
        """Retrieve a workspace by its ID.

        Args:
            workspace_id: The unique identifier of the workspace

        Returns:
            The Workspace, or None if not found
        """
        ...


@runtime_checkable
class IResourceGrantRepository(Protocol):
    """Repository for ResourceGrant aggregate persistence."""

    async def save(self, grant: ResourceGrant) -> None:
        """Persist a resource grant.

        Creates a new grant or updates the status of an existing one.

        Args:
            grant: The ResourceGrant to persist
        """
        ...

    async def get_by_id(self, grant_id: ResourceGrantId) -> ResourceGrant | None:
        """Retrieve a grant by its ID.

        Args:
            grant_id: The unique identifier of the grant

        Returns:
            The ResourceGrant, or None if not found
        """
        ...

    async def find_accepted(
        self, subject_id: SubjectId, resource_id: ResourceId
    ) -> ResourceGrant | None:
        """Find the ACCEPTED grant for a (subject, resource) pair.

        Args:
            subject_id: The grant holder
            resource_id: The resource the grant is attached to

        Returns:
            The ACCEPTED ResourceGrant, or None if there is none
        """
        ...

    async def find_live(
        self, subject_id: SubjectId, resource_id: ResourceId
    ) -> ResourceGrant | None:
        """Find a PENDING or ACCEPTED grant for a (subject, resource) pair.

        REJECTED grants are history and are never returned.

        Args:
            subject_id: The invited subject
            resource_id: The resource

        Returns:
            The live ResourceGrant, or None if there is none
        """
        ...

    async def list_pending_for_subject(
        self, subject_id: SubjectId
    ) -> list[ResourceGrant]:
        """List invitations still awaiting a response from a subject.

        Args:
            subject_id: The invited subject

        Returns:
            PENDING grants, oldest first
        """
        ...

    async def list_by_status(self, status: GrantStatus) -> list[ResourceGrant]:
        """List every grant with the given status.

        Args:
            status: The workflow status to filter on

        Returns:
            Matching grants, oldest first
        """
        ...

    async def count_by_status(self) -> dict[GrantStatus, int]:
        """Count grants grouped by workflow status.

        Returns:
            Mapping with an entry for every GrantStatus (zero when absent)
        """
        ...

    async def delete(self, grant: ResourceGrant) -> bool:
        """Delete a grant.

        Args:
            grant: The ResourceGrant to delete

        Returns:
            True if deleted, False if not found
        """
        ...


@runtime_checkable
class IWorkspaceMembershipRepository(Protocol):
    """Repository for WorkspaceMembership aggregate persistence.

    At most one row exists per (subject, workspace), active or not.
    """

    async def save(self, membership: WorkspaceMembership) -> None:
        """Persist a membership.

        Creates a new membership or updates role/active state of an existing one.

        Args:
            membership: The WorkspaceMembership to persist
        """
        ...

    async def get(
        self, subject_id: SubjectId, workspace_id: WorkspaceId
    ) -> WorkspaceMembership | None:
        """Retrieve the membership row for a (subject, workspace) pair.

        Inactive memberships are returned as well; callers decide whether
        the active flag matters.

        Args:
            subject_id: The member
            workspace_id: The workspace

        Returns:
            The WorkspaceMembership, or None if the pair has never been linked
        """
        ...

    async def list_active(self, workspace_id: WorkspaceId) -> list[WorkspaceMembership]:
        """List active memberships of a workspace.

        Args:
            workspace_id: The workspace

        Returns:
            Active memberships, oldest first
        """
        ...

    async def count_active(self) -> int:
        """Count active memberships across all workspaces."""
        ...
