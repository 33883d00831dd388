"""Resource grant application service for IAM bounded context.

Manages the invitation workflow of per-resource ACL entries: invite,
accept, reject and revoke.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    DefaultResourceGrantServiceProbe,
    ResourceGrantServiceProbe,
)
from iam.domain.aggregates import Resource, ResourceGrant
from iam.domain.value_objects import (
    GrantStatus,
    PermissionLevel,
    ResourceGrantId,
    ResourceId,
    SubjectId,
)
from iam.ports.authorization import IAuthorizationResolver
from iam.ports.exceptions import (
    ConflictError,
    ForbiddenError,
    GrantAlreadyExistsError,
    GrantAlreadyResolvedError,
    ResourceGrantNotFoundError,
    ResourceNotFoundError,
    SelfModificationError,
    SubjectNotFoundError,
)
from iam.ports.repositories import (
    IResourceGrantRepository,
    IResourceRepository,
    ISubjectRepository,
)

_LIVE_GRANT_CONSTRAINT = "uq_resource_grants_live_subject_resource"


class ResourceGrantService:
    """Application service for sharing individual resources.

    Business rules:
    - Inviting requires WRITE on the resource, and at least the level being
      granted, so nobody can hand out more than they hold
    - At most one live (PENDING or ACCEPTED) grant per (subject, resource)
    - REJECTED grants are kept as history; a new invitation creates a new
      PENDING row and never revives the rejected one
    - Only the invited subject can accept or reject, and only once
    """

    def __init__(
        self,
        session: AsyncSession,
        grant_repository: IResourceGrantRepository,
        resource_repository: IResourceRepository,
        subject_repository: ISubjectRepository,
        authz: IAuthorizationResolver,
        probe: ResourceGrantServiceProbe | None = None,
    ):
        """Initialize ResourceGrantService with dependencies.

        Args:
            session: Database session for transaction management
            grant_repository: Repository for grant persistence
            resource_repository: Read access to resources
            subject_repository: Used to verify invitees exist
            authz: Authorization resolver for permission checks
            probe: Optional domain probe for observability
        """
        self._session = session
        self._grant_repository = grant_repository
        self._resource_repository = resource_repository
        self._subject_repository = subject_repository
        self._authz = authz
        self._probe = probe or DefaultResourceGrantServiceProbe()

    async def invite(
        self,
        inviter_id: SubjectId,
        subject_id: SubjectId,
        resource_id: ResourceId,
        level: PermissionLevel,
    ) -> ResourceGrant:
        """Invite a subject to a resource with a given level.

        Args:
            inviter_id: The subject sending the invitation
            subject_id: The subject being invited
            resource_id: The resource to share
            level: Level conferred once the invitation is accepted

        Returns:
            The new PENDING grant

        Raises:
            ResourceNotFoundError: If the resource does not exist
            SubjectNotFoundError: If the inviter or invitee does not exist
            SelfModificationError: If the inviter invites themselves
            ForbiddenError: If the inviter lacks the required access
            ConflictError: If the invitee owns the resource
            GrantAlreadyExistsError: If a live grant already exists
        """
        required = max(PermissionLevel.WRITE, level, key=lambda lvl: lvl.ordinal)

        try:
            async with self._session.begin():
                resource = await self._get_resource(resource_id)

                if await self._subject_repository.get_by_id(subject_id) is None:
                    raise SubjectNotFoundError(f"Subject {subject_id} not found")

                if subject_id == inviter_id:
                    raise SelfModificationError("A subject cannot invite themselves")

                decision = await self._authz.check(inviter_id, resource_id, required)
                if not decision:
                    self._probe.grant_operation_denied(
                        operation="invite",
                        actor_id=inviter_id.value,
                        target_id=resource_id.value,
                    )
                    raise ForbiddenError(
                        f"Subject {inviter_id} lacks {required} on resource "
                        f"{resource_id}"
                    )

                if resource.is_owned_by(subject_id):
                    raise ConflictError(
                        f"Subject {subject_id} already owns resource {resource_id}"
                    )

                existing = await self._grant_repository.find_live(
                    subject_id, resource_id
                )
                if existing is not None:
                    raise GrantAlreadyExistsError(
                        f"Subject {subject_id} already has a {existing.status} "
                        f"grant on resource {resource_id}"
                    )

                grant = ResourceGrant.invite(
                    subject_id=subject_id,
                    resource_id=resource_id,
                    level=level,
                    invited_by=inviter_id,
                )
                await self._grant_repository.save(grant)
        except IntegrityError as e:
            # A concurrent invite committed the live grant first
            if _LIVE_GRANT_CONSTRAINT in str(e):
                self._probe.grant_invite_conflicted(
                    resource_id=resource_id.value, subject_id=subject_id.value
                )
                raise GrantAlreadyExistsError(
                    f"Subject {subject_id} already has a live grant on resource "
                    f"{resource_id}"
                ) from e
            raise

        self._probe.grant_invited(
            grant_id=grant.id.value,
            resource_id=resource_id.value,
            subject_id=subject_id.value,
            level=level.value,
            inviter_id=inviter_id.value,
        )

        return grant

    async def accept(
        self,
        subject_id: SubjectId,
        grant_id: ResourceGrantId,
    ) -> ResourceGrant:
        """Accept a pending invitation addressed to ``subject_id``.

        Raises:
            ResourceGrantNotFoundError: If the grant does not exist
            ForbiddenError: If the grant is addressed to someone else
            GrantAlreadyResolvedError: If the grant is no longer PENDING
        """
        async with self._session.begin():
            grant = await self._get_pending_for(subject_id, grant_id, "accept")
            grant.accept()
            await self._grant_repository.save(grant)

        self._probe.grant_accepted(grant_id=grant_id.value, subject_id=subject_id.value)
        return grant

    async def reject(
        self,
        subject_id: SubjectId,
        grant_id: ResourceGrantId,
    ) -> ResourceGrant:
        """Reject a pending invitation addressed to ``subject_id``.

        Raises:
            ResourceGrantNotFoundError: If the grant does not exist
            ForbiddenError: If the grant is addressed to someone else
            GrantAlreadyResolvedError: If the grant is no longer PENDING
        """
        async with self._session.begin():
            grant = await self._get_pending_for(subject_id, grant_id, "reject")
            grant.reject()
            await self._grant_repository.save(grant)

        self._probe.grant_rejected(grant_id=grant_id.value, subject_id=subject_id.value)
        return grant

    async def revoke(
        self,
        revoker_id: SubjectId,
        grant_id: ResourceGrantId,
    ) -> ResourceGrant:
        """Delete a PENDING or ACCEPTED grant.

        Allowed for the resource owner, and for anyone holding an ACCEPTED
        grant on the same resource at or above the revoked grant's level.

        Returns:
            The grant as it was before deletion

        Raises:
            ResourceGrantNotFoundError: If the grant does not exist
            GrantAlreadyResolvedError: If the grant was REJECTED
            ResourceNotFoundError: If the grant's resource no longer exists
            ForbiddenError: If the revoker is not allowed
        """
        async with self._session.begin():
            grant = await self._get_grant(grant_id)

            if grant.status is GrantStatus.REJECTED:
                raise GrantAlreadyResolvedError(
                    f"Grant {grant_id} was rejected and cannot be revoked"
                )

            resource = await self._get_resource(grant.resource_id)
            if not await self._may_revoke(revoker_id, resource, grant):
                self._probe.grant_operation_denied(
                    operation="revoke",
                    actor_id=revoker_id.value,
                    target_id=grant_id.value,
                )
                raise ForbiddenError(
                    f"Subject {revoker_id} may not revoke grant {grant_id}"
                )

            await self._grant_repository.delete(grant)

        self._probe.grant_revoked(
            grant_id=grant_id.value,
            resource_id=grant.resource_id.value,
            revoked_by=revoker_id.value,
        )
        return grant

    async def list_pending(self, subject_id: SubjectId) -> list[ResourceGrant]:
        """List invitations awaiting a response from ``subject_id``."""
        return await self._grant_repository.list_pending_for_subject(subject_id)

    async def _get_grant(self, grant_id: ResourceGrantId) -> ResourceGrant:
        grant = await self._grant_repository.get_by_id(grant_id)
        if grant is None:
            raise ResourceGrantNotFoundError(f"Grant {grant_id} not found")
        return grant

    async def _get_resource(self, resource_id: ResourceId) -> Resource:
        resource = await self._resource_repository.get_by_id(resource_id)
        if resource is None:
            raise ResourceNotFoundError(f"Resource {resource_id} not found")
        return resource

    async def _get_pending_for(
        self,
        subject_id: SubjectId,
        grant_id: ResourceGrantId,
        operation: str,
    ) -> ResourceGrant:
        """Load a grant that ``subject_id`` is entitled to resolve."""
        grant = await self._get_grant(grant_id)

        if not grant.is_addressed_to(subject_id):
            self._probe.grant_operation_denied(
                operation=operation,
                actor_id=subject_id.value,
                target_id=grant_id.value,
            )
            raise ForbiddenError(
                f"Grant {grant_id} is not addressed to subject {subject_id}"
            )

        if not grant.is_pending:
            raise GrantAlreadyResolvedError(
                f"Grant {grant_id} is already {grant.status}"
            )

        return grant

    async def _may_revoke(
        self,
        revoker_id: SubjectId,
        resource: Resource,
        grant: ResourceGrant,
    ) -> bool:
        if resource.is_owned_by(revoker_id):
            return True

        held = await self._grant_repository.find_accepted(revoker_id, resource.id)
        return held is not None and held.level.satisfies(grant.level)
