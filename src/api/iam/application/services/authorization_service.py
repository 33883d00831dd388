"""Authorization resolver for IAM bounded context.

Decides whether a subject may act on a resource by evaluating, in strict
priority and stopping at the first match:

1. Ownership of the resource
2. An ACCEPTED resource grant at or above the required level
3. An active workspace membership whose role covers the required level
4. The same three layers on each ancestor, walking toward the root

If nothing matches, the request is denied. The walk has no depth limit, so
a grant on a root resource reaches every descendant.

The resolver only reads. It is safe to call concurrently without locking.
"""

from __future__ import annotations

from collections.abc import Iterable

from iam.domain.aggregates import Resource
from iam.domain.capabilities import (
    role_has_all,
    role_has_any,
    role_satisfies_level,
)
from iam.domain.value_objects import (
    Capability,
    PermissionLevel,
    ResourceId,
    SubjectId,
    WorkspaceId,
)
from iam.ports.exceptions import (
    ForbiddenError,
    ResourceHierarchyCorruptedError,
    ResourceNotFoundError,
    SubjectNotFoundError,
    WorkspaceNotFoundError,
)
from iam.ports.repositories import (
    IResourceGrantRepository,
    IResourceRepository,
    ISubjectRepository,
    IWorkspaceMembershipRepository,
    IWorkspaceRepository,
)
from shared_kernel.authorization import (
    AuthorizationDecision,
    DecisionSource,
    format_resource,
    format_subject,
)
from shared_kernel.authorization.observability import (
    AuthorizationProbe,
    DefaultAuthorizationProbe,
)


class AuthorizationService:
    """Application service resolving permission checks and capability lookups.

    Implements IAuthorizationResolver.
    """

    def __init__(
        self,
        subject_repository: ISubjectRepository,
        resource_repository: IResourceRepository,
        grant_repository: IResourceGrantRepository,
        membership_repository: IWorkspaceMembershipRepository,
        workspace_repository: IWorkspaceRepository,
        probe: AuthorizationProbe | None = None,
    ):
        """Initialize AuthorizationService with dependencies.

        Args:
            subject_repository: Repository used to verify the subject exists
            resource_repository: Read access to the resource forest
            grant_repository: Source of per-resource ACL entries
            membership_repository: Source of workspace memberships
            workspace_repository: Used to verify a queried workspace exists
            probe: Optional domain probe for observability
        """
        self._subject_repository = subject_repository
        self._resource_repository = resource_repository
        self._grant_repository = grant_repository
        self._membership_repository = membership_repository
        self._workspace_repository = workspace_repository
        self._probe = probe or DefaultAuthorizationProbe()

    async def check(
        self,
        subject_id: SubjectId,
        resource_id: ResourceId,
        required_level: PermissionLevel,
    ) -> AuthorizationDecision:
        """Decide whether a subject holds at least ``required_level`` on a resource.

        Args:
            subject_id: The subject requesting access
            resource_id: The resource being accessed
            required_level: The minimum permission level needed

        Returns:
            Allow with the matching layer and depth, or Deny

        Raises:
            SubjectNotFoundError: If the subject does not exist
            ResourceNotFoundError: If the resource does not exist
            ResourceHierarchyCorruptedError: If an ancestor is missing or the
                parent chain loops
        """
        if await self._subject_repository.get_by_id(subject_id) is None:
            raise SubjectNotFoundError(f"Subject {subject_id} not found")

        resource = await self._resource_repository.get_by_id(resource_id)
        if resource is None:
            raise ResourceNotFoundError(f"Resource {resource_id} not found")

        visited: set[ResourceId] = set()
        current = resource
        depth = 0

        while True:
            visited.add(current.id)

            source = await self._match_layer(subject_id, current, required_level)
            if source is not None:
                self._probe.access_granted(
                    subject=format_subject(subject_id.value),
                    resource=format_resource(resource_id.value),
                    level=required_level.value,
                    source=source.value,
                    matched_resource=format_resource(current.id.value),
                    depth=depth,
                )
                return AuthorizationDecision.allow(
                    source=source,
                    matched_resource_id=current.id.value,
                    depth=depth,
                )

            if current.parent_id is None:
                break

            current = await self._load_parent(
                resource_id, current.id, current.parent_id, visited
            )
            depth += 1

        decision = AuthorizationDecision.deny()
        self._probe.access_denied(
            subject=format_subject(subject_id.value),
            resource=format_resource(resource_id.value),
            level=required_level.value,
            reason=decision.reason or "",
            ancestors_checked=depth,
        )
        return decision

    async def ensure(
        self,
        subject_id: SubjectId,
        resource_id: ResourceId,
        required_level: PermissionLevel,
    ) -> AuthorizationDecision:
        """Run ``check`` and raise when it denies.

        Use at the start of an operation that must not proceed without access.

        Raises:
            ForbiddenError: If the decision is Deny
            SubjectNotFoundError: If the subject does not exist
            ResourceNotFoundError: If the resource does not exist
        """
        decision = await self.check(subject_id, resource_id, required_level)
        if not decision:
            raise ForbiddenError(
                f"Subject {subject_id} lacks {required_level} on resource "
                f"{resource_id}: {decision.reason}"
            )
        return decision

    async def has_any_capability(
        self,
        subject_id: SubjectId,
        workspace_id: WorkspaceId,
        capabilities: Iterable[Capability],
    ) -> bool:
        """True if an active membership's role covers at least one capability.

        A subject with no membership, or an inactive one, has no capabilities.

        Raises:
            SubjectNotFoundError: If the subject does not exist
            WorkspaceNotFoundError: If the workspace does not exist
        """
        return await self._check_capabilities(
            subject_id, workspace_id, list(capabilities), require_all=False
        )

    async def has_all_capabilities(
        self,
        subject_id: SubjectId,
        workspace_id: WorkspaceId,
        capabilities: Iterable[Capability],
    ) -> bool:
        """True only if an active membership's role covers every capability.

        Raises:
            SubjectNotFoundError: If the subject does not exist
            WorkspaceNotFoundError: If the workspace does not exist
        """
        return await self._check_capabilities(
            subject_id, workspace_id, list(capabilities), require_all=True
        )

    async def ensure_capability(
        self,
        subject_id: SubjectId,
        workspace_id: WorkspaceId,
        *capabilities: Capability,
        require_all: bool = False,
    ) -> None:
        """Raise unless the subject's workspace role covers the capabilities.

        Args:
            subject_id: The acting subject
            workspace_id: The workspace the action targets
            *capabilities: Capabilities to test
            require_all: Require every capability instead of any one

        Raises:
            ForbiddenError: If the role does not cover the capabilities
            SubjectNotFoundError: If the subject does not exist
            WorkspaceNotFoundError: If the workspace does not exist
        """
        granted = await self._check_capabilities(
            subject_id, workspace_id, list(capabilities), require_all=require_all
        )
        if not granted:
            names = ", ".join(c.value for c in capabilities)
            raise ForbiddenError(
                f"Subject {subject_id} lacks [{names}] in workspace {workspace_id}"
            )

    async def _match_layer(
        self,
        subject_id: SubjectId,
        resource: Resource,
        required_level: PermissionLevel,
    ) -> DecisionSource | None:
        """Evaluate ownership, grant and membership on a single resource."""
        if resource.is_owned_by(subject_id):
            return DecisionSource.OWNERSHIP

        # An insufficient grant does not end the check; the workspace role or
        # an ancestor may still allow it.
        grant = await self._grant_repository.find_accepted(subject_id, resource.id)
        if grant is not None and grant.level.satisfies(required_level):
            return DecisionSource.RESOURCE_GRANT

        if resource.workspace_id is not None:
            membership = await self._membership_repository.get(
                subject_id, resource.workspace_id
            )
            if (
                membership is not None
                and membership.is_active
                and role_satisfies_level(membership.role, required_level)
            ):
                return DecisionSource.WORKSPACE_ROLE

        return None

    async def _load_parent(
        self,
        requested_id: ResourceId,
        child_id: ResourceId,
        parent_id: ResourceId,
        visited: set[ResourceId],
    ) -> Resource:
        """Fetch a parent resource, refusing dangling or cyclic links."""
        if parent_id in visited:
            error = f"Parent chain of {requested_id} loops back to {parent_id}"
            self._probe.hierarchy_corrupted(
                resource=format_resource(requested_id.value), error=error
            )
            raise ResourceHierarchyCorruptedError(error)

        parent = await self._resource_repository.get_by_id(parent_id)
        if parent is None:
            error = f"Resource {child_id} references missing parent {parent_id}"
            self._probe.hierarchy_corrupted(
                resource=format_resource(requested_id.value), error=error
            )
            raise ResourceHierarchyCorruptedError(error)

        return parent

    async def _check_capabilities(
        self,
        subject_id: SubjectId,
        workspace_id: WorkspaceId,
        capabilities: list[Capability],
        require_all: bool,
    ) -> bool:
        if await self._subject_repository.get_by_id(subject_id) is None:
            raise SubjectNotFoundError(f"Subject {subject_id} not found")

        if await self._workspace_repository.get_by_id(workspace_id) is None:
            raise WorkspaceNotFoundError(f"Workspace {workspace_id} not found")

        membership = await self._membership_repository.get(subject_id, workspace_id)

        if membership is None or not membership.is_active:
            granted = False
        elif require_all:
            granted = role_has_all(membership.role, capabilities)
        else:
            granted = role_has_any(membership.role, capabilities)

        self._probe.capability_checked(
            subject=format_subject(subject_id.value),
            workspace=workspace_id.value,
            capabilities=[c.value for c in capabilities],
            require_all=require_all,
            granted=granted,
        )
        return granted
