"""Authorization resolver port for IAM bounded context.

Mutating services depend on this protocol rather than on the concrete
resolver so that their permission checks can be substituted in tests.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from iam.domain.value_objects import (
    Capability,
    PermissionLevel,
    ResourceId,
    SubjectId,
    WorkspaceId,
)
from shared_kernel.authorization import AuthorizationDecision


@runtime_checkable
class IAuthorizationResolver(Protocol):
    """Answers "may this subject do this?" without mutating state."""

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
            An Allow or Deny decision

        Raises:
            SubjectNotFoundError: If the subject does not exist
            ResourceNotFoundError: If the resource does not exist
            ResourceHierarchyCorruptedError: If the parent chain is broken
        """
        ...

    async def has_any_capability(
        self,
        subject_id: SubjectId,
        workspace_id: WorkspaceId,
        capabilities: Iterable[Capability],
    ) -> bool:
        """True if an active membership's role covers at least one capability.

        Raises:
            SubjectNotFoundError: If the subject does not exist
            WorkspaceNotFoundError: If the workspace does not exist
        """
        ...

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
        ...
