"""ResourceGrant aggregate for IAM context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from iam.domain.value_objects import (
    GrantStatus,
    PermissionLevel,
    ResourceGrantId,
    ResourceId,
    SubjectId,
)


@dataclass
class ResourceGrant:
    """Per-resource ACL entry with an invitation workflow.

    A grant is created PENDING by an inviter and resolved exactly once by
    the invited subject:

        PENDING --accept--> ACCEPTED
        PENDING --reject--> REJECTED

    Both outcomes are terminal. Only ACCEPTED grants confer access.

    Business rules:
    - Only the invited subject may accept or reject
    - A resolved grant cannot be resolved again
    - The level never changes after creation
    """

    id: ResourceGrantId
    subject_id: SubjectId
    resource_id: ResourceId
    level: PermissionLevel
    status: GrantStatus
    invited_by: SubjectId
    created_at: datetime
    updated_at: datetime

    @classmethod
    def invite(
        cls,
        subject_id: SubjectId,
        resource_id: ResourceId,
        level: PermissionLevel,
        invited_by: SubjectId,
    ) -> ResourceGrant:
        """Factory method for a new PENDING grant.

        Args:
            subject_id: The invited subject
            resource_id: The resource being shared
            level: Access level conferred once accepted
            invited_by: The subject issuing the invitation

        Returns:
            A new ResourceGrant in PENDING status

        Raises:
            ValueError: If a subject tries to invite themselves
        """
        if subject_id == invited_by:
            raise ValueError("A subject cannot invite themselves to a resource")

        now = datetime.now(UTC)
        return cls(
            id=ResourceGrantId.generate(),
            subject_id=subject_id,
            resource_id=resource_id,
            level=level,
            status=GrantStatus.PENDING,
            invited_by=invited_by,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_pending(self) -> bool:
        """Whether the invitation still awaits a response."""
        return self.status is GrantStatus.PENDING

    @property
    def is_active(self) -> bool:
        """Whether the grant takes part in authorization."""
        return self.status is GrantStatus.ACCEPTED

    def is_addressed_to(self, subject_id: SubjectId) -> bool:
        """Check whether ``subject_id`` is the invited subject."""
        return self.subject_id == subject_id

    def accept(self) -> None:
        """Move the grant from PENDING to ACCEPTED.

        Raises:
            ValueError: If the grant is already resolved
        """
        self._resolve(GrantStatus.ACCEPTED)

    def reject(self) -> None:
        """Move the grant from PENDING to REJECTED.

        Raises:
            ValueError: If the grant is already resolved
        """
        self._resolve(GrantStatus.REJECTED)

    def _resolve(self, outcome: GrantStatus) -> None:
        if self.status.is_terminal:
            raise ValueError(
                f"Grant {self.id} is already {self.status} and cannot become {outcome}"
            )
        self.status = outcome
        self.updated_at = datetime.now(UTC)
