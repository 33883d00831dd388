"""Value objects for IAM domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ulid import ULID

from shared_kernel.authorization.types import Capability, PermissionLevel

__all__ = [
    "Capability",
    "GrantStatus",
    "MembershipId",
    "PermissionLevel",
    "ResourceGrantId",
    "ResourceId",
    "SubjectId",
    "WorkspaceId",
    "WorkspaceRole",
]


@dataclass(frozen=True)
class SubjectId:
    """Identifier for a Subject (an account that can authenticate).

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> SubjectId:
        """Generate a new SubjectId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> SubjectId:
        """Create SubjectId from string value.

        Args:
            value: ULID string

        Returns:
            SubjectId instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid SubjectId: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class ResourceId:
    """Identifier for a Resource (a document or sub-document)."""

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> ResourceId:
        """Generate a new ResourceId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> ResourceId:
        """Create ResourceId from string value.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid ResourceId: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class WorkspaceId:
    """Identifier for a Workspace.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> WorkspaceId:
        """Generate a new WorkspaceId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> WorkspaceId:
        """Create WorkspaceId from string value.

        Args:
            value: ULID string

        Returns:
            WorkspaceId instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid WorkspaceId: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class ResourceGrantId:
    """Identifier for a ResourceGrant (one ACL entry)."""

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> ResourceGrantId:
        """Generate a new ResourceGrantId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> ResourceGrantId:
        """Create ResourceGrantId from string value.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid ResourceGrantId: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class MembershipId:
    """Identifier for a WorkspaceMembership row."""

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> MembershipId:
        """Generate a new MembershipId using ULID."""
        return cls(value=str(ULID()))


class GrantStatus(StrEnum):
    """Workflow status of a ResourceGrant.

    PENDING is the only non-terminal state. Only ACCEPTED grants take part
    in authorization.
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        """Whether no further transition is allowed from this status."""
        return self is not GrantStatus.PENDING


class WorkspaceRole(StrEnum):
    """Roles for workspace membership.

    Ordered OWNER(5) > ADMIN(4) > EDITOR(3) > VIEWER(2) > GUEST(1).
    What each role may do is defined by the capability table, not by rank.
    """

    OWNER = "owner"
    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"
    GUEST = "guest"

    @property
    def rank(self) -> int:
        """Numeric weight of the role (OWNER is 5, GUEST is 1)."""
        return len(WorkspaceRole) - list(WorkspaceRole).index(self)

    def outranks(self, other: WorkspaceRole) -> bool:
        """Check whether this role is strictly higher than ``other``."""
        return self.rank > other.rank
