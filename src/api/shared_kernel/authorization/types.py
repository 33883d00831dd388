"""Authorization type definitions shared across bounded contexts.

Defines the permission levels a caller can require on a resource and the
capability tags a workspace role may authorize. These enums ensure type
safety and prevent hardcoded strings across the codebase.
"""

from __future__ import annotations

from enum import StrEnum


class PermissionLevel(StrEnum):
    """Access level on a single resource.

    Levels form a total order by declaration order: READ < WRITE < OWNER.
    "At least this much access" comparisons go through ``ordinal``.
    """

    READ = "read"
    WRITE = "write"
    OWNER = "owner"

    @property
    def ordinal(self) -> int:
        """Position of this level in the total order (READ is 0)."""
        return list(PermissionLevel).index(self)

    def satisfies(self, required: PermissionLevel) -> bool:
        """Check whether holding this level is enough for ``required``."""
        return self.ordinal >= required.ordinal


class Capability(StrEnum):
    """Named actions a workspace role may or may not authorize.

    Each value corresponds to a row of the static capability table in
    ``iam.domain.capabilities``.
    """

    CREATE_RESOURCE = "create_resource"
    EDIT_RESOURCE = "edit_resource"
    DELETE_RESOURCE = "delete_resource"
    VIEW_RESOURCE = "view_resource"
    SHARE_RESOURCE = "share_resource"
    VIEW_SHARED_ONLY = "view_shared_only"
    MANAGE_MEMBERS = "manage_members"
    INVITE_MEMBERS = "invite_members"
    MANAGE_SETTINGS = "manage_settings"
    DELETE_WORKSPACE = "delete_workspace"


class DecisionSource(StrEnum):
    """Layer of the decision cascade that produced an Allow."""

    OWNERSHIP = "ownership"
    RESOURCE_GRANT = "resource_grant"
    WORKSPACE_ROLE = "workspace_role"


def format_resource(resource_id: str) -> str:
    """Format a resource identifier for logs and error messages.

    Args:
        resource_id: The unique identifier for the resource

    Returns:
        Formatted resource string (e.g., "resource:01HZ...")

    Example:
        >>> format_resource("abc123")
        "resource:abc123"
    """
    return f"resource:{resource_id}"


def format_subject(subject_id: str) -> str:
    """Format a subject identifier for logs and error messages.

    Args:
        subject_id: The unique identifier for the subject

    Returns:
        Formatted subject string (e.g., "subject:alice")
    """
    return f"subject:{subject_id}"
