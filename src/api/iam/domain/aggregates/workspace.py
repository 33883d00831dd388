"""Workspace aggregate for IAM context."""

from __future__ import annotations

from dataclasses import dataclass

from iam.domain.value_objects import SubjectId, WorkspaceId


@dataclass(frozen=True)
class Workspace:
    """Workspace as seen by authorization: an owner and an optional parent.

    Workspaces may nest, but memberships are scoped to a single workspace
    and are not inherited by child workspaces.
    """

    id: WorkspaceId
    owner_id: SubjectId
    parent_workspace_id: WorkspaceId | None = None

    def is_owned_by(self, subject_id: SubjectId) -> bool:
        """Check whether ``subject_id`` is the recorded workspace owner."""
        return self.owner_id == subject_id
