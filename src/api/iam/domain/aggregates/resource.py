"""Resource aggregate for IAM context."""

from __future__ import annotations

from dataclasses import dataclass

from iam.domain.value_objects import ResourceId, SubjectId, WorkspaceId


@dataclass(frozen=True)
class Resource:
    """Authorization view of a document or sub-document.

    Only the fields that take part in access decisions are modelled here;
    content lives with the document store. Resources form a forest where
    ``parent_id`` is a plain id reference toward the root.
    """

    id: ResourceId
    owner_id: SubjectId
    parent_id: ResourceId | None = None
    workspace_id: WorkspaceId | None = None

    @property
    def is_root(self) -> bool:
        """Whether this resource sits at the top of its tree."""
        return self.parent_id is None

    def is_owned_by(self, subject_id: SubjectId) -> bool:
        """Check whether ``subject_id`` is the resource owner."""
        return self.owner_id == subject_id

    def reparented(self, parent_id: ResourceId | None) -> Resource:
        """Return a copy of this resource attached under ``parent_id``.

        Raises:
            ValueError: If the resource would become its own parent
        """
        if parent_id == self.id:
            raise ValueError("A resource cannot be its own parent")
        return Resource(
            id=self.id,
            owner_id=self.owner_id,
            parent_id=parent_id,
            workspace_id=self.workspace_id,
        )
