"""Domain probes for IAM repository operations.

Following Domain-Oriented Observability patterns, these probes capture
domain-significant events related to subject, resource, workspace, grant
and membership persistence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class _StructlogProbe:
    """Shared structlog plumbing for the default repository probes."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self, exclude: set[str] | None = None) -> dict[str, Any]:
        """Get context as kwargs dict, excluding keys passed explicitly."""
        if self._context is None:
            return {}

        context_dict = self._context.as_dict()
        if exclude:
            return {k: v for k, v in context_dict.items() if k not in exclude}
        return context_dict

    def with_context(self, context: ObservationContext):
        """Create a new probe with observation context bound."""
        return type(self)(logger=self._logger, context=context)


class SubjectRepositoryProbe(Protocol):
    """Domain probe for subject repository operations."""

    def subject_saved(self, subject_id: str, identity: str) -> None:
        """Record that a subject was successfully saved."""
        ...

    def subject_retrieved(self, subject_id: str) -> None:
        """Record that a subject was retrieved."""
        ...

    def subject_not_found(self, lookup: str) -> None:
        """Record that a subject id or identity did not resolve."""
        ...

    def session_id_replaced(self, subject_id: str, updated: bool) -> None:
        """Record the outcome of a session id overwrite."""
        ...

    def with_context(self, context: ObservationContext) -> SubjectRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultSubjectRepositoryProbe(_StructlogProbe):
    """Default implementation of SubjectRepositoryProbe using structlog."""

    def subject_saved(self, subject_id: str, identity: str) -> None:
        """Record that a subject was successfully saved."""
        self._logger.info(
            "subject_saved",
            subject_id=subject_id,
            identity=identity,
            **self._get_context_kwargs(exclude={"subject_id"}),
        )

    def subject_retrieved(self, subject_id: str) -> None:
        """Record that a subject was retrieved."""
        self._logger.debug(
            "subject_retrieved",
            subject_id=subject_id,
            **self._get_context_kwargs(exclude={"subject_id"}),
        )

    def subject_not_found(self, lookup: str) -> None:
        """Record that a subject id or identity did not resolve."""
        self._logger.debug(
            "subject_not_found",
            lookup=lookup,
            **self._get_context_kwargs(),
        )

    def session_id_replaced(self, subject_id: str, updated: bool) -> None:
        """Record the outcome of a session id overwrite."""
        self._logger.debug(
            "subject_session_id_replaced",
            subject_id=subject_id,
            updated=updated,
            **self._get_context_kwargs(exclude={"subject_id"}),
        )


class ResourceRepositoryProbe(Protocol):
    """Domain probe for resource and workspace lookups."""

    def resource_saved(self, resource_id: str) -> None:
        """Record that a resource was saved."""
        ...

    def resource_not_found(self, resource_id: str) -> None:
        """Record that a resource id did not resolve."""
        ...

    def resource_parent_updated(self, resource_id: str, parent_id: str | None) -> None:
        """Record that a resource was re-parented."""
        ...

    def workspace_not_found(self, workspace_id: str) -> None:
        """Record that a workspace id did not resolve."""
        ...

    def with_context(self, context: ObservationContext) -> ResourceRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultResourceRepositoryProbe(_StructlogProbe):
    """Default implementation of ResourceRepositoryProbe using structlog."""

    def resource_saved(self, resource_id: str) -> None:
        """Record that a resource was saved."""
        self._logger.info(
            "resource_saved",
            resource_id=resource_id,
            **self._get_context_kwargs(),
        )

    def resource_not_found(self, resource_id: str) -> None:
        """Record that a resource id did not resolve."""
        self._logger.debug(
            "resource_not_found",
            resource_id=resource_id,
            **self._get_context_kwargs(),
        )

    def resource_parent_updated(self, resource_id: str, parent_id: str | None) -> None:
        """Record that a resource was re-parented."""
        self._logger.info(
            "resource_parent_updated",
            resource_id=resource_id,
            parent_id=parent_id,
            **self._get_context_kwargs(),
        )

    def workspace_not_found(self, workspace_id: str) -> None:
        """Record that a workspace id did not resolve."""
        self._logger.debug(
            "workspace_not_found",
            workspace_id=workspace_id,
            **self._get_context_kwargs(exclude={"workspace_id"}),
        )


class ResourceGrantRepositoryProbe(Protocol):
    """Domain probe for resource grant persistence."""

    def grant_saved(self, grant_id: str, status: str) -> None:
        """Record that a grant was saved."""
        ...

    def grant_not_found(self, grant_id: str) -> None:
        """Record that a grant id did not resolve."""
        ...

    def grant_deleted(self, grant_id: str) -> None:
        """Record that a grant row was deleted."""
        ...

    def with_context(self, context: ObservationContext) -> ResourceGrantRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultResourceGrantRepositoryProbe(_StructlogProbe):
    """Default implementation of ResourceGrantRepositoryProbe using structlog."""

    def grant_saved(self, grant_id: str, status: str) -> None:
        """Record that a grant was saved."""
        self._logger.info(
            "resource_grant_saved",
            grant_id=grant_id,
            status=status,
            **self._get_context_kwargs(),
        )

    def grant_not_found(self, grant_id: str) -> None:
        """Record that a grant id did not resolve."""
        self._logger.debug(
            "resource_grant_not_found",
            grant_id=grant_id,
            **self._get_context_kwargs(),
        )

    def grant_deleted(self, grant_id: str) -> None:
        """Record that a grant row was deleted."""
        self._logger.info(
            "resource_grant_deleted",
            grant_id=grant_id,
            **self._get_context_kwargs(),
        )


class WorkspaceMembershipRepositoryProbe(Protocol):
    """Domain probe for workspace membership persistence."""

    def membership_saved(
        self,
        subject_id: str,
        workspace_id: str,
        role: str,
        is_active: bool,
    ) -> None:
        """Record that a membership row was saved."""
        ...

    def with_context(
        self, context: ObservationContext
    ) -> WorkspaceMembershipRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultWorkspaceMembershipRepositoryProbe(_StructlogProbe):
    """Default implementation of WorkspaceMembershipRepositoryProbe using structlog."""

    def membership_saved(
        self,
        subject_id: str,
        workspace_id: str,
        role: str,
        is_active: bool,
    ) -> None:
        """Record that a membership row was saved."""
        self._logger.info(
            "workspace_membership_saved",
            subject_id=subject_id,
            workspace_id=workspace_id,
            role=role,
            is_active=is_active,
            **self._get_context_kwargs(exclude={"subject_id", "workspace_id"}),
        )
