"""Protocol for workspace membership service observability.

Defines the interface for domain probes that capture application-level
domain events for workspace membership operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class WorkspaceMembershipServiceProbe(Protocol):
    """Domain probe for workspace membership operations.

    Records domain-significant events related to membership changes.
    """

    def member_invited(
        self,
        workspace_id: str,
        subject_id: str,
        role: str,
        inviter_id: str,
    ) -> None:
        """Record a new membership."""
        ...

    def member_reactivated(
        self,
        workspace_id: str,
        subject_id: str,
        role: str,
        inviter_id: str,
    ) -> None:
        """Record that an inactive membership was brought back."""
        ...

    def member_role_changed(
        self,
        workspace_id: str,
        subject_id: str,
        old_role: str,
        new_role: str,
        changer_id: str,
    ) -> None:
        """Record a role change."""
        ...

    def member_removed(
        self,
        workspace_id: str,
        subject_id: str,
        remover_id: str,
    ) -> None:
        """Record that a membership was deactivated."""
        ...

    def owner_membership_ensured(
        self,
        workspace_id: str,
        subject_id: str,
        created: bool,
    ) -> None:
        """Record that the workspace owner holds an active OWNER membership."""
        ...

    def membership_operation_denied(
        self,
        operation: str,
        actor_id: str,
        workspace_id: str,
    ) -> None:
        """Record that an actor was not allowed to change memberships."""
        ...

    def with_context(
        self, context: ObservationContext
    ) -> WorkspaceMembershipServiceProbe:
        """Return a new probe with additional context."""
        ...


class DefaultWorkspaceMembershipServiceProbe:
    """Default implementation of WorkspaceMembershipServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self, exclude: set[str] | None = None) -> dict[str, Any]:
        """Get context as kwargs dict, excluding specified keys.

        Args:
            exclude: Set of keys to exclude from context (avoids parameter collision)

        Returns:
            Context dict with excluded keys filtered out
        """
        if self._context is None:
            return {}

        context_dict = self._context.as_dict()
        if exclude:
            return {k: v for k, v in context_dict.items() if k not in exclude}
        return context_dict

    def with_context(
        self, context: ObservationContext
    ) -> DefaultWorkspaceMembershipServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultWorkspaceMembershipServiceProbe(
            logger=self._logger, context=context
        )

    def member_invited(
        self,
        workspace_id: str,
        subject_id: str,
        role: str,
        inviter_id: str,
    ) -> None:
        """Record a new membership."""
        self._logger.info(
            "workspace_member_invited",
            workspace_id=workspace_id,
            subject_id=subject_id,
            role=role,
            inviter_id=inviter_id,
            **self._get_context_kwargs(exclude={"workspace_id", "subject_id"}),
        )

    def member_reactivated(
        self,
        workspace_id: str,
        subject_id: str,
        role: str,
        inviter_id: str,
    ) -> None:
        """Record that an inactive membership was brought back."""
        self._logger.info(
            "workspace_member_reactivated",
            workspace_id=workspace_id,
            subject_id=subject_id,
            role=role,
            inviter_id=inviter_id,
            **self._get_context_kwargs(exclude={"workspace_id", "subject_id"}),
        )

    def member_role_changed(
        self,
        workspace_id: str,
        subject_id: str,
        old_role: str,
        new_role: str,
        changer_id: str,
    ) -> None:
        """Record a role change."""
        self._logger.info(
            "workspace_member_role_changed",
            workspace_id=workspace_id,
            subject_id=subject_id,
            old_role=old_role,
            new_role=new_role,
            changer_id=changer_id,
            **self._get_context_kwargs(exclude={"workspace_id", "subject_id"}),
        )

    def member_removed(
        self,
        workspace_id: str,
        subject_id: str,
        remover_id: str,
    ) -> None:
        """Record that a membership was deactivated."""
        self._logger.info(
            "workspace_member_removed",
            workspace_id=workspace_id,
            subject_id=subject_id,
            remover_id=remover_id,
            **self._get_context_kwargs(exclude={"workspace_id", "subject_id"}),
        )

    def owner_membership_ensured(
        self,
        workspace_id: str,
        subject_id: str,
        created: bool,
    ) -> None:
        """Record that the workspace owner holds an active OWNER membership."""
        self._logger.info(
            "workspace_owner_membership_ensured",
            workspace_id=workspace_id,
            subject_id=subject_id,
            created=created,
            **self._get_context_kwargs(exclude={"workspace_id", "subject_id"}),
        )

    def membership_operation_denied(
        self,
        operation: str,
        actor_id: str,
        workspace_id: str,
    ) -> None:
        """Record that an actor was not allowed to change memberships."""
        self._logger.warning(
            "workspace_membership_operation_denied",
            operation=operation,
            actor_id=actor_id,
            workspace_id=workspace_id,
            **self._get_context_kwargs(exclude={"workspace_id"}),
        )
