"""Protocol for resource grant service observability.

Defines the interface for domain probes that capture the invitation
workflow of per-resource ACL entries.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ResourceGrantServiceProbe(Protocol):
    """Domain probe for resource grant operations."""

    def grant_invited(
        self,
        grant_id: str,
        resource_id: str,
        subject_id: str,
        level: str,
        inviter_id: str,
    ) -> None:
        """Record a new PENDING grant."""
        ...

    def grant_accepted(self, grant_id: str, subject_id: str) -> None:
        """Record that the invitee accepted a grant."""
        ...

    def grant_rejected(self, grant_id: str, subject_id: str) -> None:
        """Record that the invitee rejected a grant."""
        ...

    def grant_revoked(self, grant_id: str, resource_id: str, revoked_by: str) -> None:
        """Record that a grant was revoked."""
        ...

    def grant_operation_denied(
        self,
        operation: str,
        actor_id: str,
        target_id: str,
    ) -> None:
        """Record that an actor was not allowed to perform a grant operation."""
        ...

    def grant_invite_conflicted(self, resource_id: str, subject_id: str) -> None:
        """Record that a concurrent invite already created the live grant."""
        ...

    def with_context(self, context: ObservationContext) -> ResourceGrantServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultResourceGrantServiceProbe:
    """Default implementation of ResourceGrantServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self, exclude: set[str] | None = None) -> dict[str, Any]:
        """Get context as kwargs dict, excluding specified keys."""
        if self._context is None:
            return {}

        context_dict = self._context.as_dict()
        if exclude:
            return {k: v for k, v in context_dict.items() if k not in exclude}
        return context_dict

    def with_context(
        self, context: ObservationContext
    ) -> DefaultResourceGrantServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultResourceGrantServiceProbe(logger=self._logger, context=context)

    def grant_invited(
        self,
        grant_id: str,
        resource_id: str,
        subject_id: str,
        level: str,
        inviter_id: str,
    ) -> None:
        """Record a new PENDING grant."""
        self._logger.info(
            "resource_grant_invited",
            grant_id=grant_id,
            resource_id=resource_id,
            subject_id=subject_id,
            level=level,
            inviter_id=inviter_id,
            **self._get_context_kwargs(exclude={"subject_id"}),
        )

    def grant_accepted(self, grant_id: str, subject_id: str) -> None:
        """Record that the invitee accepted a grant."""
        self._logger.info(
            "resource_grant_accepted",
            grant_id=grant_id,
            subject_id=subject_id,
            **self._get_context_kwargs(exclude={"subject_id"}),
        )

    def grant_rejected(self, grant_id: str, subject_id: str) -> None:
        """Record that the invitee rejected a grant."""
        self._logger.info(
            "resource_grant_rejected",
            grant_id=grant_id,
            subject_id=subject_id,
            **self._get_context_kwargs(exclude={"subject_id"}),
        )

    def grant_revoked(self, grant_id: str, resource_id: str, revoked_by: str) -> None:
        """Record that a grant was revoked."""
        self._logger.info(
            "resource_grant_revoked",
            grant_id=grant_id,
            resource_id=resource_id,
            revoked_by=revoked_by,
            **self._get_context_kwargs(),
        )

    def grant_operation_denied(
        self,
        operation: str,
        actor_id: str,
        target_id: str,
    ) -> None:
        """Record that an actor was not allowed to perform a grant operation."""
        self._logger.warning(
            "resource_grant_operation_denied",
            operation=operation,
            actor_id=actor_id,
            target_id=target_id,
            **self._get_context_kwargs(),
        )

    def grant_invite_conflicted(self, resource_id: str, subject_id: str) -> None:
        """Record that a concurrent invite already created the live grant."""
        self._logger.warning(
            "resource_grant_invite_conflicted",
            resource_id=resource_id,
            subject_id=subject_id,
            **self._get_context_kwargs(exclude={"subject_id"}),
        )
