"""Protocol for resource hierarchy service observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ResourceHierarchyServiceProbe(Protocol):
    """Domain probe for re-parenting resources."""

    def resource_moved(
        self,
        resource_id: str,
        old_parent_id: str | None,
        new_parent_id: str | None,
        mover_id: str,
    ) -> None:
        """Record a successful move."""
        ...

    def move_rejected(
        self,
        resource_id: str,
        new_parent_id: str | None,
        reason: str,
    ) -> None:
        """Record a move refused because it would create a cycle."""
        ...

    def with_context(self, context: ObservationContext) -> ResourceHierarchyServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultResourceHierarchyServiceProbe:
    """Default implementation of ResourceHierarchyServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(
        self, context: ObservationContext
    ) -> DefaultResourceHierarchyServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultResourceHierarchyServiceProbe(logger=self._logger, context=context)

    def resource_moved(
        self,
        resource_id: str,
        old_parent_id: str | None,
        new_parent_id: str | None,
        mover_id: str,
    ) -> None:
        """Record a successful move."""
        self._logger.info(
            "resource_moved",
            resource_id=resource_id,
            old_parent_id=old_parent_id,
            new_parent_id=new_parent_id,
            mover_id=mover_id,
            **self._get_context_kwargs(),
        )

    def move_rejected(
        self,
        resource_id: str,
        new_parent_id: str | None,
        reason: str,
    ) -> None:
        """Record a move refused because it would create a cycle."""
        self._logger.warning(
            "resource_move_rejected",
            resource_id=resource_id,
            new_parent_id=new_parent_id,
            reason=reason,
            **self._get_context_kwargs(),
        )
