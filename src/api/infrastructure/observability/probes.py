"""Domain probes for infrastructure observability.

Domain probes provide a high-level instrumentation API oriented around
domain semantics, keeping infrastructure code clean and testable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class DatabaseEngineProbe(Protocol):
    """Domain probe for database engine lifecycle observability."""

    def engine_created(self, role: str, target: str, pooled: bool) -> None:
        """Record that an async engine was created."""
        ...

    def engine_disposed(self, role: str) -> None:
        """Record that an async engine was disposed."""
        ...

    def with_context(self, context: ObservationContext) -> DatabaseEngineProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultDatabaseEngineProbe:
    """Default implementation of DatabaseEngineProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultDatabaseEngineProbe:
        """Create a new probe with observation context bound."""
        return DefaultDatabaseEngineProbe(logger=self._logger, context=context)

    def engine_created(self, role: str, target: str, pooled: bool) -> None:
        """Record that an async engine was created."""
        self._logger.info(
            "database_engine_created",
            role=role,
            target=target,
            pooled=pooled,
            **self._get_context_kwargs(),
        )

    def engine_disposed(self, role: str) -> None:
        """Record that an async engine was disposed."""
        self._logger.info(
            "database_engine_disposed",
            role=role,
            **self._get_context_kwargs(),
        )
