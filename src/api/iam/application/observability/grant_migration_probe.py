"""Protocol for grant migration observability.

Batch migrations are best-effort: per-record failures are logged here and
the batch carries on.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class GrantMigrationProbe(Protocol):
    """Domain probe for grant-to-membership migration batches."""

    def migration_started(self, operation: str, total: int) -> None:
        """Record the start of a batch."""
        ...

    def record_failed(self, operation: str, record_id: str, error: str) -> None:
        """Record that one record could not be processed."""
        ...

    def migration_completed(
        self,
        operation: str,
        processed: int,
        skipped: int,
        failed: int,
    ) -> None:
        """Record the end of a batch with its tallies."""
        ...

    def with_context(self, context: ObservationContext) -> GrantMigrationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultGrantMigrationProbe:
    """Default implementation of GrantMigrationProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultGrantMigrationProbe:
        """Create a new probe with observation context bound."""
        return DefaultGrantMigrationProbe(logger=self._logger, context=context)

    def migration_started(self, operation: str, total: int) -> None:
        """Record the start of a batch."""
        self._logger.info(
            "grant_migration_started",
            operation=operation,
            total=total,
            **self._get_context_kwargs(),
        )

    def record_failed(self, operation: str, record_id: str, error: str) -> None:
        """Record that one record could not be processed."""
        self._logger.error(
            "grant_migration_record_failed",
            operation=operation,
            record_id=record_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def migration_completed(
        self,
        operation: str,
        processed: int,
        skipped: int,
        failed: int,
    ) -> None:
        """Record the end of a batch with its tallies."""
        self._logger.info(
            "grant_migration_completed",
            operation=operation,
            processed=processed,
            skipped=skipped,
            failed=failed,
            **self._get_context_kwargs(),
        )
