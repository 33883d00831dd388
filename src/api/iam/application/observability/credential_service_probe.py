"""Protocol for credential service observability.

Defines the interface for domain probes that capture session issuance
and credential validation events.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class CredentialServiceProbe(Protocol):
    """Domain probe for credential operations."""

    def session_issued(
        self,
        subject_id: str,
        session_id: str,
    ) -> None:
        """Record that a new session replaced the subject's previous one."""
        ...

    def session_validated(
        self,
        subject_id: str,
        legacy: bool,
    ) -> None:
        """Record that a credential was accepted.

        Args:
            subject_id: The authenticated subject
            legacy: True when accepted because no session id was stored yet
        """
        ...

    def session_rejected(
        self,
        reason: str,
        subject_identity: str | None = None,
    ) -> None:
        """Record that a credential was refused."""
        ...

    def session_ended(
        self,
        subject_id: str,
    ) -> None:
        """Record that a subject's session was ended (logout)."""
        ...

    def with_context(self, context: ObservationContext) -> CredentialServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultCredentialServiceProbe:
    """Default implementation of CredentialServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultCredentialServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultCredentialServiceProbe(logger=self._logger, context=context)

    def session_issued(
        self,
        subject_id: str,
        session_id: str,
    ) -> None:
        """Record that a new session replaced the subject's previous one."""
        self._logger.info(
            "session_issued",
            subject_id=subject_id,
            session_id=session_id,
            **self._get_context_kwargs(exclude={"subject_id", "session_id"}),
        )

    def session_validated(
        self,
        subject_id: str,
        legacy: bool,
    ) -> None:
        """Record that a credential was accepted."""
        self._logger.debug(
            "session_validated",
            subject_id=subject_id,
            legacy=legacy,
            **self._get_context_kwargs(exclude={"subject_id"}),
        )

    def session_rejected(
        self,
        reason: str,
        subject_identity: str | None = None,
    ) -> None:
        """Record that a credential was refused."""
        self._logger.warning(
            "session_rejected",
            reason=reason,
            subject_identity=subject_identity,
            **self._get_context_kwargs(),
        )

    def session_ended(
        self,
        subject_id: str,
    ) -> None:
        """Record that a subject's session was ended (logout)."""
        self._logger.info(
            "session_ended",
            subject_id=subject_id,
            **self._get_context_kwargs(exclude={"subject_id"}),
        )
