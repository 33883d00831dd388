"""Domain probe for authorization operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to permission checks and capability
lookups performed by the authorization resolver.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AuthorizationProbe(Protocol):
    """Domain probe for authorization operations."""

    def access_granted(
        self,
        subject: str,
        resource: str,
        level: str,
        source: str,
        matched_resource: str,
        depth: int,
    ) -> None:
        """Record that a permission check resolved to Allow."""
        ...

    def access_denied(
        self,
        subject: str,
        resource: str,
        level: str,
        reason: str,
        ancestors_checked: int,
    ) -> None:
        """Record that a permission check resolved to Deny."""
        ...

    def capability_checked(
        self,
        subject: str,
        workspace: str,
        capabilities: list[str],
        require_all: bool,
        granted: bool,
    ) -> None:
        """Record that a workspace capability check was evaluated."""
        ...

    def hierarchy_corrupted(
        self,
        resource: str,
        error: str,
    ) -> None:
        """Record that the ancestor walk found a broken or cyclic chain."""
        ...

    def with_context(self, context: ObservationContext) -> AuthorizationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAuthorizationProbe:
    """Default implementation of AuthorizationProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultAuthorizationProbe:
        """Create a new probe with observation context bound."""
        return DefaultAuthorizationProbe(logger=self._logger, context=context)

    def access_granted(
        self,
        subject: str,
        resource: str,
        level: str,
        source: str,
        matched_resource: str,
        depth: int,
    ) -> None:
        """Record that a permission check resolved to Allow."""
        self._logger.debug(
            "authorization_access_granted",
            subject=subject,
            resource=resource,
            level=level,
            source=source,
            matched_resource=matched_resource,
            depth=depth,
            **self._get_context_kwargs(),
        )

    def access_denied(
        self,
        subject: str,
        resource: str,
        level: str,
        reason: str,
        ancestors_checked: int,
    ) -> None:
        """Record that a permission check resolved to Deny."""
        self._logger.info(
            "authorization_access_denied",
            subject=subject,
            resource=resource,
            level=level,
            reason=reason,
            ancestors_checked=ancestors_checked,
            **self._get_context_kwargs(),
        )

    def capability_checked(
        self,
        subject: str,
        workspace: str,
        capabilities: list[str],
        require_all: bool,
        granted: bool,
    ) -> None:
        """Record that a workspace capability check was evaluated."""
        self._logger.debug(
            "authorization_capability_checked",
            subject=subject,
            workspace=workspace,
            capabilities=capabilities,
            require_all=require_all,
            granted=granted,
            **self._get_context_kwargs(),
        )

    def hierarchy_corrupted(
        self,
        resource: str,
        error: str,
    ) -> None:
        """Record that the ancestor walk found a broken or cyclic chain."""
        self._logger.error(
            "authorization_hierarchy_corrupted",
            resource=resource,
            error=error,
            **self._get_context_kwargs(),
        )
