"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures request-scoped and domain-relevant metadata that should be
    included with all instrumentation events. Transport adapters build one
    per request and bind it to probes with ``with_context``.

    Attributes:
        request_id: Unique identifier for the current request/operation.
        subject_id: Identifier of the authenticated subject (if known).
        session_id: Session identifier embedded in the caller's credential.
        workspace_id: Workspace the request is scoped to (if applicable).
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(
            request_id="req-123",
            subject_id="01HZ...",
        )
        probe = DefaultAuthorizationProbe().with_context(context)
    """

    request_id: str | None = None
    subject_id: str | None = None
    session_id: str | None = None
    workspace_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.subject_id is not None:
            result["subject_id"] = self.subject_id
        if self.session_id is not None:
            result["session_id"] = self.session_id
        if self.workspace_id is not None:
            result["workspace_id"] = self.workspace_id
        result.update(self.extra)
        return result

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Return a copy of this context with additional extra metadata."""
        return ObservationContext(
            request_id=self.request_id,
            subject_id=self.subject_id,
            session_id=self.session_id,
            workspace_id=self.workspace_id,
            extra={**self.extra, **kwargs},
        )
