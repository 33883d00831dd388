"""Authorization decision value object.

The resolver never raises for a denied request; it returns a decision that
transport adapters map to their own protocol (e.g. HTTP 403). Missing
subjects or resources are not decisions and are raised as NotFound errors.
"""

from __future__ import annotations

from dataclasses import dataclass

from shared_kernel.authorization.types import DecisionSource

INSUFFICIENT_PERMISSION = "insufficient permission"


@dataclass(frozen=True)
class AuthorizationDecision:
    """Outcome of a single permission check.

    Attributes:
        allowed: Whether the request is permitted
        reason: Human-readable reason for a denial (None when allowed)
        source: Cascade layer that matched (None when denied)
        matched_resource_id: Resource on which the match was found; differs
            from the requested resource when the match came from an ancestor
        depth: Number of parent hops from the requested resource to the
            matched resource (0 for a direct match)
    """

    allowed: bool
    reason: str | None = None
    source: DecisionSource | None = None
    matched_resource_id: str | None = None
    depth: int | None = None

    def __bool__(self) -> bool:
        return self.allowed

    @classmethod
    def allow(
        cls,
        source: DecisionSource,
        matched_resource_id: str,
        depth: int = 0,
    ) -> AuthorizationDecision:
        """Build an Allow decision."""
        return cls(
            allowed=True,
            source=source,
            matched_resource_id=matched_resource_id,
            depth=depth,
        )

    @classmethod
    def deny(cls, reason: str = INSUFFICIENT_PERMISSION) -> AuthorizationDecision:
        """Build a Deny decision."""
        return cls(allowed=False, reason=reason)
