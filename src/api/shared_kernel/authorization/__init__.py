"""Authorization primitives for resource and workspace access control.

This module provides shared authorization types used across bounded
contexts and by transport adapters that translate decisions into
protocol-specific responses.
"""

from shared_kernel.authorization.decision import AuthorizationDecision
from shared_kernel.authorization.types import (
    Capability,
    DecisionSource,
    PermissionLevel,
    format_resource,
    format_subject,
)

__all__ = [
    "AuthorizationDecision",
    "Capability",
    "DecisionSource",
    "PermissionLevel",
    "format_resource",
    "format_subject",
]
