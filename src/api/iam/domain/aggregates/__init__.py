"""Domain aggregates for IAM context.

Aggregates are the core business objects containing state and business logic.
They enforce invariants and business rules without depending on infrastructure.
"""

from iam.domain.aggregates.resource import Resource
from iam.domain.aggregates.resource_grant import ResourceGrant
from iam.domain.aggregates.subject import Subject
from iam.domain.aggregates.workspace import Workspace
from iam.domain.aggregates.workspace_membership import WorkspaceMembership

__all__ = [
    "Resource",
    "ResourceGrant",
    "Subject",
    "Workspace",
    "WorkspaceMembership",
]
