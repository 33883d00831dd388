"""SQLAlchemy ORM models for IAM bounded context.

These models map to database tables and are used by repository implementations.
"""

from iam.infrastructure.models.resource import ResourceModel
from iam.infrastructure.models.resource_grant import ResourceGrantModel
from iam.infrastructure.models.subject import SubjectModel
from iam.infrastructure.models.workspace import WorkspaceModel
from iam.infrastructure.models.workspace_membership import WorkspaceMembershipModel

__all__ = [
    "ResourceGrantModel",
    "ResourceModel",
    "SubjectModel",
    "WorkspaceMembershipModel",
    "WorkspaceModel",
]
