"""Application services for IAM bounded context.

Application services orchestrate domain aggregates, repositories, and
other infrastructure to fulfill use cases. They are the "front door" to
the IAM context.
"""

from iam.application.services.authorization_service import AuthorizationService
from iam.application.services.credential_service import CredentialService
from iam.application.services.grant_migration_service import GrantMigrationService
from iam.application.services.resource_grant_service import ResourceGrantService
from iam.application.services.resource_hierarchy_service import (
    ResourceHierarchyService,
)
from iam.application.services.workspace_membership_service import (
    WorkspaceMembershipService,
)

__all__ = [
    "AuthorizationService",
    "CredentialService",
    "GrantMigrationService",
    "ResourceGrantService",
    "ResourceHierarchyService",
    "WorkspaceMembershipService",
]
