"""Domain-Oriented Observability for IAM application layer.

Probes for application service operations following Domain-Oriented Observability patterns.
"""

from iam.application.observability.credential_service_probe import (
    CredentialServiceProbe,
    DefaultCredentialServiceProbe,
)
from iam.application.observability.grant_migration_probe import (
    DefaultGrantMigrationProbe,
    GrantMigrationProbe,
)
from iam.application.observability.resource_grant_service_probe import (
    DefaultResourceGrantServiceProbe,
    ResourceGrantServiceProbe,
)
from iam.application.observability.resource_hierarchy_service_probe import (
    DefaultResourceHierarchyServiceProbe,
    ResourceHierarchyServiceProbe,
)
from iam.application.observability.workspace_membership_service_probe import (
    DefaultWorkspaceMembershipServiceProbe,
    WorkspaceMembershipServiceProbe,
)

__all__ = [
    "CredentialServiceProbe",
    "DefaultCredentialServiceProbe",
    "GrantMigrationProbe",
    "DefaultGrantMigrationProbe",
    "ResourceGrantServiceProbe",
    "DefaultResourceGrantServiceProbe",
    "ResourceHierarchyServiceProbe",
    "DefaultResourceHierarchyServiceProbe",
    "WorkspaceMembershipServiceProbe",
    "DefaultWorkspaceMembershipServiceProbe",
]
