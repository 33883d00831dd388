"""Domain-Oriented Observability for IAM infrastructure.

Probes for repository operations following Domain-Oriented Observability patterns.
"""

from iam.infrastructure.observability.repository_probe import (
    DefaultResourceGrantRepositoryProbe,
    DefaultResourceRepositoryProbe,
    DefaultSubjectRepositoryProbe,
    DefaultWorkspaceMembershipRepositoryProbe,
    ResourceGrantRepositoryProbe,
    ResourceRepositoryProbe,
    SubjectRepositoryProbe,
    WorkspaceMembershipRepositoryProbe,
)

__all__ = [
    "ResourceGrantRepositoryProbe",
    "DefaultResourceGrantRepositoryProbe",
    "ResourceRepositoryProbe",
    "DefaultResourceRepositoryProbe",
    "SubjectRepositoryProbe",
    "DefaultSubjectRepositoryProbe",
    "WorkspaceMembershipRepositoryProbe",
    "DefaultWorkspaceMembershipRepositoryProbe",
]
