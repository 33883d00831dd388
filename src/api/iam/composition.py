"""Composition of IAM services for a given database session.

Transport adapters call these factories once per request (or unit of work)
with the session they obtained from ``infrastructure.database``. The token
codec is process-wide and cached.
"""

from functools import lru_cache

from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.services import (
    AuthorizationService,
    CredentialService,
    GrantMigrationService,
    ResourceGrantService,
    ResourceHierarchyService,
    WorkspaceMembershipService,
)
from iam.infrastructure.resource_grant_repository import ResourceGrantRepository
from iam.infrastructure.resource_repository import (
    ResourceRepository,
    WorkspaceRepository,
)
from iam.infrastructure.subject_repository import SubjectRepository
from iam.infrastructure.workspace_membership_repository import (
    WorkspaceMembershipRepository,
)
from infrastructure.settings import get_credential_settings
from shared_kernel.auth import DefaultSessionTokenProbe, SessionTokenCodec


@lru_cache
def get_session_token_codec() -> SessionTokenCodec:
    """Get the process-wide SessionTokenCodec.

    Uses lru_cache to ensure a single codec instance is reused across
    requests.

    Raises:
        ValueError: If FOLIO_AUTH_SECRET_KEY is not configured
    """
    settings = get_credential_settings()
    return SessionTokenCodec(
        secret_key=settings.secret_key.get_secret_value(),
        probe=DefaultSessionTokenProbe(),
        algorithm=settings.algorithm,
        ttl=settings.token_ttl,
        issuer=settings.issuer,
    )


def get_authorization_service(session: AsyncSession) -> AuthorizationService:
    """Build the authorization resolver bound to ``session``."""
    return AuthorizationService(
        subject_repository=SubjectRepository(session=session),
        resource_repository=ResourceRepository(session=session),
        grant_repository=ResourceGrantRepository(session=session),
        membership_repository=WorkspaceMembershipRepository(session=session),
        workspace_repository=WorkspaceRepository(session=session),
    )


def get_credential_service(session: AsyncSession) -> CredentialService:
    """Build the credential service bound to ``session``."""
    return CredentialService(
        session=session,
        subject_repository=SubjectRepository(session=session),
        token_codec=get_session_token_codec(),
    )


def get_resource_grant_service(session: AsyncSession) -> ResourceGrantService:
    """Build the resource grant service bound to ``session``."""
    return ResourceGrantService(
        session=session,
        grant_repository=ResourceGrantRepository(session=session),
        resource_repository=ResourceRepository(session=session),
        subject_repository=SubjectRepository(session=session),
        authz=get_authorization_service(session),
    )


def get_workspace_membership_service(
    session: AsyncSession,
) -> WorkspaceMembershipService:
    """Build the workspace membership service bound to ``session``."""
    return WorkspaceMembershipService(
        session=session,
        membership_repository=WorkspaceMembershipRepository(session=session),
        workspace_repository=WorkspaceRepository(session=session),
        subject_repository=SubjectRepository(session=session),
        authz=get_authorization_service(session),
    )


def get_resource_hierarchy_service(session: AsyncSession) -> ResourceHierarchyService:
    """Build the resource hierarchy service bound to ``session``."""
    return ResourceHierarchyService(
        session=session,
        resource_repository=ResourceRepository(session=session),
        authz=get_authorization_service(session),
    )


def get_grant_migration_service(session: AsyncSession) -> GrantMigrationService:
    """Build the grant migration service bound to ``session``."""
    return GrantMigrationService(
        session=session,
        grant_repository=ResourceGrantRepository(session=session),
        resource_repository=ResourceRepository(session=session),
        membership_repository=WorkspaceMembershipRepository(session=session),
    )
