"""Application-layer value objects for IAM bounded context.

These are value objects specific to the application layer, representing
cross-cutting concerns like authentication context and batch reports.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from iam.domain.value_objects import GrantStatus, SubjectId


@dataclass(frozen=True)
class IssuedCredential:
    """A freshly issued session credential.

    Returned by the credential service so the caller can hand the token to
    the client while keeping the session id for correlation.
    """

    token: str
    session_id: str
    subject_id: SubjectId


@dataclass(frozen=True)
class AuthenticatedSubject:
    """The subject behind a validated credential.

    This is an application-layer concept (not domain) because it represents
    the authentication context of the request, not a core business entity.
    ``session_id`` is None only for legacy accounts without a bound session.
    """

    subject_id: SubjectId
    identity: str
    session_id: str | None


@dataclass(frozen=True)
class MigrationFailure:
    """One record a batch migration could not process."""

    record_id: str
    error: str


@dataclass
class MigrationReport:
    """Outcome of a best-effort batch over resource grants.

    Every examined record ends up in exactly one bucket: processed,
    skipped, or failed.
    """

    examined: int = 0
    processed: int = 0
    skipped: int = 0
    failures: list[MigrationFailure] = field(default_factory=list)

    @property
    def failed(self) -> int:
        """Number of records that raised while being processed."""
        return len(self.failures)

    def record_failure(self, record_id: str, error: Exception) -> None:
        """Remember a failed record and keep going."""
        self.failures.append(MigrationFailure(record_id=record_id, error=str(error)))


@dataclass(frozen=True)
class MigrationStatus:
    """Snapshot of grant and membership counts for migration progress."""

    grants_by_status: dict[GrantStatus, int]
    active_memberships: int

    @property
    def accepted_grants(self) -> int:
        """ACCEPTED grants still waiting to be folded into memberships."""
        return self.grants_by_status.get(GrantStatus.ACCEPTED, 0)
