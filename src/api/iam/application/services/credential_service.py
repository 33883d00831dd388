"""Credential application service for IAM bounded context.

Issues and validates session-bound bearer credentials. Each subject has a
single stored session id; issuing a credential overwrites it, which
invalidates every credential issued before. There is no revocation list.
"""

from __future__ import annotations

from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    CredentialServiceProbe,
    DefaultCredentialServiceProbe,
)
from iam.application.value_objects import AuthenticatedSubject, IssuedCredential
from iam.domain.value_objects import SubjectId
from iam.ports.exceptions import SubjectNotFoundError, UnauthenticatedError
from iam.ports.repositories import ISubjectRepository
from shared_kernel.auth import InvalidTokenError, SessionTokenCodec


class CredentialService:
    """Application service for session credential issuance and validation."""

    def __init__(
        self,
        session: AsyncSession,
        subject_repository: ISubjectRepository,
        token_codec: SessionTokenCodec,
        probe: CredentialServiceProbe | None = None,
    ):
        """Initialize CredentialService with dependencies.

        Args:
            session: Database session for transaction management
            subject_repository: Repository holding the stored session ids
            token_codec: Signs and verifies session tokens
            probe: Optional domain probe for observability
        """
        self._session = session
        self._subject_repository = subject_repository
        self._token_codec = token_codec
        self._probe = probe or DefaultCredentialServiceProbe()

    async def issue(self, subject_id: SubjectId) -> IssuedCredential:
        """Start a new session for a subject and return its credential.

        The new session id is committed before the token is signed, so the
        returned credential is valid as soon as it is handed out, and every
        earlier credential for the subject is not. Concurrent calls for the
        same subject race on the write; only the last one to land survives,
        and the tokens from the others are already invalid when returned.

        Args:
            subject_id: The subject logging in

        Returns:
            The signed token together with its session id

        Raises:
            SubjectNotFoundError: If the subject does not exist
        """
        session_id = str(uuid4())

        async with self._session.begin():
            subject = await self._subject_repository.get_by_id(subject_id)
            if subject is None:
                raise SubjectNotFoundError(f"Subject {subject_id} not found")

            replaced = await self._subject_repository.replace_session_id(
                subject_id, session_id
            )
            if not replaced:
                raise SubjectNotFoundError(f"Subject {subject_id} not found")

        token = self._token_codec.encode(
            subject_identity=subject.identity,
            session_id=session_id,
        )

        self._probe.session_issued(
            subject_id=subject_id.value,
            session_id=session_id,
        )

        return IssuedCredential(
            token=token,
            session_id=session_id,
            subject_id=subject_id,
        )

    async def validate(self, token: str) -> AuthenticatedSubject:
        """Resolve a bearer token to the subject it belongs to.

        Fails if the signature is invalid, the token has expired, or the
        embedded session id is not the subject's current one. A subject with
        no stored session id (an account that predates session binding)
        accepts any authentic, unexpired token until its first issuance.

        Args:
            token: The bearer token presented by the client

        Returns:
            The authenticated subject

        Raises:
            UnauthenticatedError: If the credential cannot be accepted
        """
        try:
            claims = self._token_codec.decode(token)
        except InvalidTokenError as e:
            self._probe.session_rejected(reason=str(e))
            raise UnauthenticatedError(str(e)) from e

        subject = await self._subject_repository.get_by_identity(
            claims.subject_identity
        )
        if subject is None:
            self._probe.session_rejected(
                reason="Unknown subject",
                subject_identity=claims.subject_identity,
            )
            raise UnauthenticatedError("Unknown subject")

        if not subject.accepts_session(claims.session_id):
            self._probe.session_rejected(
                reason="Session superseded",
                subject_identity=claims.subject_identity,
            )
            raise UnauthenticatedError("Session is no longer valid")

        self._probe.session_validated(
            subject_id=subject.id.value,
            legacy=not subject.is_session_bound,
        )

        return AuthenticatedSubject(
            subject_id=subject.id,
            identity=subject.identity,
            session_id=claims.session_id,
        )

    async def end_session(self, subject_id: SubjectId) -> None:
        """Invalidate the subject's current credential (logout).

        The stored session id is rotated to a fresh value that no credential
        carries. It is never cleared, since an empty session id would make
        the account accept every authentic token again.

        Raises:
            SubjectNotFoundError: If the subject does not exist
        """
        async with self._session.begin():
            replaced = await self._subject_repository.replace_session_id(
                subject_id, str(uuid4())
            )

        if not replaced:
            raise SubjectNotFoundError(f"Subject {subject_id} not found")

        self._probe.session_ended(subject_id=subject_id.value)
