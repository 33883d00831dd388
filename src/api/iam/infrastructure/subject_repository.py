"""PostgreSQL implementation of ISubjectRepository.

Besides plain metadata, this repository owns the single write that makes
session invalidation work: overwriting the stored session id.
"""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import Subject
from iam.domain.value_objects import SubjectId
from iam.infrastructure.models import SubjectModel
from iam.infrastructure.observability import (
    DefaultSubjectRepositoryProbe,
    SubjectRepositoryProbe,
)
from iam.ports.repositories import ISubjectRepository


class SubjectRepository(ISubjectRepository):
    """PostgreSQL-backed repository for Subject aggregates."""

    def __init__(
        self, session: AsyncSession, probe: SubjectRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession owned by the calling service
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultSubjectRepositoryProbe()

    async def save(self, subject: Subject) -> None:
        """Persist a subject aggregate.

        Creates a new subject or updates an existing one.

        Args:
            subject: The Subject aggregate to persist
        """
        stmt = select(SubjectModel).where(SubjectModel.id == subject.id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model:
            model.identity = subject.identity
            model.current_session_id = subject.current_session_id
        else:
            model = SubjectModel(
                id=subject.id.value,
                identity=subject.identity,
                current_session_id=subject.current_session_id,
            )
            self._session.add(model)

        self._probe.subject_saved(subject.id.value, subject.identity)

    async def get_by_id(self, subject_id: SubjectId) -> Subject | None:
        """Retrieve a subject by its ID.

        Args:
            subject_id: The unique identifier of the subject

        Returns:
            The Subject aggregate, or None if not found
        """
        stmt = select(SubjectModel).where(SubjectModel.id == subject_id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.subject_not_found(subject_id.value)
            return None

        self._probe.subject_retrieved(subject_id.value)
        return self._to_domain(model)

    async def get_by_identity(self, identity: str) -> Subject | None:
        """Retrieve a subject by its identity.

        Args:
            identity: The identity to search for

        Returns:
            The Subject aggregate, or None if not found
        """
        stmt = select(SubjectModel).where(SubjectModel.identity == identity)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.subject_not_found(identity)
            return None

        self._probe.subject_retrieved(model.id)
        return self._to_domain(model)

    async def replace_session_id(self, subject_id: SubjectId, session_id: str) -> bool:
        """Overwrite the stored session id with a single UPDATE statement.

        No read precedes the write, so concurrent callers cannot interleave
        a stale read with their own write; the database orders the UPDATEs
        and the last one wins.

        Args:
            subject_id: The subject whose session is being replaced
            session_id: The new session id

        Returns:
            True if a row was updated, False if the subject does not exist
        """
        stmt = (
            update(SubjectModel)
            .where(SubjectModel.id == subject_id.value)
            .values(current_session_id=session_id)
        )
        result = await self._session.execute(stmt)
        updated = result.rowcount > 0

        self._probe.session_id_replaced(subject_id.value, updated)
        return updated

    @staticmethod
    def _to_domain(model: SubjectModel) -> Subject:
        return Subject(
            id=SubjectId(value=model.id),
            identity=model.identity,
            current_session_id=model.current_session_id,
        )
