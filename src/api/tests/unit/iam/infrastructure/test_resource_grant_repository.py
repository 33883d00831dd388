"""Unit tests for ResourceGrantRepository."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from iam.domain.aggregates import ResourceGrant
from iam.domain.value_objects import (
    GrantStatus,
    PermissionLevel,
    ResourceId,
    SubjectId,
)
from iam.infrastructure.models import ResourceGrantModel
from iam.infrastructure.models.resource_grant import LIVE_GRANT_INDEX
from iam.infrastructure.resource_grant_repository import ResourceGrantRepository
from iam.ports.repositories import IResourceGrantRepository


@pytest.fixture
def mock_session():
    """Create mock async session."""
    session = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def repository(mock_session):
    """Create repository with mock session."""
    return ResourceGrantRepository(session=mock_session)


@pytest.fixture
def grant() -> ResourceGrant:
    return ResourceGrant.invite(
        subject_id=SubjectId.generate(),
        resource_id=ResourceId.generate(),
        level=PermissionLevel.WRITE,
        invited_by=SubjectId.generate(),
    )


def model_for(grant: ResourceGrant, status: GrantStatus) -> ResourceGrantModel:
    now = datetime.now(UTC)
    return ResourceGrantModel(
        id=grant.id.value,
        subject_id=grant.subject_id.value,
        resource_id=grant.resource_id.value,
        level=grant.level.value,
        status=status.value,
        invited_by=grant.invited_by.value,
        created_at=now,
        updated_at=now,
    )


def result_with(model):
    result = MagicMock()
    result.scalar_one_or_none.return_value = model
    return result


class TestProtocolCompliance:
    """Tests for protocol compliance."""

    def test_implements_protocol(self, repository):
        """Repository should implement IResourceGrantRepository protocol."""
        assert isinstance(repository, IResourceGrantRepository)


class TestSave:
    """Tests for save method."""

    @pytest.mark.asyncio
    async def test_adds_new_grant(self, repository, mock_session, grant):
        """A grant not yet stored is added with all its fields."""
        mock_session.execute.return_value = result_with(None)

        await repository.save(grant)

        added = mock_session.add.call_args[0][0]
        assert isinstance(added, ResourceGrantModel)
        assert added.status == "pending"
        assert added.level == "write"
        assert added.invited_by == grant.invited_by.value

    @pytest.mark.asyncio
    async def test_update_changes_only_status(self, repository, mock_session, grant):
        """Saving an accepted grant writes the new status."""
        existing = model_for(grant, GrantStatus.PENDING)
        mock_session.execute.return_value = result_with(existing)
        grant.accept()

        await repository.save(grant)

        mock_session.add.assert_not_called()
        assert existing.status == "accepted"


class TestFind:
    """Tests for lookups."""

    @pytest.mark.asyncio
    async def test_get_by_id_maps_model(self, repository, mock_session, grant):
        """Stored rows come back as aggregates."""
        mock_session.execute.return_value = result_with(
            model_for(grant, GrantStatus.ACCEPTED)
        )

        found = await repository.get_by_id(grant.id)

        assert found is not None
        assert found.id == grant.id
        assert found.status is GrantStatus.ACCEPTED
        assert found.level is PermissionLevel.WRITE

    @pytest.mark.asyncio
    async def test_find_accepted_returns_none_without_rows(
        self, repository, mock_session
    ):
        """No ACCEPTED row means no grant."""
        result = MagicMock()
        result.scalars.return_value.first.return_value = None
        mock_session.execute.return_value = result

        found = await repository.find_accepted(
            SubjectId.generate(), ResourceId.generate()
        )

        assert found is None

    @pytest.mark.asyncio
    async def test_count_by_status_fills_missing_statuses(
        self, repository, mock_session
    ):
        """Statuses with no rows are reported as zero."""
        result = MagicMock()
        result.all.return_value = [("accepted", 4)]
        mock_session.execute.return_value = result

        counts = await repository.count_by_status()

        assert counts == {
            GrantStatus.PENDING: 0,
            GrantStatus.ACCEPTED: 4,
            GrantStatus.REJECTED: 0,
        }


class TestDelete:
    """Tests for delete method."""

    @pytest.mark.asyncio
    async def test_deletes_existing_row(self, repository, mock_session, grant):
        """An existing row is removed."""
        existing = model_for(grant, GrantStatus.ACCEPTED)
        mock_session.execute.return_value = result_with(existing)

        assert await repository.delete(grant) is True
        mock_session.delete.assert_awaited_once_with(existing)

    @pytest.mark.asyncio
    async def test_missing_row_returns_false(self, repository, mock_session, grant):
        """Deleting an unknown grant reports False."""
        mock_session.execute.return_value = result_with(None)

        assert await repository.delete(grant) is False
        mock_session.delete.assert_not_called()


class TestLiveGrantIndex:
    """The database allows one live grant per (subject, resource)."""

    def test_live_grant_index_is_unique_and_partial(self):
        """Only PENDING and ACCEPTED rows take part in the unique index."""
        index = next(
            idx
            for idx in ResourceGrantModel.__table__.indexes
            if idx.name == LIVE_GRANT_INDEX
        )

        assert index.unique is True
        assert [c.name for c in index.columns] == ["subject_id", "resource_id"]
        where = str(index.dialect_options["postgresql"]["where"])
        assert "'pending'" in where
        assert "'accepted'" in where
        assert "'rejected'" not in where
