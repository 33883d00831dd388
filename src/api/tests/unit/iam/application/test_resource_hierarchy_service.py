"""Unit tests for ResourceHierarchyService."""

from unittest.mock import AsyncMock, create_autospec

import pytest

from iam.application.observability import ResourceHierarchyServiceProbe
from iam.application.services.resource_hierarchy_service import (
    ResourceHierarchyService,
)
from iam.domain.aggregates import Resource
from iam.domain.value_objects import PermissionLevel, ResourceId, SubjectId
from iam.ports.authorization import IAuthorizationResolver
from iam.ports.exceptions import (
    ForbiddenError,
    InvalidHierarchyMoveError,
    ResourceNotFoundError,
)
from iam.ports.repositories import IResourceRepository
from shared_kernel.authorization import AuthorizationDecision, DecisionSource

ALLOW = AuthorizationDecision.allow(
    source=DecisionSource.OWNERSHIP, matched_resource_id="r"
)


@pytest.fixture
def owner_id() -> SubjectId:
    return SubjectId.generate()


@pytest.fixture
def resources() -> dict[ResourceId, Resource]:
    return {}


@pytest.fixture
def make_resource(resources, owner_id):
    def _make(parent: Resource | None = None) -> Resource:
        resource = Resource(
            id=ResourceId.generate(),
            owner_id=owner_id,
            parent_id=parent.id if parent else None,
        )
        resources[resource.id] = resource
        return resource

    return _make


@pytest.fixture
def mock_resource_repository(resources):
    repo = create_autospec(IResourceRepository, instance=True)
    repo.get_by_id = AsyncMock(side_effect=lambda rid: resources.get(rid))
    return repo


@pytest.fixture
def mock_authz():
    authz = create_autospec(IAuthorizationResolver, instance=True)
    authz.check = AsyncMock(return_value=ALLOW)
    return authz


@pytest.fixture
def mock_probe():
    return create_autospec(ResourceHierarchyServiceProbe, instance=True)


@pytest.fixture
def hierarchy_service(mock_session, mock_resource_repository, mock_authz, mock_probe):
    return ResourceHierarchyService(
        session=mock_session,
        resource_repository=mock_resource_repository,
        authz=mock_authz,
        probe=mock_probe,
    )


class TestMove:
    """Tests for ResourceHierarchyService.move."""

    @pytest.mark.asyncio
    async def test_move_under_new_parent(
        self, hierarchy_service, make_resource, owner_id, mock_resource_repository, mock_probe
    ):
        """A permitted move updates the parent link."""
        folder = make_resource()
        doc = make_resource()

        moved = await hierarchy_service.move(owner_id, doc.id, folder.id)

        assert moved.parent_id == folder.id
        mock_resource_repository.update_parent.assert_called_once_with(
            doc.id, folder.id
        )
        mock_probe.resource_moved.assert_called_once()

    @pytest.mark.asyncio
    async def test_detach_to_root(
        self, hierarchy_service, make_resource, owner_id, mock_authz
    ):
        """Moving to None makes the resource a root and needs only OWNER on it."""
        folder = make_resource()
        doc = make_resource(parent=folder)

        moved = await hierarchy_service.move(owner_id, doc.id, None)

        assert moved.is_root
        mock_authz.check.assert_called_once_with(
            owner_id, doc.id, PermissionLevel.OWNER
        )

    @pytest.mark.asyncio
    async def test_move_under_descendant_is_rejected(
        self, hierarchy_service, make_resource, owner_id, mock_resource_repository, mock_probe
    ):
        """A resource cannot be placed beneath its own subtree."""
        root = make_resource()
        child = make_resource(parent=root)
        grandchild = make_resource(parent=child)

        with pytest.raises(InvalidHierarchyMoveError):
            await hierarchy_service.move(owner_id, root.id, grandchild.id)

        mock_resource_repository.update_parent.assert_not_called()
        mock_probe.move_rejected.assert_called_once()

    @pytest.mark.asyncio
    async def test_move_under_self_is_rejected(
        self, hierarchy_service, make_resource, owner_id
    ):
        """A resource cannot be its own parent."""
        doc = make_resource()

        with pytest.raises(InvalidHierarchyMoveError):
            await hierarchy_service.move(owner_id, doc.id, doc.id)

    @pytest.mark.asyncio
    async def test_move_without_owner_access_is_forbidden(
        self, hierarchy_service, make_resource, mock_authz
    ):
        """Movers need OWNER on the resource being moved."""
        mock_authz.check.return_value = AuthorizationDecision.deny()
        folder = make_resource()
        doc = make_resource()

        with pytest.raises(ForbiddenError):
            await hierarchy_service.move(SubjectId.generate(), doc.id, folder.id)

    @pytest.mark.asyncio
    async def test_move_requires_write_on_destination(
        self, hierarchy_service, make_resource, owner_id, mock_authz
    ):
        """Lacking WRITE on the new parent blocks the move."""
        folder = make_resource()
        doc = make_resource()
        mock_authz.check.side_effect = [ALLOW, AuthorizationDecision.deny()]

        with pytest.raises(ForbiddenError):
            await hierarchy_service.move(owner_id, doc.id, folder.id)

        assert mock_authz.check.call_args.args == (
            owner_id,
            folder.id,
            PermissionLevel.WRITE,
        )

    @pytest.mark.asyncio
    async def test_move_to_unknown_parent_raises(
        self, hierarchy_service, make_resource, owner_id
    ):
        """A destination that does not exist is NotFound."""
        doc = make_resource()

        with pytest.raises(ResourceNotFoundError):
            await hierarchy_service.move(owner_id, doc.id, ResourceId.generate())
