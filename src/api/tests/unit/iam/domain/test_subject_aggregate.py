"""Unit tests for the Subject aggregate and Resource reparenting."""

import pytest

from iam.domain.aggregates import Resource, Subject
from iam.domain.value_objects import ResourceId, SubjectId


class TestSessionBinding:
    """Tests for Subject.accepts_session."""

    def test_unbound_subject_accepts_any_session(self):
        """Accounts without a stored session id accept any credential."""
        subject = Subject(id=SubjectId.generate(), identity="alice@example.com")
        assert not subject.is_session_bound
        assert subject.accepts_session("anything")
        assert subject.accepts_session(None)

    def test_bound_subject_accepts_only_current_session(self):
        """Once bound, only an exact match is accepted."""
        subject = Subject(
            id=SubjectId.generate(),
            identity="alice@example.com",
            current_session_id="s-2",
        )
        assert subject.accepts_session("s-2")
        assert not subject.accepts_session("s-1")

    def test_bound_subject_rejects_credential_without_session(self):
        """A credential with no session id fails once the account is bound."""
        subject = Subject(
            id=SubjectId.generate(),
            identity="alice@example.com",
            current_session_id="s-1",
        )
        assert not subject.accepts_session(None)

    def test_equality_is_by_id(self):
        """Subjects compare by id only."""
        subject_id = SubjectId.generate()
        assert Subject(id=subject_id, identity="a") == Subject(
            id=subject_id, identity="b", current_session_id="x"
        )


class TestResource:
    """Tests for Resource helpers."""

    def test_reparented_keeps_owner_and_workspace(self):
        """Moving a resource changes only its parent."""
        resource = Resource(id=ResourceId.generate(), owner_id=SubjectId.generate())
        parent_id = ResourceId.generate()

        moved = resource.reparented(parent_id)

        assert moved.parent_id == parent_id
        assert moved.owner_id == resource.owner_id
        assert not moved.is_root

    def test_cannot_be_its_own_parent(self):
        """A resource cannot point at itself."""
        resource = Resource(id=ResourceId.generate(), owner_id=SubjectId.generate())
        with pytest.raises(ValueError):
            resource.reparented(resource.id)
