"""Unit tests for the ResourceGrant aggregate."""

import pytest

from iam.domain.aggregates import ResourceGrant
from iam.domain.value_objects import (
    GrantStatus,
    PermissionLevel,
    ResourceId,
    SubjectId,
)


@pytest.fixture
def grant() -> ResourceGrant:
    return ResourceGrant.invite(
        subject_id=SubjectId.generate(),
        resource_id=ResourceId.generate(),
        level=PermissionLevel.WRITE,
        invited_by=SubjectId.generate(),
    )


class TestInvite:
    """Tests for the invite factory."""

    def test_creates_pending_grant(self, grant):
        """New grants start PENDING and confer no access."""
        assert grant.status is GrantStatus.PENDING
        assert grant.is_pending
        assert not grant.is_active

    def test_rejects_self_invitation(self):
        """A subject cannot invite themselves."""
        subject_id = SubjectId.generate()
        with pytest.raises(ValueError):
            ResourceGrant.invite(
                subject_id=subject_id,
                resource_id=ResourceId.generate(),
                level=PermissionLevel.READ,
                invited_by=subject_id,
            )

    def test_is_addressed_to_invitee_only(self, grant):
        """Only the invited subject is the addressee."""
        assert grant.is_addressed_to(grant.subject_id)
        assert not grant.is_addressed_to(grant.invited_by)


class TestTransitions:
    """Tests for the PENDING -> ACCEPTED/REJECTED workflow."""

    def test_accept_activates_grant(self, grant):
        """Accepting makes the grant participate in authorization."""
        grant.accept()
        assert grant.status is GrantStatus.ACCEPTED
        assert grant.is_active

    def test_reject_is_terminal_and_inactive(self, grant):
        """Rejected grants never confer access."""
        grant.reject()
        assert grant.status is GrantStatus.REJECTED
        assert not grant.is_active

    def test_reject_after_accept_fails_and_keeps_accepted(self, grant):
        """A resolved grant cannot be resolved again."""
        grant.accept()
        with pytest.raises(ValueError):
            grant.reject()
        assert grant.status is GrantStatus.ACCEPTED

    def test_accept_after_reject_fails(self, grant):
        """A rejected grant is never resurrected as accepted."""
        grant.reject()
        with pytest.raises(ValueError):
            grant.accept()
        assert grant.status is GrantStatus.REJECTED

    def test_transition_updates_timestamp(self, grant):
        """Resolving the grant touches updated_at."""
        before = grant.updated_at
        grant.accept()
        assert grant.updated_at >= before
