"""Unit tests for IAM repository domain probes."""

from unittest.mock import Mock

from iam.infrastructure.observability import (
    DefaultResourceGrantRepositoryProbe,
    DefaultSubjectRepositoryProbe,
    DefaultWorkspaceMembershipRepositoryProbe,
)
from shared_kernel.observability_context import ObservationContext


class TestDefaultSubjectRepositoryProbe:
    """Tests for DefaultSubjectRepositoryProbe."""

    def test_creates_with_default_logger(self):
        """Test that probe can be created without providing a logger."""
        probe = DefaultSubjectRepositoryProbe()
        assert probe._logger is not None

    def test_subject_saved_logs_info(self):
        """Test that subject saved event is logged correctly."""
        mock_logger = Mock()
        probe = DefaultSubjectRepositoryProbe(logger=mock_logger)

        probe.subject_saved(subject_id="01ABC123", identity="alice@example.com")

        mock_logger.info.assert_called_once()
        call_args = mock_logger.info.call_args
        assert call_args[0][0] == "subject_saved"
        assert call_args[1]["identity"] == "alice@example.com"

    def test_session_id_replaced_logs_outcome(self):
        """Test that the session overwrite outcome is logged."""
        mock_logger = Mock()
        probe = DefaultSubjectRepositoryProbe(logger=mock_logger)

        probe.session_id_replaced(subject_id="01ABC123", updated=False)

        call_args = mock_logger.debug.call_args
        assert call_args[0][0] == "subject_session_id_replaced"
        assert call_args[1]["updated"] is False


class TestWithContext:
    """Tests for context binding."""

    def test_context_fields_are_included(self):
        """Bound context is merged into every event."""
        mock_logger = Mock()
        probe = DefaultResourceGrantRepositoryProbe(logger=mock_logger).with_context(
            ObservationContext(request_id="req-1")
        )

        probe.grant_deleted(grant_id="01GRANT")

        call_args = mock_logger.info.call_args
        assert call_args[0][0] == "resource_grant_deleted"
        assert call_args[1]["request_id"] == "req-1"

    def test_explicit_arguments_win_over_context(self):
        """Context keys passed explicitly are not duplicated."""
        mock_logger = Mock()
        probe = DefaultWorkspaceMembershipRepositoryProbe(
            logger=mock_logger
        ).with_context(ObservationContext(subject_id="ctx-subject"))

        probe.membership_saved(
            subject_id="01SUBJECT",
            workspace_id="01WS",
            role="viewer",
            is_active=True,
        )

        assert mock_logger.info.call_args[1]["subject_id"] == "01SUBJECT"

    def test_with_context_returns_new_probe(self):
        """Binding context does not mutate the original probe."""
        probe = DefaultSubjectRepositoryProbe(logger=Mock())
        bound = probe.with_context(ObservationContext(request_id="r"))

        assert bound is not probe
        assert isinstance(bound, DefaultSubjectRepositoryProbe)
