"""Unit tests for DefaultAuthorizationProbe."""

from unittest.mock import Mock

from shared_kernel.authorization.observability import DefaultAuthorizationProbe
from shared_kernel.observability_context import ObservationContext


class TestAuthorizationProbe:
    """Tests for authorization decision events."""

    def test_access_denied_logs_ancestors_checked(self):
        """Denials are logged with how far the walk went."""
        mock_logger = Mock()
        probe = DefaultAuthorizationProbe(logger=mock_logger)

        probe.access_denied(
            subject="subject:01A",
            resource="resource:01R",
            level="write",
            reason="insufficient permission",
            ancestors_checked=3,
        )

        mock_logger.info.assert_called_once()
        call_args = mock_logger.info.call_args
        assert call_args[0][0] == "authorization_access_denied"
        assert call_args[1]["ancestors_checked"] == 3

    def test_hierarchy_corruption_is_an_error(self):
        """A broken parent chain is logged at error level."""
        mock_logger = Mock()
        probe = DefaultAuthorizationProbe(logger=mock_logger)

        probe.hierarchy_corrupted(resource="resource:01R", error="loop")

        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args[0][0] == "authorization_hierarchy_corrupted"

    def test_context_is_bound(self):
        """Request context travels with every event."""
        mock_logger = Mock()
        probe = DefaultAuthorizationProbe(logger=mock_logger).with_context(
            ObservationContext(request_id="req-9")
        )

        probe.capability_checked(
            subject="subject:01A",
            workspace="01WS",
            capabilities=["view_resource"],
            require_all=False,
            granted=True,
        )

        assert mock_logger.debug.call_args[1]["request_id"] == "req-9"
