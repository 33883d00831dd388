"""Unit tests for structlog configuration."""

import logging
from unittest.mock import patch

import structlog

from infrastructure.logging import (
    bind_observation_context,
    clear_observation_context,
    configure_logging,
)
from shared_kernel.observability_context import ObservationContext


class TestConfigureLogging:
    """Tests for configure_logging."""

    def teardown_method(self):
        structlog.reset_defaults()

    def test_json_renderer_without_tty(self, monkeypatch):
        """Non-interactive output is rendered as JSON."""
        monkeypatch.delenv("FORCE_COLOR", raising=False)
        with patch("infrastructure.logging.sys") as mock_sys:
            mock_sys.stdout.isatty.return_value = False
            configure_logging(debug=False)

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_force_color_uses_console_renderer(self, monkeypatch):
        """FORCE_COLOR switches to the console renderer."""
        monkeypatch.setenv("FORCE_COLOR", "1")
        configure_logging(debug=False)

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_debug_lowers_minimum_level(self, monkeypatch):
        """debug=True lets debug events through."""
        monkeypatch.setenv("FORCE_COLOR", "1")
        configure_logging(debug=True)

        wrapper = structlog.get_config()["wrapper_class"]
        assert wrapper is structlog.make_filtering_bound_logger(logging.DEBUG)


class TestObservationContextBinding:
    """Tests for binding ObservationContext to structlog contextvars."""

    def teardown_method(self):
        clear_observation_context()

    def test_bind_exposes_context_fields(self):
        """Bound fields are visible to every logger in the task."""
        bind_observation_context(
            ObservationContext(request_id="req-1", extra={"command": "migrate"})
        )

        bound = structlog.contextvars.get_contextvars()
        assert bound == {"request_id": "req-1", "command": "migrate"}

    def test_clear_removes_fields(self):
        """Clearing leaves no context behind."""
        bind_observation_context(ObservationContext(subject_id="01A"))

        clear_observation_context()

        assert structlog.contextvars.get_contextvars() == {}
