"""Unit tests for the Logfire monitoring module.

Tests cover initialization under the different environment switches and the
event helpers used by the request middleware and the IoT pipeline.
"""

from unittest.mock import MagicMock, patch

import pytest

from agrilink.core import monitoring


@pytest.fixture
def configured():
    """Pretend Logfire has been configured for the duration of a test."""
    with patch("agrilink.core.monitoring._configured", True):
        yield


class TestInitializeLogfire:
    @patch("agrilink.core.monitoring.LOGFIRE_ENABLED", False)
    @patch("agrilink.core.monitoring.logger")
    def test_initialize_logfire_disabled(self, mock_logger):
        assert monitoring.initialize_logfire() is False
        mock_logger.info.assert_called_once()
        assert "disabled" in mock_logger.info.call_args[0][0]

    @patch("agrilink.core.monitoring.LOGFIRE_ENABLED", True)
    @patch("agrilink.core.monitoring.LOGFIRE_TOKEN", "")
    @patch("agrilink.core.monitoring.logger")
    def test_initialize_logfire_no_token(self, mock_logger):
        assert monitoring.initialize_logfire() is False
        mock_logger.warning.assert_called_once()
        assert "LOGFIRE_TOKEN" in mock_logger.warning.call_args[0][0]

    @patch("agrilink.core.monitoring.LOGFIRE_ENABLED", True)
    @patch("agrilink.core.monitoring.LOGFIRE_TOKEN", "test-token")
    @patch("agrilink.core.monitoring.LOGFIRE_SERVICE_NAME", "agrilink-test")
    @patch("agrilink.core.monitoring.LOGFIRE_ENVIRONMENT", "test")
    @patch("agrilink.core.monitoring.logfire")
    def test_initialize_logfire_instruments_everything(self, mock_logfire):
        app = MagicMock()

        with patch("agrilink.core.monitoring._configured", False):
            assert monitoring.initialize_logfire(app) is True
            assert monitoring.is_enabled() is True

        mock_logfire.configure.assert_called_once()
        assert mock_logfire.configure.call_args[1]["service_name"] == "agrilink-test"
        assert mock_logfire.configure.call_args[1]["environment"] == "test"
        mock_logfire.instrument_sqlalchemy.assert_called_once()
        mock_logfire.instrument_httpx.assert_called_once()
        mock_logfire.instrument_fastapi.assert_called_once_with(app=app)

    @patch("agrilink.core.monitoring.LOGFIRE_ENABLED", True)
    @patch("agrilink.core.monitoring.LOGFIRE_TOKEN", "test-token")
    @patch("agrilink.core.monitoring.LOGFIRE_TRACE_SQLALCHEMY", False)
    @patch("agrilink.core.monitoring.LOGFIRE_TRACE_HTTPX", False)
    @patch("agrilink.core.monitoring.logfire")
    def test_feature_flags_skip_instrumentation(self, mock_logfire):
        with patch("agrilink.core.monitoring._configured", False):
            assert monitoring.initialize_logfire() is True

        mock_logfire.instrument_sqlalchemy.assert_not_called()
        mock_logfire.instrument_httpx.assert_not_called()
        mock_logfire.instrument_fastapi.assert_not_called()

    @patch("agrilink.core.monitoring.LOGFIRE_ENABLED", True)
    @patch("agrilink.core.monitoring.LOGFIRE_TOKEN", "test-token")
    @patch("agrilink.core.monitoring.logger")
    @patch("agrilink.core.monitoring.logfire")
    def test_instrumentation_failure_is_logged(self, mock_logfire, mock_logger):
        mock_logfire.instrument_sqlalchemy.side_effect = RuntimeError("no engine")

        with patch("agrilink.core.monitoring._configured", False):
            assert monitoring.initialize_logfire() is True

        assert any("SQLAlchemy" in c[0][0] for c in mock_logger.warning.call_args_list)


class TestEventHelpers:
    @patch("agrilink.core.monitoring.logfire")
    def test_helpers_are_silent_when_not_configured(self, mock_logfire):
        with patch("agrilink.core.monitoring._configured", False):
            monitoring.log_api_request("GET", "/health", 200, 1.5)
            monitoring.log_telemetry_ingest("d-1", "TEMPERATURE", 31.0, 0)
            monitoring.log_alert_raised("a-1", "d-1", "CRITICAL", "too hot")
            monitoring.log_error("ValueError", "bad")

        assert mock_logfire.method_calls == []

    @patch("agrilink.core.monitoring.logfire")
    def test_log_api_request(self, mock_logfire, configured):
        monitoring.log_api_request("POST", "/api/v1/telemetry", 201, 12.5)

        mock_logfire.info.assert_called_once_with(
            "API request completed", method="POST", path="/api/v1/telemetry", status_code=201, duration_ms=12.5
        )

    @patch("agrilink.core.monitoring.logfire")
    def test_log_telemetry_ingest(self, mock_logfire, configured):
        monitoring.log_telemetry_ingest("d-1", "TEMPERATURE", 38.2, 2)

        kwargs = mock_logfire.info.call_args[1]
        assert kwargs["alerts_raised"] == 2
        assert kwargs["metric_type"] == "TEMPERATURE"

    @patch("agrilink.core.monitoring.logfire")
    def test_log_alert_raised(self, mock_logfire, configured):
        monitoring.log_alert_raised("a-1", "d-1", "CRITICAL", "too hot")

        mock_logfire.warn.assert_called_once()
        assert mock_logfire.warn.call_args[1]["severity"] == "CRITICAL"

    @patch("agrilink.core.monitoring.logfire")
    def test_log_error_with_context(self, mock_logfire, configured):
        monitoring.log_error("KeyError", "missing", {"error_id": "abc"})

        mock_logfire.error.assert_called_once_with("KeyError: missing", error_id="abc")
