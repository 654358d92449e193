"""
Unit tests for the request timing middleware.

This test suite covers:
- Request metrics reported to monitoring
- Header injection
- Slow request detection
- Error propagation
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI, Request
from starlette.responses import Response
from starlette.testclient import TestClient

from agrilink.server.middleware import LogfireMiddleware
from agrilink.server.middleware.logfire_middleware import PROCESS_TIME_HEADER, SLOW_REQUEST_MS


def _mock_request(method: str = "GET", path: str = "/api/v1/telemetry") -> AsyncMock:
    request = AsyncMock(spec=Request)
    request.method = method
    request.url.path = path
    request.state = MagicMock()
    return request


class TestLogfireMiddlewareDispatch:
    """Test LogfireMiddleware.dispatch method."""

    async def test_middleware_processes_successful_request(self):
        """Test that middleware reports the request to monitoring."""

        async def call_next(request):
            return Response(content="ok", status_code=201)

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch("agrilink.server.middleware.logfire_middleware.log_api_request") as mock_log:
            response = await middleware.dispatch(_mock_request("POST"), call_next)

        assert response.status_code == 201
        mock_log.assert_called_once()
        kwargs = mock_log.call_args[1]
        assert kwargs["method"] == "POST"
        assert kwargs["path"] == "/api/v1/telemetry"
        assert kwargs["status_code"] == 201
        assert kwargs["duration_ms"] >= 0

    async def test_middleware_adds_process_time_header(self):
        async def call_next(request):
            return Response(content="ok", status_code=200)

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch("agrilink.server.middleware.logfire_middleware.log_api_request"):
            response = await middleware.dispatch(_mock_request(), call_next)

        assert float(response.headers[PROCESS_TIME_HEADER]) >= 0

    async def test_middleware_detects_slow_requests(self):
        """Test that a request over the threshold is logged as a warning."""

        async def call_next(request):
            return Response(content="ok", status_code=200)

        middleware = LogfireMiddleware(app=AsyncMock())
        ticks = iter([0.0, (SLOW_REQUEST_MS + 500) / 1000])

        with patch("agrilink.server.middleware.logfire_middleware.log_api_request"), patch(
            "agrilink.server.middleware.logfire_middleware.time.perf_counter", side_effect=lambda: next(ticks)
        ), patch("agrilink.server.middleware.logfire_middleware.logger") as mock_logger:
            await middleware.dispatch(_mock_request(), call_next)

        mock_logger.warning.assert_called_once()
        assert "Slow API request" in mock_logger.warning.call_args[0][0]

    async def test_fast_request_is_not_flagged(self):
        async def call_next(request):
            return Response(content="ok", status_code=200)

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch("agrilink.server.middleware.logfire_middleware.log_api_request"), patch(
            "agrilink.server.middleware.logfire_middleware.logger"
        ) as mock_logger:
            await middleware.dispatch(_mock_request(), call_next)

        mock_logger.warning.assert_not_called()

    async def test_middleware_reraises_errors(self):
        """Test that failures are logged as 500 and propagated."""

        async def call_next(request):
            raise RuntimeError("boom")

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch("agrilink.server.middleware.logfire_middleware.log_api_request") as mock_log, patch(
            "agrilink.server.middleware.logfire_middleware.logger"
        ) as mock_logger:
            with pytest.raises(RuntimeError, match="boom"):
                await middleware.dispatch(_mock_request(), call_next)

        assert mock_log.call_args[1]["status_code"] == 500
        mock_logger.error.assert_called_once()


class TestLogfireMiddlewareIntegration:
    def test_header_on_real_app(self):
        app = FastAPI()
        app.add_middleware(LogfireMiddleware)

        @app.get("/ping")
        async def ping():
            return {"pong": True}

        with patch("agrilink.server.middleware.logfire_middleware.log_api_request"):
            response = TestClient(app).get("/ping")

        assert response.status_code == 200
        assert PROCESS_TIME_HEADER in response.headers
