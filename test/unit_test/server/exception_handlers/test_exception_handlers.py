"""
Unit tests for server exception handlers.

Tests cover the error envelope produced for domain exceptions, request
validation failures, constraint violations and unexpected errors.
"""

import json
from unittest.mock import Mock, patch

import pytest
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from agrilink.core.exceptions import (
    AgriLinkException,
    BadRequestException,
    ForbiddenException,
    ResourceNotFoundException,
)
from agrilink.server.exception_handlers import setup_exception_handlers
from agrilink.server.exception_handlers.domain_handlers import (
    agrilink_exception_handler,
    collect_validation_errors,
    integrity_error_handler,
    validation_exception_handler,
)
from agrilink.server.exception_handlers.global_handler import global_exception_handler


@pytest.fixture
def mock_request():
    """Create a mock request object."""
    request = Mock(spec=Request)
    request.method = "GET"
    request.url.path = "/api/v1/devices"
    request.query_params = {}
    request.client = Mock()
    request.client.host = "127.0.0.1"
    return request


def _body(response: JSONResponse) -> dict:
    return json.loads(response.body.decode())


class TestDomainExceptionHandler:
    """Test rendering of AgriLinkException subclasses."""

    async def test_not_found(self, mock_request):
        exc = ResourceNotFoundException("Device", "id", "abc")

        response = await agrilink_exception_handler(mock_request, exc)

        assert response.status_code == 404
        body = _body(response)
        assert body["success"] is False
        assert body["status"] == 404
        assert body["error"] == "RESOURCE_NOT_FOUND"
        assert body["message"] == "Device not found with id: 'abc'"
        assert body["path"] == "/api/v1/devices"
        assert "timestamp" in body

    @pytest.mark.parametrize(
        "exc, status, code",
        [
            (BadRequestException("bad"), 400, "BAD_REQUEST"),
            (ForbiddenException("no"), 403, "FORBIDDEN"),
            (AgriLinkException("teapot", status_code=418, error_code="TEAPOT"), 418, "TEAPOT"),
        ],
    )
    async def test_status_and_code(self, mock_request, exc, status, code):
        response = await agrilink_exception_handler(mock_request, exc)

        assert response.status_code == status
        assert _body(response)["error"] == code

    async def test_optional_fields_are_omitted(self, mock_request):
        body = _body(await agrilink_exception_handler(mock_request, BadRequestException("bad")))

        assert "validation_errors" not in body
        assert "error_id" not in body


class TestValidationHandler:
    """Test request validation error rendering."""

    def test_collect_strips_location_prefix(self):
        exc = RequestValidationError(
            [
                {"loc": ("body", "email"), "msg": "String should match pattern", "type": "string_pattern_mismatch"},
                {"loc": ("body", "items", 0, "quantity"), "msg": "Input should be greater than 0", "type": "gt"},
                {"loc": ("query", "size"), "msg": "too big", "type": "le"},
                {"loc": ("body", "email"), "msg": "second", "type": "x"},
            ]
        )

        errors = collect_validation_errors(exc)

        assert errors == {
            "email": ["String should match pattern", "second"],
            "items.0.quantity": ["Input should be greater than 0"],
            "size": ["too big"],
        }

    async def test_validation_response(self, mock_request):
        exc = RequestValidationError([{"loc": ("body",), "msg": "Field required", "type": "missing"}])

        response = await validation_exception_handler(mock_request, exc)

        assert response.status_code == 400
        body = _body(response)
        assert body["error"] == "VALIDATION_ERROR"
        assert body["validation_errors"] == {"request": ["Field required"]}


class TestIntegrityErrorHandler:
    async def test_conflict(self, mock_request):
        exc = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

        with patch("agrilink.server.exception_handlers.domain_handlers.logger") as mock_logger:
            response = await integrity_error_handler(mock_request, exc)

        assert response.status_code == 409
        assert _body(response)["error"] == "CONSTRAINT_VIOLATION"
        mock_logger.warning.assert_called_once()


class TestGlobalExceptionHandler:
    """Test suite for global exception handler."""

    async def test_exception_handler_logs_error(self, mock_request):
        """Test that exception handler logs errors."""
        exc = ValueError("Test error")

        with patch("agrilink.server.exception_handlers.global_handler.logger") as mock_logger:
            await global_exception_handler(mock_request, exc)

            mock_logger.error.assert_called_once()
            call_args = mock_logger.error.call_args
            assert "Unhandled exception" in call_args[0][0]
            assert call_args[1]["extra"]["error_type"] == "ValueError"
            assert call_args[1]["extra"]["method"] == "GET"
            assert call_args[1]["extra"]["client"] == "127.0.0.1"

    async def test_exception_handler_returns_500_envelope(self, mock_request):
        """Test that the body hides the cause and carries an error id."""
        with patch("agrilink.server.exception_handlers.global_handler.logger"):
            response = await global_exception_handler(mock_request, RuntimeError("secret detail"))

        assert isinstance(response, JSONResponse)
        assert response.status_code == 500
        body = _body(response)
        assert body["error"] == "INTERNAL_ERROR"
        assert body["message"] == "An unexpected error occurred"
        assert len(body["error_id"]) == 32
        assert "secret detail" not in response.body.decode()

    async def test_error_ids_are_unique(self, mock_request):
        with patch("agrilink.server.exception_handlers.global_handler.logger"):
            first = _body(await global_exception_handler(mock_request, RuntimeError("x")))
            second = _body(await global_exception_handler(mock_request, RuntimeError("x")))

        assert first["error_id"] != second["error_id"]

    async def test_missing_client_is_logged_as_unknown(self, mock_request):
        mock_request.client = None

        with patch("agrilink.server.exception_handlers.global_handler.logger") as mock_logger:
            await global_exception_handler(mock_request, RuntimeError("x"))

        assert mock_logger.error.call_args[1]["extra"]["client"] == "unknown"

    async def test_error_is_reported_to_monitoring(self, mock_request):
        with patch("agrilink.server.exception_handlers.global_handler.logger"), patch(
            "agrilink.server.exception_handlers.global_handler.monitoring.log_error"
        ) as mock_log_error:
            await global_exception_handler(mock_request, KeyError("k"))

        mock_log_error.assert_called_once()
        assert mock_log_error.call_args[0][0] == "KeyError"


class TestSetupExceptionHandlers:
    def test_registers_handlers(self):
        app = FastAPI()

        setup_exception_handlers(app)

        for exc_type in (AgriLinkException, RequestValidationError, IntegrityError, Exception):
            assert exc_type in app.exception_handlers
