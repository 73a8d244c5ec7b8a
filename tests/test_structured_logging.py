"""Tests for structured logging.

Tests:
- configure_logging wires structlog renderers onto the root logger
- request_id and user_id context variables
- RequestLoggingMiddleware adds X-Request-ID and logs authenticated requests
- Login, sharing and error events are logged with structured extras
- No print() calls in the docvault package
"""

import logging
import pathlib
import uuid
from unittest.mock import patch

from docvault.core.logging import (
    _redact_secrets,
    configure_logging,
    request_id_var,
    user_id_var,
)
from docvault.services.sharing_service import SharingService


class TestConfigureLogging:
    def test_sets_root_level(self):
        configure_logging(log_level="DEBUG", log_format="json")
        assert logging.getLogger().level == logging.DEBUG

        configure_logging(log_level="INFO", log_format="json")

    def test_console_format(self):
        configure_logging(log_level="INFO", log_format="console")
        assert len(logging.getLogger().handlers) == 1

        configure_logging(log_level="INFO", log_format="json")

    def test_noisy_loggers_suppressed(self):
        configure_logging(log_level="DEBUG", log_format="json")
        for name in ("httpx", "httpcore", "uvicorn.access", "arq.worker"):
            assert logging.getLogger(name).level == logging.WARNING

        configure_logging(log_level="INFO", log_format="json")


class TestRedaction:
    def test_secret_fields_masked(self):
        event = {"event": "login_failed", "password": "hunter2", "token": "abc", "email": "a@b.c"}
        redacted = _redact_secrets(None, "info", event)

        assert redacted["password"] == "***"
        assert redacted["token"] == "***"
        assert redacted["email"] == "a@b.c"


class TestContextVars:
    def test_request_id_set_get(self):
        rid = str(uuid.uuid4())
        token = request_id_var.set(rid)
        assert request_id_var.get() == rid
        request_id_var.reset(token)

    def test_user_id_default_none(self):
        token = user_id_var.set(None)
        assert user_id_var.get() is None
        user_id_var.reset(token)


class TestRequestLoggingMiddleware:
    def test_response_has_request_id(self, client):
        response = client.get("/api/health")
        uuid.UUID(response.headers["X-Request-ID"])  # Raises if invalid

    def test_incoming_request_id_is_echoed(self, client):
        response = client.get("/api/health", headers={"X-Request-ID": "trace-123"})
        assert response.headers["X-Request-ID"] == "trace-123"

    def test_authenticated_request_logged_with_user(self, client, alice, alice_headers):
        with patch("docvault.middleware.request_logging.logger") as mock_logger:
            client.get("/api/tags", headers=alice_headers)

        call_args = mock_logger.info.call_args
        assert call_args[0][0] == "http_request"
        assert call_args[1]["extra"]["user_id"] == alice.id
        assert call_args[1]["extra"]["status_code"] == 200

    def test_route_template_and_entity_id_logged(self, client, alice, alice_headers, make_document):
        doc = make_document(alice, "notes.txt")
        with patch("docvault.middleware.request_logging.logger") as mock_logger:
            client.get(f"/api/documents/{doc.id}", headers=alice_headers)

        extra = mock_logger.info.call_args[1]["extra"]
        assert extra["route"] == "/api/documents/{document_id}"
        assert extra["document_id"] == doc.id

    def test_health_not_logged(self, client):
        with patch("docvault.middleware.request_logging.logger") as mock_logger:
            client.get("/api/health")
        mock_logger.info.assert_not_called()


class TestEventLogging:
    def test_failed_login_logs_warning(self, client, alice):
        with patch("docvault.api.auth.logger") as mock_logger:
            client.post("/api/auth/login", json={"email": alice.email, "password": "wrong"})

        mock_logger.warning.assert_called_once()
        call_args = mock_logger.warning.call_args
        assert call_args[0][0] == "login_failed"
        assert call_args[1]["extra"]["reason"] == "invalid_credentials"

    def test_successful_login_logs_info(self, client, alice):
        with patch("docvault.api.auth.logger") as mock_logger:
            client.post("/api/auth/login", json={"email": alice.email, "password": "Password123"})

        call_args = mock_logger.info.call_args
        assert call_args[0][0] == "login_success"
        assert call_args[1]["extra"]["user_id"] == alice.id

    def test_document_share_logged(self, db, alice, bob, make_document):
        doc = make_document(alice, "plan.txt")
        with patch("docvault.services.sharing_service.logger") as mock_logger:
            SharingService(db).share_document(alice, doc.id, [bob.id])

        call_args = mock_logger.info.call_args
        assert call_args[0][0] == "document_shared"
        assert call_args[1]["extra"]["shared_with"] == 1

    def test_app_error_logged(self, client, alice_headers):
        with patch("docvault.core.error_handlers.logger") as mock_logger:
            client.get("/api/documents/missing", headers=alice_headers)

        call_args = mock_logger.info.call_args
        assert call_args[0][0] == "request_failed"
        assert call_args[1]["extra"]["error_code"] == "NOT_FOUND"


class TestNoPrintStatements:
    def test_no_print_in_source(self):
        """No print() statements in docvault source."""
        source_dir = pathlib.Path(__file__).parent.parent / "docvault"
        violations = []

        for py_file in source_dir.rglob("*.py"):
            for i, line in enumerate(py_file.read_text().splitlines(), 1):
                stripped = line.strip()
                if stripped.startswith("#"):
                    continue
                if "print(" in stripped:
                    violations.append(f"{py_file.relative_to(source_dir.parent)}:{i}: {stripped}")

        assert violations == [], "Found print() statements:\n" + "\n".join(violations)
