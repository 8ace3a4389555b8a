"""Tests for the FastAPI hosting routes."""

import json
from unittest.mock import MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient
from structlog.testing import capture_logs

from mail_relay import main
from mail_relay.config import Settings
from mail_relay.main import app, get_forwarder, get_settings
from mail_relay.services.forwarder import Forwarder
from mail_relay.tests.conftest import RecordingTransport


@pytest.fixture
def client(relay_settings, forwarder):
    """TestClient with settings and forwarder overridden; lifespan is not run."""
    app.dependency_overrides[get_settings] = lambda: relay_settings
    app.dependency_overrides[get_forwarder] = lambda: forwarder
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestInbound:
    """Tests for POST /inbound."""

    def test_envelope_header_used_as_sender(self, client, transport, sample_raw_email):
        response = client.post(
            "/inbound",
            content=sample_raw_email,
            headers={"X-Envelope-From": "ceo@trusted.com"},
        )

        assert response.status_code == 202
        assert response.json() == {"outcome": "forwarded"}
        payload = json.loads(transport.requests[0].content)
        assert payload["sender"] == "ceo@trusted.com"
        assert payload["date"] == "Mon, 02 Feb 2026 10:30:00 +0000"
        assert payload["subject"] == "Quarterly numbers"

    def test_query_parameter_sender(self, client, transport, sample_raw_email):
        response = client.post("/inbound?from=boss@example.org", content=sample_raw_email)

        assert response.json() == {"outcome": "forwarded"}
        assert json.loads(transport.requests[0].content)["sender"] == "boss@example.org"

    def test_falls_back_to_from_header(self, client, transport, sample_raw_email):
        response = client.post("/inbound", content=sample_raw_email)

        assert response.json() == {"outcome": "forwarded"}
        assert json.loads(transport.requests[0].content)["sender"] == "sarah@trusted.com"

    def test_rejected_sender_still_accepted(self, client, transport, sample_raw_email):
        response = client.post(
            "/inbound",
            content=sample_raw_email,
            headers={"X-Envelope-From": "spam@elsewhere.net"},
        )

        assert response.status_code == 202
        assert response.json() == {"outcome": "rejected"}
        assert transport.requests == []

    def test_empty_body_rejected_without_sender(self, client, transport):
        response = client.post("/inbound", content=b"")

        assert response.status_code == 202
        assert response.json() == {"outcome": "rejected"}

    def test_api_failure_still_202(self, relay_settings, sample_raw_email):
        transport = RecordingTransport(status_code=503, text="maintenance")
        forwarder = Forwarder(client=httpx.AsyncClient(transport=transport))
        app.dependency_overrides[get_settings] = lambda: relay_settings
        app.dependency_overrides[get_forwarder] = lambda: forwarder
        try:
            response = TestClient(app).post(
                "/inbound",
                content=sample_raw_email,
                headers={"X-Envelope-From": "sarah@trusted.com"},
            )
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 202
        assert response.json() == {"outcome": "delivery_failed"}

    def test_date_header_forwarded_as_received(self, client, transport):
        raw = (
            b"From: Sarah Smith <sarah@trusted.com>\r\n"
            b"Subject: Clock check\r\n"
            b"Date: Mon, 2 Feb 2026 10:30:00 GMT\r\n"
            b"\r\n"
            b"What time is it?\r\n"
        )

        response = client.post("/inbound", content=raw)

        assert response.json() == {"outcome": "forwarded"}
        assert json.loads(transport.requests[0].content)["date"] == "Mon, 2 Feb 2026 10:30:00 GMT"


class TestLifespan:
    """Tests for startup and shutdown."""

    def test_startup_warns_and_owns_forwarder(self, monkeypatch):
        startup_settings = Settings(_env_file=None, api_endpoint="", allowed_emails="")
        configure = MagicMock()
        monkeypatch.setattr(main, "settings", startup_settings)
        monkeypatch.setattr(main, "configure_logging", configure)

        with capture_logs() as logs:
            with TestClient(app) as client:
                forwarder = app.state.forwarder
                assert isinstance(forwarder, Forwarder)
                assert forwarder._client.timeout.read == startup_settings.forward_timeout
                assert client.get("/health").status_code == 200
                assert client.post("/inbound", content=b"From: a@example.com\r\n\r\nHi\r\n").json() == {
                    "outcome": "rejected",
                }

        configure.assert_called_once_with(startup_settings)
        assert forwarder._client.is_closed is True

        events = [entry["event"] for entry in logs]
        assert "allow_list_empty" in events
        assert "api_endpoint_missing" in events
        assert events[-1] == "application_stopped"

        warning = next(entry for entry in logs if entry["event"] == "allow_list_empty")
        assert warning["log_level"] == "warning"
