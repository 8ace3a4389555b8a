"""
Shared pytest fixtures for mail_relay tests.
"""

from email.message import EmailMessage

import httpx
import pytest
import structlog

from mail_relay.config import Settings
from mail_relay.core.models import InboundMessage
from mail_relay.services.forwarder import Forwarder

API_ENDPOINT = "https://api.example.com/emails"
API_TOKEN = "test-token"


@pytest.fixture(autouse=True)
def reset_structlog():
    """Keep structlog unconfigured so capture_logs sees every event."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()


@pytest.fixture
def relay_settings() -> Settings:
    """Settings allowing one exact address and one domain pattern."""
    return Settings(
        _env_file=None,
        api_endpoint=API_ENDPOINT,
        api_token=API_TOKEN,
        allowed_emails="boss@example.org, @trusted.com",
    )


@pytest.fixture
def sample_raw_email() -> bytes:
    """Multipart email with plain text and HTML alternatives."""
    msg = EmailMessage()
    msg["From"] = "Sarah Smith <sarah@trusted.com>"
    msg["To"] = "inbox@relay.example.com"
    msg["Subject"] = "Quarterly numbers"
    msg["Date"] = "Mon, 02 Feb 2026 10:30:00 +0000"
    msg.set_content("Hi team,\n\nNumbers are attached below.\n\nSarah\n")
    msg.add_alternative(
        "<html><body><p>Hi team,</p><p>Numbers are attached below.</p></body></html>",
        subtype="html",
    )
    return msg.as_bytes()


@pytest.fixture
def html_only_raw_email() -> bytes:
    """Email with only an HTML body."""
    msg = EmailMessage()
    msg["From"] = "newsletter@trusted.com"
    msg["Subject"] = "Weekly digest"
    msg["Date"] = "Tue, 03 Feb 2026 08:00:00 +0000"
    msg.set_content(
        '<p>Read <a href="https://trusted.com/post">the post</a></p>'
        '<img src="https://trusted.com/pixel.gif" alt="tracking pixel">',
        subtype="html",
    )
    return msg.as_bytes()


@pytest.fixture
def sample_message(sample_raw_email) -> InboundMessage:
    """Inbound delivery from an allowed sender."""
    return InboundMessage(
        sender="sarah@trusted.com",
        raw=sample_raw_email,
        headers=httpx.Headers({"Date": "Mon, 02 Feb 2026 10:30:00 +0000"}),
    )


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it handled."""

    def __init__(self, status_code: int = 200, text: str = "ok", error: Exception | None = None):
        self.requests: list[httpx.Request] = []
        self.status_code = status_code
        self.text = text
        self.error = error
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, text=self.text)


@pytest.fixture
def transport() -> RecordingTransport:
    """Outbound API answering 200."""
    return RecordingTransport()


@pytest.fixture
def forwarder(transport) -> Forwarder:
    """Forwarder wired to the recording transport."""
    return Forwarder(client=httpx.AsyncClient(transport=transport))
