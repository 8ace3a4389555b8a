"""
FastAPI application hosting the relay.

Stands in for the mail-routing runtime: each POST to /inbound carries one raw
RFC 822 message and triggers one relay invocation.
"""

from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import Depends, FastAPI, Header, Query, Request

from mail_relay.config import Settings, settings
from mail_relay.core.logging import configure_logging, get_logger
from mail_relay.core.models import InboundMessage
from mail_relay.relay import handle_email
from mail_relay.services.forwarder import Forwarder
from mail_relay.services.mime import address_from_header, parse_headers

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    configure_logging(settings)

    if not settings.api_endpoint:
        log.warning("api_endpoint_missing", reason="API_ENDPOINT is not configured")
    if not settings.allowed_emails.strip():
        log.warning("allow_list_empty", reason="ALLOWED_EMAILS is empty, every sender will be rejected")

    app.state.forwarder = Forwarder(timeout=settings.forward_timeout)
    log.info("application_starting")

    yield

    # Shutdown
    await app.state.forwarder.aclose()
    log.info("application_stopped")


app = FastAPI(
    title="Mail Relay",
    description="Relays inbound emails to an HTTP API",
    version="1.0.0",
    lifespan=lifespan,
)


def get_settings() -> Settings:
    return settings


def get_forwarder(request: Request) -> Forwarder:
    return request.app.state.forwarder


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": "1.0.0"}


@app.post("/inbound", status_code=202)
async def inbound_email(
    request: Request,
    sender: str | None = Query(None, alias="from"),
    x_envelope_from: str | None = Header(None),
    forwarder: Forwarder = Depends(get_forwarder),
    relay_settings: Settings = Depends(get_settings),
):
    """
    Relay one raw email.

    The envelope sender is taken from the X-Envelope-From header, then the
    ``from`` query parameter, then the message's own From header. Always
    answers 202; the outcome is informational only.
    """
    raw = await request.body()

    try:
        headers = parse_headers(raw)
    except Exception:
        log.warning("header_parse_failed", exc_info=True)
        headers = httpx.Headers()

    envelope_sender = x_envelope_from or sender or address_from_header(headers.get("From"))

    message = InboundMessage(sender=envelope_sender, raw=raw, headers=headers)
    with structlog.contextvars.bound_contextvars(
        envelope_sender=envelope_sender,
        message_id=headers.get("Message-ID", ""),
    ):
        outcome = await handle_email(message, relay_settings, forwarder=forwarder)

    return {"outcome": outcome.value}
