"""
Entry point for relaying one inbound email to the outbound API.

Filter by sender, parse, extract a body, forward. Every failure is logged and
reported as a RelayOutcome; nothing is raised to the hosting runtime.
"""

from collections.abc import Awaitable, Callable

from mail_relay.config import Settings
from mail_relay.core.allowlist import is_allowed
from mail_relay.core.logging import get_logger
from mail_relay.core.models import (
    InboundMessage,
    OutboundRecord,
    ParsedEmail,
    RawPayload,
    RelayOutcome,
)
from mail_relay.services.content import extract_body
from mail_relay.services.forwarder import Forwarder
from mail_relay.services.mime import parse_email

log = get_logger(__name__)

PREVIEW_CHARS = 300

Parser = Callable[[RawPayload], Awaitable[ParsedEmail]]


async def handle_email(
    message: InboundMessage,
    settings: Settings,
    *,
    forwarder: Forwarder,
    parser: Parser = parse_email,
) -> RelayOutcome:
    """
    Relay a single inbound email.

    Args:
        message: Delivery from the mail-routing runtime
        settings: Endpoint, token and allow-list to use
        forwarder: Client that posts the outbound record
        parser: MIME parser, replaceable in tests

    Returns:
        RelayOutcome describing how processing ended
    """
    try:
        if not is_allowed(message.sender, settings.allowed_emails):
            log.info("email_rejected", sender=message.sender, reason="sender not in allow-list")
            return RelayOutcome.REJECTED

        try:
            email = await parser(message.raw)
        except Exception:
            log.error("email_parse_failed", sender=message.sender, exc_info=True)
            return RelayOutcome.PARSE_FAILED

        body = extract_body(email.text, email.html)

        log.info(
            "email_parsed",
            from_name=(email.from_.name if email.from_ else "") or "Unknown",
            from_address=(email.from_.address if email.from_ else "") or message.sender,
            subject=email.subject or "No subject",
            body_length=len(body),
            preview=body[:PREVIEW_CHARS],
        )

        record = OutboundRecord(
            sender=message.sender,
            subject=email.subject or "",
            date=message.headers.get("Date") or "",
            body=body,
        )

        result = await forwarder.forward(record, settings.api_endpoint, settings.api_token)
        if result.ok:
            return RelayOutcome.FORWARDED
        if result.status_code is None:
            return RelayOutcome.TRANSPORT_FAILED
        return RelayOutcome.DELIVERY_FAILED

    except Exception:
        log.exception("email_processing_error", sender=message.sender)
        return RelayOutcome.ERROR
