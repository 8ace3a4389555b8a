"""
MIME parsing for raw inbound messages.

Wraps the standard library email parser behind two functions: a full parse
yielding the fields the relay needs, and a header-only parse used by the
hosting route.
"""

from email import policy
from email.message import EmailMessage
from email.parser import BytesHeaderParser, BytesParser
from email.utils import parseaddr

import httpx

from mail_relay.core.logging import get_logger
from mail_relay.core.models import EmailAddress, ParsedEmail, RawPayload

log = get_logger(__name__)


class MimeParseError(Exception):
    """Raised when a raw payload cannot be read or parsed as MIME."""


async def read_raw(raw: RawPayload) -> bytes:
    """Read a raw payload into bytes, draining async streams."""
    if isinstance(raw, (bytes, bytearray)):
        return bytes(raw)
    if isinstance(raw, str):
        return raw.encode("utf-8")
    if hasattr(raw, "__aiter__"):
        chunks = []
        async for chunk in raw:
            chunks.append(chunk.encode("utf-8") if isinstance(chunk, str) else bytes(chunk))
        return b"".join(chunks)
    raise MimeParseError(f"Unsupported payload type: {type(raw).__name__}")


async def parse_email(raw: RawPayload) -> ParsedEmail:
    """
    Parse a raw MIME document.

    Args:
        raw: Full message as bytes, str or an async byte stream

    Returns:
        ParsedEmail with whichever of text, html, subject and from are present

    Raises:
        MimeParseError: If the payload cannot be read or parsed
    """
    try:
        data = await read_raw(raw)
        msg = BytesParser(policy=policy.default).parsebytes(data)

        parsed = ParsedEmail(
            text=_get_body_text(msg, "plain"),
            html=_get_body_text(msg, "html"),
            subject=str(msg.get("subject", "")) or None,
            from_=_get_from(msg),
        )
    except MimeParseError:
        raise
    except Exception as e:
        raise MimeParseError(f"Failed to parse email: {e}") from e

    log.debug(
        "mime_parsed",
        size=len(data),
        has_text=parsed.text is not None,
        has_html=parsed.html is not None,
    )
    return parsed


def parse_headers(data: bytes) -> httpx.Headers:
    """
    Parse only the header block of a raw message.

    Values are kept as received, only unfolded; encoded words and dates are
    not rewritten.
    """
    msg = BytesHeaderParser(policy=policy.compat32).parsebytes(data)
    return httpx.Headers(
        [(key, _unfold(str(value))) for key, value in msg.items()],
        encoding="utf-8",
    )


def _unfold(value: str) -> str:
    """Join a folded header value back onto one line."""
    return value.replace("\r\n", "").replace("\n", "")


def address_from_header(header: str | None) -> str:
    """Extract the bare address from a header like 'Name <email@example.com>'."""
    if not header:
        return ""
    _, address = parseaddr(header)
    return address


def _get_body_text(msg: EmailMessage, subtype: str) -> str | None:
    """Get the preferred text/<subtype> body part, skipping attachments."""
    part = msg.get_body(preferencelist=(subtype,))
    if part is None:
        return None
    try:
        return part.get_content()
    except (LookupError, UnicodeDecodeError):
        # Unknown or lying charset
        payload = part.get_payload(decode=True) or b""
        return payload.decode("utf-8", errors="replace")


def _get_from(msg: EmailMessage) -> EmailAddress | None:
    header = msg.get("from")
    if header is None:
        return None

    addresses = getattr(header, "addresses", ())
    if addresses:
        first = addresses[0]
        return EmailAddress(address=first.addr_spec, name=first.display_name)

    name, address = parseaddr(str(header))
    if not (name or address):
        return None
    return EmailAddress(address=address, name=name)
