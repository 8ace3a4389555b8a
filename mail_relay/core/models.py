"""
Data models for inbound email relaying.

Uses dataclasses for clean, typed data structures.
"""

from collections.abc import AsyncIterable
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

import httpx

RawPayload = bytes | str | AsyncIterable[bytes]


class RelayOutcome(str, Enum):
    """How a single relay invocation ended."""

    REJECTED = "rejected"
    PARSE_FAILED = "parse_failed"
    FORWARDED = "forwarded"
    DELIVERY_FAILED = "delivery_failed"  # API answered with a non-2xx status
    TRANSPORT_FAILED = "transport_failed"  # API could not be reached
    ERROR = "error"


@dataclass(frozen=True)
class InboundMessage:
    """One delivery handed over by the mail-routing runtime."""

    sender: str
    raw: RawPayload
    # Case-insensitive; repeated names come back joined with ", "
    headers: httpx.Headers = field(default_factory=httpx.Headers)


@dataclass(frozen=True)
class EmailAddress:
    """Structured mailbox from a parsed From header."""

    address: str = ""
    name: str = ""


@dataclass
class ParsedEmail:
    """Fields a MIME parse yields; every one may be missing."""

    text: str | None = None
    html: str | None = None
    subject: str | None = None
    from_: EmailAddress | None = None


@dataclass(frozen=True)
class OutboundRecord:
    """Record posted to the outbound API."""

    sender: str
    subject: str
    date: str
    body: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return asdict(self)


@dataclass(frozen=True)
class ForwardResult:
    """Result from a single POST to the outbound API."""

    ok: bool
    status_code: int | None = None
    error: str | None = None
