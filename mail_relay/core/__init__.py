"""Core modules for email relaying."""

from .allowlist import is_allowed, parse_allow_list
from .logging import configure_logging, get_logger
from .models import (
    EmailAddress,
    ForwardResult,
    InboundMessage,
    OutboundRecord,
    ParsedEmail,
    RelayOutcome,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "is_allowed",
    "parse_allow_list",
    "EmailAddress",
    "ForwardResult",
    "InboundMessage",
    "OutboundRecord",
    "ParsedEmail",
    "RelayOutcome",
]
