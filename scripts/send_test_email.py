#!/usr/bin/env python3
"""
Dev helper: POST a raw email to a running relay's /inbound endpoint.

Sends an existing .eml file, or builds a small multipart message when no file
is given.

Usage:
    python scripts/send_test_email.py --from alice@example.com
    python scripts/send_test_email.py --file message.eml --url http://localhost:8000
    python scripts/send_test_email.py --html-only --subject "HTML test"
"""

import argparse
import sys
from email.message import EmailMessage
from email.utils import formatdate
from pathlib import Path

import httpx


def build_message(sender: str, subject: str, html_only: bool) -> bytes:
    """Build a sample message with a plain and/or HTML body."""
    msg = EmailMessage()
    msg["From"] = f"Test Sender <{sender}>"
    msg["To"] = "relay@localhost"
    msg["Subject"] = subject
    msg["Date"] = formatdate(localtime=True)

    html = (
        "<html><body><p>Hello from the relay test script.</p>"
        '<p>Docs: <a href="https://example.com/docs">the docs</a></p>'
        '<img src="https://example.com/logo.png" alt="logo"></body></html>'
    )
    if html_only:
        msg.set_content(html, subtype="html")
    else:
        msg.set_content("Hello from the relay test script.")
        msg.add_alternative(html, subtype="html")
    return msg.as_bytes()


def main() -> int:
    parser = argparse.ArgumentParser(description="Send a test email to the relay")
    parser.add_argument("--url", default="http://localhost:8000", help="Relay base URL")
    parser.add_argument("--from", dest="sender", default="test@example.com", help="Envelope sender")
    parser.add_argument("--file", type=Path, help="Raw .eml file to send")
    parser.add_argument("--subject", default="Relay test", help="Subject for a generated message")
    parser.add_argument("--html-only", action="store_true", help="Generate an HTML-only message")
    args = parser.parse_args()

    if args.file:
        raw = args.file.read_bytes()
    else:
        raw = build_message(args.sender, args.subject, args.html_only)

    response = httpx.post(
        f"{args.url.rstrip('/')}/inbound",
        content=raw,
        headers={"Content-Type": "message/rfc822", "X-Envelope-From": args.sender},
        timeout=30,
    )
    print(f"{response.status_code} {response.text}")
    return 0 if response.is_success else 1


if __name__ == "__main__":
    sys.exit(main())
