"""
Inbound email relay.

Receives raw emails from a mail-routing runtime and:
- Drops senders that are not on the allow-list
- Parses the MIME document and extracts a readable body
- Forwards a sender/subject/date/body record to an HTTP API
"""
