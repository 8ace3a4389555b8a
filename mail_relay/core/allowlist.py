"""
Sender allow-list matching.
"""


def parse_allow_list(allow_list: str | None) -> list[str]:
    """Split a comma-separated allow-list into trimmed, lowercased entries."""
    if not allow_list:
        return []
    return [entry.strip().lower() for entry in allow_list.split(",")]


def is_allowed(sender: str | None, allow_list: str | None) -> bool:
    """
    Check whether an envelope sender passes the allow-list.

    Entries starting with ``@`` match any sender ending with that text, so
    ``@example.com`` accepts ``user@example.com``. Other entries must equal
    the sender. Comparison is case-insensitive and empty entries never match.

    Args:
        sender: Envelope sender address
        allow_list: Comma-separated addresses and ``@domain`` patterns

    Returns:
        True if any entry matches
    """
    if not isinstance(sender, str) or not isinstance(allow_list, str):
        return False

    sender = sender.lower()
    if not sender:
        return False

    for entry in parse_allow_list(allow_list):
        if not entry:
            continue
        if entry.startswith("@"):
            # Suffix match, not a domain comparison
            if sender.endswith(entry):
                return True
        elif sender == entry:
            return True
    return False
