"""Message-ID normalization utilities."""

from mailheaders.models.behavior import Behavior
from mailheaders.services.grammar import HeaderParseError
from mailheaders.services.header_parser import parse_message_id


def normalize_message_id(message_id: str) -> str:
    """
    Normalize Message-ID to standard format with angle brackets.

    Comments and white space are dropped, and brackets are added when the
    sender left them out.

    Args:
        message_id: Raw Message-ID (may or may not have brackets)

    Returns:
        Message-ID in format <id@domain>

    Raises:
        ValueError: If message_id is empty or malformed

    Examples:
        >>> normalize_message_id("abc@domain.com")
        '<abc@domain.com>'
        >>> normalize_message_id("<abc@domain.com> (sent by a robot)")
        '<abc@domain.com>'
    """
    if not message_id or not message_id.strip():
        raise ValueError("Message-ID is empty")

    try:
        outcome = parse_message_id(message_id, Behavior.OBSOLETE)
    except HeaderParseError as e:
        raise ValueError(f"Invalid Message-ID format: {message_id}") from e

    if outcome.value.right is None or outcome.remainder.strip():
        raise ValueError(f"Invalid Message-ID format: {message_id}")

    return str(outcome.value)
