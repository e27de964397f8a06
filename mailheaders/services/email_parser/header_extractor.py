"""Parsing every header of a message with the grammar its field name calls for."""

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from mailheaders.config.parser_config import ParserConfig
from mailheaders.models.behavior import Behavior
from mailheaders.models.outcome import ParseOutcome
from mailheaders.services.grammar import GrammarFailure, HeaderParseError
from mailheaders.services.header_parser import (
    Input,
    parse_address,
    parse_address_list,
    parse_content_disposition,
    parse_content_transfer_encoding,
    parse_content_type,
    parse_date_time,
    parse_message_id,
    parse_message_id_list,
    parse_unstructured,
)

from .header_section import split_header_section

logger = logging.getLogger(__name__)

FIELD_PARSERS: Dict[str, Callable[..., ParseOutcome]] = {}
for _name in ("from", "to", "cc", "bcc", "reply-to", "resent-from", "resent-to", "resent-cc", "resent-bcc"):
    FIELD_PARSERS[_name] = parse_address_list
for _name in ("sender", "resent-sender"):
    FIELD_PARSERS[_name] = parse_address
for _name in ("message-id", "content-id", "resent-message-id"):
    FIELD_PARSERS[_name] = parse_message_id
for _name in ("in-reply-to", "references"):
    FIELD_PARSERS[_name] = parse_message_id_list
for _name in ("date", "resent-date"):
    FIELD_PARSERS[_name] = parse_date_time
FIELD_PARSERS["content-type"] = parse_content_type
FIELD_PARSERS["content-disposition"] = parse_content_disposition
FIELD_PARSERS["content-transfer-encoding"] = parse_content_transfer_encoding
del _name


def parser_for(name: str) -> Callable[..., ParseOutcome]:
    """Return the entry point for a field name; unknown fields are unstructured."""
    return FIELD_PARSERS.get(name.lower(), parse_unstructured)


def parse_header(
    name: str,
    value: Input,
    behavior: Behavior = Behavior.STRICT,
    config: Optional[ParserConfig] = None,
) -> ParseOutcome:
    """
    Parse a field body with the grammar its name calls for.

    Args:
        name: Field name, any case
        value: Field body
        behavior: Strict or obsolete grammar
        config: Parser configuration

    Returns:
        ParseOutcome of the matching entry point

    Raises:
        HeaderParseError: If the body cannot be parsed

    Examples:
        >>> parse_header("Message-ID", b"<a@b>").value.left
        'a'
    """
    return parser_for(name)(value, behavior, config)


class HeaderExtractor:
    """Parse all header fields of a message."""

    def __init__(
        self,
        behavior: Behavior = Behavior.OBSOLETE,
        config: Optional[ParserConfig] = None,
        fallback: bool = False,
    ):
        """
        Args:
            behavior: Grammar used for every field
            config: Parser configuration
            fallback: Retry fields that fail under the strict grammar with
                the obsolete one
        """
        self.behavior = Behavior(behavior)
        self.config = config
        self.fallback = fallback
        self.failures: List[Tuple[str, HeaderParseError]] = []

    def parse_field(self, name: str, value: bytes) -> ParseOutcome:
        """
        Parse one field, falling back to the obsolete grammar if enabled.

        Raises:
            HeaderParseError: If the field cannot be parsed
        """
        try:
            return parse_header(name, value, self.behavior, self.config)
        except GrammarFailure as e:
            if not self.fallback or self.behavior is Behavior.OBSOLETE:
                raise
            logger.debug("Strict parse of %s failed (%s), retrying obsolete", name, e)
            return parse_header(name, value, Behavior.OBSOLETE, self.config)

    def extract(self, message: bytes) -> Dict[str, List[ParseOutcome]]:
        """
        Parse every header of a raw message.

        Malformed header lines are skipped. Fields that fail to parse are
        left out of the result and listed in ``self.failures``.

        Args:
            message: Raw message bytes (the body is ignored)

        Returns:
            Lower-cased field names mapped to their outcomes in message order
        """
        self.failures = []
        results: Dict[str, List[ParseOutcome]] = {}
        fields, _ = split_header_section(message)
        for field in fields:
            if not field.is_valid:
                continue
            key = field.name.lower()
            try:
                outcome = self.parse_field(field.name, field.value)
            except HeaderParseError as e:
                logger.debug("Cannot parse %s header: %s", field.name, e)
                self.failures.append((key, e))
                continue
            results.setdefault(key, []).append(outcome)
        return results

    def extract_from_file(self, file_path: Path) -> Dict[str, List[ParseOutcome]]:
        """
        Parse every header of a message file.

        Raises:
            FileNotFoundError: If file doesn't exist
        """
        if not file_path.exists():
            raise FileNotFoundError(f"Email file not found: {file_path}")
        return self.extract(file_path.read_bytes())
