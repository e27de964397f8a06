"""
Entry points for parsing structured header field bodies.

Each function takes the body of one header field (the bytes after the colon,
folds included) and a ``Behavior``:

- ``Behavior.STRICT`` accepts only RFC 5322 section 3 syntax and raises
  ``GrammarFailure`` if anything is left over.
- ``Behavior.OBSOLETE`` also accepts the section 4 obsolete syntax and
  returns what it could not use as ``ParseOutcome.remainder``.

Both return a ``ParseOutcome`` whose ``defects`` list the irregularities
that were tolerated.
"""

import logging
from typing import List, Optional, Union

from mailheaders.config.parser_config import ParserConfig
from mailheaders.models.address import Address, Mailbox
from mailheaders.models.behavior import Behavior
from mailheaders.models.date_time import DateTime
from mailheaders.models.message_id import MessageID
from mailheaders.models.mime import ContentDisposition, ContentTransferEncoding, ContentType
from mailheaders.models.outcome import ParseOutcome
from mailheaders.services.grammar import grammar_for

logger = logging.getLogger(__name__)

Input = Union[bytes, str]


def _to_bytes(data: Input) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def _parse(production: str, data: Input, behavior: Behavior, config: Optional[ParserConfig]) -> ParseOutcome:
    grammar = grammar_for(behavior, config)
    value, remainder = grammar.run(getattr(grammar, production), _to_bytes(data))
    if remainder or grammar.defects:
        logger.debug(
            "%s parsed with %d defect(s), %d byte(s) left over",
            production,
            len(grammar.defects),
            len(remainder),
        )
    return ParseOutcome(value, remainder, tuple(grammar.defects))


def parse_mailbox_list(
    data: Input, behavior: Behavior = Behavior.STRICT, config: Optional[ParserConfig] = None
) -> ParseOutcome[List[Mailbox]]:
    """
    Parse a mailbox-list (From, Resent-From).

    Args:
        data: Field body
        behavior: Strict or obsolete grammar
        config: Parser configuration

    Returns:
        ParseOutcome with a list of Mailbox values

    Raises:
        GrammarFailure: If the input does not start with a mailbox, or
            (strict) if input is left over
        ResourceLimitExceeded: If comments nest too deeply

    Examples:
        >>> outcome = parse_mailbox_list(b"Joe Q. Public <john@example.com>", Behavior.OBSOLETE)
        >>> outcome.value[0].name
        'Joe Q. Public'
    """
    return _parse("mailbox_list", data, behavior, config)


def parse_address_list(
    data: Input, behavior: Behavior = Behavior.STRICT, config: Optional[ParserConfig] = None
) -> ParseOutcome[List[Address]]:
    """Parse an address-list (To, Cc, Bcc, Reply-To): mailboxes and groups."""
    return _parse("address_list", data, behavior, config)


def parse_address(
    data: Input, behavior: Behavior = Behavior.STRICT, config: Optional[ParserConfig] = None
) -> ParseOutcome[Address]:
    """Parse a single mailbox or group."""
    return _parse("address", data, behavior, config)


def parse_mailbox(
    data: Input, behavior: Behavior = Behavior.STRICT, config: Optional[ParserConfig] = None
) -> ParseOutcome[Mailbox]:
    """Parse a single mailbox (Sender)."""
    return _parse("mailbox", data, behavior, config)


def parse_message_id(
    data: Input, behavior: Behavior = Behavior.STRICT, config: Optional[ParserConfig] = None
) -> ParseOutcome[MessageID]:
    """
    Parse a msg-id (Message-ID, Content-ID).

    Examples:
        >>> parse_message_id(b"<1234@local.machine.example>").value.right
        'local.machine.example'
    """
    return _parse("msg_id", data, behavior, config)


def parse_message_id_list(
    data: Input, behavior: Behavior = Behavior.STRICT, config: Optional[ParserConfig] = None
) -> ParseOutcome[List[MessageID]]:
    """Parse one or more msg-ids (In-Reply-To, References)."""
    return _parse("msg_id_list", data, behavior, config)


def parse_date_time(
    data: Input, behavior: Behavior = Behavior.STRICT, config: Optional[ParserConfig] = None
) -> ParseOutcome[DateTime]:
    """
    Parse a date-time (Date, Resent-Date).

    Examples:
        >>> moment = parse_date_time(b"Fri, 21 Nov 1997 09:55:06 -0600").value.moment
        >>> moment.isoformat()
        '1997-11-21T09:55:06-06:00'
    """
    return _parse("date_time", data, behavior, config)


def parse_unstructured(
    data: Input, behavior: Behavior = Behavior.STRICT, config: Optional[ParserConfig] = None
) -> ParseOutcome[str]:
    """Parse unstructured text (Subject, Comments), decoding encoded words."""
    return _parse("unstructured", data, behavior, config)


def decode_encoded_words(data: Input, config: Optional[ParserConfig] = None) -> str:
    """
    Decode all RFC 2047 encoded words in a piece of header text.

    Always uses the obsolete grammar, so it never fails on odd input.

    Examples:
        >>> decode_encoded_words(b"=?ISO-8859-1?Q?Andr=E9?= Pirard")
        'André Pirard'
    """
    return _parse("unstructured", data, Behavior.OBSOLETE, config).value


def parse_content_type(
    data: Input, behavior: Behavior = Behavior.STRICT, config: Optional[ParserConfig] = None
) -> ParseOutcome[ContentType]:
    """
    Parse a Content-Type with RFC 2231 parameters.

    Examples:
        >>> value = parse_content_type(b"text/plain; charset*=utf-8''%E2%82%AC").value
        >>> value.mime_type, value.param("charset")
        ('text/plain', '€')
    """
    return _parse("content_type", data, behavior, config)


def parse_content_disposition(
    data: Input, behavior: Behavior = Behavior.STRICT, config: Optional[ParserConfig] = None
) -> ParseOutcome[ContentDisposition]:
    """Parse a Content-Disposition with RFC 2231 parameters."""
    return _parse("content_disposition", data, behavior, config)


def parse_content_transfer_encoding(
    data: Input, behavior: Behavior = Behavior.STRICT, config: Optional[ParserConfig] = None
) -> ParseOutcome[ContentTransferEncoding]:
    """Parse a Content-Transfer-Encoding mechanism token."""
    return _parse("content_transfer_encoding", data, behavior, config)
