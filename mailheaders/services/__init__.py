"""Header parsing services"""

from .email_parser import HeaderExtractor, parse_header, split_header_section
from .grammar import GrammarFailure, HeaderParseError, ResourceLimitExceeded, grammar_for
from .header_parser import (
    decode_encoded_words,
    parse_address,
    parse_address_list,
    parse_date_time,
    parse_mailbox,
    parse_mailbox_list,
    parse_message_id,
    parse_message_id_list,
    parse_unstructured,
)
from .reporting import OutcomeFormatter

__all__ = [
    "HeaderExtractor",
    "parse_header",
    "split_header_section",
    "GrammarFailure",
    "HeaderParseError",
    "ResourceLimitExceeded",
    "grammar_for",
    "decode_encoded_words",
    "parse_address",
    "parse_address_list",
    "parse_date_time",
    "parse_mailbox",
    "parse_mailbox_list",
    "parse_message_id",
    "parse_message_id_list",
    "parse_unstructured",
    "OutcomeFormatter",
]
