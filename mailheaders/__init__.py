"""RFC 5322 / RFC 2047 header parsing with strict and obsolete grammars."""

from mailheaders.models import (
    Address,
    AddrSpec,
    Behavior,
    DateTime,
    Defect,
    DefectKind,
    DomainLiteral,
    DottedAtoms,
    Group,
    Mailbox,
    MessageID,
    ParseOutcome,
    Word,
)
from mailheaders.services import (
    GrammarFailure,
    HeaderParseError,
    ResourceLimitExceeded,
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

__version__ = "0.1.0"

__all__ = [
    "Address",
    "AddrSpec",
    "Behavior",
    "DateTime",
    "Defect",
    "DefectKind",
    "DomainLiteral",
    "DottedAtoms",
    "Group",
    "Mailbox",
    "MessageID",
    "ParseOutcome",
    "Word",
    "GrammarFailure",
    "HeaderParseError",
    "ResourceLimitExceeded",
    "decode_encoded_words",
    "parse_address",
    "parse_address_list",
    "parse_date_time",
    "parse_mailbox",
    "parse_mailbox_list",
    "parse_message_id",
    "parse_message_id_list",
    "parse_unstructured",
]
