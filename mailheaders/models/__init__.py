"""Data models for parsed header values"""

from .behavior import Behavior
from .address import Address, AddrSpec, DomainLiteral, DomainVariant, DottedAtoms, Group, Mailbox, Word
from .date_time import DateTime
from .header_field import HeaderField
from .message_id import MessageID
from .mime import ContentDisposition, ContentTransferEncoding, ContentType, DispositionKind, TransferEncoding
from .outcome import Defect, DefectKind, ParseOutcome

__all__ = [
    "Behavior",
    "Address",
    "AddrSpec",
    "DomainLiteral",
    "DomainVariant",
    "DottedAtoms",
    "Group",
    "Mailbox",
    "Word",
    "DateTime",
    "HeaderField",
    "MessageID",
    "ContentDisposition",
    "ContentTransferEncoding",
    "ContentType",
    "DispositionKind",
    "TransferEncoding",
    "Defect",
    "DefectKind",
    "ParseOutcome",
]
