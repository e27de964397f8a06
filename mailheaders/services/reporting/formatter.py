"""Rendering parsed header values back to RFC 5322 text and to JSON."""

import json
from datetime import timedelta
from enum import Enum
from typing import Any, Iterable, Sequence

from mailheaders.models.address import Address, AddrSpec, Group, Mailbox, Word
from mailheaders.models.date_time import DateTime
from mailheaders.models.message_id import MessageID
from mailheaders.models.mime import ContentDisposition, ContentTransferEncoding, ContentType
from mailheaders.models.outcome import Defect, ParseOutcome
from mailheaders.services.encoded_words import ENCODED_WORD

ATOM_SPECIALS = frozenset("!#$%&'*+-/=?^_`{|}~")
DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _is_atom_char(ch: str) -> bool:
    # non-ASCII characters are atext under RFC 6532
    return not ch.isascii() or ch.isalnum() or ch in ATOM_SPECIALS


def _is_atom(text: str) -> bool:
    return bool(text) and all(_is_atom_char(ch) for ch in text)


def quote_string(text: str) -> str:
    """Wrap text in double quotes, escaping backslashes and quotes."""
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def format_word(word: Word) -> str:
    """
    Render a word as an atom when possible, else as a quoted string.

    Text that looks like an encoded word has its "?" written as quoted-pairs,
    so parsing the result gives the same text back instead of decoding it.
    """
    if ENCODED_WORD.search(word.text):
        return quote_string(word.text).replace("?", "\\?")
    if _is_atom(word.text):
        return word.text
    return quote_string(word.text)


def format_phrase(words: Iterable[Word]) -> str:
    return " ".join(format_word(word) for word in words)


def format_addr_spec(spec: AddrSpec) -> str:
    local = ".".join(format_word(word) for word in spec.local_part)
    return f"{local}@{spec.domain.text}"


def format_mailbox(mailbox: Mailbox) -> str:
    """
    Render a mailbox as ``display name <addr-spec>`` or a bare addr-spec.

    Examples:
        >>> from mailheaders.models import AddrSpec, DottedAtoms, Mailbox, Word
        >>> spec = AddrSpec((Word("john"),), DottedAtoms(("example", "com")))
        >>> format_mailbox(Mailbox((Word("John"), Word("Q."), Word("Public")), spec))
        'John "Q." Public <john@example.com>'
    """
    spec = format_addr_spec(mailbox.address)
    if mailbox.display_name is None:
        return spec
    return f"{format_phrase(mailbox.display_name)} <{spec}>"


def format_group(group: Group) -> str:
    members = ", ".join(format_mailbox(member) for member in group.members)
    return f"{format_phrase(group.display_name)}: {members};" if members else f"{format_phrase(group.display_name)}:;"


def format_address(address: Address) -> str:
    if isinstance(address, Group):
        return format_group(address)
    return format_mailbox(address)


def format_address_list(addresses: Sequence[Address]) -> str:
    """Render addresses comma-joined, the way an address-list is written."""
    return ", ".join(format_address(address) for address in addresses)


def format_message_id(message_id: MessageID) -> str:
    return str(message_id)


def format_zone(offset: timedelta) -> str:
    minutes = int(offset.total_seconds()) // 60
    sign = "-" if minutes < 0 else "+"
    hours, minutes = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}{minutes:02d}"


def format_date_time(value: DateTime) -> str:
    """
    Render a date-time in RFC 5322 form.

    Unknown offsets are written as ``-0000``.
    """
    moment = value.moment
    zone = "-0000" if value.unknown_offset else format_zone(moment.utcoffset())
    return (
        f"{DAY_NAMES[moment.weekday()]}, {moment.day} {MONTH_NAMES[moment.month - 1]} "
        f"{moment.year:04d} {moment:%H:%M:%S} {zone}"
    )


def to_jsonable(value: Any) -> Any:
    """
    Convert parsed values and outcomes into JSON-serializable structures.

    Args:
        value: A ParseOutcome, model object, or a sequence of them

    Returns:
        Nested dicts, lists and scalars
    """
    if isinstance(value, ParseOutcome):
        return {
            "value": to_jsonable(value.value),
            "remainder": value.remainder.decode("utf-8", "backslashreplace"),
            "defects": [to_jsonable(defect) for defect in value.defects],
        }
    if isinstance(value, Defect):
        return {"kind": value.kind.value, "position": value.position, "detail": value.detail}
    if isinstance(value, Mailbox):
        return {
            "type": "mailbox",
            "display_name": value.name,
            "local_part": value.address.local_text,
            "domain": value.address.domain_text,
            "text": format_mailbox(value),
        }
    if isinstance(value, Group):
        return {
            "type": "group",
            "display_name": value.name,
            "members": [to_jsonable(member) for member in value.members],
        }
    if isinstance(value, MessageID):
        return {"left": value.left, "right": value.right, "text": str(value)}
    if isinstance(value, DateTime):
        return {
            "moment": value.moment.isoformat(),
            "unknown_offset": value.unknown_offset,
            "text": format_date_time(value),
        }
    if isinstance(value, ContentType):
        return {"mime_type": value.mime_type, "parameters": dict(value.parameters)}
    if isinstance(value, ContentDisposition):
        return {"disposition": value.token, "kind": value.kind.value, "parameters": dict(value.parameters)}
    if isinstance(value, ContentTransferEncoding):
        return {"mechanism": value.token, "kind": value.mechanism.value}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


class OutcomeFormatter:
    """Format outcomes as JSON documents for the command line."""

    def __init__(self, indent: int = 2):
        """
        Args:
            indent: JSON indentation; 0 prints one line per document
        """
        self.indent = indent or None

    def format_outcome(self, outcome: ParseOutcome) -> str:
        return json.dumps(to_jsonable(outcome), indent=self.indent, ensure_ascii=False)

    def format_headers(self, headers: dict) -> str:
        document = {name: [to_jsonable(outcome) for outcome in outcomes] for name, outcomes in headers.items()}
        return json.dumps(document, indent=self.indent, ensure_ascii=False)
