"""Splitting raw message bytes into header fields."""

import logging
from typing import List, Optional, Tuple

from mailheaders.models.header_field import HeaderField

logger = logging.getLogger(__name__)

# ftext: printable US-ASCII except ":"
FIELD_NAME_OCTETS = frozenset(range(33, 127)) - {0x3A}
WSP = b" \t"


def _line_end(data: bytes, pos: int) -> Tuple[int, int]:
    """
    Find the end of the line starting at ``pos``.

    Returns:
        (offset of the line break, length of the line break); the length is
        0 when the data ends without one
    """
    newline = data.find(b"\n", pos)
    if newline == -1:
        return len(data), 0
    if newline > pos and data[newline - 1] == 0x0D:
        return newline - 1, 2
    return newline, 1


def _make_field(raw: bytes) -> HeaderField:
    colon = raw.find(b":")
    if colon <= 0:
        return HeaderField(None, raw, raw)
    # obs-optional allows white space before the colon
    name = raw[:colon].rstrip(WSP)
    if not name or any(octet not in FIELD_NAME_OCTETS for octet in name):
        return HeaderField(None, raw, raw)
    return HeaderField(name.decode("ascii"), raw[colon + 1 :], raw)


def split_header(data: bytes, pos: int = 0) -> Tuple[Optional[HeaderField], int]:
    """
    Split off one header field, including its continuation lines.

    Args:
        data: Raw message bytes
        pos: Offset of the first line of the field

    Returns:
        (field, offset after its final line break); field is None when
        ``pos`` is at the empty line ending the header section or at the
        end of the data

    Examples:
        >>> field, _ = split_header(b"Subject: hi\\r\\n there\\r\\n\\r\\n")
        >>> field.name, field.value
        ('Subject', b' hi\\r\\n there')
    """
    end = len(data)
    if pos >= end:
        return None, pos
    eol, brk = _line_end(data, pos)
    if eol == pos:
        return None, pos
    stop = eol
    following = eol + brk
    while brk and following < end and data[following] in WSP:
        stop, brk = _line_end(data, following)
        following = stop + brk
    return _make_field(data[pos:stop]), following


def split_header_section(data: bytes) -> Tuple[List[HeaderField], bytes]:
    """
    Split a message into its header fields and its body.

    Lines that are not valid header fields are returned as fields with
    ``name=None`` so the caller can decide what to do with them. CRLF and
    bare LF line endings are both accepted.

    Args:
        data: Raw message bytes

    Returns:
        (fields, body)
    """
    fields = []
    pos = 0
    while True:
        field, pos = split_header(data, pos)
        if field is None:
            break
        if not field.is_valid:
            logger.debug("Skipping malformed header line %r", field.raw[:60])
        fields.append(field)
    if pos < len(data):
        _, brk = _line_end(data, pos)
        pos += brk
    return fields, data[pos:]
